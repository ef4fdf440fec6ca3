"""summary command — print the unresolved threads of a change."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gerritlens_core.config import client_config
from gerritlens_core.gerrit.client import GerritClient
from gerritlens_core.gerrit.models import AccountInfo
from gerritlens_core.summary import Summary, SummaryError, summarise

console = Console()


def _names(accounts: tuple[AccountInfo, ...]) -> str:
    return escape(", ".join(a.display_name for a in accounts)) or "—"


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def summary_to_dict(summary: Summary, root_url: str) -> dict:
    """JSON-friendly form of a Summary; thread links are made absolute."""

    def account(a: AccountInfo) -> dict:
        return {"name": a.name, "email": a.email, "username": a.username}

    return {
        "change_id": summary.change_id,
        "project": summary.project,
        "branch": summary.branch,
        "subject": summary.subject,
        "latest_commit_message": summary.latest_commit_message,
        "created": _iso(summary.created),
        "updated": _iso(summary.updated),
        "submitted": _iso(summary.submitted),
        "comments": summary.comments,
        "unresolved_comments": summary.unresolved_comments,
        "reviewers": [account(a) for a in summary.all_reviewers],
        "active_reviewers": [account(a) for a in summary.active_reviewers],
        "cc": [account(a) for a in summary.cced],
        "threads": [
            {
                "path": t.path,
                "line": t.line,
                "patch_set": t.patch_set,
                "authors": [account(a) for a in t.authors],
                "message": t.message,
                "updated": _iso(t.last_comment.updated),
                "url": t.absolute_url(root_url),
            }
            for t in summary.threads
        ],
    }


def print_summary(summary: Summary, root_url: str) -> None:
    console.print(f"\n[bold]{summary.change_id}: {escape(summary.subject)}[/bold]")
    console.print(f"  [cyan]{escape(summary.project)}[/cyan] @ {escape(summary.branch)}")
    console.print(f"  Comments: {summary.comments} ({summary.unresolved_comments} unresolved)")
    console.print(f"  Reviewers: {_names(summary.all_reviewers)}")
    console.print(f"  Active:    {_names(summary.active_reviewers)}")
    console.print(f"  CC:        {_names(summary.cced)}")

    if not summary.threads:
        console.print("\n[green]No unresolved threads.[/green]")
        return

    table = Table(title=f"Unresolved Threads — {summary.change_id}", show_header=True, header_style="bold cyan")
    table.add_column("File", style="bold")
    table.add_column("PS", justify="right", width=4)
    table.add_column("Participants", max_width=30)
    table.add_column("Last comment", max_width=50)
    table.add_column("Updated", width=20)
    table.add_column("Link")

    for t in summary.threads:
        updated = t.last_comment.updated
        table.add_row(
            escape(f"{t.path}:{t.line}"),
            str(t.patch_set),
            _names(t.authors),
            escape(t.message.strip().splitlines()[0]) if t.message.strip() else "",
            updated.strftime("%Y-%m-%d %H:%M:%S") if updated else "",
            escape(t.absolute_url(root_url)),
        )

    console.print(table)


@click.command("summary")
@click.argument("change")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON.")
@click.pass_context
def summary_cmd(ctx, change: str, as_json: bool):
    """Show metadata, reviewers and open comment threads for CHANGE.

    CHANGE is anything Gerrit accepts as a change identifier: the change
    number, the Change-Id, or project~branch~Change-Id.

    \b
    Credentials:
      GERRIT_USER / GERRIT_PASSWORD   HTTP credentials (or a ~/.netrc entry)
    """
    config = ctx.obj["config"] if ctx.obj else {}

    try:
        cfg = client_config(config)
    except ValueError as e:
        raise click.UsageError(str(e))
    if not cfg.user or not cfg.password:
        raise click.UsageError(
            "No Gerrit credentials found. Set GERRIT_USER and GERRIT_PASSWORD, "
            "or add an entry for the Gerrit host to ~/.netrc."
        )

    with GerritClient(cfg) as client:
        try:
            summary = summarise(client, change)
        except SummaryError as e:
            raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(summary_to_dict(summary, cfg.root_url), indent=2))
        return
    print_summary(summary, cfg.root_url)
