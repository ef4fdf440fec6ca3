"""CLI entry point for gerritlens.

Commands:
  summary  — show a change's metadata, reviewers and unresolved comment threads
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from gerritlens_cli.commands.summary import summary_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("gerritlens"),
    prog_name="gerritlens",
)
@click.option(
    "--config",
    "config_path",
    default=".gerritlens.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="GERRITLENS_CONFIG",
)
@click.option("--url", default=None, help="Gerrit root URL. Overrides config file.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, url: str | None, verbose: bool):
    """Summarise unresolved review threads on Gerrit changes."""
    from gerritlens_core.config import load_config
    from gerritlens_cli.auth import resolve_credentials

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    ctx.ensure_object(dict)

    config = load_config(config_path, cli_overrides={"url": url})

    # Resolve credentials early so all subcommands share the same resolution.
    credentials = resolve_credentials(config.get("url"))
    if credentials:
        config["gerrit_user"], config["gerrit_password"] = credentials

    ctx.obj["config"] = config


main.add_command(summary_cmd)
