import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "url": None,  # Gerrit root, e.g. https://gerrit.example.com (no /a/ suffix)
    "timeout": 30,  # seconds per HTTP request
}


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for one Gerrit server, fixed for the client's lifetime."""

    root_url: str
    user: str = ""
    password: str = ""
    timeout: float = 30


def load_config(config_path: str = ".gerritlens.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .gerritlens.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials from environment variables
    if not config.get("url"):
        config["url"] = os.environ.get("GERRIT_URL")
    config["gerrit_user"] = os.environ.get("GERRIT_USER")
    config["gerrit_password"] = os.environ.get("GERRIT_PASSWORD")

    return config


def client_config(config: dict) -> ClientConfig:
    """Build the immutable ClientConfig from a loaded config dict."""
    url = config.get("url")
    if not url:
        raise ValueError("No Gerrit URL configured. Set 'url' in .gerritlens.yml, pass --url, or set GERRIT_URL.")
    return ClientConfig(
        root_url=url.rstrip("/"),
        user=config.get("gerrit_user") or "",
        password=config.get("gerrit_password") or "",
        timeout=config.get("timeout") or DEFAULT_CONFIG["timeout"],
    )
