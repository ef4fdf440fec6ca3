"""Tests for configuration loading."""

import pytest

from gerritlens_core.config import ClientConfig, client_config, load_config


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    for name in ("GERRIT_URL", "GERRIT_USER", "GERRIT_PASSWORD"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["url"] is None
    assert config["timeout"] == 30


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".lens.yml"
    cfg.write_text("url: https://review.example.com\ntimeout: 10\n")
    config = load_config(config_path=str(cfg))
    assert config["url"] == "https://review.example.com"
    assert config["timeout"] == 10


def test_empty_config_file(tmp_path):
    cfg = tmp_path / ".lens.yml"
    cfg.write_text("")
    config = load_config(config_path=str(cfg))
    assert config["timeout"] == 30


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".lens.yml"
    cfg.write_text("url: https://file.example.com\n")
    config = load_config(config_path=str(cfg), cli_overrides={"url": "https://cli.example.com"})
    assert config["url"] == "https://cli.example.com"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".lens.yml"
    cfg.write_text("url: https://file.example.com\n")
    config = load_config(config_path=str(cfg), cli_overrides={"url": None})
    assert config["url"] == "https://file.example.com"


def test_env_vars_loaded(monkeypatch, tmp_path):
    monkeypatch.setenv("GERRIT_URL", "https://env.example.com")
    monkeypatch.setenv("GERRIT_USER", "bot")
    monkeypatch.setenv("GERRIT_PASSWORD", "secret")
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["url"] == "https://env.example.com"
    assert config["gerrit_user"] == "bot"
    assert config["gerrit_password"] == "secret"


def test_env_url_does_not_override_file(monkeypatch, tmp_path):
    monkeypatch.setenv("GERRIT_URL", "https://env.example.com")
    cfg = tmp_path / ".lens.yml"
    cfg.write_text("url: https://file.example.com\n")
    assert load_config(config_path=str(cfg))["url"] == "https://file.example.com"


def test_defaults_not_shared_between_loads(tmp_path):
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["timeout"] = 99
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config_b["timeout"] == 30


class TestClientConfig:
    def test_built_from_config(self):
        cfg = client_config(
            {"url": "https://review.example.com/", "gerrit_user": "bot", "gerrit_password": "pw", "timeout": 12}
        )
        assert cfg == ClientConfig(root_url="https://review.example.com", user="bot", password="pw", timeout=12)

    def test_missing_url_raises(self):
        with pytest.raises(ValueError, match="No Gerrit URL"):
            client_config({"url": None})

    def test_missing_credentials_default_to_empty(self):
        cfg = client_config({"url": "https://review.example.com"})
        assert cfg.user == ""
        assert cfg.password == ""
        assert cfg.timeout == 30

    def test_is_immutable(self):
        cfg = client_config({"url": "https://review.example.com"})
        with pytest.raises(AttributeError):
            cfg.root_url = "https://other.example.com"
