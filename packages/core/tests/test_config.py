"""Tests for configuration loading."""

import yaml

from cleantrack_core.config import load_config, write_config


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["store"] == "memory"
    assert config["store_path"] == ".cleantrack.db"
    assert config["cloudinary_upload_preset"] == "cleantrack_uploads"
    assert config["upload_retries"] == 3
    assert config["role"] == "user"


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".cleantrack.yml"
    cfg.write_text("store: sqlite\nstore_path: /tmp/ct.db\n")
    config = load_config(config_path=str(cfg))
    assert config["store"] == "sqlite"
    assert config["store_path"] == "/tmp/ct.db"


def test_env_overrides_config_file(tmp_path, monkeypatch):
    cfg = tmp_path / ".cleantrack.yml"
    cfg.write_text("cloudinary_cloud_name: from-file\n")
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "from-env")
    monkeypatch.setenv("CLEANTRACK_ROLE", "admin")
    config = load_config(config_path=str(cfg))
    assert config["cloudinary_cloud_name"] == "from-env"
    assert config["role"] == "admin"


def test_cli_overrides_win(tmp_path, monkeypatch):
    monkeypatch.setenv("CLEANTRACK_USER_ID", "env-user")
    config = load_config(config_path=str(tmp_path / "none.yml"), cli_overrides={"user_id": "cli-user"})
    assert config["user_id"] == "cli-user"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".cleantrack.yml"
    cfg.write_text("store: sqlite\n")
    config = load_config(config_path=str(cfg), cli_overrides={"store": None})
    assert config["store"] == "sqlite"


def test_github_token_from_env_only(tmp_path, monkeypatch):
    cfg = tmp_path / ".cleantrack.yml"
    cfg.write_text("github_token: leaked\n")
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    assert load_config(config_path=str(cfg))["github_token"] is None

    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    assert load_config(config_path=str(cfg))["github_token"] == "gh-token"


def test_write_config_preserves_existing_keys(tmp_path):
    cfg = tmp_path / ".cleantrack.yml"
    cfg.write_text("user_name: Asha\n")

    write_config({"store": "gist", "gist_id": "abc"}, config_path=str(cfg))

    written = yaml.safe_load(cfg.read_text())
    assert written == {"user_name": "Asha", "store": "gist", "gist_id": "abc"}
