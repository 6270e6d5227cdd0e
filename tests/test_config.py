from __future__ import annotations

import base64

import pytest

from utils import config as config_module
from utils.config import load_config

ENV_VARS = (
    "GOOGLE_CLIENT_SECRETS",
    "GOOGLE_TOKEN_PATH",
    "GOOGLE_CLIENT_SECRETS_JSON",
    "GOOGLE_CLIENT_SECRETS_B64",
    "GOOGLE_TOKEN_JSON",
    "GOOGLE_TOKEN_B64",
    "GMAIL_USER_ID",
    "AUTO_REPLY_LABEL",
    "AUTO_REPLY_BODY",
    "AUTO_REPLY_QUERY",
    "AUTO_REPLY_MARK_READ",
    "MIN_INTERVAL_SECONDS",
    "MAX_INTERVAL_SECONDS",
    "LOG_DIR",
    "LOG_LEVEL",
    "STATS_FILE",
    "DB_PATH",
)


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    # setenv first so values loaded from .env files are undone after the test
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setattr(config_module, "PROJECT_ROOT", tmp_path)
    return tmp_path


def test_defaults(clean_env):
    config = load_config(clean_env / "missing.env")

    assert config.label_name == "testing"
    assert config.reply_body == "Your automatic reply message here."
    assert config.search_query == "is:unread -in:sent -in:chat"
    assert config.mark_as_read is False
    assert (config.min_interval_seconds, config.max_interval_seconds) == (45, 120)
    assert config.mailbox.user_id == "me"
    assert config.mailbox.token_file == clean_env / "token.json"
    assert config.log_dir.is_dir()


def test_env_file_overrides(clean_env):
    env_file = clean_env / ".env"
    env_file.write_text(
        "AUTO_REPLY_LABEL=auto-replied\nAUTO_REPLY_MARK_READ=yes\nMIN_INTERVAL_SECONDS=10\n",
        encoding="utf-8",
    )

    config = load_config(env_file)

    assert config.label_name == "auto-replied"
    assert config.mark_as_read is True
    assert config.min_interval_seconds == 10


def test_inverted_interval_range_is_rejected(clean_env, monkeypatch):
    monkeypatch.setenv("MIN_INTERVAL_SECONDS", "200")

    with pytest.raises(ValueError):
        load_config(clean_env / "missing.env")


def test_inline_token_is_written(clean_env, monkeypatch):
    token = '{"type": "authorized_user"}'
    monkeypatch.setenv("GOOGLE_TOKEN_B64", base64.b64encode(token.encode()).decode())

    config = load_config(clean_env / "missing.env")

    assert config.mailbox.token_file.read_text(encoding="utf-8") == token
