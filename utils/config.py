from __future__ import annotations

import base64
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_QUERY = "is:unread -in:sent -in:chat"
DEFAULT_LABEL = "testing"
DEFAULT_REPLY_BODY = "Your automatic reply message here."


@dataclass(slots=True)
class MailboxConfig:
    credentials_file: Path
    token_file: Path
    user_id: str


@dataclass(slots=True)
class AppConfig:
    mailbox: MailboxConfig
    label_name: str
    reply_body: str
    search_query: str
    mark_as_read: bool
    min_interval_seconds: int
    max_interval_seconds: int
    log_dir: Path
    log_level: str
    stats_file: Path
    db_path: Path


def _resolve_path(value: str | None, fallback: str) -> Path:
    candidate = Path(value or fallback)
    if not candidate.is_absolute():
        candidate = PROJECT_ROOT / candidate
    return candidate


def _maybe_write_secret_file(target: Path, inline_value: str | None, b64_value: str | None) -> None:
    if not inline_value and not b64_value:
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    if inline_value:
        target.write_text(inline_value, encoding="utf-8")
        return
    try:
        decoded = base64.b64decode(b64_value or "")
    except Exception as exc:  # noqa: BLE001
        raise ValueError("Failed to decode base64 secret payload") from exc
    target.write_bytes(decoded)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_config(env_file: str | os.PathLike[str] | None = None) -> AppConfig:
    """Load configuration values from a .env file and environment variables."""

    if env_file:
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(override=False)

    credentials_file = _resolve_path(os.getenv("GOOGLE_CLIENT_SECRETS"), "credentials.json")
    token_file = _resolve_path(os.getenv("GOOGLE_TOKEN_PATH"), "token.json")
    log_dir = _resolve_path(os.getenv("LOG_DIR"), "logs")
    stats_file = _resolve_path(os.getenv("STATS_FILE"), "data/stats.json")
    db_path = _resolve_path(os.getenv("DB_PATH"), "data/auto_reply.db")

    log_dir.mkdir(parents=True, exist_ok=True)
    stats_file.parent.mkdir(parents=True, exist_ok=True)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    _maybe_write_secret_file(
        credentials_file,
        os.getenv("GOOGLE_CLIENT_SECRETS_JSON"),
        os.getenv("GOOGLE_CLIENT_SECRETS_B64"),
    )
    _maybe_write_secret_file(
        token_file,
        os.getenv("GOOGLE_TOKEN_JSON"),
        os.getenv("GOOGLE_TOKEN_B64"),
    )

    min_interval = _int_env("MIN_INTERVAL_SECONDS", 45)
    max_interval = _int_env("MAX_INTERVAL_SECONDS", 120)
    if min_interval < 1 or min_interval > max_interval:
        raise ValueError(
            f"Invalid interval range {min_interval}-{max_interval}; "
            "MIN_INTERVAL_SECONDS must be positive and not exceed MAX_INTERVAL_SECONDS"
        )

    mailbox = MailboxConfig(
        credentials_file=credentials_file,
        token_file=token_file,
        user_id=os.getenv("GMAIL_USER_ID", "me"),
    )

    return AppConfig(
        mailbox=mailbox,
        label_name=os.getenv("AUTO_REPLY_LABEL", DEFAULT_LABEL),
        reply_body=os.getenv("AUTO_REPLY_BODY", DEFAULT_REPLY_BODY),
        search_query=os.getenv("AUTO_REPLY_QUERY", DEFAULT_QUERY),
        mark_as_read=_bool_env("AUTO_REPLY_MARK_READ", False),
        min_interval_seconds=min_interval,
        max_interval_seconds=max_interval,
        log_dir=log_dir,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        stats_file=stats_file,
        db_path=db_path,
    )
