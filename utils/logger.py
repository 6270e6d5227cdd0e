from __future__ import annotations

import logging
import logging.config
from pathlib import Path

LOG_FILE_NAME = "auto_reply.log"

# Third-party loggers that are chatty at INFO and below.
QUIET_LOGGERS = ("googleapiclient.discovery_cache", "google_auth_oauthlib.flow", "urllib3")


def configure_logging(log_dir: Path, level: str = "INFO", console: bool = True) -> Path:
    """Route log records to a rotating file and, optionally, the terminal.

    The terminal handler carries the human-readable status lines of the
    auto-responder (next run countdown, subject/sender, reply outcome), so
    its format stays short. The file keeps timestamps and logger names.
    """

    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME
    handlers = ["file", "stdout"] if console else ["file"]

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            },
            "console": {
                "format": "%(asctime)s %(levelname)s | %(message)s",
                "datefmt": "%H:%M:%S",
            },
        },
        "handlers": {
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "standard",
                "filename": str(log_path),
                "maxBytes": 1_000_000,
                "backupCount": 3,
                "encoding": "utf-8",
            },
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "console",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        "root": {
            "handlers": handlers,
            "level": level.upper(),
        },
    }

    logging.config.dictConfig(config)
    logging.getLogger(__name__).debug("Logging configured at %s", level)
    return log_path
