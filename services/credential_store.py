from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict

from services.errors import AuthorizationError

LOGGER = logging.getLogger(__name__)
CREDENTIAL_TYPE = "authorized_user"


class CredentialStore:
    """Token file holding the refresh token issued for this mailbox."""

    def __init__(self, token_file: Path):
        self._token_file = token_file

    @property
    def path(self) -> Path:
        return self._token_file

    def load(self) -> Dict | None:
        if not self._token_file.exists():
            return None
        LOGGER.debug("Loading cached credential from %s", self._token_file)
        try:
            data = json.loads(self._token_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise AuthorizationError(f"Unreadable token file {self._token_file}: {exc}") from exc
        if not isinstance(data, dict):
            raise AuthorizationError(f"Token file {self._token_file} does not hold a JSON object")
        return data

    def save(self, payload: Dict) -> None:
        LOGGER.debug("Persisting OAuth tokens to %s", self._token_file)
        self._token_file.parent.mkdir(parents=True, exist_ok=True)
        self._token_file.write_text(json.dumps(payload), encoding="utf-8")

    @staticmethod
    def build_payload(client_secrets_file: Path, refresh_token: str) -> Dict[str, str]:
        """Combine the application's client id/secret with a refresh token."""

        try:
            keys = json.loads(client_secrets_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise AuthorizationError(f"Unreadable client secrets file {client_secrets_file}: {exc}") from exc

        key = None
        if isinstance(keys, dict):
            key = keys.get("installed") or keys.get("web")
        if not isinstance(key, dict) or "client_id" not in key or "client_secret" not in key:
            raise AuthorizationError(
                f"{client_secrets_file} has no 'installed' or 'web' client with client_id/client_secret"
            )
        return {
            "type": CREDENTIAL_TYPE,
            "client_id": key["client_id"],
            "client_secret": key["client_secret"],
            "refresh_token": refresh_token,
        }
