from __future__ import annotations

import logging
from typing import Iterable

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from services.credential_store import CredentialStore
from services.errors import AuthorizationError
from utils.config import MailboxConfig

LOGGER = logging.getLogger(__name__)
SCOPES: Iterable[str] = (
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/gmail.modify",
)


class AuthService:
    """Obtain Gmail credentials from the token file or an interactive consent."""

    def __init__(self, mailbox: MailboxConfig, store: CredentialStore | None = None):
        self._mailbox = mailbox
        self._store = store or CredentialStore(mailbox.token_file)

    def authorize(self) -> Credentials:
        creds = self._load_saved_credentials()
        if creds is not None:
            return creds
        return self._run_consent_flow()

    def _load_saved_credentials(self) -> Credentials | None:
        info = self._store.load()
        if info is None:
            return None
        try:
            creds = Credentials.from_authorized_user_info(info, list(SCOPES))
        except ValueError as exc:
            raise AuthorizationError(f"Malformed token file {self._store.path}: {exc}") from exc

        if not creds.valid and creds.refresh_token:
            LOGGER.debug("Refreshing Gmail access token")
            try:
                creds.refresh(Request())
            except RefreshError as exc:
                raise AuthorizationError(f"Could not refresh Gmail token: {exc}") from exc
            if creds.refresh_token and creds.refresh_token != info.get("refresh_token"):
                LOGGER.info("Gmail issued a new refresh token, updating %s", self._store.path)
                self._persist(creds)
        return creds

    def _run_consent_flow(self) -> Credentials:
        secrets = self._mailbox.credentials_file
        if not secrets.exists():
            raise AuthorizationError(
                f"Missing OAuth client file at '{secrets}'. Download a Desktop OAuth client JSON and save it there."
            )
        LOGGER.info("Initiating OAuth flow using %s", secrets)
        flow = InstalledAppFlow.from_client_secrets_file(str(secrets), scopes=list(SCOPES))
        creds = flow.run_local_server(port=0)
        if not creds or not creds.refresh_token:
            raise AuthorizationError("OAuth flow completed without issuing a refresh token")
        self._persist(creds)
        return creds

    def _persist(self, creds: Credentials) -> None:
        payload = CredentialStore.build_payload(self._mailbox.credentials_file, creds.refresh_token)
        self._store.save(payload)
