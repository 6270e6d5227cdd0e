from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

import httplib2
from google.auth.exceptions import TransportError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from models.message_ref import MessageRef
from services.errors import LabelExistsError, MailServiceError
from services.mail_service import MailService

LOGGER = logging.getLogger(__name__)

# Failures below the HTTP layer: timeouts, resets, DNS, token transport.
TRANSPORT_ERRORS = (OSError, httplib2.HttpLib2Error, TransportError)


class GmailService(MailService):
    """Gmail API client restricted to the calls the auto-responder makes."""

    def __init__(self, credentials: Credentials, user_id: str = "me", client=None):
        self._user_id = user_id
        self._client = client or build("gmail", "v1", credentials=credentials, cache_discovery=False)

    @property
    def user_id(self) -> str:
        return self._user_id

    def search_unread(self, query: str) -> Tuple[List[MessageRef], int]:
        refs: List[MessageRef] = []
        estimate = 0
        page_token = None
        while True:
            request = self._client.users().messages().list(userId=self.user_id, q=query, pageToken=page_token)
            response = _execute(request, "list messages")
            estimate = max(estimate, int(response.get("resultSizeEstimate", 0)))
            for message in response.get("messages", []):
                refs.append(MessageRef(id=message["id"], thread_id=message["threadId"]))
            page_token = response.get("nextPageToken")
            if not page_token:
                break
        LOGGER.debug("Query %r matched %s message(s), estimate %s", query, len(refs), estimate)
        return refs, estimate

    def get_thread(self, thread_id: str) -> Dict:
        request = self._client.users().threads().get(userId=self.user_id, id=thread_id, format="full")
        return _execute(request, f"get thread {thread_id}")

    def create_label(self, name: str) -> str:
        body = {"name": name, "labelListVisibility": "labelShow", "messageListVisibility": "show"}
        try:
            response = self._client.users().labels().create(userId=self.user_id, body=body).execute()
        except HttpError as exc:
            if exc.resp.status == 409:
                raise LabelExistsError(name) from exc
            raise MailServiceError(f"create label {name}: {exc}", status=exc.resp.status) from exc
        except TRANSPORT_ERRORS as exc:
            raise MailServiceError(f"create label {name}: {exc}") from exc
        LOGGER.info("Created label %s with id %s", name, response["id"])
        return response["id"]

    def find_label_id(self, name: str) -> str | None:
        response = _execute(self._client.users().labels().list(userId=self.user_id), "list labels")
        for label in response.get("labels", []):
            if label["name"].lower() == name.lower():
                LOGGER.debug("Label %s already exists as %s", name, label["id"])
                return label["id"]
        return None

    def modify_thread_labels(
        self, thread_id: str, add: Sequence[str] = (), remove: Sequence[str] = ()
    ) -> Dict:
        body = {"addLabelIds": list(add), "removeLabelIds": list(remove)}
        request = self._client.users().threads().modify(userId=self.user_id, id=thread_id, body=body)
        response = _execute(request, f"modify thread {thread_id}")
        LOGGER.debug("Thread %s labels +%s -%s", thread_id, list(add), list(remove))
        return response

    def send_message(self, raw: str, thread_id: str) -> Dict:
        body = {"raw": raw, "threadId": thread_id}
        request = self._client.users().messages().send(userId=self.user_id, body=body)
        return _execute(request, f"send reply on thread {thread_id}")


def _execute(request, action: str) -> Dict:
    try:
        return request.execute()
    except HttpError as exc:
        raise MailServiceError(f"{action}: {_reason(exc)}", status=exc.resp.status) from exc
    except TRANSPORT_ERRORS as exc:
        raise MailServiceError(f"{action}: {exc}") from exc


def _reason(exc: HttpError) -> str:
    reason = getattr(exc, "reason", None)
    if reason:
        return str(reason)
    return str(exc)
