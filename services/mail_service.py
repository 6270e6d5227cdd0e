from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Tuple

from models.message_ref import MessageRef


class MailService(ABC):
    """Mailbox operations the auto-responder relies on."""

    @abstractmethod
    def search_unread(self, query: str) -> Tuple[List[MessageRef], int]:
        """Return matching message refs and the server's result size estimate."""
        raise NotImplementedError

    @abstractmethod
    def get_thread(self, thread_id: str) -> Dict:
        raise NotImplementedError

    @abstractmethod
    def create_label(self, name: str) -> str:
        """Create a label and return its id; raise LabelExistsError on a name clash."""
        raise NotImplementedError

    @abstractmethod
    def find_label_id(self, name: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def modify_thread_labels(
        self, thread_id: str, add: Sequence[str] = (), remove: Sequence[str] = ()
    ) -> Dict:
        raise NotImplementedError

    @abstractmethod
    def send_message(self, raw: str, thread_id: str) -> Dict:
        """Send a base64url encoded RFC 822 message into an existing thread."""
        raise NotImplementedError
