from __future__ import annotations


class AutoReplyError(Exception):
    """Base class for errors raised by the auto-responder."""


class AuthorizationError(AutoReplyError):
    """No usable Gmail credential could be obtained."""


class MailServiceError(AutoReplyError):
    """A mail API call failed."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class LabelExistsError(MailServiceError):
    """Label creation was rejected because the name is taken (HTTP 409)."""

    def __init__(self, label_name: str):
        super().__init__(f"Label already exists: {label_name}", status=409)
        self.label_name = label_name


class MissingHeaderError(AutoReplyError, LookupError):
    """The inspected message lacks a header needed to build a reply."""

    def __init__(self, header: str, thread_id: str):
        super().__init__(f"Header '{header}' missing on thread {thread_id}")
        self.header = header
        self.thread_id = thread_id
