"""Error taxonomy for streamed document patching."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Stable identifiers reported to observers."""

    TRANSPORT = "transport_error"
    INCOMPLETE_BLOCK = "incomplete_block_at_end"
    BLOCK_NOT_FOUND = "block_not_found"
    IMPRECISE_LOCATION = "imprecise_location"
    MALFORMED_DOCUMENT = "malformed_document"
    TRUNCATED_DOCUMENT = "truncated_document"
    EDIT_FAILED = "edit_failed"


class StreamPatchError(Exception):
    """Base error for stream patching failures."""

    kind: Optional[ErrorKind] = None


class SessionStateError(StreamPatchError):
    """Raised when a session is driven through an illegal transition."""


class RequestInFlightError(StreamPatchError):
    """Raised when a request is issued while another one is still running."""


class ConfigError(StreamPatchError):
    """Raised when the config file cannot be used."""


class TransportError(StreamPatchError):
    """Upstream stream failed, returned an error status, or had no body."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LoginRequiredError(TransportError):
    """Remote service refused the request until the user logs in."""

    open_login = True


class IncompleteBlockAtEnd(StreamPatchError):
    """Stream closed while a SEARCH block was still open."""

    kind = ErrorKind.INCOMPLETE_BLOCK

    def __init__(self, tail: str) -> None:
        super().__init__("stream ended with an incomplete change block")
        self.tail = tail


class MalformedDocument(StreamPatchError):
    """Full-mode stream never produced the document start marker."""

    kind = ErrorKind.MALFORMED_DOCUMENT

    def __init__(self, tail: str) -> None:
        super().__init__("response does not contain a document start marker")
        self.tail = tail


class TruncatedDocument(StreamPatchError):
    """Full-mode stream ended before the document close marker arrived."""

    kind = ErrorKind.TRUNCATED_DOCUMENT

    def __init__(self, tail: str) -> None:
        super().__init__("response ended before the closing tag; kept the partial document")
        self.tail = tail


class BlockError(StreamPatchError):
    """Per-block failure; never aborts the session."""

    def __init__(self, message: str, *, original: str, updated: str) -> None:
        super().__init__(message)
        self.original = original
        self.updated = updated


class BlockNotFound(BlockError):
    kind = ErrorKind.BLOCK_NOT_FOUND


class ImpreciseLocation(BlockError):
    kind = ErrorKind.IMPRECISE_LOCATION


class EditFailed(BlockError):
    kind = ErrorKind.EDIT_FAILED
