"""Presentation collaborator contract and simple implementations."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Tuple

from streampatch.errors import ErrorKind
from streampatch.types import BlockResult, SessionSummary


class SessionObserver(Protocol):
    def on_partial_document(self, text: str) -> None: ...

    def on_final_document(self, text: str) -> None: ...

    def on_block_outcome(self, result: BlockResult) -> None: ...

    def on_session_complete(self, summary: SessionSummary) -> None: ...

    def on_session_error(
        self, kind: ErrorKind, message: str, *, context: Optional[Dict[str, Any]] = None
    ) -> None: ...


class NullObserver:
    """Observer that ignores every callback."""

    def on_partial_document(self, text: str) -> None:
        return None

    def on_final_document(self, text: str) -> None:
        return None

    def on_block_outcome(self, result: BlockResult) -> None:
        return None

    def on_session_complete(self, summary: SessionSummary) -> None:
        return None

    def on_session_error(self, kind: ErrorKind, message: str, *, context=None) -> None:
        return None


class RecordingObserver(NullObserver):
    """Observer that keeps every callback for later inspection."""

    def __init__(self) -> None:
        self.partials: List[str] = []
        self.finals: List[str] = []
        self.outcomes: List[BlockResult] = []
        self.completed: List[SessionSummary] = []
        self.errors: List[Tuple[ErrorKind, str, Dict[str, Any]]] = []

    def on_partial_document(self, text: str) -> None:
        self.partials.append(text)

    def on_final_document(self, text: str) -> None:
        self.finals.append(text)

    def on_block_outcome(self, result: BlockResult) -> None:
        self.outcomes.append(result)

    def on_session_complete(self, summary: SessionSummary) -> None:
        self.completed.append(summary)

    def on_session_error(self, kind: ErrorKind, message: str, *, context=None) -> None:
        self.errors.append((kind, message, dict(context or {})))
