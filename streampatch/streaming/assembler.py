"""Full-document assembly with throttled intermediate emission."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DOCUMENT_START = "<!DOCTYPE html>"
DOCUMENT_CLOSE = "</html>"
DEFAULT_RENDER_INTERVAL_SECONDS = 0.3


class ThrottleGate:
    """Clock-checked gate allowing at most one pass per interval."""

    def __init__(
        self,
        interval_seconds: float = DEFAULT_RENDER_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._last_pass: Optional[float] = None

    def try_pass(self, *, force: bool = False) -> bool:
        now = self._clock()
        if not force and self._last_pass is not None and now - self._last_pass < self.interval_seconds:
            return False
        self._last_pass = now
        return True

    def reset(self) -> None:
        self._last_pass = None


def extract_document(accumulated: str) -> Optional[str]:
    """Return the candidate document prefix, or None when not ready."""
    start = accumulated.find(DOCUMENT_START)
    if start == -1:
        return None
    return accumulated[start:]


def close_for_preview(candidate: str) -> str:
    """Append a synthetic close marker for safe intermediate rendering."""
    if candidate.strip().endswith(DOCUMENT_CLOSE):
        return candidate
    return f"{candidate}\n{DOCUMENT_CLOSE}"


@dataclass(frozen=True)
class FinalDocument:
    text: str
    # True when the stream never produced the real close marker.
    truncated: bool


class FullDocumentAssembler:
    """Track a growing document stream and decide what to emit."""

    def __init__(self, gate: Optional[ThrottleGate] = None) -> None:
        self.gate = gate or ThrottleGate()
        self.frames_emitted = 0

    def extract(self, accumulated: str) -> Optional[str]:
        return extract_document(accumulated)

    def partial(self, accumulated: str) -> Optional[str]:
        """Return a preview frame if one is due, else None."""
        candidate = extract_document(accumulated)
        if candidate is None:
            return None
        if not self.gate.try_pass():
            return None
        self.frames_emitted += 1
        return close_for_preview(candidate)

    def final(self, accumulated: str) -> Optional[FinalDocument]:
        """Return the authoritative final document, or None if it never started."""
        candidate = extract_document(accumulated)
        if candidate is None:
            return None
        close_at = candidate.rfind(DOCUMENT_CLOSE)
        if close_at == -1:
            logger.warning("Final document has no closing marker length=%s", len(candidate))
            return FinalDocument(text=candidate, truncated=True)
        return FinalDocument(text=candidate[: close_at + len(DOCUMENT_CLOSE)], truncated=False)
