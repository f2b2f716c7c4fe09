"""Core runtime types shared by the streaming and patching layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from streampatch.errors import BlockError, StreamPatchError


class StreamMode(str, Enum):
    """Protocol a response stream is interpreted under."""

    FULL = "full"
    DIFF = "diff"

    @classmethod
    def from_value(cls, value: Union[str, "StreamMode"]) -> "StreamMode":
        """Convert a raw value to a mode enum."""
        if isinstance(value, cls):
            return value

        normalized = str(value).strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ValueError(f"Unsupported stream mode: {value}")


class SessionState(str, Enum):
    """Lifecycle state for a stream session."""

    AWAITING_MODE = "awaiting_mode"
    FULL = "full"
    DIFF = "diff"
    DRAINING = "draining"
    CLOSED = "closed"


@dataclass(frozen=True)
class TextRange:
    """Half-open character offset range into a document."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid range start={self.start} end={self.end}")

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class EditBlock:
    """One SEARCH/REPLACE instruction pair."""

    original: str
    updated: str


class LocateKind(str, Enum):
    """Tiered outcome of searching a document for a block's original text."""

    FOUND = "found"
    # Exact tier missed, whitespace-normalized tier located the text.
    NOT_FOUND_EXACT = "not_found_exact"
    # Both tiers missed.
    NOT_FOUND_FUZZY = "not_found_fuzzy"


@dataclass(frozen=True)
class LocateResult:
    kind: LocateKind
    range: Optional[TextRange] = None
    strategy: str = ""

    @classmethod
    def found(cls, text_range: TextRange, *, strategy: str) -> "LocateResult":
        return cls(kind=LocateKind.FOUND, range=text_range, strategy=strategy)

    @classmethod
    def located_imprecisely(cls, *, strategy: str) -> "LocateResult":
        return cls(kind=LocateKind.NOT_FOUND_EXACT, strategy=strategy)

    @classmethod
    def not_found(cls) -> "LocateResult":
        return cls(kind=LocateKind.NOT_FOUND_FUZZY)


class BlockOutcome(str, Enum):
    """Result of one block application attempt."""

    APPLIED = "applied"
    IMPRECISE_LOCATION = "imprecise_location"
    NOT_FOUND = "not_found"
    EDIT_FAILED = "edit_failed"

    @property
    def is_skip(self) -> bool:
        return self is BlockOutcome.IMPRECISE_LOCATION

    @property
    def is_failure(self) -> bool:
        return self in {BlockOutcome.NOT_FOUND, BlockOutcome.EDIT_FAILED}


@dataclass
class BlockResult:
    """Reported outcome for a single edit block."""

    block: EditBlock
    outcome: BlockOutcome
    range: Optional[TextRange] = None
    error: Optional[BlockError] = None

    @property
    def ok(self) -> bool:
        return self.outcome is BlockOutcome.APPLIED


@dataclass
class SessionSummary:
    """Structured result for one stream session."""

    mode: Optional[StreamMode] = None
    ok: bool = False
    aborted: bool = False
    results: List[BlockResult] = field(default_factory=list)
    final_document: Optional[str] = None
    truncated: bool = False
    errors: List[StreamPatchError] = field(default_factory=list)

    @property
    def applied(self) -> int:
        return sum(1 for result in self.results if result.outcome is BlockOutcome.APPLIED)

    @property
    def skipped(self) -> int:
        return sum(1 for result in self.results if result.outcome.is_skip)

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if result.outcome.is_failure)

    def to_payload(self) -> dict:
        return {
            "mode": self.mode.value if self.mode else None,
            "ok": self.ok,
            "aborted": self.aborted,
            "applied": self.applied,
            "skipped": self.skipped,
            "failed": self.failed,
            "truncated": self.truncated,
            "errors": [str(error) for error in self.errors],
        }
