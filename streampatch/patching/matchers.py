"""Ordered strategies for locating a search fragment in a document."""

from __future__ import annotations

import re
from typing import Optional, Protocol, Sequence

from streampatch.patching.document import LiveDocument
from streampatch.types import LocateResult

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to one space and trim the ends."""
    return _WHITESPACE_RE.sub(" ", text).strip()


class MatchStrategy(Protocol):
    name: str

    def locate(self, original: str, document: LiveDocument) -> Optional[LocateResult]: ...


class ExactMatch:
    """Literal substring search; first occurrence wins."""

    name = "exact"

    def locate(self, original: str, document: LiveDocument) -> Optional[LocateResult]:
        if not original:
            return None
        found = document.find_first(original)
        if found is None:
            return None
        return LocateResult.found(found, strategy=self.name)


class WhitespaceNormalizedMatch:
    """Search after whitespace normalization.

    A hit is reported without offsets: normalized positions are not mapped
    back to the live text, so callers must not edit on this result.
    """

    name = "whitespace_normalized"

    def locate(self, original: str, document: LiveDocument) -> Optional[LocateResult]:
        needle = normalize_whitespace(original)
        if not needle:
            return None
        if needle not in normalize_whitespace(document.get_text()):
            return None
        return LocateResult.located_imprecisely(strategy=self.name)


DEFAULT_STRATEGIES: Sequence[MatchStrategy] = (ExactMatch(), WhitespaceNormalizedMatch())


def locate(
    original: str,
    document: LiveDocument,
    strategies: Sequence[MatchStrategy] = DEFAULT_STRATEGIES,
) -> LocateResult:
    """Run strategies in order and return the first result."""
    for strategy in strategies:
        result = strategy.locate(original, document)
        if result is not None:
            return result
    return LocateResult.not_found()
