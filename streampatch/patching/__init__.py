"""Locating and applying edit blocks against live documents."""

from streampatch.patching.document import LiveDocument, TextDocument
from streampatch.patching.matchers import ExactMatch, WhitespaceNormalizedMatch, locate
from streampatch.patching.patcher import DocumentPatcher

__all__ = [
    "DocumentPatcher",
    "ExactMatch",
    "LiveDocument",
    "TextDocument",
    "WhitespaceNormalizedMatch",
    "locate",
]
