"""Live document contract and an in-memory implementation."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Optional, Protocol

from streampatch.types import TextRange

logger = logging.getLogger(__name__)


class LiveDocument(Protocol):
    """Mutable text target edit blocks are applied to.

    Callers must keep at most one active stream session mutating a given
    document at a time.
    """

    def get_text(self) -> str: ...

    def find_first(self, literal: str) -> Optional[TextRange]: ...

    def replace(self, text_range: TextRange, text: str) -> None: ...

    def reveal_range(self, text_range: TextRange) -> None: ...


class TextDocument:
    """Thread-safe in-memory text buffer."""

    def __init__(self, text: str = "", *, on_reveal: Optional[Callable[[TextRange], None]] = None) -> None:
        self._text = text
        self._lock = threading.Lock()
        self._on_reveal = on_reveal
        self.version = 0

    @classmethod
    def from_path(cls, path: Path, **kwargs) -> "TextDocument":
        return cls(Path(path).read_text(encoding="utf-8"), **kwargs)

    def save(self, path: Path) -> None:
        Path(path).write_text(self.get_text(), encoding="utf-8")

    def get_text(self) -> str:
        with self._lock:
            return self._text

    def find_first(self, literal: str) -> Optional[TextRange]:
        if not literal:
            return None
        with self._lock:
            index = self._text.find(literal)
        if index == -1:
            return None
        return TextRange(index, index + len(literal))

    def replace(self, text_range: TextRange, text: str) -> None:
        with self._lock:
            if text_range.end > len(self._text):
                raise ValueError(
                    f"range end={text_range.end} exceeds document length={len(self._text)}"
                )
            self._text = self._text[: text_range.start] + text + self._text[text_range.end :]
            self.version += 1

    def reveal_range(self, text_range: TextRange) -> None:
        if self._on_reveal is not None:
            self._on_reveal(text_range)

