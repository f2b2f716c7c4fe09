"""Incremental SEARCH/REPLACE block parsing.

The parser is a pure function of the accumulated buffer: it returns every
block whose three markers have fully arrived plus the unconsumed remainder.
Feeding ``remainder + next_chunk`` back in yields the same blocks as parsing
the whole stream at once, so markers may be split at any chunk boundary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from streampatch.types import EditBlock

logger = logging.getLogger(__name__)

SEARCH_START = "<<<<<<< SEARCH"
DIVIDER = "======="
REPLACE_END = ">>>>>>> REPLACE"


def _clean_section(text: str) -> str:
    text = text.rstrip()
    if text.startswith("\r\n"):
        return text[2:]
    if text.startswith("\n"):
        return text[1:]
    return text


def parse_blocks(buffer: str) -> Tuple[List[EditBlock], str]:
    """Extract complete blocks from ``buffer``.

    Returns ``(blocks, remainder)``. Text before an incomplete block is
    dropped; a buffer without any start marker is returned unchanged.
    """
    blocks: List[EditBlock] = []
    rest = buffer

    while True:
        start = rest.find(SEARCH_START)
        if start == -1:
            return blocks, rest

        body_start = start + len(SEARCH_START)
        divider = rest.find(DIVIDER, body_start)
        if divider == -1:
            return blocks, rest[start:]

        updated_start = divider + len(DIVIDER)
        end = rest.find(REPLACE_END, updated_start)
        if end == -1:
            return blocks, rest[start:]

        block = EditBlock(
            original=_clean_section(rest[body_start:divider]),
            updated=_clean_section(rest[updated_start:end]),
        )
        logger.debug("Block parsed original_len=%s updated_len=%s", len(block.original), len(block.updated))
        blocks.append(block)
        rest = rest[end + len(REPLACE_END) :]


def has_open_block(remainder: str) -> bool:
    """Whether ``remainder`` still holds a started but unfinished block."""
    return SEARCH_START in remainder


@dataclass
class DiffBlockParser:
    """Resumable parser state: the remainder carried between chunks."""

    remainder: str = ""
    blocks_parsed: int = field(default=0)

    def feed(self, chunk: str) -> List[EditBlock]:
        blocks, self.remainder = parse_blocks(self.remainder + chunk)
        self.blocks_parsed += len(blocks)
        return blocks

    @property
    def has_open_block(self) -> bool:
        return has_open_block(self.remainder)

    def reset(self) -> None:
        self.remainder = ""
        self.blocks_parsed = 0
