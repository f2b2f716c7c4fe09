"""Apply parsed edit blocks to a live document."""

from __future__ import annotations

import logging
from typing import Sequence

from streampatch.errors import BlockNotFound, EditFailed, ImpreciseLocation
from streampatch.patching.document import LiveDocument
from streampatch.patching.matchers import DEFAULT_STRATEGIES, MatchStrategy, locate
from streampatch.types import BlockOutcome, BlockResult, EditBlock, LocateKind, TextRange

logger = logging.getLogger(__name__)


class DocumentPatcher:
    """Locate each block's original text and substitute the update in place.

    Only an exact hit is edited. A whitespace-normalized hit is reported as
    an imprecise location and the document is left untouched.
    """

    def __init__(self, strategies: Sequence[MatchStrategy] = DEFAULT_STRATEGIES) -> None:
        self.strategies = tuple(strategies)

    def apply(self, block: EditBlock, document: LiveDocument) -> bool:
        return self.apply_block(block, document).ok

    def apply_block(self, block: EditBlock, document: LiveDocument) -> BlockResult:
        located = locate(block.original, document, self.strategies)

        if located.kind is LocateKind.NOT_FOUND_EXACT:
            logger.warning("Block located only by %s match, skipping", located.strategy)
            return BlockResult(
                block=block,
                outcome=BlockOutcome.IMPRECISE_LOCATION,
                error=ImpreciseLocation(
                    "could not precisely locate change, skipped one block",
                    original=block.original,
                    updated=block.updated,
                ),
            )

        if located.kind is LocateKind.NOT_FOUND_FUZZY or located.range is None:
            logger.warning("Block not found original_len=%s", len(block.original))
            return BlockResult(
                block=block,
                outcome=BlockOutcome.NOT_FOUND,
                error=BlockNotFound(
                    "could not locate the text to change; the document may have drifted",
                    original=block.original,
                    updated=block.updated,
                ),
            )

        text_range = located.range
        try:
            document.replace(text_range, block.updated)
        except Exception as exc:
            logger.exception("Edit failed start=%s end=%s", text_range.start, text_range.end)
            return BlockResult(
                block=block,
                outcome=BlockOutcome.EDIT_FAILED,
                range=text_range,
                error=EditFailed(
                    f"failed to apply change: {exc}",
                    original=block.original,
                    updated=block.updated,
                ),
            )

        logger.info("Block applied start=%s end=%s", text_range.start, text_range.end)
        try:
            document.reveal_range(TextRange(text_range.start, text_range.start + len(block.updated)))
        except Exception:
            logger.warning("reveal_range failed start=%s", text_range.start, exc_info=True)
        return BlockResult(block=block, outcome=BlockOutcome.APPLIED, range=text_range)
