"""Per-stream protocol mode selection."""

from __future__ import annotations

import logging
from typing import Optional

from streampatch.types import StreamMode

logger = logging.getLogger(__name__)


class ModeSelector:
    """Resolve the out-of-band mode indicator into a StreamMode.

    Only the literal values ``"full"`` and ``"diff"`` are recognized; the
    comparison is exact.
    """

    def __init__(self, default: StreamMode = StreamMode.FULL) -> None:
        self.default = default

    def select(self, indicator: Optional[str]) -> StreamMode:
        if not indicator:
            return self.default
        for mode in StreamMode:
            if indicator == mode.value:
                return mode
        logger.warning("Unrecognized mode indicator=%r, using %s", indicator, self.default.value)
        return self.default
