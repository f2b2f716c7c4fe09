"""Incremental transport chunk decoding."""

from __future__ import annotations

import codecs
from typing import Union


class ChunkDecoder:
    """Decode byte chunks into text, holding split multi-byte sequences."""

    def __init__(self, encoding: str = "utf-8", errors: str = "replace") -> None:
        self.encoding = encoding
        self._decoder = codecs.getincrementaldecoder(encoding)(errors=errors)

    def decode(self, chunk: Union[bytes, bytearray, str]) -> str:
        if isinstance(chunk, str):
            return chunk
        return self._decoder.decode(bytes(chunk), final=False)

    def flush(self) -> str:
        """Decode whatever is still pending at end of stream."""
        return self._decoder.decode(b"", final=True)

    def reset(self) -> None:
        self._decoder.reset()
