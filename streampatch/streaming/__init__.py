"""Streaming protocol support: decoding, block parsing, assembly, sessions."""

from streampatch.streaming.assembler import FullDocumentAssembler, ThrottleGate
from streampatch.streaming.blocks import DIVIDER, REPLACE_END, SEARCH_START, DiffBlockParser, parse_blocks
from streampatch.streaming.decoder import ChunkDecoder
from streampatch.streaming.mode import ModeSelector
from streampatch.streaming.observer import NullObserver, RecordingObserver, SessionObserver
from streampatch.streaming.session import StreamSession

__all__ = [
    "DIVIDER",
    "REPLACE_END",
    "SEARCH_START",
    "ChunkDecoder",
    "DiffBlockParser",
    "FullDocumentAssembler",
    "ModeSelector",
    "NullObserver",
    "RecordingObserver",
    "SessionObserver",
    "StreamSession",
    "ThrottleGate",
    "parse_blocks",
]
