"""Per-request stream session state machine."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Union

from streampatch.errors import (
    EditFailed,
    IncompleteBlockAtEnd,
    MalformedDocument,
    SessionStateError,
    StreamPatchError,
    TransportError,
    TruncatedDocument,
)
from streampatch.patching.document import LiveDocument
from streampatch.patching.patcher import DocumentPatcher
from streampatch.streaming.assembler import FullDocumentAssembler
from streampatch.streaming.blocks import DiffBlockParser
from streampatch.streaming.decoder import ChunkDecoder
from streampatch.streaming.mode import ModeSelector
from streampatch.streaming.observer import NullObserver, SessionObserver
from streampatch.types import BlockResult, SessionState, SessionSummary, StreamMode, TextRange

logger = logging.getLogger(__name__)

Chunk = Union[bytes, bytearray, str]

# Characters of raw tail kept in error context.
ERROR_TAIL_CHARS = 2000


class StreamSession:
    """Drive one response stream into a live document.

    Chunks are processed strictly in order on the caller's thread. Block
    application always runs to completion; cancellation is only observed
    between chunks.
    """

    def __init__(
        self,
        document: LiveDocument,
        observer: Optional[SessionObserver] = None,
        *,
        mode_selector: Optional[ModeSelector] = None,
        patcher: Optional[DocumentPatcher] = None,
        assembler: Optional[FullDocumentAssembler] = None,
        decoder: Optional[ChunkDecoder] = None,
        parser: Optional[DiffBlockParser] = None,
    ) -> None:
        self.document = document
        self.observer: SessionObserver = observer or NullObserver()
        self.mode_selector = mode_selector or ModeSelector()
        self.patcher = patcher or DocumentPatcher()
        self.assembler = assembler or FullDocumentAssembler()
        self.decoder = decoder or ChunkDecoder()
        self.parser = parser or DiffBlockParser()

        self.state = SessionState.AWAITING_MODE
        self.mode: Optional[StreamMode] = None
        self._accumulated = ""
        self.summary = SessionSummary()
        self._pending: List[str] = []

    @property
    def raw_buffer(self) -> str:
        """Unconsumed text: the parser remainder in DIFF, the whole stream otherwise."""
        if self.mode is StreamMode.DIFF:
            return self.parser.remainder
        return self._accumulated

    @property
    def is_terminal(self) -> bool:
        return self.state is SessionState.CLOSED

    def select_mode(self, indicator: Optional[str]) -> StreamMode:
        """Fix the stream mode and replay any chunks held while waiting."""
        if self.state is not SessionState.AWAITING_MODE:
            raise SessionStateError(f"mode already selected state={self.state.value}")

        mode = self.mode_selector.select(indicator)
        self.mode = mode
        self.summary.mode = mode
        self.state = SessionState.DIFF if mode is StreamMode.DIFF else SessionState.FULL
        logger.info("Stream mode selected mode=%s indicator=%r", mode.value, indicator)

        held = "".join(self._pending)
        self._pending.clear()
        if held:
            self._process(held)
        return mode

    def feed(self, chunk: Chunk) -> List[BlockResult]:
        """Consume one transport chunk; return outcomes of blocks it completed."""
        self._ensure_accepting()
        text = self.decoder.decode(chunk)
        if not text:
            return []
        if self.state is SessionState.AWAITING_MODE:
            self._pending.append(text)
            return []
        return self._process(text)

    def finish(self) -> SessionSummary:
        """Handle end of stream and close the session."""
        self._ensure_accepting()
        tail = self.decoder.flush()
        if tail:
            if self.state is SessionState.AWAITING_MODE:
                self._pending.append(tail)
            else:
                self._process(tail)
        if self.state is SessionState.AWAITING_MODE:
            self.select_mode(None)

        self.state = SessionState.DRAINING
        if self.mode is StreamMode.DIFF:
            self._drain_diff()
        else:
            self._drain_full()
        return self._close()

    def abort(self) -> SessionSummary:
        """Discard buffered state without flushing; not an error."""
        if self.state is SessionState.CLOSED:
            return self.summary
        logger.info("Stream session aborted state=%s buffered=%s", self.state.value, len(self.raw_buffer))
        self._accumulated = ""
        self.parser.reset()
        self._pending.clear()
        self.decoder.reset()
        self.summary.aborted = True
        self.summary.ok = False
        self.state = SessionState.CLOSED
        return self.summary

    def fail(self, error: TransportError) -> SessionSummary:
        """Close the session after a fatal transport failure."""
        if self.state is SessionState.CLOSED:
            return self.summary
        logger.error("Transport failure state=%s error=%s", self.state.value, error)
        self._report(error, context={"status_code": error.status_code, "tail": self._tail()})
        self.summary.ok = False
        self.state = SessionState.CLOSED
        return self.summary

    def run(
        self,
        chunks: Iterable[Chunk],
        *,
        mode_indicator: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> SessionSummary:
        """Process an entire stream and return its summary."""
        if self.state is SessionState.AWAITING_MODE:
            self.select_mode(mode_indicator)

        iterator = iter(chunks)
        while True:
            if cancel_event is not None and cancel_event.is_set():
                return self.abort()
            try:
                chunk = next(iterator)
            except StopIteration:
                break
            except TransportError as exc:
                return self.fail(exc)
            except Exception as exc:
                error = TransportError(f"stream ended abnormally: {exc}")
                error.__cause__ = exc
                return self.fail(error)
            self.feed(chunk)

        if cancel_event is not None and cancel_event.is_set():
            return self.abort()
        return self.finish()

    def _ensure_accepting(self) -> None:
        if self.state in {SessionState.DRAINING, SessionState.CLOSED}:
            raise SessionStateError(f"session no longer accepts input state={self.state.value}")

    def _process(self, text: str) -> List[BlockResult]:
        if self.mode is StreamMode.DIFF:
            return [self._apply(block) for block in self.parser.feed(text)]

        self._accumulated += text
        frame = self.assembler.partial(self._accumulated)
        if frame is not None:
            self.observer.on_partial_document(frame)
        return []

    def _apply(self, block) -> BlockResult:
        result = self.patcher.apply_block(block, self.document)
        self.summary.results.append(result)
        self.observer.on_block_outcome(result)
        return result

    def _drain_diff(self) -> None:
        if self.parser.has_open_block:
            logger.warning("Stream ended with incomplete block tail_len=%s", len(self.raw_buffer))
            self._report(IncompleteBlockAtEnd(self.raw_buffer), context={"tail": self._tail()})
        self.summary.ok = True

    def _drain_full(self) -> None:
        final = self.assembler.final(self._accumulated)
        if final is None:
            logger.error("Malformed document response length=%s", len(self.raw_buffer))
            self._report(MalformedDocument(self.raw_buffer), context={"tail": self._tail()})
            self.summary.ok = False
            return

        try:
            self.document.replace(TextRange(0, len(self.document.get_text())), final.text)
        except Exception as exc:
            logger.exception("Final document update failed")
            error = EditFailed(f"failed to store final document: {exc}", original="", updated=final.text)
            self._report(error, context={"tail": self._tail()})
            self.summary.ok = False
            return

        self.summary.final_document = final.text
        self.summary.truncated = final.truncated
        if final.truncated:
            self._report(TruncatedDocument(final.text), context={"tail": self._tail()})
        self.observer.on_final_document(final.text)
        self.summary.ok = True

    def _report(self, error: StreamPatchError, *, context: Dict[str, Any]) -> None:
        self.summary.errors.append(error)
        if error.kind is not None:
            self.observer.on_session_error(error.kind, str(error), context=context)

    def _tail(self) -> str:
        return self.raw_buffer[-ERROR_TAIL_CHARS:]

    def _close(self) -> SessionSummary:
        self.state = SessionState.CLOSED
        summary = self.summary
        logger.info(
            "Stream session closed mode=%s ok=%s applied=%s skipped=%s failed=%s",
            summary.mode.value if summary.mode else None,
            summary.ok,
            summary.applied,
            summary.skipped,
            summary.failed,
        )
        if summary.ok:
            self.observer.on_session_complete(summary)
        return summary
