"""Event sequencing and emission helpers."""

from __future__ import annotations

import threading
import time
import uuid
from typing import Any, Callable, Dict, Optional

from streampatch.errors import ErrorKind
from streampatch.protocol.types import EventEnvelope, EventFrame, EventType
from streampatch.types import BlockResult, SessionSummary


class SessionSequencer:
    """Generate monotonic sequence IDs per session."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._seq_by_session: Dict[str, int] = {}

    def next(self, session_id: str) -> int:
        with self._lock:
            current = self._seq_by_session.get(session_id, 0) + 1
            self._seq_by_session[session_id] = current
            return current


class EventEmitter:
    """Emit validated events through a transport callback."""

    def __init__(self, send: Callable[[dict], None]) -> None:
        self._send = send
        self._sequencer = SessionSequencer()

    def emit(self, *, session_id: str, event_type: EventType, payload: dict) -> EventEnvelope:
        envelope = EventEnvelope(
            session_id=session_id,
            seq=self._sequencer.next(session_id),
            ts_ms=int(time.time() * 1000),
            event_type=event_type,
            payload=payload,
        )
        frame = EventFrame(params=envelope)
        self._send(frame.model_dump())
        return envelope


def block_result_payload(result: BlockResult) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "outcome": result.outcome.value,
        "original": result.block.original,
        "updated": result.block.updated,
    }
    if result.range is not None:
        payload["range"] = {"start": result.range.start, "end": result.range.end}
    if result.error is not None:
        payload["message"] = str(result.error)
    return payload


class EventObserver:
    """Session observer publishing every callback as an event frame."""

    def __init__(
        self,
        send: Callable[[dict], None],
        *,
        session_id: Optional[str] = None,
        include_partials: bool = True,
    ) -> None:
        self.session_id = session_id or f"session-{uuid.uuid4().hex[:12]}"
        self.include_partials = include_partials
        self._emitter = EventEmitter(send)

    def _emit(self, event_type: EventType, payload: dict) -> None:
        self._emitter.emit(session_id=self.session_id, event_type=event_type, payload=payload)

    def on_partial_document(self, text: str) -> None:
        if self.include_partials:
            self._emit("document.partial", {"text": text})

    def on_final_document(self, text: str) -> None:
        self._emit("document.final", {"text": text})

    def on_block_outcome(self, result: BlockResult) -> None:
        self._emit("block.outcome", block_result_payload(result))

    def on_session_complete(self, summary: SessionSummary) -> None:
        self._emit("session.complete", summary.to_payload())

    def on_session_error(self, kind: ErrorKind, message: str, *, context=None) -> None:
        payload: Dict[str, Any] = {"kind": kind.value, "message": message}
        if context:
            payload["context"] = dict(context)
        self._emit("session.error", payload)
