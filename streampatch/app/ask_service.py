"""Request workflow around a single live document."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from streampatch.errors import RequestInFlightError, TransportError
from streampatch.patching.document import LiveDocument
from streampatch.streaming.assembler import FullDocumentAssembler, ThrottleGate
from streampatch.streaming.mode import ModeSelector
from streampatch.streaming.observer import SessionObserver
from streampatch.streaming.session import StreamSession
from streampatch.transport.client import AskClient
from streampatch.types import SessionSummary, StreamMode

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT = """<!DOCTYPE html>
<html>
  <head>
    <title>My app</title>
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <meta charset="utf-8">
  </head>
  <body>
    <h1>Start building</h1>
  </body>
</html>"""


def create_session(config, document: LiveDocument, observer: Optional[SessionObserver] = None) -> StreamSession:
    """Build a stream session wired with config-driven collaborators."""
    try:
        default_mode = StreamMode.from_value(config.stream.default_mode)
    except ValueError:
        logger.warning("Invalid default_mode=%r, using full", config.stream.default_mode)
        default_mode = StreamMode.FULL

    return StreamSession(
        document,
        observer,
        mode_selector=ModeSelector(default=default_mode),
        assembler=FullDocumentAssembler(ThrottleGate(config.stream.render_throttle_ms / 1000.0)),
    )


class AskService:
    """Issue generation requests and stream their edits into a document."""

    def __init__(self, *, config, client: AskClient, default_document: str = DEFAULT_DOCUMENT) -> None:
        self.config = config
        self.client = client
        self.default_document = default_document
        self.previous_prompt: Optional[str] = None
        self._busy = False
        self._lock = threading.Lock()

    @property
    def is_working(self) -> bool:
        with self._lock:
            return self._busy

    def build_payload(self, prompt: str, document_text: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"prompt": prompt}
        if document_text != self.default_document:
            payload["html"] = document_text
        if self.previous_prompt:
            payload["previousPrompt"] = self.previous_prompt
        return payload

    def ask(
        self,
        prompt: str,
        document: LiveDocument,
        observer: Optional[SessionObserver] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> SessionSummary:
        if not prompt or not prompt.strip():
            raise ValueError("prompt must be a non-empty string")

        with self._lock:
            if self._busy:
                raise RequestInFlightError("a request is already running for this document")
            self._busy = True

        try:
            session = create_session(self.config, document, observer)
            payload = self.build_payload(prompt, document.get_text())
            try:
                with self.client.stream(payload) as response:
                    summary = session.run(
                        response.chunks,
                        mode_indicator=response.mode_indicator,
                        cancel_event=cancel_event,
                    )
            except TransportError as exc:
                summary = session.fail(exc)

            if summary.ok:
                self.previous_prompt = prompt
            return summary
        finally:
            with self._lock:
                self._busy = False
