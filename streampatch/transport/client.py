"""HTTP client for streamed generation requests."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

import httpx

from streampatch.errors import LoginRequiredError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_MODE_HEADER = "X-Response-Type"


@dataclass
class StreamResponse:
    """Open streamed response: mode indicator plus body chunks."""

    status_code: int
    mode_indicator: Optional[str]
    chunks: Iterator[bytes]


class AskClient:
    """POST a generation request and stream the response body."""

    def __init__(
        self,
        endpoint: str,
        *,
        timeout_seconds: int = 60,
        mode_header: str = DEFAULT_MODE_HEADER,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.endpoint = endpoint
        self.mode_header = mode_header
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(connect=30.0, read=float(timeout_seconds), write=30.0, pool=10.0),
        )

    @classmethod
    def from_config(cls, config, *, client: Optional[httpx.Client] = None) -> "AskClient":
        return cls(
            config.transport.endpoint,
            timeout_seconds=config.transport.timeout_seconds,
            mode_header=config.stream.mode_header,
            client=client,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    @contextmanager
    def stream(self, payload: Dict[str, Any]) -> Iterator[StreamResponse]:
        logger.info("Request start endpoint=%s", self.endpoint)
        try:
            with self._client.stream("POST", self.endpoint, json=payload) as response:
                if not response.is_success:
                    response.read()
                    raise self._error_from_response(response)
                mode_indicator = response.headers.get(self.mode_header)
                logger.info("Response open status=%s mode=%s", response.status_code, mode_indicator)
                yield StreamResponse(
                    status_code=response.status_code,
                    mode_indicator=mode_indicator,
                    chunks=self._iter_body(response),
                )
        except httpx.HTTPError as exc:
            logger.error("Request failed endpoint=%s error=%s", self.endpoint, exc)
            raise TransportError(f"request failed: {exc}") from exc

    @staticmethod
    def _iter_body(response: httpx.Response) -> Iterator[bytes]:
        try:
            for chunk in response.iter_bytes():
                if chunk:
                    yield chunk
        except httpx.HTTPError as exc:
            raise TransportError(f"stream interrupted: {exc}", status_code=response.status_code) from exc

    @staticmethod
    def _error_from_response(response: httpx.Response) -> TransportError:
        status = response.status_code
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict):
            message = str(data.get("message") or f"request failed with status {status}")
            if data.get("openLogin"):
                return LoginRequiredError(message, status_code=status)
            return TransportError(message, status_code=status)

        text = response.text.strip()
        return TransportError(text or f"request failed with status {status}", status_code=status)
