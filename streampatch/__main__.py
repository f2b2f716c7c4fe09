"""Main entry point for streampatch."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterator, List, Optional

from rich.console import Console

from streampatch.app.ask_service import AskService, create_session
from streampatch.config import Config
from streampatch.errors import ConfigError, LoginRequiredError
from streampatch.logging_config import configure_logging
from streampatch.patching.document import TextDocument
from streampatch.protocol.events import EventObserver
from streampatch.transport.client import AskClient
from streampatch.types import SessionSummary
from streampatch.ui.console import ConsoleObserver


def _iter_file_chunks(path: Path, chunk_size: int) -> Iterator[bytes]:
    with path.open("rb") as handle:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                return
            yield chunk


def _write_event(frame: dict) -> None:
    sys.stdout.write(json.dumps(frame, ensure_ascii=False) + "\n")
    sys.stdout.flush()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="streampatch")
    parser.add_argument("--document", type=Path, required=True, help="Document file edits are applied to.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", type=Path, help="Replay a recorded response stream from a file.")
    source.add_argument("--prompt", help="Send a prompt to the configured endpoint and apply the response.")
    parser.add_argument("--mode", choices=["full", "diff"], help="Mode indicator for replayed streams.")
    parser.add_argument("--chunk-size", type=int, help="Replay chunk size in bytes.")
    parser.add_argument("--config", type=Path, help="Path to config.yaml.")
    parser.add_argument("--write", action="store_true", help="Write the resulting document back to --document.")
    parser.add_argument("--json-events", action="store_true", help="Print session events as JSON lines.")
    parser.add_argument("--verbose", action="store_true", help="Report every preview frame.")
    return parser


def _run(args, config: Config, document: TextDocument, observer) -> SessionSummary:
    if args.input is not None:
        chunk_size = args.chunk_size or config.stream.chunk_size
        session = create_session(config, document, observer)
        try:
            return session.run(_iter_file_chunks(args.input, chunk_size), mode_indicator=args.mode)
        except KeyboardInterrupt:
            return session.abort()

    client = AskClient.from_config(config)
    try:
        service = AskService(config=config, client=client)
        return service.ask(args.prompt, document, observer)
    finally:
        client.close()


def main(argv: Optional[List[str]] = None) -> None:
    args = _build_parser().parse_args(argv)
    if args.chunk_size is not None and args.chunk_size < 1:
        print("Error: --chunk-size must be >= 1", file=sys.stderr)
        raise SystemExit(2)

    try:
        config = Config(config_path=args.config)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2)
    configure_logging(config)

    console = Console(stderr=args.json_events)
    if args.json_events:
        observer = EventObserver(_write_event, include_partials=args.verbose)
    else:
        observer = ConsoleObserver(console, verbose=args.verbose)

    document = TextDocument.from_path(args.document) if args.document.exists() else TextDocument("")
    summary = _run(args, config, document, observer)

    if any(isinstance(error, LoginRequiredError) for error in summary.errors):
        console.print("[yellow]Login required.[/yellow] Sign in to the service and try again.")

    if summary.aborted:
        raise SystemExit(130)
    if not summary.ok:
        raise SystemExit(1)
    if args.write:
        document.save(args.document)
        console.print(f"[green]✓[/green] Wrote {args.document}")


if __name__ == "__main__":
    main()
