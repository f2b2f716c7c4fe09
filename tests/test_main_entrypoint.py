from __future__ import annotations

import json
from pathlib import Path

import pytest

from streampatch import __main__ as cli


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda config: None)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def _config(tmp_path: Path) -> Path:
    return _write(tmp_path / "config.yaml", f"log_file: {tmp_path / 'sp.log'}\nrender_throttle_ms: 0\n")


def test_replay_diff_stream_writes_document(tmp_path: Path):
    document = _write(tmp_path / "index.html", "<h1>Hello</h1>\n<p>old</p>\n")
    stream = _write(
        tmp_path / "stream.txt",
        "Updating.\n<<<<<<< SEARCH\n<p>old</p>\n=======\n<p>new ✓</p>\n>>>>>>> REPLACE\n",
    )

    cli.main(
        [
            "--document", str(document),
            "--input", str(stream),
            "--mode", "diff",
            "--chunk-size", "3",
            "--config", str(_config(tmp_path)),
            "--write",
        ]
    )

    assert document.read_text(encoding="utf-8") == "<h1>Hello</h1>\n<p>new ✓</p>\n"


def test_replay_without_write_leaves_file_untouched(tmp_path: Path):
    document = _write(tmp_path / "index.html", "<p>old</p>")
    stream = _write(tmp_path / "stream.txt", "<<<<<<< SEARCH\n<p>old</p>\n=======\n<p>new</p>\n>>>>>>> REPLACE")

    cli.main(["--document", str(document), "--input", str(stream), "--mode", "diff", "--config", str(_config(tmp_path))])

    assert document.read_text(encoding="utf-8") == "<p>old</p>"


def test_malformed_full_stream_exits_1(tmp_path: Path):
    document = _write(tmp_path / "index.html", "<p>keep</p>")
    stream = _write(tmp_path / "stream.txt", "Sorry, I can't do that.")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--document", str(document), "--input", str(stream), "--config", str(_config(tmp_path)), "--write"])

    assert excinfo.value.code == 1
    assert document.read_text(encoding="utf-8") == "<p>keep</p>"


def test_json_events_are_printed_as_lines(tmp_path: Path, capsys):
    document = _write(tmp_path / "index.html", "")
    stream = _write(tmp_path / "stream.txt", "<!DOCTYPE html><html><body></body></html>")

    cli.main(
        [
            "--document", str(document),
            "--input", str(stream),
            "--config", str(_config(tmp_path)),
            "--json-events",
        ]
    )

    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert [line["params"]["event_type"] for line in lines] == ["document.final", "session.complete"]
    assert lines[0]["params"]["payload"]["text"] == "<!DOCTYPE html><html><body></body></html>"


def test_invalid_chunk_size_is_rejected(tmp_path: Path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--document", str(tmp_path / "x.html"), "--input", str(tmp_path / "s.txt"), "--chunk-size", "0"])
    assert excinfo.value.code == 2
