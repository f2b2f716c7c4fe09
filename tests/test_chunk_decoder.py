import pytest

from streampatch.streaming.decoder import ChunkDecoder
from streampatch.streaming.mode import ModeSelector
from streampatch.types import StreamMode


def test_decoder_holds_split_multibyte_sequences():
    payload = "héllo ✓ wörld".encode("utf-8")
    decoder = ChunkDecoder()
    pieces = [decoder.decode(payload[index : index + 1]) for index in range(len(payload))]
    pieces.append(decoder.flush())
    assert "".join(pieces) == "héllo ✓ wörld"


def test_decoder_passes_text_through():
    assert ChunkDecoder().decode("already text") == "already text"


def test_decoder_flush_replaces_truncated_sequence():
    decoder = ChunkDecoder()
    assert decoder.decode("✓".encode("utf-8")[:2]) == ""
    assert decoder.flush() == "�"


def test_mode_selector_defaults_to_full():
    selector = ModeSelector()
    assert selector.select(None) is StreamMode.FULL
    assert selector.select("") is StreamMode.FULL
    assert selector.select("patch") is StreamMode.FULL
    assert selector.select("diff") is StreamMode.DIFF
    assert selector.select("full") is StreamMode.FULL


@pytest.mark.parametrize("indicator", ["DIFF", "Diff", " diff ", "diff\n"])
def test_mode_selector_requires_exact_indicator(indicator):
    assert ModeSelector().select(indicator) is StreamMode.FULL
    assert ModeSelector(default=StreamMode.DIFF).select("FULL") is StreamMode.DIFF

