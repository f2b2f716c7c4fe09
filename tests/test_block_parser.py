import pytest

from streampatch.streaming.blocks import DiffBlockParser, has_open_block, parse_blocks
from streampatch.types import EditBlock

STREAM = (
    "Here are the changes.\n"
    "<<<<<<< SEARCH\n"
    "<h1>Hello</h1>\n"
    "=======\n"
    "<h1>Hello, world</h1>\n"
    ">>>>>>> REPLACE\n"
    "and a second one\n"
    "<<<<<<< SEARCH\n"
    "  <p>old</p>\n"
    "  <p>text</p>\n"
    "=======\n"
    "  <p>new</p>\n"
    ">>>>>>> REPLACE\n"
    "done."
)

EXPECTED = [
    EditBlock(original="<h1>Hello</h1>", updated="<h1>Hello, world</h1>"),
    EditBlock(original="  <p>old</p>\n  <p>text</p>", updated="  <p>new</p>"),
]


def _feed_in_chunks(text: str, size: int):
    parser = DiffBlockParser()
    blocks = []
    for start in range(0, len(text), size):
        blocks.extend(parser.feed(text[start : start + size]))
    return blocks, parser


def test_parse_blocks_extracts_all_complete_blocks():
    blocks, remainder = parse_blocks(STREAM)
    assert blocks == EXPECTED
    assert remainder == "\ndone."


def test_parse_blocks_without_start_marker_returns_buffer_unchanged():
    buffer = "Some prose =======\n>>>>>>> REPLACE and <<<<<<< SEAR"
    blocks, remainder = parse_blocks(buffer)
    assert blocks == []
    assert remainder == buffer

    again, remainder_again = parse_blocks(remainder)
    assert again == []
    assert remainder_again == buffer


@pytest.mark.parametrize(
    "partial",
    [
        "intro\n<<<<<<< SEARCH\nfoo\n",
        "intro\n<<<<<<< SEARCH\nfoo\n=====",
        "intro\n<<<<<<< SEARCH\nfoo\n=======\nbar\n>>>>>>> REPL",
    ],
)
def test_incomplete_block_keeps_text_from_start_marker(partial: str):
    blocks, remainder = parse_blocks(partial)
    assert blocks == []
    assert remainder == partial[partial.index("<<<<<<< SEARCH") :]
    assert has_open_block(remainder)


@pytest.mark.parametrize("size", [1, 2, 3, 5, 7, 13, 64, len(STREAM)])
def test_chunked_feed_matches_whole_stream(size: int):
    blocks, parser = _feed_in_chunks(STREAM, size)
    assert blocks == EXPECTED
    assert parser.blocks_parsed == 2
    assert not parser.has_open_block


def test_leading_newline_and_trailing_whitespace_are_stripped():
    blocks, _ = parse_blocks("<<<<<<< SEARCH\n\n  indented\n\n=======\n\tx  \n\n>>>>>>> REPLACE")
    assert blocks == [EditBlock(original="\n  indented", updated="\tx")]


def test_crlf_marker_line_endings():
    blocks, _ = parse_blocks("<<<<<<< SEARCH\r\nfoo\r\n=======\r\nbar\r\n>>>>>>> REPLACE\r\n")
    assert blocks == [EditBlock(original="foo", updated="bar")]


def test_empty_replacement_is_a_deletion():
    blocks, _ = parse_blocks("<<<<<<< SEARCH\n<br>\n=======\n>>>>>>> REPLACE")
    assert blocks == [EditBlock(original="<br>", updated="")]


def test_trailing_partial_block_after_complete_one():
    text = STREAM + "\n<<<<<<< SEARCH\nunfinished"
    blocks, remainder = parse_blocks(text)
    assert blocks == EXPECTED
    assert remainder == "<<<<<<< SEARCH\nunfinished"


def test_reset_clears_state():
    parser = DiffBlockParser()
    parser.feed("<<<<<<< SEARCH\nfoo")
    parser.reset()
    assert parser.remainder == ""
    assert parser.blocks_parsed == 0
