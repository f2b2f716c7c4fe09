from streampatch.errors import BlockNotFound, ErrorKind, ImpreciseLocation
from streampatch.patching.document import TextDocument
from streampatch.patching.matchers import (
    ExactMatch,
    WhitespaceNormalizedMatch,
    locate,
    normalize_whitespace,
)
from streampatch.patching.patcher import DocumentPatcher
from streampatch.types import BlockOutcome, EditBlock, LocateKind, TextRange

DOC = "<html>\n  <body>\n    <h1>Title</h1>\n    <p>Body</p>\n  </body>\n</html>"


class _ExplodingDocument(TextDocument):
    def replace(self, text_range, text):
        raise RuntimeError("read-only")


def test_exact_match_replaces_only_the_matched_span():
    document = TextDocument(DOC)
    result = DocumentPatcher().apply_block(EditBlock("<h1>Title</h1>", "<h1>New</h1>"), document)

    assert result.outcome is BlockOutcome.APPLIED
    assert result.range == TextRange(DOC.index("<h1>"), DOC.index("<h1>") + len("<h1>Title</h1>"))
    assert document.get_text() == DOC.replace("<h1>Title</h1>", "<h1>New</h1>")


def test_first_occurrence_wins():
    document = TextDocument("a-x-b-x-c")
    assert DocumentPatcher().apply(EditBlock("x", "Y"), document) is True
    assert document.get_text() == "a-Y-b-x-c"


def test_regex_metacharacters_are_literal():
    text = "price: $5.00 (approx.) [note]*"
    document = TextDocument(text)
    assert DocumentPatcher().apply(EditBlock("$5.00 (approx.) [note]*", "$6"), document) is True
    assert document.get_text() == "price: $6"


def test_match_is_case_sensitive():
    document = TextDocument("<H1>Title</H1>")
    result = DocumentPatcher().apply_block(EditBlock("<h1>Title</h1>", "x"), document)
    assert result.outcome is BlockOutcome.NOT_FOUND
    assert document.get_text() == "<H1>Title</H1>"


def test_whitespace_only_match_is_skipped_without_editing():
    document = TextDocument(DOC)
    block = EditBlock("<h1>Title</h1>\n<p>Body</p>", "<p>gone</p>")
    result = DocumentPatcher().apply_block(block, document)

    assert result.outcome is BlockOutcome.IMPRECISE_LOCATION
    assert result.outcome.is_skip
    assert isinstance(result.error, ImpreciseLocation)
    assert result.error.kind is ErrorKind.IMPRECISE_LOCATION
    assert result.error.original == block.original
    assert document.get_text() == DOC


def test_missing_text_reports_not_found_and_leaves_document_untouched():
    document = TextDocument(DOC)
    block = EditBlock("<footer>nope</footer>", "<footer/>")
    result = DocumentPatcher().apply_block(block, document)

    assert result.outcome is BlockOutcome.NOT_FOUND
    assert isinstance(result.error, BlockNotFound)
    assert result.error.updated == "<footer/>"
    assert document.get_text() == DOC
    assert document.version == 0


def test_empty_search_text_is_not_found():
    document = TextDocument(DOC)
    result = DocumentPatcher().apply_block(EditBlock("", "inserted"), document)
    assert result.outcome is BlockOutcome.NOT_FOUND
    assert document.get_text() == DOC


def test_second_identical_block_does_not_match_after_first_edit():
    document = TextDocument("<p>foo</p>")
    patcher = DocumentPatcher()
    block = EditBlock("foo", "bar")

    assert patcher.apply(block, document) is True
    second = patcher.apply_block(block, document)

    assert second.outcome is BlockOutcome.NOT_FOUND
    assert document.get_text() == "<p>bar</p>"


def test_replace_failure_is_reported_per_block():
    document = _ExplodingDocument(DOC)
    result = DocumentPatcher().apply_block(EditBlock("<p>Body</p>", "<p>x</p>"), document)
    assert result.outcome is BlockOutcome.EDIT_FAILED
    assert result.outcome.is_failure
    assert "read-only" in str(result.error)


def test_reveal_receives_updated_span_and_failures_are_ignored():
    revealed = []
    document = TextDocument("abc foo xyz", on_reveal=revealed.append)
    assert DocumentPatcher().apply(EditBlock("foo", "longer"), document) is True
    assert revealed == [TextRange(4, 10)]

    def _boom(_range):
        raise RuntimeError("no view")

    failing = TextDocument("abc foo xyz", on_reveal=_boom)
    assert DocumentPatcher().apply(EditBlock("foo", "bar"), failing) is True
    assert failing.get_text() == "abc bar xyz"


def test_locate_runs_strategies_in_order():
    document = TextDocument("a  b\n c")
    assert locate("a  b", document).kind is LocateKind.FOUND
    assert locate("a b c", document).kind is LocateKind.NOT_FOUND_EXACT
    assert locate("a b d", document).kind is LocateKind.NOT_FOUND_FUZZY

    exact_only = locate("a b c", document, strategies=(ExactMatch(),))
    assert exact_only.kind is LocateKind.NOT_FOUND_FUZZY

    fuzzy = WhitespaceNormalizedMatch().locate("a b c", document)
    assert fuzzy is not None
    assert fuzzy.range is None
    assert fuzzy.strategy == "whitespace_normalized"


def test_normalize_whitespace():
    assert normalize_whitespace("  a\n\t b   c \n") == "a b c"
