import pytest

from detox_agent.ingest.segmenter import Segmenter

_DOCUMENTS = [
    "",
    "   ",
    "\t\n",
    "no punctuation here at all",
    "You are an idiot. Let's meet at 3pm.",
    "  Leading space. Trailing space!  ",
    "Para one.\n\nPara two?\n",
    "Heading\n\n\n\nBody text without a full stop",
    "Wait... what?! Really.",
    'He said "stop." Then he left.',
    "中文。句子！ ok",
    "version 1.2.3 is out",
    "One.  Two.\r\n\r\nThree.",
    "Heading\r\n \r\nBody text\r\n",
]


@pytest.mark.parametrize("document", _DOCUMENTS)
def test_segments_partition_document(document: str) -> None:
    segmented = Segmenter().segment(document)

    rebuilt = "".join(s.leading_separator + s.text for s in segmented) + segmented.trailing_separator
    assert rebuilt == document
    assert segmented.reassemble() == document
    assert [s.index for s in segmented] == list(range(len(segmented)))
    assert all(s.text and s.text == s.text.strip() for s in segmented)


def test_sentence_boundaries_split_on_punctuation_followed_by_space() -> None:
    segmented = Segmenter().segment("You are an idiot. Let's meet at 3pm.")

    assert [s.text for s in segmented] == ["You are an idiot.", "Let's meet at 3pm."]
    assert [s.leading_separator for s in segmented] == ["", " "]
    assert segmented.trailing_separator == ""


def test_punctuation_runs_and_closing_quotes_stay_with_sentence() -> None:
    texts = [s.text for s in Segmenter().segment('Wait... what?! He said "stop." Fine.')]

    assert texts == ["Wait...", "what?!", 'He said "stop."', "Fine."]


def test_paragraph_break_is_a_boundary_without_punctuation() -> None:
    segmented = Segmenter().segment("First line\n\nSecond line")

    assert [s.text for s in segmented] == ["First line", "Second line"]
    assert segmented.segments[1].leading_separator == "\n\n"


def test_crlf_paragraph_break_is_a_boundary_without_punctuation() -> None:
    segmented = Segmenter().segment("Heading\r\n\r\nBody text")

    assert [s.text for s in segmented] == ["Heading", "Body text"]
    assert segmented.segments[1].leading_separator == "\r\n\r\n"
    assert segmented.reassemble() == "Heading\r\n\r\nBody text"


def test_single_crlf_is_not_a_paragraph_break() -> None:
    texts = [s.text for s in Segmenter().segment("Line one\r\nline two")]

    assert texts == ["Line one\r\nline two"]


@pytest.mark.parametrize("document", ["", "   ", "\n\n\t "])
def test_blank_document_has_no_segments(document: str) -> None:
    segmented = Segmenter().segment(document)

    assert len(segmented) == 0
    assert segmented.trailing_separator == document


def test_document_without_boundary_is_one_segment() -> None:
    segmented = Segmenter().segment("  just one thought, version 1.2 maybe  ")

    assert len(segmented) == 1
    assert segmented.segments[0].text == "just one thought, version 1.2 maybe"
    assert segmented.segments[0].leading_separator == "  "
    assert segmented.trailing_separator == "  "


def test_segmented_document_is_restartable() -> None:
    segmented = Segmenter().segment("One. Two. Three.")

    assert list(segmented) == list(segmented)


def test_reassemble_substitutes_replacements_and_keeps_separators() -> None:
    segmented = Segmenter().segment("Bad one.\n\nGood two.  ")

    assert segmented.reassemble(["Nice one.", "Good two."]) == "Nice one.\n\nGood two.  "
    with pytest.raises(ValueError):
        segmented.reassemble(["only one"])
