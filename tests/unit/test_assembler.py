import pytest

from detox_agent.ingest.segmenter import Segmenter
from detox_agent.pipeline.assembler import assemble
from detox_agent.types import CategoryScore, FlaggedItem, FlagVerdict, SegmentOutcome

_INSULT = (CategoryScore("insult", 0.91),)


def _outcomes(document, rewrites: dict[int, str]) -> list[SegmentOutcome]:
    outcomes = []
    for segment in document:
        if segment.index in rewrites:
            verdict = FlagVerdict(toxic=True, categories=_INSULT)
            replacement = rewrites[segment.index]
        else:
            verdict = FlagVerdict(toxic=False)
            replacement = segment.text
        outcomes.append(
            SegmentOutcome(
                index=segment.index,
                text=segment.text,
                replacement=replacement,
                verdict=verdict,
            )
        )
    return outcomes


def test_assembles_in_index_order_regardless_of_input_order() -> None:
    document = Segmenter().segment("A is fine.  B is rude!\n\nC is fine.\n")
    outcomes = _outcomes(document, {1: "B is curt!"})

    report = assemble(document, list(reversed(outcomes)))

    assert report.sanitized_document == "A is fine.  B is curt!\n\nC is fine.\n"
    assert report.flagged == (
        FlaggedItem(index=1, original="B is rude!", sanitized="B is curt!", categories=_INSULT),
    )


def test_flagged_indices_strictly_increasing() -> None:
    document = Segmenter().segment("One. Two. Three. Four.")
    report = assemble(document, _outcomes(document, {3: "4.", 0: "1.", 2: "3."}))

    indices = [item.index for item in report.flagged]
    assert indices == [0, 2, 3]
    assert report.sanitized_document == "1. Two. 3. 4."


def test_no_flags_reproduces_document() -> None:
    text = "  Nothing to see here. Move along!  "
    document = Segmenter().segment(text)

    report = assemble(document, _outcomes(document, {}))

    assert report.sanitized_document == text
    assert report.flagged == ()
    assert report.summary == "Detox complete · No toxicity detected"


def test_outcomes_must_cover_each_segment_once() -> None:
    document = Segmenter().segment("One. Two.")
    outcomes = _outcomes(document, {})

    with pytest.raises(ValueError):
        assemble(document, outcomes[:1])
    with pytest.raises(ValueError):
        assemble(document, outcomes + outcomes[:1])


def test_report_wire_shape() -> None:
    document = Segmenter().segment("You are an idiot. Let's meet at 3pm.")
    report = assemble(document, _outcomes(document, {0: "I disagree with you."}))

    assert report.summary == "Detox complete · 1 toxic segment softened"
    assert report.to_dict() == {
        "sanitizedDocument": "I disagree with you. Let's meet at 3pm.",
        "flagged": [
            {
                "index": 0,
                "original": "You are an idiot.",
                "sanitized": "I disagree with you.",
                "categories": [{"label": "insult", "probability": 0.91}],
            }
        ],
    }
