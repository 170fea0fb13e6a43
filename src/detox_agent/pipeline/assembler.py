"""Rebuilds the sanitized document and the flagged-segment list."""

from __future__ import annotations

from collections.abc import Sequence

from detox_agent.ingest.segmenter import SegmentedDocument
from detox_agent.types import DetoxReport, FlaggedItem, SegmentOutcome


def assemble(
    document: SegmentedDocument,
    outcomes: Sequence[SegmentOutcome],
    *,
    trace_id: str | None = None,
) -> DetoxReport:
    """Assemble a report from per-segment outcomes.

    Outcomes are keyed by segment index and consumed in ascending index
    order, so the order in which concurrent work finished never leaks into
    the report.
    """

    by_index = {outcome.index: outcome for outcome in outcomes}
    expected = [segment.index for segment in document]
    if len(by_index) != len(outcomes) or sorted(by_index) != expected:
        raise ValueError("outcomes must cover each segment index exactly once")

    ordered = [by_index[index] for index in expected]
    sanitized = document.reassemble([outcome.replacement for outcome in ordered])
    flagged = tuple(
        FlaggedItem(
            index=outcome.index,
            original=outcome.text,
            sanitized=outcome.replacement,
            categories=outcome.verdict.categories,
        )
        for outcome in ordered
        if outcome.verdict.toxic
    )
    return DetoxReport(sanitized_document=sanitized, flagged=flagged, trace_id=trace_id)
