"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Segment:
    """A contiguous span of the document assessed as one unit."""

    index: int
    text: str
    leading_separator: str


@dataclass(frozen=True, slots=True)
class CategoryScore:
    """Probability that a segment belongs to one toxicity category."""

    label: str
    probability: float

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "probability": self.probability}


@dataclass(frozen=True, slots=True)
class FlagVerdict:
    """Outcome of the flag policy for one segment."""

    toxic: bool
    categories: tuple[CategoryScore, ...] = ()


@dataclass(frozen=True, slots=True)
class SegmentOutcome:
    """Per-segment result handed from the orchestrator to the assembler."""

    index: int
    text: str
    replacement: str
    verdict: FlagVerdict


@dataclass(frozen=True, slots=True)
class FlaggedItem:
    """Report entry for a segment that was flagged as toxic."""

    index: int
    original: str
    sanitized: str
    categories: tuple[CategoryScore, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "original": self.original,
            "sanitized": self.sanitized,
            "categories": [category.to_dict() for category in self.categories],
        }


@dataclass(frozen=True, slots=True)
class SegmentFailure:
    """A recovered per-segment collaborator failure, kept for tracing."""

    index: int
    stage: str
    reason: str


@dataclass(frozen=True, slots=True)
class DetoxReport:
    """Sanitized document plus the ordered list of flagged segments."""

    sanitized_document: str
    flagged: tuple[FlaggedItem, ...] = ()
    trace_id: str | None = field(default=None, compare=False)

    @property
    def flagged_count(self) -> int:
        return len(self.flagged)

    @property
    def summary(self) -> str:
        count = self.flagged_count
        if count == 0:
            return "Detox complete · No toxicity detected"
        plural = "" if count == 1 else "s"
        return f"Detox complete · {count} toxic segment{plural} softened"

    def to_dict(self) -> dict[str, Any]:
        return {
            "sanitizedDocument": self.sanitized_document,
            "flagged": [item.to_dict() for item in self.flagged],
        }
