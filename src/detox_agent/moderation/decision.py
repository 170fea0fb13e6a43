"""Threshold policy that turns category scores into a flag verdict."""

from __future__ import annotations

from collections.abc import Iterable

from detox_agent.types import CategoryScore, FlagVerdict

DEFAULT_THRESHOLD = 0.5


class FlagPolicy:
    """Flags a segment when any category meets or exceeds the threshold.

    The justifying categories are every score at or above the threshold,
    highest probability first, ties broken by label so verdicts are
    deterministic. An empty score set, as produced for a segment whose
    classification failed, is never toxic.
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("threshold must be within [0, 1]")
        self.threshold = threshold

    def decide(self, scores: Iterable[CategoryScore]) -> FlagVerdict:
        justifying = sorted(
            (score for score in scores if score.probability >= self.threshold),
            key=lambda score: (-score.probability, score.label),
        )
        return FlagVerdict(toxic=bool(justifying), categories=tuple(justifying))
