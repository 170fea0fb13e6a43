"""Toxicity classifier abstractions and deterministic baseline implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from detox_agent.config import ToxicityCategory
from detox_agent.moderation.lexicon import entries_for
from detox_agent.types import CategoryScore


class Classifier(ABC):
    """Classifier interface used by the pipeline orchestrator.

    Implementations return one `CategoryScore` per supported category. Scores
    are independent probabilities (multi-label), so they need not sum to 1.
    Collaborator failures must surface as `ClassificationUnavailable`.
    """

    def __init__(self, categories: Iterable[str] | None = None) -> None:
        self.categories = [
            str(category) for category in (categories or list(ToxicityCategory))
        ]

    @abstractmethod
    async def classify(self, text: str) -> list[CategoryScore]:
        """Score one segment across every supported category."""


class LexiconClassifier(Classifier):
    """Deterministic classifier without external model calls.

    A category's probability is the noisy-OR of the weights of its matching
    lexicon entries: `1 - prod(1 - weight)`. Used offline, in tests, and as
    the default when no chat model is configured.
    """

    async def classify(self, text: str) -> list[CategoryScore]:
        return self.score(text)

    def score(self, text: str) -> list[CategoryScore]:
        remaining = {category: 1.0 for category in self.categories}
        for entry in entries_for(set(self.categories)):
            if entry.pattern.search(text):
                remaining[entry.category.value] *= 1.0 - entry.weight

        return [
            CategoryScore(label=category, probability=round(1.0 - remaining[category], 4))
            for category in self.categories
        ]
