"""Rewriter interface shared by rule-based and model-backed rewriters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from detox_agent.errors import RewriteUnavailable
from detox_agent.types import CategoryScore


class Rewriter(ABC):
    """Produces the replacement text for one segment.

    `rewrite` is the identity when no categories justify a flag. For flagged
    segments it delegates to `_neutralize` and rejects empty output, raising
    `RewriteUnavailable` so the orchestrator can fall back to the original.
    """

    async def rewrite(self, text: str, categories: Sequence[CategoryScore]) -> str:
        if not categories:
            return text

        rewritten = await self._neutralize(text, categories)
        if text.strip() and not rewritten.strip():
            raise RewriteUnavailable("rewriter produced empty output")
        return rewritten

    @abstractmethod
    async def _neutralize(self, text: str, categories: Sequence[CategoryScore]) -> str:
        """Rewrite a flagged segment in neutral phrasing."""
