"""LangChain-backed toxicity classifier."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Annotated, Any

from langchain_core.output_parsers import JsonOutputParser
from langchain_core.prompts import ChatPromptTemplate
from pydantic import Field, TypeAdapter, ValidationError

from detox_agent.errors import ClassificationUnavailable
from detox_agent.moderation.classifier import Classifier
from detox_agent.types import CategoryScore

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = """
You are a toxicity classifier for user-generated text.

Rules:
1) Score the text independently for every category the user lists.
2) Each score is a probability between 0 and 1. Categories are multi-label and
   do not need to sum to 1.
3) Respond with a single JSON object mapping each category label to its
   probability, for example {{"insult": 0.12, "threat": 0.01}}.
4) Do not add commentary, markdown, or extra keys.
""".strip()

_HUMAN_PROMPT = "Categories: {categories}\n\nText:\n{text}"

_SCORES = TypeAdapter(dict[str, Annotated[float, Field(strict=True, ge=0.0, le=1.0)]])


class LangChainClassifier(Classifier):
    """Scores segments with a chat model through a JSON-producing chain."""

    def __init__(
        self,
        *,
        llm: Any,
        categories: Iterable[str] | None = None,
        max_retries: int = 2,
    ) -> None:
        super().__init__(categories)
        prompt = ChatPromptTemplate.from_messages(
            [("system", _SYSTEM_PROMPT), ("human", _HUMAN_PROMPT)]
        )
        self.chain = (prompt | llm | JsonOutputParser()).with_retry(
            stop_after_attempt=max_retries
        )

    async def classify(self, text: str) -> list[CategoryScore]:
        try:
            payload = await self.chain.ainvoke(
                {"categories": ", ".join(self.categories), "text": text}
            )
        except Exception as exc:
            raise ClassificationUnavailable(
                f"classifier call failed: {type(exc).__name__}: {exc}"
            ) from exc
        return _normalize_scores(payload, self.categories)


def _normalize_scores(payload: Any, categories: list[str]) -> list[CategoryScore]:
    if isinstance(payload, dict) and isinstance(payload.get("scores"), dict):
        payload = payload["scores"]
    if not isinstance(payload, dict):
        raise ClassificationUnavailable(
            f"classifier returned {type(payload).__name__}, expected a JSON object"
        )

    known = {
        str(label).strip().lower(): value
        for label, value in payload.items()
        if str(label).strip().lower() in categories
    }
    try:
        scores = _SCORES.validate_python(known)
    except ValidationError as exc:
        raise ClassificationUnavailable(f"malformed classifier scores: {exc}") from exc

    missing = [category for category in categories if category not in scores]
    if missing:
        raise ClassificationUnavailable(f"classifier omitted categories: {missing}")

    ignored = sum(1 for label in payload if str(label).strip().lower() not in categories)
    if ignored:
        logger.debug(f"Ignored {ignored} unknown labels in classifier output")

    return [CategoryScore(label=category, probability=scores[category]) for category in categories]
