"""LangChain-backed neutralizing rewriter."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from detox_agent.errors import RewriteUnavailable
from detox_agent.rewrite.base import Rewriter
from detox_agent.types import CategoryScore

_SYSTEM_PROMPT = """
You are a careful editor who removes toxicity from text.

Rules:
1) Rewrite the sentence so it no longer contains the flagged kinds of toxicity.
2) Replace charged or hostile wording with neutral, respectful phrasing.
3) Keep the informational content and intent whenever that can be said politely.
4) Do not add new facts, apologies, or commentary.
5) Return only the rewritten sentence, without quotes.
""".strip()

_HUMAN_PROMPT = "Flagged categories: {categories}\n\nSentence:\n{text}"

_QUOTE_PAIRS = (('"', '"'), ("'", "'"), ("“", "”"), ("‘", "’"))


class LangChainRewriter(Rewriter):
    """Neutralizes flagged segments with a chat model."""

    def __init__(self, *, llm: Any, max_retries: int = 2) -> None:
        prompt = ChatPromptTemplate.from_messages(
            [("system", _SYSTEM_PROMPT), ("human", _HUMAN_PROMPT)]
        )
        self.chain = (prompt | llm | StrOutputParser()).with_retry(
            stop_after_attempt=max_retries
        )

    async def _neutralize(self, text: str, categories: Sequence[CategoryScore]) -> str:
        labels = ", ".join(category.label for category in categories)
        try:
            output = await self.chain.ainvoke({"categories": labels, "text": text})
        except Exception as exc:
            raise RewriteUnavailable(
                f"rewrite call failed: {type(exc).__name__}: {exc}"
            ) from exc
        return _strip_quotes(str(output).strip())


def _strip_quotes(text: str) -> str:
    for opening, closing in _QUOTE_PAIRS:
        if len(text) >= 2 and text.startswith(opening) and text.endswith(closing):
            return text[1:-1].strip()
    return text
