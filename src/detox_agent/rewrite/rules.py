"""Deterministic rule-table rewriter used when no chat model is available."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from detox_agent.moderation.lexicon import LexiconEntry, entries_for
from detox_agent.rewrite.base import Rewriter
from detox_agent.types import CategoryScore

_MAX_PASSES = 3
_GENERIC_REPLACEMENT = "I have some concerns about this."
_WORD = re.compile(r"\w", flags=re.UNICODE)
_EXTRA_SPACE = re.compile(r"[ \t]{2,}")
_SPACE_BEFORE_PUNCT = re.compile(r"[ \t]+([,.;:!?])")
_LEADING_JOINERS = re.compile(r"^[\s,;:]+")


class RuleTableRewriter(Rewriter):
    """Substitutes charged lexicon entries with their neutral phrasing.

    Only entries of the triggering categories are rewritten, phrases before
    single terms. The table is the same lexicon `LexiconClassifier` scores
    with, and no replacement matches an entry, so a rewrite never re-triggers
    the categories it was produced for.

    This keeps the same contract as `LangChainRewriter` and is useful for
    local/offline environments where `OPENAI_API_KEY` is not configured.
    """

    async def _neutralize(self, text: str, categories: Sequence[CategoryScore]) -> str:
        return self.apply(text, {category.label for category in categories})

    def apply(self, text: str, labels: set[str] | None = None) -> str:
        entries = entries_for(labels)
        rewritten = _substitute(text, entries)
        if rewritten == text:
            return text

        # Removals can join words into a new match, so tidy until stable.
        capitalize = text[:1].isupper()
        for _ in range(_MAX_PASSES):
            tidied = _tidy(rewritten, capitalize=capitalize)
            rewritten = _substitute(tidied, entries)
            if rewritten == tidied:
                break
        rewritten = _tidy(rewritten, capitalize=capitalize)

        if not _WORD.search(rewritten):
            return _GENERIC_REPLACEMENT
        return rewritten


def _substitute(text: str, entries: list[LexiconEntry]) -> str:
    for entry in entries:
        text = entry.pattern.sub(_replacer(entry.replacement), text)
    return text


def _replacer(replacement: str) -> Callable[[re.Match[str]], str]:
    def _substitute(match: re.Match[str]) -> str:
        article = match.groupdict().get("article")
        text = replacement
        if article and replacement:
            text = f"{_indefinite_article(replacement)} {replacement}"
        elif article:
            text = article
        if text and match.group(0)[:1].isupper():
            return text[0].upper() + text[1:]
        return text

    return _substitute


def _indefinite_article(word: str) -> str:
    return "an" if word[:1].lower() in "aeiou" else "a"


def _tidy(text: str, *, capitalize: bool) -> str:
    text = _EXTRA_SPACE.sub(" ", text)
    text = _SPACE_BEFORE_PUNCT.sub(r"\1", text)
    text = _LEADING_JOINERS.sub("", text).strip()
    if capitalize and text:
        text = text[0].upper() + text[1:]
    return text
