"""Weighted lexicon of charged language shared by the offline collaborators.

Each entry carries the category it signals, the weight it contributes to that
category's probability, and the neutral phrasing used when rewriting it.
Replacements must never match any entry themselves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from detox_agent.config import ToxicityCategory

_APOS = "['’]"
# Single terms also capture a preceding indefinite article so rewrites can
# re-derive it for the replacement.
_ARTICLE = r"(?:\b(?P<article>an?)[ \t]+)?"


@dataclass(frozen=True, slots=True)
class LexiconEntry:
    category: ToxicityCategory
    pattern: re.Pattern[str]
    weight: float
    replacement: str
    phrase: bool = False


def _entry(
    category: ToxicityCategory,
    pattern: str,
    weight: float,
    replacement: str,
    *,
    phrase: bool = False,
) -> LexiconEntry:
    if not phrase:
        pattern = _ARTICLE + pattern
    return LexiconEntry(
        category=category,
        pattern=re.compile(pattern, flags=re.IGNORECASE),
        weight=weight,
        replacement=replacement,
        phrase=phrase,
    )


_C = ToxicityCategory

LEXICON: tuple[LexiconEntry, ...] = (
    # insult
    _entry(
        _C.INSULT,
        rf"\byou(?:{_APOS}re| are) (?:such )?(?:an? )?(?:complete |total |absolute )?"
        r"(?:idiot|moron|fool|imbecile|loser|clown)s?\b",
        0.9,
        "I think you are mistaken",
        phrase=True,
    ),
    _entry(_C.INSULT, r"\b(?:idiot|moron|imbecile|loser|clown)\b", 0.8, "person"),
    _entry(_C.INSULT, r"\b(?:idiot|moron|imbecile|loser|clown)s\b", 0.8, "folks"),
    _entry(_C.INSULT, r"\basshole\b", 0.85, "person"),
    _entry(_C.INSULT, r"\bassholes\b", 0.85, "folks"),
    _entry(_C.INSULT, r"\bfool\b", 0.6, "person"),
    _entry(_C.INSULT, r"\bfools\b", 0.6, "folks"),
    _entry(_C.INSULT, r"\bstupid\b", 0.7, "unwise"),
    _entry(_C.INSULT, r"\bdumb\b", 0.6, "ill-considered"),
    _entry(_C.INSULT, r"\bpathetic\b", 0.6, "disappointing"),
    _entry(_C.INSULT, r"\bworthless\b", 0.65, "unhelpful"),
    _entry(_C.INSULT, r"\bincompetent\b", 0.55, "inexperienced"),
    _entry(_C.INSULT, r"\buseless\b", 0.45, "not helpful"),
    # threat
    _entry(
        _C.THREAT,
        rf"\bi(?:{_APOS}ll| will| am going to|{_APOS}m going to) (?:kill|hurt|destroy|end|beat) you\b",
        0.95,
        "I am very upset with you",
        phrase=True,
    ),
    _entry(
        _C.THREAT,
        rf"\byou(?:{_APOS}ll| will) regret (?:this|it)\b",
        0.7,
        "I am unhappy about this",
        phrase=True,
    ),
    _entry(_C.THREAT, r"\bwatch your back\b", 0.75, "please be careful", phrase=True),
    _entry(_C.THREAT, r"\bkill(?:s|ed|ing)?\b", 0.6, "stop"),
    # profanity
    _entry(
        _C.PROFANITY,
        r"\bfuck (?:off|you)\b",
        0.95,
        "please leave me alone",
        phrase=True,
    ),
    _entry(_C.PROFANITY, r"\bwhat the (?:fuck|hell)\b", 0.8, "what", phrase=True),
    _entry(_C.PROFANITY, r"\bfuckin[g']?", 0.9, ""),
    _entry(_C.PROFANITY, r"\bfuck(?:ed|er|ers)?\b", 0.9, "darn"),
    _entry(_C.PROFANITY, r"\b(?:bull)?shit(?:ty)?\b", 0.75, "nonsense"),
    _entry(_C.PROFANITY, r"\bcrap(?:py)?\b", 0.5, "nonsense"),
    _entry(_C.PROFANITY, r"\bdamn(?:ed)?\b", 0.5, ""),
    _entry(_C.PROFANITY, r"\bbloody\b", 0.4, ""),
    # identity_attack
    _entry(
        _C.IDENTITY_ATTACK,
        r"\bgo back to (?:your (?:own )?country|where you came from)\b",
        0.85,
        "you are welcome to share your perspective",
        phrase=True,
    ),
    _entry(_C.IDENTITY_ATTACK, r"\byour kind\b", 0.6, "you", phrase=True),
    _entry(_C.IDENTITY_ATTACK, r"\bpeople like you\b", 0.55, "you", phrase=True),
    # harassment
    _entry(_C.HARASSMENT, r"\bshut up\b", 0.7, "please let me finish", phrase=True),
    _entry(
        _C.HARASSMENT,
        r"\bnobody (?:wants|likes|needs) you\b",
        0.8,
        "I would like some space",
        phrase=True,
    ),
    _entry(_C.HARASSMENT, r"\bget lost\b", 0.65, "please give me some space", phrase=True),
    _entry(_C.HARASSMENT, r"\bi hate you\b", 0.8, "I am frustrated with you", phrase=True),
    _entry(_C.HARASSMENT, r"\bhate\b", 0.4, "dislike"),
)


def entries_for(categories: set[str] | None = None) -> list[LexiconEntry]:
    """Return lexicon entries, phrases first, optionally limited to categories."""

    selected = [
        entry
        for entry in LEXICON
        if categories is None or entry.category.value in categories
    ]
    return sorted(selected, key=lambda entry: not entry.phrase)
