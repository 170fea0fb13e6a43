import asyncio

import pytest

from detox_agent.moderation.classifier import LexiconClassifier
from detox_agent.moderation.decision import FlagPolicy
from detox_agent.rewrite.rules import RuleTableRewriter
from detox_agent.types import CategoryScore


def test_unflagged_segment_is_returned_unchanged() -> None:
    text = "You are an idiot."

    assert asyncio.run(RuleTableRewriter().rewrite(text, [])) == text


def test_insult_phrase_rewritten_to_neutral_phrasing() -> None:
    rewritten = asyncio.run(
        RuleTableRewriter().rewrite("You are an idiot.", [CategoryScore("insult", 0.98)])
    )

    assert rewritten == "I think you are mistaken."


def test_only_triggering_categories_are_rewritten() -> None:
    rewriter = RuleTableRewriter()

    assert rewriter.apply("This is fucking stupid.", {"profanity"}) == "This is stupid."
    assert rewriter.apply("This is fucking stupid.", {"profanity", "insult"}) == "This is unwise."


def test_removed_leading_word_keeps_sentence_capitalized() -> None:
    assert RuleTableRewriter().apply("Damn, this is late.", {"profanity"}) == "This is late."


def test_fully_removed_segment_becomes_generic_sentence() -> None:
    assert RuleTableRewriter().apply("Damn!", {"profanity"}) == "I have some concerns about this."


@pytest.mark.parametrize(
    ("sentence", "expected"),
    [
        ("He is an idiot.", "He is a person."),
        ("An idiot wrote this.", "A person wrote this."),
        ("That was a stupid idea.", "That was an unwise idea."),
        ("They are clowns.", "They are folks."),
        ("What a damn mess.", "What a mess."),
    ],
)
def test_indefinite_article_follows_replacement(sentence: str, expected: str) -> None:
    assert RuleTableRewriter().apply(sentence) == expected


def test_segment_without_rule_match_is_kept() -> None:
    assert RuleTableRewriter().apply("Meet me at noon.", {"insult"}) == "Meet me at noon."


@pytest.mark.parametrize(
    "sentence",
    [
        "You are an idiot.",
        "Shut up, nobody wants you here.",
        "I'll kill you if you touch my car.",
        "This is bullshit and you are a moron.",
        "Go back to your country, people like you are worthless.",
        "Idiots like you never listen.",
        "What the hell, you stupid clown.",
        "Fuck off, I hate you.",
    ],
)
def test_rewrite_does_not_retrigger_flagged_categories(sentence: str) -> None:
    classifier = LexiconClassifier()
    policy = FlagPolicy(0.5)
    verdict = policy.decide(classifier.score(sentence))
    assert verdict.toxic

    rewritten = asyncio.run(RuleTableRewriter().rewrite(sentence, verdict.categories))

    assert rewritten.strip()
    rescored = {score.label: score.probability for score in classifier.score(rewritten)}
    for category in verdict.categories:
        assert rescored[category.label] < policy.threshold
