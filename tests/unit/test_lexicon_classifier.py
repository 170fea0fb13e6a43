import asyncio

from detox_agent.config import ToxicityCategory
from detox_agent.moderation.classifier import LexiconClassifier


def _as_dict(scores) -> dict[str, float]:
    return {score.label: score.probability for score in scores}


def test_scores_cover_every_category_in_order() -> None:
    scores = asyncio.run(LexiconClassifier().classify("Let's meet at 3pm."))

    assert [score.label for score in scores] == [c.value for c in ToxicityCategory]
    assert all(score.probability == 0.0 for score in scores)


def test_insult_phrase_scores_high() -> None:
    scores = _as_dict(LexiconClassifier().score("You are an idiot."))

    assert scores["insult"] >= 0.9
    assert scores["threat"] == 0.0


def test_matches_combine_with_noisy_or() -> None:
    scores = _as_dict(LexiconClassifier().score("That plan is dumb and pathetic."))

    # 1 - (1 - 0.6) * (1 - 0.6)
    assert scores["insult"] == 0.84


def test_categories_are_scored_independently() -> None:
    scores = _as_dict(LexiconClassifier().score("Shut up or I will kill you."))

    assert scores["harassment"] >= 0.5
    assert scores["threat"] >= 0.9
    assert scores["profanity"] == 0.0


def test_configured_subset_limits_labels() -> None:
    classifier = LexiconClassifier(["threat", "insult"])

    scores = classifier.score("You are an idiot.")

    assert [score.label for score in scores] == ["threat", "insult"]
