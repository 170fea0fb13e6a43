"""Configuration models for the detox pipeline."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class ToxicityCategory(StrEnum):
    """Toxicity dimensions scored by every classifier collaborator."""

    INSULT = "insult"
    THREAT = "threat"
    PROFANITY = "profanity"
    IDENTITY_ATTACK = "identity_attack"
    HARASSMENT = "harassment"


class DetoxConfig(BaseModel):
    """Configures flag policy, fan-out limits and collaborator retries."""

    threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    categories: list[ToxicityCategory] = Field(
        default_factory=lambda: list(ToxicityCategory), min_length=1
    )
    max_concurrency: int = Field(default=8, ge=1)
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_retries: int = Field(default=2, ge=1)
    fail_on_total_outage: bool = True

    @property
    def category_labels(self) -> list[str]:
        return [category.value for category in self.categories]
