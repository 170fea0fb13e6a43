"""Detox Agent package."""

from .config import DetoxConfig, ToxicityCategory
from .errors import (
    ClassificationUnavailable,
    DetoxError,
    DetoxUnexpectedError,
    DocumentRejected,
    RewriteUnavailable,
)
from .pipeline.orchestrator import DetoxPipeline, build_pipeline, detox_document
from .types import CategoryScore, DetoxReport, FlaggedItem

__all__ = [
    "DetoxConfig",
    "ToxicityCategory",
    "DetoxPipeline",
    "build_pipeline",
    "detox_document",
    "DetoxReport",
    "FlaggedItem",
    "CategoryScore",
    "DetoxError",
    "DocumentRejected",
    "ClassificationUnavailable",
    "RewriteUnavailable",
    "DetoxUnexpectedError",
]
__version__ = "0.1.0"
