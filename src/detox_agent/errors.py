"""Error taxonomy for the detox pipeline.

Only `DocumentRejected` and `DetoxUnexpectedError` (and its subclasses) ever
leave `DetoxPipeline.detox_document`. The per-segment errors are raised by
collaborators and absorbed by the orchestrator.
"""

from __future__ import annotations


class DetoxError(Exception):
    """Base class for all detox pipeline errors."""


class DocumentRejected(DetoxError):
    """The document is empty after trimming and cannot be analyzed."""


class ClassificationUnavailable(DetoxError):
    """The toxicity classifier was unreachable or returned malformed output."""


class RewriteUnavailable(DetoxError):
    """The rewrite collaborator failed to produce a replacement."""


class DetoxUnexpectedError(DetoxError):
    """Fatal, uncategorized failure while processing a document."""


class CollaboratorUnavailable(DetoxUnexpectedError):
    """Every segment's classification failed, so no fallback is possible."""


class DetoxTimeout(DetoxUnexpectedError):
    """The document did not finish within the configured timeout."""
