"""End-to-end detox pipeline: segment -> classify -> decide -> rewrite -> assemble."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Coroutine
from enum import StrEnum
from typing import Any, TypeVar

from detox_agent.config import DetoxConfig
from detox_agent.errors import (
    ClassificationUnavailable,
    CollaboratorUnavailable,
    DetoxError,
    DetoxTimeout,
    DetoxUnexpectedError,
    DocumentRejected,
    RewriteUnavailable,
)
from detox_agent.ingest.segmenter import SegmentedDocument, Segmenter
from detox_agent.moderation.classifier import Classifier, LexiconClassifier
from detox_agent.moderation.decision import FlagPolicy
from detox_agent.obs.tracing import Timer, TraceStore, estimate_token_count
from detox_agent.pipeline.assembler import assemble
from detox_agent.rewrite.base import Rewriter
from detox_agent.rewrite.rules import RuleTableRewriter
from detox_agent.types import (
    CategoryScore,
    DetoxReport,
    FlagVerdict,
    Segment,
    SegmentFailure,
    SegmentOutcome,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PipelineStage(StrEnum):
    START = "start"
    SEGMENTING = "segmenting"
    CLASSIFYING = "classifying"
    DECIDING_REWRITING = "deciding_rewriting"
    ASSEMBLING = "assembling"
    DONE = "done"


class DetoxPipeline:
    """Coordinates segmenter, classifier, flag policy, rewriter and assembler.

    One call handles one document. Classification and rewriting fan out one
    task per segment (bounded by `max_concurrency`) and fan back in before
    the next stage, so the report is always assembled in document order.

    Per-segment collaborator failures are absorbed: a failed classification
    leaves the segment unflagged, a failed rewrite keeps the original text.
    Timeouts and cancellation cancel every in-flight task and emit no report.
    """

    def __init__(
        self,
        classifier: Classifier,
        rewriter: Rewriter,
        *,
        segmenter: Segmenter | None = None,
        config: DetoxConfig | None = None,
        trace_store: TraceStore | None = None,
    ) -> None:
        self.classifier = classifier
        self.rewriter = rewriter
        self.segmenter = segmenter or Segmenter()
        self.config = config or DetoxConfig()
        self.policy = FlagPolicy(self.config.threshold)
        self.trace_store = trace_store or TraceStore()

    async def detox_document(self, document_text: str) -> DetoxReport:
        """Detoxify one document and record a trace for it.

        Raises:
            DocumentRejected: The document is empty or whitespace-only.
            DetoxTimeout: Processing exceeded `timeout_seconds`.
            CollaboratorUnavailable: Every segment's classification failed.
            DetoxUnexpectedError: Any other uncategorized failure.
        """

        if not document_text.strip():
            raise DocumentRejected("Document is empty; nothing to analyze.")

        _log_stage(PipelineStage.START)
        try:
            with Timer() as timer:
                _log_stage(PipelineStage.SEGMENTING)
                document = self.segmenter.segment(document_text)
                async with asyncio.timeout(self.config.timeout_seconds):
                    outcomes, failures = await self._process(document)
                _log_stage(PipelineStage.ASSEMBLING)
                report = assemble(document, outcomes)
        except TimeoutError as exc:
            raise DetoxTimeout(
                f"Document not processed within {self.config.timeout_seconds}s"
            ) from exc
        except DetoxError:
            raise
        except Exception as exc:
            logger.exception("Detox pipeline failed unexpectedly")
            raise DetoxUnexpectedError(f"{type(exc).__name__}: {exc}") from exc

        record = self.trace_store.create_record(
            segment_count=len(document),
            flagged_count=report.flagged_count,
            failures=failures,
            input_tokens=estimate_token_count(document_text),
            output_tokens=estimate_token_count(report.sanitized_document),
            latency_ms=timer.elapsed_ms,
        )
        _log_stage(PipelineStage.DONE)
        logger.info(
            f"Detoxed document trace_id={record.trace_id} segments={len(document)} "
            f"flagged={report.flagged_count} failures={len(failures)} "
            f"latency_ms={record.latency_ms:.1f}"
        )
        return dataclasses.replace(report, trace_id=record.trace_id)

    async def _process(
        self, document: SegmentedDocument
    ) -> tuple[list[SegmentOutcome], list[SegmentFailure]]:
        failures: list[SegmentFailure] = []
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        _log_stage(PipelineStage.CLASSIFYING, segments=len(document))
        scores = await _fan_out(
            [self._classify(segment, semaphore, failures) for segment in document]
        )
        if (
            self.config.fail_on_total_outage
            and len(document) > 0
            and len(failures) == len(document)
        ):
            raise CollaboratorUnavailable(
                f"Classification failed for all {len(document)} segments"
            )

        _log_stage(PipelineStage.DECIDING_REWRITING)
        verdicts = [self.policy.decide(segment_scores) for segment_scores in scores]
        replacements = await _fan_out(
            [
                self._rewrite(segment, verdict, semaphore, failures)
                for segment, verdict in zip(document, verdicts, strict=True)
            ]
        )

        outcomes = [
            SegmentOutcome(
                index=segment.index,
                text=segment.text,
                replacement=replacement,
                verdict=verdict,
            )
            for segment, verdict, replacement in zip(
                document, verdicts, replacements, strict=True
            )
        ]
        return outcomes, sorted(failures, key=lambda failure: (failure.index, failure.stage))

    async def _classify(
        self,
        segment: Segment,
        semaphore: asyncio.Semaphore,
        failures: list[SegmentFailure],
    ) -> list[CategoryScore]:
        async with semaphore:
            try:
                return await self.classifier.classify(segment.text)
            except ClassificationUnavailable as exc:
                logger.warning(f"Segment {segment.index} left unscored: {exc}")
                failures.append(SegmentFailure(segment.index, "classify", str(exc)))
                return []

    async def _rewrite(
        self,
        segment: Segment,
        verdict: FlagVerdict,
        semaphore: asyncio.Semaphore,
        failures: list[SegmentFailure],
    ) -> str:
        if not verdict.toxic:
            return segment.text

        async with semaphore:
            try:
                return await self.rewriter.rewrite(segment.text, verdict.categories)
            except RewriteUnavailable as exc:
                logger.warning(f"Segment {segment.index} kept original text: {exc}")
                failures.append(SegmentFailure(segment.index, "rewrite", str(exc)))
                return segment.text


def build_pipeline(
    llm: Any | None = None,
    *,
    config: DetoxConfig | None = None,
    trace_store: TraceStore | None = None,
) -> DetoxPipeline:
    """Build a pipeline backed by `llm`, or by the offline lexicon when `None`."""

    config = config or DetoxConfig()
    if llm is None:
        classifier: Classifier = LexiconClassifier(config.category_labels)
        rewriter: Rewriter = RuleTableRewriter()
    else:
        from detox_agent.moderation.llm import LangChainClassifier
        from detox_agent.rewrite.llm import LangChainRewriter

        classifier = LangChainClassifier(
            llm=llm, categories=config.category_labels, max_retries=config.max_retries
        )
        rewriter = LangChainRewriter(llm=llm, max_retries=config.max_retries)
    return DetoxPipeline(classifier, rewriter, config=config, trace_store=trace_store)


_default_pipeline: DetoxPipeline | None = None


async def detox_document(
    document_text: str, *, pipeline: DetoxPipeline | None = None
) -> DetoxReport:
    """Detoxify a document with `pipeline`, or a shared offline pipeline."""

    global _default_pipeline
    if pipeline is None:
        if _default_pipeline is None:
            _default_pipeline = build_pipeline()
        pipeline = _default_pipeline
    return await pipeline.detox_document(document_text)


async def _fan_out(coroutines: list[Coroutine[Any, Any, T]]) -> list[T]:
    tasks = [asyncio.ensure_future(coroutine) for coroutine in coroutines]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def _log_stage(stage: PipelineStage, **details: Any) -> None:
    suffix = "".join(f" {key}={value}" for key, value in details.items())
    logger.debug(f"Pipeline stage -> {stage}{suffix}")
