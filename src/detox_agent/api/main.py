"""FastAPI entrypoint for detox/trace/metrics endpoints."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from detox_agent.config import DetoxConfig
from detox_agent.errors import DetoxUnexpectedError, DocumentRejected
from detox_agent.obs.tracing import TraceStore
from detox_agent.pipeline.orchestrator import build_pipeline

logger = logging.getLogger(__name__)

_RETRY_MESSAGE = "The detox agent hit an unexpected issue. Try again."


def _create_llm() -> Any:
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        return None

    from langchain_openai import ChatOpenAI

    return ChatOpenAI(model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"), temperature=0)


def _create_config() -> DetoxConfig:
    threshold = os.getenv("DETOX_THRESHOLD")
    if threshold is None:
        return DetoxConfig()
    return DetoxConfig(threshold=float(threshold))


class DetoxRequest(BaseModel):
    document: str


app = FastAPI(title="Detox Agent", version="0.1.0")

_trace_store = TraceStore()
_llm = _create_llm()
_pipeline = build_pipeline(_llm, config=_create_config(), trace_store=_trace_store)


@app.get("/health")
def health() -> dict[str, Any]:
    return {
        "status": "ok",
        "llm_configured": _llm is not None,
        "pipeline_mode": "langchain" if _llm is not None else "lexicon",
        "threshold": _pipeline.config.threshold,
        "categories": _pipeline.config.category_labels,
    }


@app.post("/detox")
async def detox(request: DetoxRequest) -> dict[str, Any]:
    try:
        report = await _pipeline.detox_document(request.document)
    except DocumentRejected as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except DetoxUnexpectedError as exc:
        logger.error(f"Detox request failed: {exc}")
        raise HTTPException(status_code=503, detail=_RETRY_MESSAGE) from exc

    return {
        **report.to_dict(),
        "traceId": report.trace_id,
        "summary": report.summary,
    }


@app.get("/traces")
def traces(limit: int = 20) -> dict[str, Any]:
    records = [asdict(record) for record in _trace_store.list_recent(limit=limit)]
    return {"items": records}


@app.get("/traces/{trace_id}")
def trace_detail(trace_id: str) -> dict[str, Any]:
    try:
        record = _trace_store.get(trace_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return asdict(record)


@app.get("/metrics")
def metrics() -> dict[str, Any]:
    return _trace_store.summary()
