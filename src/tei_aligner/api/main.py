"""FastAPI entrypoint for catalog, alignment and trace endpoints."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from typing import Any, Literal

from fastapi import FastAPI, HTTPException, Query

from tei_aligner.align.aligner import Aligner
from tei_aligner.align.loader import FileSystemLoader
from tei_aligner.align.service import AlignmentService
from tei_aligner.config import (
    AlignmentConfig,
    CatalogConfig,
    TEIConfig,
    default_catalog,
    load_catalog,
)
from tei_aligner.obs.tracing import TraceStore

logger = logging.getLogger(__name__)

_ERROR_STATUS = {"catalog": 404, "not_found": 404, "parse": 422, "io": 502}


def _load_catalog() -> CatalogConfig:
    path = os.getenv("TEI_ALIGNER_CATALOG")
    if not path:
        return default_catalog()
    logger.info(f"Loading catalog from {path}")
    return load_catalog(path)


def build_default_service() -> AlignmentService:
    catalog = _load_catalog()
    data_dir = os.getenv("TEI_ALIGNER_DATA_DIR", "data")
    return AlignmentService(
        catalog=catalog,
        loader=FileSystemLoader(data_dir, catalog),
        aligner=Aligner(TEIConfig(), AlignmentConfig()),
        trace_store=TraceStore(),
    )


def create_app(service: AlignmentService) -> FastAPI:
    app = FastAPI(title="TEI Aligner", version="0.1.0")

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "chapter_count": len(service.catalog.chapters),
            "view_count": len(service.catalog.views),
        }

    @app.get("/chapters")
    def chapters() -> dict[str, Any]:
        return {"items": [chapter.model_dump() for chapter in service.catalog.chapters]}

    @app.get("/views")
    def views() -> dict[str, Any]:
        return {
            "default": service.catalog.default_view,
            "items": [view.model_dump() for view in service.catalog.views],
        }

    @app.get("/align/{chapter_id}")
    def align_chapter(
        chapter_id: str,
        view: str | None = None,
        mode: Literal["range", "segment"] = Query(default="range"),
    ) -> dict[str, Any]:
        result = service.align_chapter(chapter_id, view, mode=mode)
        if not result.ok:
            status = _ERROR_STATUS.get(result.error_kind or "", 500)
            raise HTTPException(status_code=status, detail=result.error)

        return {
            "chapter_id": result.chapter_id,
            "view_id": result.view_id,
            "mode": mode,
            "trace_id": result.trace_id,
            "pairs": [{**asdict(pair), "kind": pair.kind} for pair in result.pairs],
        }

    @app.get("/traces")
    def traces(limit: int = 20) -> dict[str, Any]:
        records = [asdict(record) for record in service.trace_store.list_recent(limit=limit)]
        return {"items": records}

    @app.get("/traces/{trace_id}")
    def trace_detail(trace_id: str) -> dict[str, Any]:
        try:
            record = service.trace_store.get(trace_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return asdict(record)

    @app.get("/metrics")
    def metrics() -> dict[str, Any]:
        return service.trace_store.summary()

    return app


app = create_app(build_default_service())
