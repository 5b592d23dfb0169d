"""Chapter/view alignment service: load -> align -> trace."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from tei_aligner.align.aligner import Aligner
from tei_aligner.align.loader import DocumentLoader, DocumentNotFoundError
from tei_aligner.config import CatalogConfig
from tei_aligner.obs.tracing import Timer, TraceStore
from tei_aligner.tei.xml import TEIParseError
from tei_aligner.types import AlignedPair, AlignmentResult

logger = logging.getLogger(__name__)

ALIGNMENT_MODES = ("range", "segment")


class SelectionError(LookupError):
    """Raised for a chapter or view the catalog does not know."""


class AlignmentService:
    """Coordinates catalog lookup, document loading and alignment.

    Failures never escape as exceptions: they are reported through
    `AlignmentResult.error` with an `error_kind` of `catalog`, `not_found`, `io`
    or `parse`, and no pairs. Every call is recorded in the trace store.
    """

    def __init__(
        self,
        catalog: CatalogConfig,
        loader: DocumentLoader,
        aligner: Aligner | None = None,
        trace_store: TraceStore | None = None,
    ) -> None:
        self.catalog = catalog
        self.loader = loader
        self.aligner = aligner or Aligner()
        self.trace_store = trace_store or TraceStore()

    def align_chapter(
        self,
        chapter_id: str,
        view_id: str | None = None,
        *,
        mode: str = "range",
    ) -> AlignmentResult:
        if mode not in ALIGNMENT_MODES:
            raise ValueError(f"Unknown alignment mode: {mode}")
        view_id = view_id or self.catalog.default_view

        pairs: list[AlignedPair] = []
        error: str | None = None
        error_kind: str | None = None
        with Timer() as timer:
            try:
                pairs = self._align(chapter_id, view_id, mode)
            except SelectionError as exc:
                error, error_kind = str(exc), "catalog"
                logger.warning(error)
            except DocumentNotFoundError as exc:
                error, error_kind = str(exc), "not_found"
                logger.warning(f"Cannot align {chapter_id}/{view_id}: {exc}")
            except OSError as exc:
                error, error_kind = str(exc), "io"
                logger.error(f"Cannot read documents for {chapter_id}/{view_id}: {exc}")
            except (TEIParseError, UnicodeDecodeError) as exc:
                error, error_kind = str(exc), "parse"
                logger.error(f"Cannot align {chapter_id}/{view_id}: {exc}")

        record = self.trace_store.create_record(
            chapter_id=chapter_id,
            view_id=view_id,
            mode=mode,
            pairs=pairs,
            latency_ms=timer.elapsed_ms,
            error=error,
        )
        if error is None:
            logger.info(
                f"Aligned {chapter_id}/{view_id} ({mode}): {record.pair_count} pairs, "
                f"{record.insertion_count} insertions in {record.latency_ms:.1f} ms"
            )
        return AlignmentResult(
            chapter_id=chapter_id,
            view_id=view_id,
            pairs=pairs,
            error=error,
            error_kind=error_kind,
            trace_id=record.trace_id,
        )

    def _align(self, chapter_id: str, view_id: str, mode: str) -> list[AlignedPair]:
        try:
            self.catalog.get_chapter(chapter_id)
        except KeyError as exc:
            raise SelectionError(f"Invalid chapter selection: {chapter_id}") from exc
        try:
            view = self.catalog.get_view(view_id)
        except KeyError as exc:
            raise SelectionError(f"Invalid view selection: {view_id}") from exc

        # The two documents are independent; fetch them side by side.
        with ThreadPoolExecutor(max_workers=2) as pool:
            source_future = pool.submit(self.loader.load_source, chapter_id)
            translation_future = pool.submit(
                self.loader.load_translation, chapter_id, view.folder
            )
            source_xml = source_future.result()
            translation_xml = translation_future.result()

        if mode == "segment":
            return self.aligner.align_segments(source_xml, translation_xml)
        return self.aligner.align(source_xml, translation_xml)
