from pathlib import Path

import pytest

from tei_aligner.align.loader import (
    DocumentLoadError,
    DocumentNotFoundError,
    FileSystemLoader,
    InMemoryLoader,
)
from tei_aligner.align.service import AlignmentService
from tei_aligner.config import default_catalog

SOURCE = """<?xml version="1.0" encoding="UTF-8"?>
<TEI xmlns="http://www.tei-c.org/ns/1.0"><text><body><p>
  <s><w xml:id="cap1_w1">Canto</w> <w xml:id="cap1_w2">primo</w></s>
  <s><w xml:id="cap1_w3">Fine</w></s>
  <seg xml:id="cap1_s1">Canto primo.</seg>
</p></body></text></TEI>
"""

TRANSLATION = """<?xml version="1.0" encoding="UTF-8"?>
<TEI xmlns="http://www.tei-c.org/ns/1.0"><text><body>
  <note target="cap1.xml#cap1_w1" targetEnd="cap1.xml#cap1_w2">Песнь первая</note>
  <note target="cap1.xml#cap1_w7" targetEnd="cap1.xml#cap1_w7">Примечание</note>
</body></text></TEI>
"""


def _write_chapter(data_dir: Path, chapter_id: str, source: str, translation: str) -> None:
    catalog = default_catalog()
    loader = FileSystemLoader(data_dir, catalog)
    folder = catalog.get_view(catalog.default_view).folder

    source_path = loader.source_path(chapter_id)
    source_path.parent.mkdir(parents=True, exist_ok=True)
    source_path.write_text(source, encoding="utf-8")

    translation_path = loader.translation_path(chapter_id, folder)
    translation_path.parent.mkdir(parents=True, exist_ok=True)
    translation_path.write_text(translation, encoding="utf-8")


def test_file_layout_and_alignment(tmp_path) -> None:
    _write_chapter(tmp_path, "cap1", SOURCE, TRANSLATION)
    catalog = default_catalog()
    service = AlignmentService(catalog, FileSystemLoader(tmp_path, catalog))

    assert (tmp_path / "Ventisettana" / "cap1.xml").is_file()
    assert (
        tmp_path / "translations" / "Russian_1854_segments" / "Russian_1854_segments_cap1.xml"
    ).is_file()

    result = service.align_chapter("cap1")

    assert result.ok
    assert result.view_id == "Russian_1854_segment"
    assert [(pair.source_text, pair.translation_text) for pair in result.pairs] == [
        ("Canto primo", "Песнь первая"),
        ("", "Примечание"),
    ]
    assert result.pairs[0].start_id == "cap1_w1"

    trace = service.trace_store.get(result.trace_id)
    assert trace.pair_count == 2
    assert trace.insertion_count == 1


def test_segment_mode(tmp_path) -> None:
    _write_chapter(tmp_path, "cap1", SOURCE, TRANSLATION)
    catalog = default_catalog()
    service = AlignmentService(catalog, FileSystemLoader(tmp_path, catalog))

    result = service.align_chapter("cap1", mode="segment")

    # Neither note references a segment id, so both rows are insertions.
    assert result.ok
    assert [pair.kind for pair in result.pairs] == ["insertion", "insertion"]


def test_invalid_selection_reported_without_pairs() -> None:
    service = AlignmentService(default_catalog(), InMemoryLoader())

    chapter_result = service.align_chapter("cap42")
    view_result = service.align_chapter("cap1", "Klingon_2200")

    assert chapter_result.error == "Invalid chapter selection: cap42"
    assert chapter_result.error_kind == "catalog"
    assert view_result.error == "Invalid view selection: Klingon_2200"
    assert view_result.pairs == []


def test_missing_translation_reported(tmp_path) -> None:
    catalog = default_catalog()
    loader = FileSystemLoader(tmp_path, catalog)
    loader.source_path("cap2").parent.mkdir(parents=True)
    loader.source_path("cap2").write_text(SOURCE, encoding="utf-8")

    result = AlignmentService(catalog, loader).align_chapter("cap2")

    assert not result.ok
    assert result.error_kind == "not_found"
    assert "translation" in result.error


def test_parse_failure_discards_everything() -> None:
    loader = InMemoryLoader()
    loader.add_source("cap3", SOURCE)
    loader.add_translation("cap3", "Russian_1854_segments", "<TEI><note target='#w1'>")
    service = AlignmentService(default_catalog(), loader)

    result = service.align_chapter("cap3")

    assert result.error_kind == "parse"
    assert result.pairs == []
    assert service.trace_store.summary()["failed_requests"] == 1


def test_alignment_is_idempotent() -> None:
    loader = InMemoryLoader()
    loader.add_source("intro", SOURCE)
    loader.add_translation("intro", "Russian_1854", TRANSLATION)
    service = AlignmentService(default_catalog(), loader)

    first = service.align_chapter("intro", "Russian_1854_sentence")
    second = service.align_chapter("intro", "Russian_1854_sentence")

    assert first.pairs == second.pairs
    assert first.trace_id != second.trace_id


def test_in_memory_loader_raises_not_found() -> None:
    with pytest.raises(DocumentNotFoundError, match="source"):
        InMemoryLoader().load_source("cap1")


class _UnreadableLoader(InMemoryLoader):
    def load_source(self, chapter_id: str) -> str:
        raise PermissionError(f"Permission denied: {chapter_id}.xml")


def test_unreadable_document_reported() -> None:
    loader = _UnreadableLoader()
    loader.add_translation("cap4", "Russian_1854_segments", TRANSLATION)
    service = AlignmentService(default_catalog(), loader)

    result = service.align_chapter("cap4")

    assert result.error_kind == "io"
    assert result.pairs == []
    assert service.trace_store.get(result.trace_id).error is not None


def test_read_failure_becomes_load_error(tmp_path, monkeypatch) -> None:
    _write_chapter(tmp_path, "cap5", SOURCE, TRANSLATION)
    loader = FileSystemLoader(tmp_path, default_catalog())

    def _denied(self, *args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(Path, "read_text", _denied)

    with pytest.raises(DocumentLoadError, match="source"):
        loader.load_source("cap5")


def test_non_utf8_source_is_a_parse_error(tmp_path) -> None:
    _write_chapter(tmp_path, "cap6", SOURCE, TRANSLATION)
    catalog = default_catalog()
    loader = FileSystemLoader(tmp_path, catalog)
    loader.source_path("cap6").write_bytes('<TEI><w xml:id="w1">città</w></TEI>'.encode("latin-1"))

    result = AlignmentService(catalog, loader).align_chapter("cap6")

    assert result.error_kind == "parse"
    assert result.pairs == []
