"""Configuration models for the TEI aligner."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class TEIConfig(BaseModel):
    """Element and attribute names the parsers look for."""

    token_tag: str = Field(default="w", min_length=1)
    annotation_tag: str = Field(default="note", min_length=1)
    segment_tag: str = Field(default="seg", min_length=1)
    id_attribute: str = Field(default="xml:id", min_length=1)
    start_attribute: str = Field(default="target", min_length=1)
    end_attribute: str = Field(default="targetEnd", min_length=1)


class AlignmentConfig(BaseModel):
    """Configures batched alignment output."""

    batch_size: int = Field(default=50, ge=1)


class ChapterEntry(BaseModel):
    id: str = Field(min_length=1)
    title: str


class ViewEntry(BaseModel):
    """A translation view; `folder` names where its documents live."""

    id: str = Field(min_length=1)
    title: str
    folder: str = Field(min_length=1)


class CatalogConfig(BaseModel):
    """Chapters and translation views available to the service."""

    chapters: list[ChapterEntry] = Field(default_factory=list)
    views: list[ViewEntry] = Field(min_length=1)
    default_view: str
    source_folder: str = "Ventisettana"
    translations_folder: str = "translations"

    @model_validator(mode="after")
    def _check_entries(self) -> "CatalogConfig":
        chapter_ids = [chapter.id for chapter in self.chapters]
        if len(set(chapter_ids)) != len(chapter_ids):
            raise ValueError("chapter ids must be unique")
        view_ids = [view.id for view in self.views]
        if len(set(view_ids)) != len(view_ids):
            raise ValueError("view ids must be unique")
        if self.default_view not in view_ids:
            raise ValueError(f"default_view is not a known view: {self.default_view}")
        return self

    def get_chapter(self, chapter_id: str) -> ChapterEntry:
        for chapter in self.chapters:
            if chapter.id == chapter_id:
                return chapter
        raise KeyError(f"Unknown chapter: {chapter_id}")

    def get_view(self, view_id: str) -> ViewEntry:
        for view in self.views:
            if view.id == view_id:
                return view
        raise KeyError(f"Unknown view: {view_id}")


def default_catalog() -> CatalogConfig:
    """The Ventisettana chapters with the 1854 Russian translation views."""

    chapters = [ChapterEntry(id="intro", title="Introduction")]
    chapters.extend(
        ChapterEntry(id=f"cap{number}", title=f"Chapter {number}") for number in range(1, 20)
    )
    return CatalogConfig(
        chapters=chapters,
        views=[
            ViewEntry(
                id="Russian_1854_sentence",
                title="Russian (1854) - Sentence Level",
                folder="Russian_1854",
            ),
            ViewEntry(
                id="Russian_1854_segment",
                title="Russian (1854) - Segment Level",
                folder="Russian_1854_segments",
            ),
        ],
        default_view="Russian_1854_segment",
    )


def load_catalog(path: str | Path) -> CatalogConfig:
    """Load a catalog from a JSON file."""
    return CatalogConfig.model_validate_json(Path(path).read_text(encoding="utf-8"))
