"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class Token:
    """A leaf word of the source document, flattened out of its structure."""

    id: str
    text: str


@dataclass(slots=True)
class AnnotationRecord:
    """A translation note covering a range of source tokens.

    `start_ref` and `end_ref` are kept verbatim (`<scheme>#<tokenId>`);
    splitting off the fragment is left to the aligner.
    """

    text: str
    start_ref: str
    end_ref: str
    note_id: str = ""


@dataclass(slots=True)
class AlignedPair:
    """One row of the side-by-side view."""

    source_text: str
    translation_text: str
    start_id: str
    end_id: str

    @property
    def kind(self) -> str:
        if not self.source_text and not self.translation_text:
            return "empty"
        if not self.source_text:
            return "insertion"
        if not self.translation_text:
            return "omission"
        return "aligned"

    @property
    def is_gap(self) -> bool:
        return self.kind != "aligned"


@dataclass(slots=True)
class ContentEntry:
    """A `note` or `seg` entry listed by the segment-level parser."""

    id: str
    text: str
    target: str = ""
    target_end: str = ""


@dataclass(slots=True)
class AlignmentResult:
    """Outcome of aligning one chapter against one translation view.

    Either `pairs` holds the complete alignment or `error` describes why the
    request failed; partial pairs are never returned with an error.
    """

    chapter_id: str
    view_id: str
    pairs: list[AlignedPair] = field(default_factory=list)
    error: str | None = None
    error_kind: str | None = None
    trace_id: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
