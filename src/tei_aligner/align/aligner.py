"""Alignment of translation notes with the source spans they reference."""

from __future__ import annotations

from collections.abc import Iterator

from tei_aligner.config import AlignmentConfig, TEIConfig
from tei_aligner.tei.annotations import parse_annotations
from tei_aligner.tei.resolver import SourceIndex
from tei_aligner.tei.segments import align_segments, parse_tei_content
from tei_aligner.types import AlignedPair, AnnotationRecord


def fragment_id(ref: str) -> str:
    """Everything after the first `#` of a reference, or "" without one."""
    _, sep, fragment = ref.partition("#")
    return fragment if sep else ""


class Aligner:
    """Builds the ordered list of aligned pairs for one source/translation couple.

    The output is driven by the translation: one pair per annotation, in the
    order the annotations appear. Source tokens no annotation covers are not
    represented.

    `iter_batches` produces the same pairs in fixed-size slices so a caller can
    render progressively or stop early; the concatenated batches always equal
    `align` for the same inputs.
    """

    def __init__(
        self,
        tei_config: TEIConfig | None = None,
        config: AlignmentConfig | None = None,
    ) -> None:
        self.tei_config = tei_config or TEIConfig()
        self.config = config or AlignmentConfig()

    def align(self, source_xml: str | bytes, translation_xml: str | bytes) -> list[AlignedPair]:
        return [
            pair
            for batch in self.iter_batches(source_xml, translation_xml)
            for pair in batch
        ]

    def iter_batches(
        self,
        source_xml: str | bytes,
        translation_xml: str | bytes,
        batch_size: int | None = None,
    ) -> Iterator[list[AlignedPair]]:
        size = self.config.batch_size if batch_size is None else batch_size
        if size < 1:
            raise ValueError("batch_size must be at least 1")

        # Both documents are parsed before the first batch so a malformed
        # document never leaves the caller with partial output.
        annotations = parse_annotations(translation_xml, self.tei_config)
        index = SourceIndex.from_xml(source_xml, self.tei_config)

        for offset in range(0, len(annotations), size):
            yield [
                self._pair(index, annotation)
                for annotation in annotations[offset : offset + size]
            ]

    def align_segments(
        self, source_xml: str | bytes, translation_xml: str | bytes
    ) -> list[AlignedPair]:
        """Segment-level alignment by id containment."""
        translation_entries = parse_tei_content(translation_xml, self.tei_config)
        source_entries = parse_tei_content(source_xml, self.tei_config)
        return align_segments(source_entries, translation_entries)

    @staticmethod
    def _pair(index: SourceIndex, annotation: AnnotationRecord) -> AlignedPair:
        start_id = fragment_id(annotation.start_ref)
        end_id = fragment_id(annotation.end_ref)
        return AlignedPair(
            source_text=index.resolve(start_id, end_id),
            translation_text=annotation.text,
            start_id=start_id,
            end_id=end_id,
        )


def align(
    source_xml: str | bytes,
    translation_xml: str | bytes,
    config: TEIConfig | None = None,
) -> list[AlignedPair]:
    """Align a translation document against its source document."""
    return Aligner(tei_config=config).align(source_xml, translation_xml)
