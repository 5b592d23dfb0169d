"""Extraction of translation notes from a translation document."""

from __future__ import annotations

from tei_aligner.config import TEIConfig
from tei_aligner.tei.xml import get_attribute, iter_elements, parse_xml, text_content
from tei_aligner.types import AnnotationRecord


def parse_annotations(
    xml: str | bytes, config: TEIConfig | None = None
) -> list[AnnotationRecord]:
    """Return every annotation of the document in document order.

    Reference attributes are kept verbatim, including the part before `#`.
    Missing attributes become empty strings. Raises `TEIParseError` when the
    document is malformed.
    """

    config = config or TEIConfig()
    root = parse_xml(xml)
    return [
        AnnotationRecord(
            text=text_content(note).strip(),
            start_ref=get_attribute(note, config.start_attribute),
            end_ref=get_attribute(note, config.end_attribute),
            note_id=get_attribute(note, config.id_attribute),
        )
        for note in iter_elements(root, config.annotation_tag)
    ]
