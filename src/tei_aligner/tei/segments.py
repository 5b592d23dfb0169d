"""Segment-level listing and id containment matching.

Used for documents segmented with `<seg xml:id>` rather than word tokens: a
translation note is matched to the first source segment whose id appears in
either of its references.
"""

from __future__ import annotations

from tei_aligner.config import TEIConfig
from tei_aligner.tei.xml import get_attribute, iter_elements, parse_xml, text_content
from tei_aligner.types import AlignedPair, ContentEntry


def parse_tei_content(xml: str | bytes, config: TEIConfig | None = None) -> list[ContentEntry]:
    """List annotations if the document has any, otherwise its segments."""

    config = config or TEIConfig()
    root = parse_xml(xml)

    notes = list(iter_elements(root, config.annotation_tag))
    if notes:
        return [
            ContentEntry(
                id=get_attribute(note, config.id_attribute),
                text=text_content(note).strip(),
                target=get_attribute(note, config.start_attribute),
                target_end=get_attribute(note, config.end_attribute),
            )
            for note in notes
        ]

    return [
        ContentEntry(
            id=get_attribute(seg, config.id_attribute),
            text=text_content(seg).strip(),
        )
        for seg in iter_elements(root, config.segment_tag)
    ]


def align_segments(
    source_entries: list[ContentEntry], translation_entries: list[ContentEntry]
) -> list[AlignedPair]:
    """Pair each translation entry with the first source segment it references.

    Source entries without an id are never matched, since an empty id would be
    contained in every reference.
    """

    candidates = [entry for entry in source_entries if entry.id]
    pairs: list[AlignedPair] = []
    for translation in translation_entries:
        match = next(
            (
                source
                for source in candidates
                if source.id in translation.target or source.id in translation.target_end
            ),
            None,
        )
        pairs.append(
            AlignedPair(
                source_text=match.text if match else "",
                translation_text=translation.text,
                start_id=match.id if match else "",
                end_id=match.id if match else "",
            )
        )
    return pairs
