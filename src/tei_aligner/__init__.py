"""TEI Aligner package."""

from .align.aligner import Aligner, align
from .config import AlignmentConfig, CatalogConfig, TEIConfig
from .tei.annotations import parse_annotations
from .tei.resolver import resolve_span
from .tei.xml import TEIParseError
from .types import AlignedPair, AnnotationRecord, Token

__all__ = [
    "AlignedPair",
    "Aligner",
    "AlignmentConfig",
    "AnnotationRecord",
    "CatalogConfig",
    "TEIConfig",
    "TEIParseError",
    "Token",
    "align",
    "parse_annotations",
    "resolve_span",
]
