"""Document loaders addressed by chapter and translation folder."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from tei_aligner.config import CatalogConfig

logger = logging.getLogger(__name__)


class DocumentNotFoundError(FileNotFoundError):
    """Raised when a source or translation document cannot be found."""


class DocumentLoadError(OSError):
    """Raised when a document exists but cannot be read."""


class DocumentLoader(ABC):
    """Base loader interface used by the alignment service."""

    @abstractmethod
    def load_source(self, chapter_id: str) -> str:
        """Return the source document of a chapter."""

    @abstractmethod
    def load_translation(self, chapter_id: str, folder: str) -> str:
        """Return a chapter's translation stored under `folder`."""


class FileSystemLoader(DocumentLoader):
    """Reads UTF-8 documents from a data directory.

    Layout::

        <data_dir>/<source_folder>/<chapter>.xml
        <data_dir>/<translations_folder>/<folder>/<folder>_<chapter>.xml
    """

    def __init__(self, data_dir: str | Path, catalog: CatalogConfig) -> None:
        self.data_dir = Path(data_dir)
        self.catalog = catalog

    def source_path(self, chapter_id: str) -> Path:
        return self.data_dir / self.catalog.source_folder / f"{chapter_id}.xml"

    def translation_path(self, chapter_id: str, folder: str) -> Path:
        return (
            self.data_dir
            / self.catalog.translations_folder
            / folder
            / f"{folder}_{chapter_id}.xml"
        )

    def load_source(self, chapter_id: str) -> str:
        return self._read(self.source_path(chapter_id), "source")

    def load_translation(self, chapter_id: str, folder: str) -> str:
        return self._read(self.translation_path(chapter_id, folder), "translation")

    @staticmethod
    def _read(path: Path, side: str) -> str:
        if not path.is_file():
            logger.debug(f"Missing {side} document: {path}")
            raise DocumentNotFoundError(f"Failed to load {side} TEI file: {path.name}")
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise DocumentNotFoundError(f"Failed to load {side} TEI file: {path.name}") from exc
        except OSError as exc:
            raise DocumentLoadError(f"Failed to read {side} TEI file: {path.name}") from exc


class InMemoryLoader(DocumentLoader):
    """Serves documents registered up front; keyed like the file layout."""

    def __init__(self) -> None:
        self._sources: dict[str, str] = {}
        self._translations: dict[tuple[str, str], str] = {}

    def add_source(self, chapter_id: str, xml: str) -> None:
        self._sources[chapter_id] = xml

    def add_translation(self, chapter_id: str, folder: str, xml: str) -> None:
        self._translations[(chapter_id, folder)] = xml

    def load_source(self, chapter_id: str) -> str:
        try:
            return self._sources[chapter_id]
        except KeyError as exc:
            raise DocumentNotFoundError(f"Failed to load source TEI file: {chapter_id}") from exc

    def load_translation(self, chapter_id: str, folder: str) -> str:
        try:
            return self._translations[(chapter_id, folder)]
        except KeyError as exc:
            raise DocumentNotFoundError(
                f"Failed to load translation TEI file: {folder}_{chapter_id}"
            ) from exc
