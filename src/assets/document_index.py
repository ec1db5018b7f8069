"""Manual document index.

This module lists the manual directories once per rebuild and answers
two questions from that listing: which manuals belong to a module
(sheet URLs), and how fresh each HTML manual and its PDF are.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Sequence
from urllib.parse import quote

from core.constants import HTML_MANUAL_EXTENSION, PDF_MANUAL_EXTENSION
from core.site_config import DocumentDirectory
from core.types import DocumentFile


@dataclass(frozen=True)
class DocumentIndex:
    """Files of every configured document directory.

    Attributes:
        files: Documents ordered by directory order, then file name.
    """

    files: tuple[DocumentFile, ...] = ()

    def sheet_urls(self, file_name: str, longer_module_names: Iterable[str] = ()) -> tuple[str, ...]:
        """Return relative URLs of the manuals belonging to a module.

        A manual belongs to a module when its stem starts with the
        module's file name, unless it also starts with the name of a
        longer module sharing that prefix.

        Args:
            file_name: Module file name (descriptor stem).
            longer_module_names: Names of other modules that extend ``file_name``.

        Returns:
            URLs of the form ``<directory>/<quoted file name>``.
        """
        excluded = tuple(longer_module_names)
        urls: list[str] = []
        for document in self.files:
            stem = Path(document.file_name).stem
            if not stem.startswith(file_name):
                continue
            if any(stem.startswith(other) for other in excluded):
                continue
            urls.append(f"{document.directory}/{quote(document.file_name)}")
        return tuple(urls)

    def manuals_last_modified(self) -> dict[str, str]:
        """Map each HTML manual file name to its ISO modification time."""
        return {
            document.file_name: document.last_modified_utc.isoformat()
            for document in self.files
            if _has_extension(document, HTML_MANUAL_EXTENSION)
        }

    def autogenerated_pdfs(self) -> dict[str, str]:
        """Map HTML manuals to PDF counterparts that are at least as new."""
        pdfs = {
            Path(document.file_name).stem: document
            for document in self.files
            if _has_extension(document, PDF_MANUAL_EXTENSION)
        }
        fresh: dict[str, str] = {}
        for document in self.files:
            if not _has_extension(document, HTML_MANUAL_EXTENSION):
                continue
            pdf = pdfs.get(Path(document.file_name).stem)
            if pdf is not None and pdf.last_modified_utc >= document.last_modified_utc:
                fresh[document.file_name] = pdf.file_name
        return fresh


def scan_documents(base_dir: Path, document_dirs: Sequence[DocumentDirectory]) -> DocumentIndex:
    """List the top-level files of every document directory.

    Missing directories contribute no files.

    Args:
        base_dir: Site base directory.
        document_dirs: Configured document directories.

    Returns:
        Document index for this rebuild.
    """
    files: list[DocumentFile] = []
    for directory in document_dirs:
        root = base_dir / directory.name
        if not root.is_dir():
            continue
        for path in sorted(root.iterdir()):
            if not path.is_file() or path.name.startswith("."):
                continue
            files.append(
                DocumentFile(
                    directory=directory.name,
                    file_name=path.name,
                    last_modified_utc=datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc),
                )
            )
    return DocumentIndex(files=tuple(files))


def _has_extension(document: DocumentFile, extension: str) -> bool:
    return Path(document.file_name).suffix.lower() == extension
