from pathlib import Path
from typing import Optional

from src.graph.state import Document, DocumentFormat
from src.tools import pdf_text

FORMAT_BY_EXTENSION = {
    ".json": DocumentFormat.JSON,
    ".pdf": DocumentFormat.PDF,
    ".eml": DocumentFormat.EMAIL,
    ".txt": DocumentFormat.EMAIL,
}


def format_for_filename(filename: str) -> Optional[DocumentFormat]:
    return FORMAT_BY_EXTENSION.get(Path(filename).suffix.lower())


def load_document(path: Path) -> Document:
    """Read a document file, converting PDFs to text"""
    declared_format = format_for_filename(path.name)
    if declared_format is None:
        raise ValueError(f"Unsupported document type: {path.name}")

    if declared_format == DocumentFormat.PDF:
        content = pdf_text.extract_text(path)
    else:
        content = path.read_text(encoding="utf-8")
    return Document(content=content, declared_format=declared_format, source_name=path.name)
