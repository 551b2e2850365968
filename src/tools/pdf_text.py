"""
PDF to text conversion for uploads.
Accepts a file path, raw bytes, or a data:application/pdf;base64 URI.
"""

import pdfplumber
from pathlib import Path
from typing import Union
import base64
import binascii
import io
import sys

from src.config.logger import setup_logger
from src.config.exception import AppException

logger = setup_logger("PDFText", "pdf_text.log")

DATA_URI_PREFIX = "data:application/pdf;base64,"


def is_pdf_data_uri(content: str) -> bool:
    return content.strip().lower().startswith(DATA_URI_PREFIX)


def decode_data_uri(data_uri: str) -> bytes:
    """Decode a base64 PDF data URI to raw bytes"""
    payload = data_uri.strip()[len(DATA_URI_PREFIX):]
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.error(f"Invalid PDF data URI: {e}")
        raise AppException(f"Invalid PDF data URI: {e}", sys)


def extract_text(source: Union[str, Path, bytes]) -> str:
    """
    Extract the text layer of a PDF.

    Scanned PDFs without a text layer come back as an empty string; OCR is out
    of scope here.
    """
    if isinstance(source, str) and is_pdf_data_uri(source):
        source = decode_data_uri(source)

    opened = io.BytesIO(source) if isinstance(source, bytes) else str(source)

    try:
        with pdfplumber.open(opened) as pdf:
            pages = []
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    pages.append(page_text)
            logger.debug(f"Extracted text from {len(pdf.pages)} pages")
    except Exception as e:
        logger.error(f"PDF text extraction failed: {e}")
        raise AppException(f"Could not read PDF: {e}", sys)

    return "\n".join(pages).strip()
