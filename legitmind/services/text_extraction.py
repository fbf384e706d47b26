"""
Text Extraction - turns uploaded file bytes into document text
"""

import io
import logging
from typing import Tuple

import pdfplumber
from docx import Document as DocxDocument

from legitmind.core.exceptions import UnsupportedFileType

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = ("txt",)


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def size_label(num_bytes: int) -> str:
    return f"{num_bytes / 1024:.2f} KB"


def extract_text_from_pdf(pdf_bytes: bytes) -> Tuple[str, int]:
    """Page text joined with page markers when there is more than one page"""
    all_text = []
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        page_count = len(pdf.pages)
        for page_num, page in enumerate(pdf.pages, 1):
            text = page.extract_text()
            if text:
                if page_count > 1:
                    all_text.append(f"\n\n--- PAGE {page_num} ---\n\n{text}")
                else:
                    all_text.append(text)
    return "\n".join(all_text), page_count


def extract_text_from_docx(docx_bytes: bytes) -> Tuple[str, int]:
    doc = DocxDocument(io.BytesIO(docx_bytes))
    return "\n".join(paragraph.text for paragraph in doc.paragraphs), 1


def extract_text(file_bytes: bytes, filename: str) -> Tuple[str, int]:
    """
    Extract text from an upload

    Returns:
        Tuple of (extracted_text, page_count)
    """
    extension = file_extension(filename)

    if extension == "pdf":
        return extract_text_from_pdf(file_bytes)

    if extension == "docx":
        return extract_text_from_docx(file_bytes)

    if extension in TEXT_EXTENSIONS:
        # Plain text is read as UTF-8, undecodable bytes are replaced
        return file_bytes.decode("utf-8", errors="replace"), 1

    raise UnsupportedFileType(f"Unsupported file type '.{extension}'" if extension else "File has no extension")
