from __future__ import annotations

import logging
from io import BytesIO
from typing import Any

from docx import Document
from pypdf import PdfReader

from app.core.config import settings

logger = logging.getLogger(__name__)


class UnsupportedFormat(ValueError):
    def __init__(self, extension: str):
        self.extension = extension
        supported = ", ".join(settings.resume_allowed_extensions).upper()
        super().__init__(f"Unsupported file format: '{extension or 'none'}'. Supported: {supported}")


class DocumentExtractionError(ValueError):
    pass


def file_extension(file_name: str | None) -> str:
    name = (file_name or "").strip()
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""


def is_valid_file_type(file_name: str | None) -> bool:
    return file_extension(file_name) in settings.resume_allowed_extensions


def _extract_pdf(content: bytes) -> str:
    try:
        reader = PdfReader(BytesIO(content))
        pages = [(page.extract_text() or "") for page in reader.pages]
    except Exception as exc:
        raise DocumentExtractionError("Unable to extract text from this PDF file.") from exc
    return "\n".join(page for page in pages if page.strip())


def _extract_word(content: bytes) -> str:
    try:
        document = Document(BytesIO(content))
    except Exception as exc:
        raise DocumentExtractionError(
            "Unable to extract text from this Word document. Legacy .doc files may need conversion to .docx."
        ) from exc
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def extract_text(content: bytes, file_name: str | None) -> str:
    """Extract plain text from an uploaded resume.

    Raises UnsupportedFormat for extensions outside the configured allow-list
    and DocumentExtractionError when a supported file cannot be read.
    """
    ext = file_extension(file_name)
    if ext not in settings.resume_allowed_extensions:
        raise UnsupportedFormat(ext)

    if ext == "pdf":
        text = _extract_pdf(content)
    elif ext in {"docx", "doc"}:
        text = _extract_word(content)
    else:
        raise UnsupportedFormat(ext)

    logger.debug("document_text_extracted file=%s ext=%s chars=%s", file_name, ext, len(text))
    return text


def extract_metadata(file_name: str | None, content: bytes, content_type: str | None) -> dict[str, Any]:
    return {
        "fileName": file_name,
        "fileSize": len(content),
        "contentType": content_type,
    }
