"""Attachment text extraction.

Hidden design decisions:
- Using pypdf for PDF text extraction
- Page limit for PDFs
- How page texts are joined

The extracted text is passed to the orchestrator as attachment context.
"""

from pathlib import Path

from loguru import logger
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from ..config import PDF_MAX_PAGES, TEXT_ATTACHMENT_EXTENSIONS


class AttachmentError(Exception):
    """Raised when an attachment cannot be turned into text.

    The message is meant to be shown to the user as-is.
    """


def extract_text(path: str | Path) -> str:
    """Extract readable text from an attachment.

    Args:
        path: Path to a .txt, .md or .pdf file

    Returns:
        The file's text, surrounding whitespace removed

    Raises:
        AttachmentError: If the file type is unsupported, the file cannot be
            read, a PDF exceeds the page limit, or no text was found
    """
    file_path = Path(path)
    suffix = file_path.suffix.lower()

    if suffix in TEXT_ATTACHMENT_EXTENSIONS:
        text = _read_text(file_path)
    elif suffix == ".pdf":
        text = _read_pdf(file_path)
    else:
        supported = ", ".join(sorted(TEXT_ATTACHMENT_EXTENSIONS | {".pdf"}))
        raise AttachmentError(f"Unsupported file type '{suffix or file_path.name}'. Supported: {supported}")

    text = text.strip()
    if not text:
        raise AttachmentError("No readable text was found in that file.")

    logger.debug(f"Extracted {len(text)} characters from {file_path.name}")
    return text


def _read_text(file_path: Path) -> str:
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise AttachmentError(f"The selected file couldn't be read: {e}") from e


def _read_pdf(file_path: Path) -> str:
    try:
        reader = PdfReader(file_path)
        page_count = len(reader.pages)
    except (OSError, PyPdfError, ValueError) as e:
        raise AttachmentError(f"The selected file couldn't be read: {e}") from e

    if page_count > PDF_MAX_PAGES:
        raise AttachmentError(
            f"This PDF has {page_count} pages. The maximum allowed is {PDF_MAX_PAGES} pages."
        )

    pages = []
    for page_num, page in enumerate(reader.pages, start=1):
        try:
            text = (page.extract_text() or "").strip()
        except (PyPdfError, ValueError) as e:
            logger.warning(f"Failed to extract page {page_num} of {file_path.name}: {e}")
            continue
        if text:
            pages.append(text)

    return "\n\n".join(pages)
