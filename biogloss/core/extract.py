"""
BioGloss Text Extraction
Turns uploaded PDF, HTML or plain text documents into plain text
"""

import io
import logging
from pathlib import Path
from typing import Optional

from .errors import ExtractionError

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


def extract_text(data: bytes, filename: Optional[str] = None) -> str:
    """
    Extract plain text from document bytes

    Args:
        data: Raw file contents
        filename: Optional original file name, used to pick the parser

    Returns:
        Plain text

    Raises:
        ExtractionError: when the document is malformed or holds no text
    """
    suffix = Path(filename).suffix.lower() if filename else ""

    if data.startswith(PDF_MAGIC) or suffix == '.pdf':
        text = _extract_pdf(data)
    elif suffix in ['.html', '.htm']:
        text = _extract_html(data)
    else:
        text = _extract_plain(data)

    if not text.strip():
        raise ExtractionError(f"No text found in {filename or 'document'}")

    return text


def _extract_pdf(data: bytes) -> str:
    """Extract PDF text, trying pdfplumber first and PyPDF2 as a fallback"""
    # Try method 1: pdfplumber
    try:
        import pdfplumber

        pages = []
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for page in pdf.pages:
                pages.append(page.extract_text() or "")

        text = "\n".join(pages)
        if text.strip():
            logger.info(f"Parsed PDF with pdfplumber: {len(pages)} pages")
            return text

    except Exception as e:
        logger.warning(f"pdfplumber failed, trying PyPDF2: {str(e)}")

    # Try method 2: PyPDF2 (basic fallback)
    try:
        import PyPDF2

        reader = PyPDF2.PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]

        logger.info(f"Parsed PDF with PyPDF2: {len(pages)} pages")
        return "\n".join(pages)

    except Exception as e:
        raise ExtractionError(f"Failed to extract text from PDF: {e}") from e


def _extract_html(data: bytes) -> str:
    """Extract visible text from an HTML document"""
    from bs4 import BeautifulSoup

    try:
        soup = BeautifulSoup(data, 'html.parser')
    except Exception as e:
        raise ExtractionError(f"Failed to parse HTML: {e}") from e

    # Remove script and style elements
    for script in soup(["script", "style"]):
        script.decompose()

    return soup.get_text(separator='\n', strip=True)


def _extract_plain(data: bytes) -> str:
    """Decode plain text with encoding fallbacks"""
    for encoding in ['utf-8', 'cp1252', 'latin-1']:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue

    raise ExtractionError("Could not decode text document")
