"""Tests for document text extraction."""

import pytest

from biogloss.core.errors import ExtractionError
from biogloss.core.extract import extract_text


def test_utf8_text():
    assert extract_text("Café biofilm".encode("utf-8"), "notes.txt") == "Café biofilm"


def test_cp1252_fallback():
    assert extract_text("naïve".encode("cp1252")) == "naïve"


def test_html_visible_text_only():
    html = b"<html><head><style>p {}</style><script>var x = 1;</script></head><body><p>An antigen</p></body></html>"
    text = extract_text(html, "page.html")

    assert "An antigen" in text
    assert "var x" not in text
    assert "p {}" not in text


def test_empty_document_rejected():
    with pytest.raises(ExtractionError):
        extract_text(b"  \n\t", "blank.txt")


def test_malformed_pdf_rejected():
    with pytest.raises(ExtractionError):
        extract_text(b"%PDF-1.4 this is not really a pdf", "broken.pdf")
