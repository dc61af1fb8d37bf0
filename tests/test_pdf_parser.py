import pytest

from conftest import make_pdf
from errors import ExtractionError
from pdf_parser import extract_text_from_pdf_bytes


def test_extracts_page_text(sky_pdf):
    assert "The sky is blue." in extract_text_from_pdf_bytes(sky_pdf)


def test_page_without_text():
    with pytest.raises(ExtractionError, match="No text extracted from PDF"):
        extract_text_from_pdf_bytes(make_pdf())


def test_whitespace_only_text():
    with pytest.raises(ExtractionError, match="No text extracted from PDF"):
        extract_text_from_pdf_bytes(make_pdf("    "))


@pytest.mark.parametrize("data", [b"", b"%PDF-1.4 truncated", b"plain text file"])
def test_unreadable_bytes(data):
    with pytest.raises(ExtractionError, match="Failed to extract text from PDF"):
        extract_text_from_pdf_bytes(data)
