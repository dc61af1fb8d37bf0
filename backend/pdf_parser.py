# extract plain text from an uploaded PDF held in memory
import logging
from io import BytesIO

import PyPDF2

from errors import ExtractionError

log = logging.getLogger(__name__)

# PyPDF2 warns on every slightly malformed xref table
logging.getLogger("PyPDF2").setLevel(logging.ERROR)


def extract_text_from_pdf_bytes(pdf_bytes: bytes) -> str:
    try:
        reader = PyPDF2.PdfReader(BytesIO(pdf_bytes))
        text = []
        for p in reader.pages:
            text.append(p.extract_text() or "")
    except Exception as e:
        log.error("Error extracting text from PDF: %s", e)
        raise ExtractionError("Failed to extract text from PDF") from e

    joined = "\n".join(text)
    if not joined.strip():
        raise ExtractionError("No text extracted from PDF")
    return joined
