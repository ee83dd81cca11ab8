import io
import logging
from abc import ABC, abstractmethod

import pdfplumber

from resume_analyzer.models.analysis import ExtractedText
from resume_analyzer.services.errors import CorruptDocument, UnsupportedFormat

logger = logging.getLogger("uvicorn.error")

PDF_MAGIC = b"%PDF-"


class TextExtractor(ABC):
    """Contract for turning an uploaded document into plain text."""

    @abstractmethod
    def extract(self, file_bytes: bytes) -> ExtractedText:
        """Extract plain text from document bytes.

        Raises:
            UnsupportedFormat: if the bytes are not the expected document type.
            CorruptDocument: if the document cannot be parsed.
        """


class PdfPlumberExtractor(TextExtractor):
    """Extracts text from PDF resumes using pdfplumber.

    Page text is joined with newlines and otherwise passed through untouched.
    """

    def extract(self, file_bytes: bytes) -> ExtractedText:
        # Some writers emit a few junk bytes before the header.
        if PDF_MAGIC not in file_bytes[:1024]:
            raise UnsupportedFormat("Upload is not a PDF document")

        text = ""
        try:
            with pdfplumber.open(io.BytesIO(file_bytes)) as pdf:
                for page in pdf.pages:
                    page_text = page.extract_text()
                    if page_text:
                        text += page_text + "\n"
        except Exception as e:
            logger.exception("Failed to extract text from PDF")
            raise CorruptDocument(f"Failed to extract text from PDF: {e}") from e
        return ExtractedText(content=text)
