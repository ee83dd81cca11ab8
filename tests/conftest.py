import io
from pathlib import Path
from typing import List, Optional

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from resume_analyzer.models.analysis import (
    AnalysisPrompt,
    RawModelReply,
    UploadedDocument,
)
from resume_analyzer.services.extractor import PdfPlumberExtractor
from resume_analyzer.services.jobs import PlaceholderJobResolver
from resume_analyzer.services.pipeline import AnalysisPipeline
from resume_analyzer.services.storage import DocumentStore

SAMPLE_REPLY = (
    "Strengths:\n- Solid Python background\n"
    "Weaknesses:\n- No cloud experience\n"
    "Score: 82%\n"
    "Suggestions:\n- Add AWS projects\n"
)


def _pdf(*pages: str) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for i, text in enumerate(pages):
        if i:
            c.showPage()
        if text:
            c.drawString(72, 720, text)
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Single-page resume PDF with known text."""
    return _pdf("Jane Doe - Senior Python Engineer")


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    return _pdf("Experience: Acme Corp", "Education: MIT")


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Valid PDF with a blank page."""
    return _pdf("")


class RecordingStore(DocumentStore):
    """DocumentStore that remembers what it stored and released."""

    def __init__(self, root: Path):
        super().__init__(root)
        self.stored_docs: List[UploadedDocument] = []
        self.released_docs: List[UploadedDocument] = []

    def store(self, file_bytes, original_name):
        doc = super().store(file_bytes, original_name)
        self.stored_docs.append(doc)
        return doc

    def release(self, doc):
        self.released_docs.append(doc)
        super().release(doc)


class FakeInvoker:
    def __init__(self, reply: str = SAMPLE_REPLY, error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.prompts: List[AnalysisPrompt] = []

    async def invoke(self, prompt, config=None, timeout=None):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return RawModelReply(text=self.reply)


@pytest.fixture()
def store(tmp_path: Path) -> RecordingStore:
    return RecordingStore(tmp_path / "uploads")


@pytest.fixture()
def invoker() -> FakeInvoker:
    return FakeInvoker()


@pytest.fixture()
def pipeline(store: RecordingStore, invoker: FakeInvoker) -> AnalysisPipeline:
    return AnalysisPipeline(
        store=store,
        extractor=PdfPlumberExtractor(),
        resolver=PlaceholderJobResolver(),
        invoker=invoker,
    )
