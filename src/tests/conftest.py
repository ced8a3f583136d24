"""
Shared fixtures: tiny in-memory PDF/DOCX documents and a stub model client.
"""

import io
import sys
from pathlib import Path

import docx
import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent
sys.path.insert(0, str(src_dir))

from utils.model_client import ModelClient


def make_pdf(*page_texts: str) -> bytes:
    """Build a minimal PDF with one Helvetica text line per page."""
    page_count = len(page_texts)
    font_id = 3 + 2 * page_count
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids ["
        + b" ".join(b"%d 0 R" % (3 + 2 * i) for i in range(page_count))
        + b"] /Count %d >>" % page_count,
    ]
    for i, text in enumerate(page_texts):
        stream = b"BT /F1 12 Tf 72 720 Td (" + text.encode("latin-1") + b") Tj ET"
        objects.append(
            b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            b"/Contents %d 0 R /Resources << /Font << /F1 %d 0 R >> >> >>"
            % (4 + 2 * i, font_id)
        )
        objects.append(
            b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"
        )
    objects.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    out = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_offset
    return out


def make_docx(*paragraphs: str) -> bytes:
    document = docx.Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class StubModelClient(ModelClient):
    """Deterministic model: always answers with the same reply text."""

    def __init__(self, reply: str):
        super().__init__(api_key="test-key", model="stub-model", base_url="http://stub")
        self.reply = reply
        self.calls = []

    async def complete(self, conversation, options=None):
        self.calls.append((conversation, options))
        return self.reply


@pytest.fixture
def pdf_bytes():
    return make_pdf(
        "The French Revolution began in 1789.",
        "It reshaped European politics for a century.",
    )


@pytest.fixture
def docx_bytes():
    return make_docx(
        "Photosynthesis converts light energy into chemical energy.",
        "It takes place in the chloroplasts.",
    )
