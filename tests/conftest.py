import io

import docx
import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

RESUME_LINES = [
    "Jane Doe",
    "Senior Backend Engineer",
    "Experience: eight years building document processing services.",
]


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page), like a scan."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def resume_pdf_bytes() -> bytes:
    """Generate a one-page resume PDF with a text layer."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for offset, line in enumerate(RESUME_LINES):
        c.drawString(72, 720 - offset * 20, line)
    c.save()
    return buf.getvalue()


@pytest.fixture()
def encrypted_pdf_bytes() -> bytes:
    """Generate a PDF that needs a user password to open."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter, encrypt="secret")
    c.drawString(72, 720, "Confidential resume content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def resume_docx_bytes() -> bytes:
    """Generate a DOCX resume with paragraphs and a skills table."""
    document = docx.Document()
    for line in RESUME_LINES:
        document.add_paragraph(line)
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Python"
    table.rows[0].cells[1].text = "PostgreSQL"
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture()
def empty_docx_bytes() -> bytes:
    document = docx.Document()
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture()
def filename_only_docx_bytes() -> bytes:
    """DOCX whose only text is the stem of the name it is uploaded under."""
    document = docx.Document()
    document.add_paragraph("jane_doe_resume_2024")
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()
