import io
from pathlib import Path

import pymupdf
import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from proofly.jurisdictions.colorado import COLORADO
from tests.factories import make_png, make_signature_data_url

# AcroForm fields placed on the generated CO template, by logical key
TEMPLATE_TEXT_FIELDS = (
    "requestorFirstName",
    "requestorLastName",
    "mailingCity",
    "dobMonth",
    "dobDay",
    "dobYear",
    "motherFirstName",
    "motherMaidenLastName",
    "todaysDate",
    "feeCopies",
    "feeTotal",
    "reasonOtherText",
)
TEMPLATE_CHECKBOXES = ("relationshipSelf", "relationshipParent", "reasonRecords", "deceasedNo")


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
def png_bytes() -> bytes:
    return make_png(400, 250)


@pytest.fixture()
def signature_data_url() -> str:
    return make_signature_data_url()


@pytest.fixture()
def forms_root(tmp_path: Path) -> Path:
    """Directory holding a small AcroForm stand-in for the CO application."""
    field_map = COLORADO.form.field_map
    doc = pymupdf.open()
    page = doc.new_page(width=612, height=792)
    y = 60.0
    for key in TEMPLATE_TEXT_FIELDS:
        widget = pymupdf.Widget()
        widget.field_name = field_map[key]
        widget.field_type = pymupdf.PDF_WIDGET_TYPE_TEXT
        widget.rect = pymupdf.Rect(72, y, 300, y + 18)
        page.add_widget(widget)
        y += 24
    for key in TEMPLATE_CHECKBOXES:
        widget = pymupdf.Widget()
        widget.field_name = field_map[key]
        widget.field_type = pymupdf.PDF_WIDGET_TYPE_CHECKBOX
        widget.rect = pymupdf.Rect(72, y, 86, y + 14)
        page.add_widget(widget)
        y += 24
    doc.save(tmp_path / COLORADO.form.pdf_filename)
    doc.close()
    return tmp_path
