import io
from datetime import date

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from proofly.jurisdictions.models import JurisdictionConfig
from proofly.logging.logger import Log
from proofly.pdf.base import BaseLetterGenerator
from proofly.pdf.exceptions import ConsentLetterError
from proofly.pdf.signature import decode_signature_image
from proofly.processor.models import ApplicantData

MARGIN = 72
ACCENT = colors.Color(0.06, 0.47, 0.42)
MUTED = colors.Color(0.4, 0.4, 0.4)

ESIGN_NOTICE = (
    "This e-signature is legally binding under the Electronic Signatures in Global "
    "and National Commerce Act (E-SIGN Act) and applicable state electronic signature "
    "laws. This authorization is one-time use only and expires upon fulfillment."
)


def long_date(value: date) -> str:
    return f"{value.strftime('%B')} {value.day}, {value.year}"


class ConsentLetterGenerator(BaseLetterGenerator):
    """Renders the one-page agent authorization letter with ReportLab."""

    def __init__(self, agent_name: str = "Proofly", agent_contact: str = "") -> None:
        self._agent_name = agent_name
        self._agent_contact = agent_contact

    def generate(
        self,
        config: JurisdictionConfig,
        applicant: ApplicantData,
        signature_image: str,
        request_ref: str,
        today: date,
    ) -> bytes:
        buffer = io.BytesIO()
        try:
            pdf = canvas.Canvas(buffer, pagesize=letter)
            _LetterLayout(pdf, self._agent_name, self._agent_contact).draw(
                config, applicant, signature_image, request_ref, today
            )
            pdf.showPage()
            pdf.save()
        except Exception as exc:
            raise ConsentLetterError(f"Could not render consent letter for {request_ref}: {exc}") from exc
        return buffer.getvalue()


class _LetterLayout:
    """Top-down cursor over a single letter page."""

    def __init__(self, pdf: canvas.Canvas, agent_name: str, agent_contact: str) -> None:
        self._pdf = pdf
        self._agent_name = agent_name
        self._agent_contact = agent_contact
        self._width, self._height = letter
        self._content_width = self._width - 2 * MARGIN
        self._y = self._height - MARGIN

    def draw(
        self,
        config: JurisdictionConfig,
        applicant: ApplicantData,
        signature_image: str,
        request_ref: str,
        today: date,
    ) -> None:
        agency = config.vital_records.agency_name
        signed_on = long_date(today)

        self._text(self._agent_name.upper(), "Helvetica-Bold", 20, color=ACCENT)
        self._y -= 16
        if self._agent_contact:
            self._text(self._agent_contact, "Helvetica", 9, color=MUTED)
        self._y -= 8
        self._rule(1)
        self._y -= 24

        self._text("AGENT AUTHORIZATION FOR BIRTH CERTIFICATE REQUEST", "Helvetica-Bold", 13)
        self._y -= 20
        self._text(f"Date: {signed_on}", "Helvetica", 10, color=MUTED)
        self._y -= 28

        self._wrapped(
            f"I, {applicant.full_name}, hereby authorize {self._agent_name} to act as my "
            "authorized agent for the sole and limited purpose of submitting a birth "
            f"certificate application to the {agency} on my behalf.",
            "Helvetica",
            11,
            leading=16,
        )
        self._y -= 20

        self._bullets(
            "This authorization covers:",
            [
                f"Completing the official {config.name} birth certificate application on my behalf",
                "Submitting the completed application with a copy of my government-issued photo ID",
                "Submitting the required fee payment on my behalf",
                "Receiving submission confirmation and tracking information",
            ],
        )
        self._bullets(
            "I understand and agree:",
            [
                "All documents provided will be permanently deleted immediately after submission",
                "A SHA-256 fingerprint of every file is published to a public ledger before deletion",
                f"The birth certificate will be mailed directly to my address by the {agency}",
                "This authorization is one-time use only, for this specific request",
                f"{self._agent_name} retains no copies of any documents after the deletion receipt is issued",
            ],
        )
        self._y -= 4

        self._registrant_box(config, applicant)

        self._label_value("Authorized Agent:", self._agent_name)
        self._y -= 14
        if self._agent_contact:
            self._label_value("Agent Contact:", self._agent_contact)
        self._y -= 30

        self._text("Requestor Signature:", "Helvetica-Bold", 11)
        self._y -= 14
        self._text(
            "By signing below, I certify the above authorization is true and correct.",
            "Helvetica",
            9,
            color=MUTED,
        )
        self._y -= 8
        self._signature(signature_image)

        self._text(f"Date Signed: {signed_on}", "Helvetica", 10)
        self._y -= 14
        self._text("Request Reference:", "Helvetica", 10)
        self._text(request_ref, "Courier", 10, x=MARGIN + 120, color=ACCENT)
        self._y -= 28

        self._rule(0.5)
        self._y -= 14
        self._wrapped(ESIGN_NOTICE, "Helvetica", 8, leading=13, color=colors.Color(0.5, 0.5, 0.5))

        self._pdf.setFont("Helvetica", 8)
        self._pdf.setFillColor(colors.Color(0.6, 0.6, 0.6))
        self._pdf.drawString(MARGIN, 36, f"{self._agent_name} - Privacy-first identity middleware")

    def _registrant_box(self, config: JurisdictionConfig, applicant: ApplicantData) -> None:
        box_height = 90
        self._pdf.setStrokeColor(colors.Color(0.8, 0.8, 0.8))
        self._pdf.setFillColor(colors.Color(0.97, 0.97, 0.97))
        self._pdf.rect(
            MARGIN, self._y + 8 - box_height, self._content_width, box_height, stroke=1, fill=1
        )
        self._y -= 4
        self._text("Registrant Information", "Helvetica-Bold", 10, x=MARGIN + 12, color=MUTED)
        self._y -= 16

        try:
            dob = long_date(date.fromisoformat(applicant.date_of_birth))
        except ValueError:
            dob = applicant.date_of_birth

        rows = [
            ("Name at Birth:", applicant.full_name),
            ("Date of Birth:", dob),
            ("Place of Birth:", f"{applicant.place_of_birth} County, {config.name}"),
            ("Relationship:", applicant.relationship),
        ]
        for label, value in rows:
            self._label_value(label, value, x=MARGIN + 12)
            self._y -= 15
        self._y -= 20

    def _signature(self, signature_image: str) -> None:
        try:
            image_bytes, _mime = decode_signature_image(signature_image)
            self._pdf.drawImage(
                ImageReader(io.BytesIO(image_bytes)),
                MARGIN,
                self._y - 60,
                width=220,
                height=55,
                mask="auto",
            )
            self._y -= 70
        except Exception as exc:
            Log.warning(f"Signature image could not be drawn, using signature line: {exc}")
            self._pdf.setStrokeColor(colors.black)
            self._pdf.setLineWidth(1)
            self._pdf.line(MARGIN, self._y - 40, MARGIN + 220, self._y - 40)
            self._y -= 50

    def _bullets(self, heading: str, items: list[str]) -> None:
        self._text(heading, "Helvetica-Bold", 11)
        self._y -= 16
        for item in items:
            self._wrapped(
                f"• {item}", "Helvetica", 10, leading=15, x=MARGIN + 12, indent=12
            )
            self._y -= 4
        self._y -= 16

    def _label_value(self, label: str, value: str, x: float = MARGIN) -> None:
        self._text(label, "Helvetica-Bold", 10, x=x)
        self._text(value, "Helvetica", 10, x=x + 118)

    def _text(
        self,
        text: str,
        font: str,
        size: float,
        x: float = MARGIN,
        color: colors.Color = colors.black,
    ) -> None:
        self._pdf.setFont(font, size)
        self._pdf.setFillColor(color)
        self._pdf.drawString(x, self._y, text)

    def _wrapped(
        self,
        text: str,
        font: str,
        size: float,
        leading: float,
        x: float = MARGIN,
        indent: float = 0,
        color: colors.Color = colors.black,
    ) -> None:
        for line in simpleSplit(text, font, size, self._content_width - indent):
            self._text(line, font, size, x=x, color=color)
            self._y -= leading

    def _rule(self, thickness: float) -> None:
        self._pdf.setStrokeColor(colors.Color(0.85, 0.85, 0.85))
        self._pdf.setLineWidth(thickness)
        self._pdf.line(MARGIN, self._y, self._width - MARGIN, self._y)
