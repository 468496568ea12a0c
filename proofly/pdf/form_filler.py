from datetime import date
from pathlib import Path
from typing import ClassVar

import pymupdf

from proofly.jurisdictions.models import JurisdictionConfig
from proofly.logging.logger import Log
from proofly.pdf.base import BaseFormFiller
from proofly.pdf.exceptions import FormFillError
from proofly.pdf.names import parse_full_name
from proofly.pdf.signature import decode_signature_image
from proofly.processor.models import ApplicantData


class AcroFormFiller(BaseFormFiller):
    """Fills the jurisdiction's official AcroForm application with PyMuPDF."""

    RELATIONSHIP_CHECKBOXES: ClassVar[dict[str, str]] = {
        "self": "relationshipSelf",
        "parent": "relationshipParent",
        "grandparent": "relationshipGrandparent",
        "stepparent": "relationshipStepparent",
        "sibling": "relationshipSibling",
        "spouse": "relationshipSpouse",
        "child": "relationshipChild",
        "stepchild": "relationshipStepchild",
        "legal_guardian": "relationshipGuardian",
    }

    PURPOSE_CHECKBOXES: ClassVar[dict[str, str]] = {
        "voter_registration": "reasonRecords",
        "passport": "reasonPassport",
        "passport_renewal": "reasonPassport",
        "legal": "reasonRecords",
        "benefits": "reasonRecords",
        "other": "reasonOtherCheck",
    }

    # Signature line on page 1, top-left origin
    SIGNATURE_RECT: ClassVar[tuple[float, float, float, float]] = (80, 575, 280, 615)

    def __init__(self, forms_root: Path) -> None:
        self._forms_root = forms_root

    def fill(
        self,
        config: JurisdictionConfig,
        applicant: ApplicantData,
        signature_image: str,
        copies: int,
        today: date,
    ) -> bytes:
        template_path = self._forms_root / config.form.pdf_filename
        try:
            doc = pymupdf.open(template_path)
        except Exception as exc:
            raise FormFillError(f"Could not load form template {template_path}: {exc}") from exc

        with doc:
            if not doc.is_pdf:
                raise FormFillError(f"Form template {template_path} is not a PDF")
            text_values, checked = self._field_values(config, applicant, copies, today)
            self._apply(doc, config.form.field_map, text_values, checked)
            self._embed_signature(doc, signature_image)
            try:
                return doc.tobytes(garbage=3, deflate=True)
            except Exception as exc:
                raise FormFillError(f"Could not serialize filled form: {exc}") from exc

    def _field_values(
        self,
        config: JurisdictionConfig,
        applicant: ApplicantData,
        copies: int,
        today: date,
    ) -> tuple[dict[str, str], list[str]]:
        """Map logical field keys to values and checkbox keys to check."""
        requestor = parse_full_name(applicant.full_name)
        mother = parse_full_name(applicant.mother_name_at_birth)
        father = parse_full_name(applicant.father_name)

        values = {
            "requestorFirstName": requestor.first,
            "requestorMiddleName": requestor.middle,
            "requestorLastName": requestor.last,
            "requestorEmail": applicant.email,
            "mailingStreet": applicant.mailing_address1,
            "mailingApt": applicant.mailing_address2,
            "mailingCity": applicant.city,
            "mailingState": applicant.state,
            "mailingZip": applicant.zip,
            "physicalStreet": applicant.mailing_address1,
            "physicalCity": applicant.city,
            "physicalState": applicant.state,
            "physicalZip": applicant.zip,
            "registrantFirstName": requestor.first,
            "registrantMiddleName": requestor.middle,
            "registrantLastName": requestor.last,
            "placeOfBirthCity": applicant.place_of_birth,
            "placeOfBirthCounty": applicant.place_of_birth,
            "motherFirstName": mother.first,
            "motherMiddleName": mother.middle,
            "motherMaidenLastName": mother.last,
            "fatherFirstName": father.first,
            "fatherMiddleName": father.middle,
            "fatherLastName": father.last,
            "todaysDate": today.strftime("%m/%d/%Y"),
        }

        year, _, rest = applicant.date_of_birth.partition("-")
        month, _, day = rest.partition("-")
        values.update({"dobMonth": month, "dobDay": day, "dobYear": year})

        checked = ["deceasedNo", "shippingRegularMail"]
        relationship_key = self.RELATIONSHIP_CHECKBOXES.get(applicant.relationship)
        if relationship_key:
            checked.append(relationship_key)
        purpose_key = self.PURPOSE_CHECKBOXES.get(applicant.purpose)
        if purpose_key:
            checked.append(purpose_key)
            if applicant.purpose == "other" and applicant.purpose_other:
                values["reasonOtherText"] = applicant.purpose_other
            if applicant.purpose == "voter_registration":
                values["reasonOtherText"] = "Voter Registration"

        fees = config.fees
        first_copy = f"{fees.first_copy / 100:.2f}"
        values["feeTotal"] = f"{fees.agency_fee_cents(copies) / 100:.2f}"
        if copies > 1:
            # no dedicated additional-copies field; note the count beside the first copy
            values["feeCopies"] = (
                f"{first_copy} + {copies - 1} @ ${fees.additional_copy / 100:.2f}"
            )
        else:
            values["feeCopies"] = first_copy

        return {k: v for k, v in values.items() if v}, checked

    @staticmethod
    def _apply(
        doc: pymupdf.Document,
        field_map: dict[str, str],
        text_values: dict[str, str],
        checked: list[str],
    ) -> None:
        text_by_name = {field_map[k]: v for k, v in text_values.items() if k in field_map}
        check_names = {field_map[k] for k in checked if k in field_map}
        pending = set(text_by_name) | check_names

        for page in doc:
            for widget in page.widgets():
                name = widget.field_name
                if name not in pending:
                    continue
                try:
                    if name in check_names:
                        widget.field_value = widget.on_state()
                    else:
                        widget.field_value = text_by_name[name]
                    widget.update()
                    pending.discard(name)
                except Exception as exc:
                    Log.warning(f"Could not set form field '{name}': {exc}")

        for name in sorted(pending):
            Log.warning(f"Form field '{name}' not found in template")

    def _embed_signature(self, doc: pymupdf.Document, signature_image: str) -> None:
        try:
            image_bytes, _mime = decode_signature_image(signature_image)
            doc[0].insert_image(pymupdf.Rect(*self.SIGNATURE_RECT), stream=image_bytes)
        except Exception as exc:
            # the consent letter carries the signature separately
            Log.warning(f"Could not embed signature image on form: {exc}")
