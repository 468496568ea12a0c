"""Turns a completed-checkout payment event into a fulfillment request.

Only ``checkout.session.completed`` events whose session is paid start a run.
The session metadata carries the upload reference, its committed fingerprint,
the signature data URL and the wizard answers as a JSON string under
``formData``. Webhook signature verification happens upstream.
"""

import json
from typing import Any

from proofly.logging.logger import Log
from proofly.processor.exceptions import InvalidRequestError
from proofly.processor.models import ApplicantData, FulfillmentRequest

CHECKOUT_COMPLETED = "checkout.session.completed"
PAID = "paid"

_REQUIRED_METADATA = ("stateCode", "copies", "blobUrl", "fileHash", "signatureDataUrl", "formData")

# formData key -> ApplicantData field
_APPLICANT_FIELDS = {
    "fullName": "full_name",
    "dateOfBirth": "date_of_birth",
    "placeOfBirth": "place_of_birth",
    "relationship": "relationship",
    "purpose": "purpose",
    "mailingAddress1": "mailing_address1",
    "city": "city",
    "state": "state",
    "zip": "zip",
    "email": "email",
    "motherNameAtBirth": "mother_name_at_birth",
    "fatherName": "father_name",
    "purposeOther": "purpose_other",
    "mailingAddress2": "mailing_address2",
}


def parse_checkout_event(event: dict[str, Any]) -> FulfillmentRequest | None:
    """Return a request for a paid completed checkout, None for any other event.

    Raises:
        InvalidRequestError: if a paid session carries incomplete metadata.
    """
    if not isinstance(event, dict):
        raise InvalidRequestError("Payment event must be a JSON object")
    event_type = event.get("type")
    if event_type != CHECKOUT_COMPLETED:
        Log.info(f"Ignoring payment event of type '{event_type}'")
        return None
    session = (event.get("data") or {}).get("object")
    if not isinstance(session, dict):
        raise InvalidRequestError("Checkout event has no session object")
    return parse_payment_trigger(
        session_id=str(session.get("id") or ""),
        payment_status=str(session.get("payment_status") or ""),
        metadata=session.get("metadata"),
    )


def parse_payment_trigger(
    session_id: str,
    payment_status: str,
    metadata: dict[str, Any] | None,
) -> FulfillmentRequest | None:
    """Build a FulfillmentRequest from a checkout session.

    Returns None for unpaid sessions.

    Raises:
        InvalidRequestError: on missing session id, missing metadata keys,
            unparseable ``formData`` or a non-integer ``copies``.
    """
    if not session_id:
        raise InvalidRequestError("Payment trigger has no session id")
    if payment_status != PAID:
        Log.warning(f"Session {session_id} not paid (status: {payment_status}), ignoring")
        return None
    if not isinstance(metadata, dict):
        raise InvalidRequestError(f"Session {session_id} has no metadata")

    missing = [key for key in _REQUIRED_METADATA if not metadata.get(key)]
    if missing:
        raise InvalidRequestError(f"Session {session_id} missing metadata fields: {missing}")

    try:
        copies = int(metadata["copies"])
    except (TypeError, ValueError) as exc:
        raise InvalidRequestError(f"Session {session_id} has non-integer copies") from exc

    form_data = _parse_form_data(session_id, metadata["formData"])

    return FulfillmentRequest(
        session_id=session_id,
        jurisdiction_code=str(metadata["stateCode"]).strip().upper(),
        copies=copies,
        storage_ref=str(metadata["blobUrl"]),
        committed_fingerprint=str(metadata["fileHash"]),
        signature_image=str(metadata["signatureDataUrl"]),
        applicant=_build_applicant(form_data),
    )


def _parse_form_data(session_id: str, raw: Any) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise InvalidRequestError(f"Session {session_id} formData is not valid JSON") from exc
    if not isinstance(parsed, dict):
        raise InvalidRequestError(f"Session {session_id} formData must be an object")
    return parsed


def _build_applicant(form_data: dict[str, Any]) -> ApplicantData:
    values = {
        field: str(form_data.get(key) or "").strip()
        for key, field in _APPLICANT_FIELDS.items()
    }
    return ApplicantData(**values)
