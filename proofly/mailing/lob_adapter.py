from typing import Any

import httpx

from proofly.jurisdictions.models import JurisdictionConfig
from proofly.logging.logger import Log
from proofly.mailing.base import BaseMailingGateway
from proofly.mailing.exceptions import MailingError
from proofly.mailing.models import Address, FeeReceipt, MailReceipt


def _address_fields(prefix: str, address: Address) -> dict[str, str]:
    return {
        f"{prefix}[name]": address.name,
        f"{prefix}[address_line1]": address.street,
        f"{prefix}[address_city]": address.city,
        f"{prefix}[address_state]": address.state,
        f"{prefix}[address_zip]": address.zip,
        f"{prefix}[address_country]": address.country,
    }


class LobMailingGateway(BaseMailingGateway):
    """Mails letters and checks through Lob's Print & Mail REST API."""

    def __init__(
        self,
        *,
        api_url: str,
        api_key: str,
        bank_account_id: str,
        timeout_seconds: int,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._bank_account_id = bank_account_id
        self._client = (
            client
            if client is not None
            else httpx.Client(auth=(api_key, ""), timeout=timeout_seconds)
        )

    def mail_packet(
        self,
        packet: bytes,
        destination: Address,
        sender: Address,
        request_ref: str,
        description: str,
    ) -> MailReceipt:
        data = {
            "description": description,
            "color": "false",
            "double_sided": "true",
            "address_placement": "top_first_page",
            "mail_type": "usps_first_class",
            "metadata[request_ref]": request_ref,
            **_address_fields("to", destination),
            **_address_fields("from", sender),
        }
        body = self._post(
            "letters",
            data=data,
            files={"file": (f"{request_ref}.pdf", packet, "application/pdf")},
        )
        receipt = MailReceipt(
            mail_id=str(body.get("id") or ""),
            tracking_number=body.get("tracking_number"),
            expected_delivery_date=body.get("expected_delivery_date"),
        )
        if not receipt.mail_id:
            raise MailingError(f"Letter for {request_ref} was accepted without an id")
        return receipt

    def mail_fee_instrument(
        self,
        config: JurisdictionConfig,
        copies: int,
        sender: Address,
        request_ref: str,
    ) -> FeeReceipt:
        if not self._bank_account_id:
            Log.warning(f"No bank account configured, fee check NOT mailed for {request_ref}")
            return FeeReceipt(check_id=f"STUB_{request_ref}", status="stubbed")

        agency = config.vital_records.mailing_address
        destination = Address(
            name=agency.name,
            street=agency.street,
            city=agency.city,
            state=agency.state,
            zip=agency.zip,
        )
        data = {
            "description": f"{config.name} Birth Certificate Fee - {request_ref}",
            "bank_account": self._bank_account_id,
            "amount": f"{config.fees.agency_fee_cents(copies) / 100:.2f}",
            "memo": config.fees.check_memo,
            **_address_fields("to", destination),
            **_address_fields("from", sender),
        }
        body = self._post("checks", data=data)
        check_id = str(body.get("id") or "")
        if not check_id:
            raise MailingError(f"Fee check for {request_ref} was accepted without an id")
        return FeeReceipt(
            check_id=check_id,
            status="created",
            check_number=body.get("check_number"),
        )

    def _post(self, resource: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self._client.post(f"{self._api_url}/{resource}", **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise MailingError(
                f"Lob {resource} request rejected: {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise MailingError(f"Lob {resource} request failed: {exc}") from exc
        try:
            body = response.json()
        except ValueError as exc:
            raise MailingError(f"Lob {resource} returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise MailingError(f"Lob {resource} returned an unexpected payload")
        return body
