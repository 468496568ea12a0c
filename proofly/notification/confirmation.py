import html
from datetime import datetime, timezone
from pathlib import Path

from proofly.deletion.models import DeletionReceipt
from proofly.jurisdictions.models import JurisdictionConfig
from proofly.logging.logger import Log
from proofly.notification.base import BaseEmailSender
from proofly.notification.template_loader import load_template
from proofly.outcome import Outcome
from proofly.processor.models import ApplicantData, FulfillmentResult

ATTESTATION_LABELS = (
    ("authorization", "Authorization"),
    ("fulfillment", "Fulfillment"),
    ("deletion", "Data Destruction"),
)


class ConfirmationNotifier:
    """Renders and sends the post-mailing confirmation email.

    Failures are returned as an Outcome; the run is already complete by the
    time this is called.
    """

    def __init__(
        self,
        sender: BaseEmailSender,
        explorer_url: str,
        support_email: str,
        template_dir: Path | None = None,
    ) -> None:
        self._sender = sender
        self._explorer_url = explorer_url.rstrip("/")
        self._support_email = support_email
        self._template_dir = template_dir

    def notify(
        self,
        applicant: ApplicantData,
        config: JurisdictionConfig,
        result: FulfillmentResult,
        receipt: DeletionReceipt,
    ) -> Outcome[None]:
        ref = result.request_ref
        try:
            html_body = self.render_html(applicant, config, result, receipt)
            text_body = self.render_text(applicant, config, result, receipt)
            self._sender.send(
                to=applicant.email,
                subject=f"Your {config.name} birth certificate request - Ref: {ref}",
                html=html_body,
                text=text_body,
            )
        except Exception as exc:
            Log.error(f"Confirmation email failed for {ref}: {exc}")
            return Outcome.failure(str(exc))
        Log.info(f"Confirmation email sent for {ref}")
        return Outcome.success()

    def render_html(
        self,
        applicant: ApplicantData,
        config: JurisdictionConfig,
        result: FulfillmentResult,
        receipt: DeletionReceipt,
    ) -> str:
        template = load_template("confirmation.html", self._template_dir)
        values = {k: html.escape(v) for k, v in self._common_values(applicant, config, result, receipt).items()}
        values["tracking_section"] = self._tracking_html(result)
        values["attestation_section"] = self._attestations_html(result)
        return template.format(**values)

    def render_text(
        self,
        applicant: ApplicantData,
        config: JurisdictionConfig,
        result: FulfillmentResult,
        receipt: DeletionReceipt,
    ) -> str:
        template = load_template("confirmation.txt", self._template_dir)
        values = self._common_values(applicant, config, result, receipt)
        values["tracking_number"] = result.tracking_number or "Available shortly"
        values["expected_delivery"] = result.expected_delivery_date or "Not yet available"
        links = self._attestation_links(result)
        values["attestation_lines"] = (
            "\nPublic attestations:\n" + "".join(f"  {label}: {url}\n" for label, _uid, url in links)
            if links
            else ""
        )
        return template.format(**values)

    def _common_values(
        self,
        applicant: ApplicantData,
        config: JurisdictionConfig,
        result: FulfillmentResult,
        receipt: DeletionReceipt,
    ) -> dict[str, str]:
        deleted_at = datetime.fromtimestamp(receipt.deleted_at / 1000, tz=timezone.utc)
        return {
            "to": applicant.email,
            "full_name": applicant.full_name,
            "jurisdiction_name": config.name,
            "agency_name": config.vital_records.agency_name,
            "processing_days": str(config.vital_records.processing_time_days),
            "request_ref": result.request_ref,
            "receipt_hash": receipt.receipt_hash,
            "deleted_at": deleted_at.strftime("%a, %d %b %Y %H:%M:%S GMT"),
            "deletion_method": receipt.deletion_method,
            "all_files_deleted": (
                "Yes"
                if receipt.all_files_deleted
                else "No - the upload store did not confirm removal; the upload expires automatically"
            ),
            "support_email": self._support_email,
        }

    @staticmethod
    def _tracking_html(result: FulfillmentResult) -> str:
        if not result.tracking_number:
            return "<p>Tracking information will be available shortly.</p>"
        section = (
            "<p><strong>Tracking Number:</strong> "
            f"<code>{html.escape(result.tracking_number)}</code></p>"
        )
        if result.expected_delivery_date:
            section += (
                "<p><strong>Expected Delivery:</strong> "
                f"{html.escape(result.expected_delivery_date)}</p>"
            )
        return section

    def _attestations_html(self, result: FulfillmentResult) -> str:
        links = self._attestation_links(result)
        if not links:
            return ""
        items = "".join(
            f'<li>{label}: <a href="{html.escape(url)}" style="color:#0d9488;">'
            f"{html.escape(uid[:12])}...</a></li>"
            for label, uid, url in links
        )
        return (
            '<div style="margin-bottom:24px;">'
            '<p style="margin:0 0 8px;font-size:13px;font-weight:600;color:#cbd5e1;">'
            "Public Attestations</p>"
            f'<ul style="margin:0;padding:0 0 0 16px;font-size:12px;">{items}</ul>'
            "</div>"
        )

    def _attestation_links(self, result: FulfillmentResult) -> list[tuple[str, str, str]]:
        uids = result.attestation_uids.as_dict()
        return [
            (label, uids[slot], f"{self._explorer_url}/{uids[slot]}")
            for slot, label in ATTESTATION_LABELS
            if uids[slot]
        ]
