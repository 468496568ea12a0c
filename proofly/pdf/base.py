from abc import ABC, abstractmethod
from datetime import date

from proofly.jurisdictions.models import JurisdictionConfig
from proofly.processor.models import ApplicantData


class BaseFormFiller(ABC):
    """Contract for official application form fillers."""

    @abstractmethod
    def fill(
        self,
        config: JurisdictionConfig,
        applicant: ApplicantData,
        signature_image: str,
        copies: int,
        today: date,
    ) -> bytes:
        """Return the filled official form as PDF bytes.

        Individual fields that cannot be written are skipped.

        Raises:
            FormFillError: if the base template cannot be loaded.
        """


class BaseLetterGenerator(ABC):
    """Contract for consent/authorization letter generators."""

    @abstractmethod
    def generate(
        self,
        config: JurisdictionConfig,
        applicant: ApplicantData,
        signature_image: str,
        request_ref: str,
        today: date,
    ) -> bytes:
        """Return the signed consent letter as PDF bytes.

        Raises:
            ConsentLetterError: if the letter cannot be rendered.
        """


class BasePacketBuilder(ABC):
    """Contract for merging the mailable packet."""

    @abstractmethod
    def build(
        self,
        form: bytes | bytearray,
        letter: bytes | bytearray,
        id_file: bytes | bytearray,
        id_content_type: str,
    ) -> bytes:
        """Merge letter, form and ID into one PDF, in that order.

        Raises:
            PacketBuildError: if an input is not a well-formed document.
        """
