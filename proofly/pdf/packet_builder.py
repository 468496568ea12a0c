from typing import ClassVar

import pymupdf

from proofly.logging.logger import Log
from proofly.pdf.base import BasePacketBuilder
from proofly.pdf.exceptions import PacketBuildError

PDF_CONTENT_TYPE = "application/pdf"


class PdfPacketBuilder(BasePacketBuilder):
    """Merges consent letter, filled form and identity copy with PyMuPDF."""

    PAGE_WIDTH: ClassVar[float] = 612
    PAGE_HEIGHT: ClassVar[float] = 792
    MARGIN: ClassVar[float] = 54
    LABEL_SPACE: ClassVar[float] = 60

    ID_LABEL: ClassVar[str] = "GOVERNMENT-ISSUED PHOTO ID - SUBMITTED BY APPLICANT"
    ID_NOTE: ClassVar[str] = (
        "Required for mail-in birth certificate requests. "
        "See the application for ID requirements."
    )

    def build(
        self,
        form: bytes | bytearray,
        letter: bytes | bytearray,
        id_file: bytes | bytearray,
        id_content_type: str,
    ) -> bytes:
        try:
            with pymupdf.open() as packet:
                self._append_pdf(packet, letter, "consent letter")
                self._append_pdf(packet, form, "filled form")
                if id_content_type == PDF_CONTENT_TYPE:
                    self._append_pdf(packet, id_file, "identity document")
                elif id_content_type.startswith("image/"):
                    self._append_image_page(packet, id_file)
                else:
                    raise PacketBuildError(f"Unsupported identity file type: {id_content_type}")
                Log.info(f"Built mail packet with {packet.page_count} pages")
                return packet.tobytes(garbage=3, deflate=True)
        except PacketBuildError:
            raise
        except Exception as exc:
            raise PacketBuildError(f"Failed to build mail packet: {exc}") from exc

    @staticmethod
    def _append_pdf(packet: pymupdf.Document, data: bytes | bytearray, label: str) -> None:
        try:
            source = pymupdf.open(stream=bytes(data), filetype="pdf")
        except Exception as exc:
            raise PacketBuildError(f"The {label} is not a valid PDF: {exc}") from exc
        with source:
            if source.page_count == 0:
                raise PacketBuildError(f"The {label} has no pages")
            packet.insert_pdf(source)

    def _append_image_page(self, packet: pymupdf.Document, image: bytes | bytearray) -> None:
        stream = bytes(image)
        try:
            pixmap = pymupdf.Pixmap(stream)
        except Exception as exc:
            raise PacketBuildError(f"The identity image could not be decoded: {exc}") from exc
        img_w, img_h = pixmap.width, pixmap.height

        max_w = self.PAGE_WIDTH - 2 * self.MARGIN
        max_h = self.PAGE_HEIGHT - 2 * self.MARGIN - self.LABEL_SPACE
        scale = min(max_w / img_w, max_h / img_h, 1)
        draw_w, draw_h = img_w * scale, img_h * scale
        x0 = (self.PAGE_WIDTH - draw_w) / 2
        y0 = (self.PAGE_HEIGHT - draw_h) / 2

        page = packet.new_page(width=self.PAGE_WIDTH, height=self.PAGE_HEIGHT)
        page.insert_text((self.MARGIN, self.MARGIN), self.ID_LABEL, fontsize=9)
        page.insert_text((self.MARGIN, self.MARGIN + 14), self.ID_NOTE, fontsize=8)
        page.insert_image(pymupdf.Rect(x0, y0, x0 + draw_w, y0 + draw_h), stream=stream)
