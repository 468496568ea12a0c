import base64
import binascii
import re

_DATA_URL_RE = re.compile(r"^data:(?P<mime>image/[\w.+-]+);base64,", re.IGNORECASE)


def decode_signature_image(data_url: str) -> tuple[bytes, str]:
    """Decode a signature-pad data URL into raw image bytes and its MIME type.

    Raises:
        ValueError: if the payload is not valid base64.
    """
    match = _DATA_URL_RE.match(data_url)
    mime = match.group("mime").lower() if match else "image/png"
    payload = data_url[match.end():] if match else data_url
    try:
        return base64.b64decode(payload, validate=True), mime
    except binascii.Error as exc:
        raise ValueError(f"Signature image is not valid base64: {exc}") from exc
