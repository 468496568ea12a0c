import logging
import re
import sys

_DATA_URL_RE = re.compile(r"data:[\w.+/-]+;base64,[A-Za-z0-9+/=]+")
_EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")


class RedactingFilter(logging.Filter):
    """Masks signature data URLs and email addresses in rendered messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _EMAIL_RE.sub("<email>", _DATA_URL_RE.sub("<data-url>", message))
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class Log:
    """Centralized logging for fulfillment runs.

    Messages identify a run by its request reference. Document bytes are
    never passed in; stray data URLs and email addresses are masked.
    """

    _logger: logging.Logger = logging.getLogger("proofly")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level, attach the stdout handler and the redaction filter once."""
        cls._logger.setLevel(log_level.upper())
        if not any(isinstance(f, RedactingFilter) for f in cls._logger.filters):
            cls._logger.addFilter(RedactingFilter())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)
