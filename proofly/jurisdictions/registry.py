from typing import ClassVar

from proofly.jurisdictions.colorado import COLORADO
from proofly.jurisdictions.exceptions import UnknownJurisdictionError
from proofly.jurisdictions.models import JurisdictionConfig


class JurisdictionRegistry:
    """Lookup of configured jurisdictions by two-letter code."""

    JURISDICTIONS: ClassVar[dict[str, JurisdictionConfig]] = {
        "CO": COLORADO,
    }

    @classmethod
    def get(cls, code: str) -> JurisdictionConfig:
        config = cls.JURISDICTIONS.get(code.strip().upper()) if code else None
        if config is None:
            raise UnknownJurisdictionError(
                f"Jurisdiction '{code}' is not configured. Choose from: {list(cls.JURISDICTIONS)}"
            )
        return config

    @classmethod
    def live(cls) -> list[JurisdictionConfig]:
        return [c for c in cls.JURISDICTIONS.values() if c.status == "live"]

    @classmethod
    def all(cls) -> list[JurisdictionConfig]:
        return list(cls.JURISDICTIONS.values())
