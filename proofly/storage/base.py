from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class FetchedFile:
    data: bytes
    content_type: str


class BaseBlobStore(ABC):
    """Contract for the short-lived upload store holding the identity file."""

    @abstractmethod
    def fetch_bytes(self, url: str) -> FetchedFile:
        """Download the object behind ``url`` into memory.

        Raises:
            FetchError: on a non-2xx status or transport failure. No retry.
        """

    @abstractmethod
    def delete(self, url: str) -> bool:
        """Delete the stored object. Returns True when the store confirmed it.

        Never raises: failures are reported as False.
        """
