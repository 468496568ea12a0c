from abc import ABC, abstractmethod
from typing import Any


class BaseResultCache(ABC):
    """Contract for the short-lived key/value store read by the status poller.

    Values are JSON-compatible dicts.
    """

    @abstractmethod
    def put(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``.

        Raises:
            ResultCacheError: if the backend is unreachable.
        """

    @abstractmethod
    def get(self, key: str) -> dict[str, Any] | None:
        """Return the stored value, or None when absent or expired.

        Raises:
            ResultCacheError: if the backend is unreachable.
        """

    @abstractmethod
    def put_if_absent(self, key: str, value: dict[str, Any], ttl_seconds: int) -> bool:
        """Store ``value`` only if ``key`` is not already set.

        Returns True when this call wrote the key.

        Raises:
            ResultCacheError: if the backend is unreachable.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present.

        Raises:
            ResultCacheError: if the backend is unreachable.
        """
