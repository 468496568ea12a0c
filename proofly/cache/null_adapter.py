from typing import Any

from proofly.cache.base import BaseResultCache


class NullResultCache(BaseResultCache):
    """No cache configured: writes are dropped and every read misses."""

    def put(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        return None

    def get(self, key: str) -> dict[str, Any] | None:
        return None

    def put_if_absent(self, key: str, value: dict[str, Any], ttl_seconds: int) -> bool:
        return True

    def delete(self, key: str) -> None:
        return None
