import json
from typing import Any

import redis

from proofly.cache.base import BaseResultCache
from proofly.cache.exceptions import ResultCacheError


class RedisResultCache(BaseResultCache):
    """Result cache backed by Redis string keys holding JSON."""

    def __init__(self, url: str, client: redis.Redis | None = None) -> None:
        self._client = client or redis.Redis.from_url(
            url,
            socket_connect_timeout=2,
            socket_timeout=2,
            decode_responses=True,
        )

    def put(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        try:
            self._client.set(key, json.dumps(value), ex=ttl_seconds)
        except redis.RedisError as exc:
            raise ResultCacheError(f"Redis write failed for {key}: {exc}") from exc

    def get(self, key: str) -> dict[str, Any] | None:
        try:
            raw = self._client.get(key)
        except redis.RedisError as exc:
            raise ResultCacheError(f"Redis read failed for {key}: {exc}") from exc
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ResultCacheError(f"Cached value for {key} is not valid JSON: {exc}") from exc
        if not isinstance(value, dict):
            raise ResultCacheError(f"Cached value for {key} is not an object")
        return value

    def put_if_absent(self, key: str, value: dict[str, Any], ttl_seconds: int) -> bool:
        try:
            return bool(self._client.set(key, json.dumps(value), ex=ttl_seconds, nx=True))
        except redis.RedisError as exc:
            raise ResultCacheError(f"Redis claim failed for {key}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except redis.RedisError as exc:
            raise ResultCacheError(f"Redis delete failed for {key}: {exc}") from exc
