from proofly.cache.base import BaseResultCache
from proofly.cache.memory_adapter import InMemoryResultCache
from proofly.cache.null_adapter import NullResultCache
from proofly.cache.redis_adapter import RedisResultCache
from proofly.cache.result_cache import FulfillmentResultCache
from proofly.config.settings import Settings


class ResultCacheFactory:
    """Creates the fulfillment result cache over the configured backend."""

    BACKENDS = ("redis", "memory", "none")

    @classmethod
    def create(cls, settings: Settings) -> FulfillmentResultCache:
        return FulfillmentResultCache(
            backend=cls._create_backend(settings),
            ttl_seconds=settings.result_cache_ttl_seconds,
        )

    @classmethod
    def _create_backend(cls, settings: Settings) -> BaseResultCache:
        backend = settings.result_cache_backend.lower()
        if backend == "redis":
            if not settings.redis_url:
                raise ValueError("redis_url is required for result_cache_backend=redis")
            return RedisResultCache(settings.redis_url)
        if backend == "memory":
            return InMemoryResultCache()
        if backend == "none":
            return NullResultCache()
        raise ValueError(
            f"Unknown result cache backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
