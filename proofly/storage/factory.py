from proofly.config.settings import Settings
from proofly.storage.base import BaseBlobStore
from proofly.storage.vercel_blob_adapter import VercelBlobStore


class BlobStoreFactory:
    """Creates the configured upload store adapter."""

    @classmethod
    def create(cls, settings: Settings) -> BaseBlobStore:
        return VercelBlobStore(
            api_url=settings.blob_api_url,
            token=settings.blob_read_write_token,
            timeout_seconds=settings.fetch_timeout_seconds,
        )
