import httpx

from proofly.logging.logger import Log
from proofly.storage.base import BaseBlobStore, FetchedFile
from proofly.storage.exceptions import FetchError

DEFAULT_CONTENT_TYPE = "image/jpeg"


class VercelBlobStore(BaseBlobStore):
    """Fetches and deletes uploads held in Vercel Blob over its HTTP API."""

    def __init__(
        self,
        *,
        api_url: str,
        token: str,
        timeout_seconds: int,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._token = token
        self._client = client if client is not None else httpx.Client(timeout=timeout_seconds)

    def fetch_bytes(self, url: str) -> FetchedFile:
        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            raise FetchError(f"Failed to fetch upload: {exc}") from exc
        if not response.is_success:
            raise FetchError(
                f"Failed to fetch upload: {response.status_code} {response.reason_phrase}"
            )
        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        return FetchedFile(
            data=response.content,
            content_type=content_type.split(";")[0].strip().lower(),
        )

    def delete(self, url: str) -> bool:
        try:
            response = self._client.post(
                f"{self._api_url}/delete",
                json={"urls": [url]},
                headers={"authorization": f"Bearer {self._token}"},
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            Log.error(f"Failed to delete stored upload {url}: {exc}")
            return False
        return True
