"""Storage Client — async wrapper over the hosted object storage REST API.

Invariants:
    - Every request authenticates with the service key (bypasses row-level policies)
    - Non-2xx responses and transport failures surface as StorageError
    - public_url() is pure string building (no request)

Design Decisions:
    - httpx.AsyncClient over the vendor SDK: the four calls used here are plain
      REST, and httpx transports make the client testable without a network
    - No retry: a failed upload is reported to the caller, who re-submits
"""

import logging
from urllib.parse import quote

import httpx

from travel_map.core.errors import StorageError

logger = logging.getLogger(__name__)


class StorageClient:
    """Upload objects and manage buckets on the storage service."""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        timeout_seconds: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=f"{self.base_url}/storage/v1",
            headers={
                "Authorization": f"Bearer {service_key}",
                "apikey": service_key,
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    async def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str,
        upsert: bool = False,
        cache_control: str = "3600",
    ) -> str:
        """Store content at bucket/path. Returns the stored object path."""
        response = await self._request(
            "POST",
            f"/object/{bucket}/{quote(path, safe='/')}",
            content=content,
            headers={
                "Content-Type": content_type,
                "x-upsert": "true" if upsert else "false",
                "cache-control": f"max-age={cache_control}",
            },
        )
        logger.info(
            "Object uploaded",
            extra={"bucket": bucket, "object_path": path},
        )
        key = response.json().get("Key") if response.content else None
        if key and key.startswith(f"{bucket}/"):
            return key[len(bucket) + 1:]
        return path

    def public_url(self, bucket: str, path: str) -> str:
        return (
            f"{self.base_url}/storage/v1/object/public/"
            f"{bucket}/{quote(path, safe='/')}"
        )

    async def list_buckets(self) -> list[dict]:
        response = await self._request("GET", "/bucket")
        return response.json()

    async def create_bucket(
        self,
        name: str,
        public: bool = True,
        file_size_limit: int | None = None,
        allowed_mime_types: list[str] | None = None,
    ) -> None:
        payload: dict = {"id": name, "name": name, "public": public}
        if file_size_limit is not None:
            payload["file_size_limit"] = file_size_limit
        if allowed_mime_types is not None:
            payload["allowed_mime_types"] = allowed_mime_types
        await self._request("POST", "/bucket", json=payload)
        logger.info("Bucket created", extra={"bucket": name})

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Storage transport error: {e}")
            raise StorageError("storage service unreachable")
        if response.is_error:
            message = _error_message(response)
            logger.error(
                f"Storage {method} {url} failed: {message}",
                extra={"status_code": response.status_code},
            )
            raise StorageError(message, status_code=response.status_code)
        return response


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(
            body.get("message") or body.get("error")
            or f"HTTP {response.status_code}"
        )
    return f"HTTP {response.status_code}"


# Singleton (initialized on startup)
storage_client: StorageClient | None = None


def init_storage(base_url: str, service_key: str, **kwargs) -> StorageClient:
    global storage_client
    storage_client = StorageClient(base_url, service_key, **kwargs)
    return storage_client


def get_storage() -> StorageClient:
    """FastAPI dependency for the storage client."""
    if not storage_client:
        raise RuntimeError("Storage client not initialized")
    return storage_client
