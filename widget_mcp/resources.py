"""Widget resources: URI normalization, lookup and HTML fetching."""
import logging
import time
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel

from .utils.errors import WidgetFetchError

logger = logging.getLogger(__name__)

SKYBRIDGE_MIME_TYPE = "text/html+skybridge"

DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}


def _strip_trailing_slash(value: str) -> str:
    return value[:-1] if value.endswith("/") else value


def normalize_uri(uri: str) -> str:
    """Reduce a URI to origin + path for resource matching.

    Query strings and fragments are ignored, so cache-busting parameters
    such as ``?v=1.0.4`` do not affect the match. A value that does not
    parse as an absolute URI falls back to the raw string minus one
    trailing slash.
    """
    try:
        parts = urlsplit(uri)
        port = parts.port
    except ValueError:
        return _strip_trailing_slash(uri)

    if not parts.scheme or not parts.netloc or not parts.hostname:
        return _strip_trailing_slash(uri)

    scheme = parts.scheme.lower()
    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        host = f"{host}:{port}"

    path = _strip_trailing_slash(parts.path) or "/"
    return f"{scheme}://{host}{path}"


class WidgetResource(BaseModel):
    """An embeddable widget document exposed through resources/*."""

    uri: str
    name: str
    description: str = ""
    mimeType: str = SKYBRIDGE_MIME_TYPE

    def to_dict(self) -> Dict[str, str]:
        return self.model_dump()


class ResourceCatalog:
    """Known widget resources, matched by normalized URI."""

    def __init__(self, resources: Optional[List[WidgetResource]] = None):
        self.resources: List[WidgetResource] = list(resources or [])

    def __len__(self) -> int:
        return len(self.resources)

    def list_resources(self) -> List[Dict[str, str]]:
        return [resource.to_dict() for resource in self.resources]

    def find(self, uri: str) -> Optional[WidgetResource]:
        wanted = normalize_uri(uri)
        for resource in self.resources:
            if normalize_uri(resource.uri) == wanted:
                return resource
        return None


class WidgetFetcher:
    """Fetches deployed widget HTML with a timeout and a time-bounded cache.

    A cache TTL of zero disables caching. Failed fetches are never cached.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        cache_ttl: float = 300.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self._client = client
        self._owns_client = client is None
        self._cache: Dict[str, Tuple[float, str]] = {}

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self._client

    def _cached(self, key: str) -> Optional[str]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        expires_at, text = entry
        if time.monotonic() >= expires_at:
            del self._cache[key]
            return None
        return text

    async def fetch(self, uri: str) -> str:
        """Return the widget HTML for ``uri``.

        Raises:
            WidgetFetchError: network failure, timeout or non-2xx status
        """
        key = normalize_uri(uri)
        if self.cache_ttl > 0:
            cached = self._cached(key)
            if cached is not None:
                logger.debug(f"Widget cache hit: {key}")
                return cached

        logger.info(f"Fetching widget HTML from {uri}")
        try:
            response = await self.client.get(uri, timeout=self.timeout)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise WidgetFetchError(f"timed out after {self.timeout}s ({e.__class__.__name__})") from e
        except httpx.HTTPStatusError as e:
            raise WidgetFetchError(f"HTTP {e.response.status_code} from {uri}") from e
        except httpx.HTTPError as e:
            raise WidgetFetchError(str(e) or e.__class__.__name__) from e

        text = response.text
        if self.cache_ttl > 0:
            self._cache[key] = (time.monotonic() + self.cache_ttl, text)
        return text

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
