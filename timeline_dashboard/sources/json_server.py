"""json-server client for loading and saving timeline items.

Usage
-----
::

    with JsonServerClient() as client:
        items = client.fetch_items()
    view = TimelineView(items=items)
"""

import logging
from typing import Any, List, Optional

import httpx

from timeline_dashboard.core.errors import TimelineLoadError
from timeline_dashboard.core.item import TimelineItem

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_RESOURCE = "timelines"


class JsonServerClient:
    """Thin HTTP client for a json-server style REST resource.

    Parameters
    ----------
    base_url : str
        Server root, e.g. ``http://localhost:3000``.
    resource : str
        Collection name; items are read from ``GET /{resource}``.
    timeout : float
        Request timeout in seconds.
    transport : httpx.BaseTransport, optional
        Custom transport (used by tests to mock the server).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        resource: str = DEFAULT_RESOURCE,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.resource = resource.strip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> "JsonServerClient":
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Timeline request %s %s failed: %s", method, path, e)
            raise TimelineLoadError(
                f"Server returned {e.response.status_code} for {method} {path}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("Timeline request %s %s failed: %s", method, path, e)
            raise TimelineLoadError(f"Network error for {method} {path}: {e}") from e
        except ValueError as e:
            logger.error("Timeline response for %s %s is not JSON: %s", method, path, e)
            raise TimelineLoadError(f"Invalid JSON from {method} {path}") from e

    def fetch_items(self) -> List[TimelineItem]:
        """Fetch the full item list. A non-list payload yields an empty list."""
        data = self._request("GET", f"/{self.resource}")
        if not isinstance(data, list):
            logger.warning("Expected a list from /%s, got %s", self.resource, type(data).__name__)
            return []
        try:
            return [TimelineItem.from_dict(record) for record in data]
        except (KeyError, TypeError, AttributeError) as e:
            raise TimelineLoadError(f"Malformed item in /{self.resource}: {e}") from e

    def update_item(self, item: TimelineItem) -> TimelineItem:
        """Replace one item on the server and return the stored version."""
        data = self._request("PUT", f"/{self.resource}/{item.id}", json=item.to_dict())
        return TimelineItem.from_dict(data)
