"""HTTP client for the store API.

Every page in the site is a thin view over this client. The API owns all data
and rules; this module only knows endpoint paths and JSON shapes, and turns
transport or HTTP failures into ``ApiError`` so views can report them.
"""

import logging
from typing import IO, Any, Dict, List, Optional

import requests

from .config import API_URL, REQUEST_TIMEOUT
from .models import FAQ, Category, Collection, Contact, Placeholder, Product

__all__ = [
    "ApiError",
    "ApiNotFound",
    "StoreApiClient",
    "get_api_client",
    "init_api_client",
]

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the store API cannot be reached or rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class ApiNotFound(ApiError):
    """The requested record does not exist (HTTP 404)."""


def _error_detail(resp: requests.Response) -> str:
    """Extract a human-readable error from an API response body."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text.strip()
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return resp.text.strip()


class StoreApiClient:
    """Thin wrapper over the store's REST API."""

    def __init__(
        self,
        base_url: str = API_URL,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("Accept", "application/json")

    # ---------- transport ----------

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}{path}"
        kwargs.setdefault("timeout", self.timeout)
        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout calling {method} {url}: {e}")
            raise ApiError(f"API timeout: {method} {path}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error calling {method} {url}: {e}")
            raise ApiError(f"API unavailable: {method} {path}") from e

        if resp.status_code == 404:
            raise ApiNotFound(
                f"Not found: {method} {path}", status_code=404, body=resp.text
            )
        if not resp.ok:
            detail = _error_detail(resp)
            logger.error(f"API error {resp.status_code} for {method} {url}: {detail}")
            raise ApiError(
                detail or f"HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )
        return resp

    def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        resp = self._request(method, path, **kwargs)
        try:
            return resp.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {method} {path}: {resp.text[:200]!r}")
            raise ApiError(
                f"Invalid JSON from {method} {path}",
                status_code=resp.status_code,
                body=resp.text,
            ) from e

    def _list(self, path: str) -> List[Dict[str, Any]]:
        data = self._json("GET", path)
        # The API encodes an empty table as null
        if data is None:
            return []
        if not isinstance(data, list):
            raise ApiError(f"Expected a list from GET {path}")
        return data

    # ---------- products ----------

    def list_products(self) -> List[Product]:
        return [Product.from_dict(p) for p in self._list("/products")]

    def list_featured_products(self) -> List[Product]:
        return [Product.from_dict(p) for p in self._list("/products/featured")]

    def get_product(self, product_id: int) -> Product:
        return Product.from_dict(self._json("GET", f"/products/{product_id}"))

    def create_product(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("POST", "/admin/products", json=payload)

    def update_product(self, product_id: int, payload: Dict[str, Any]) -> None:
        self._request("PUT", f"/admin/products/{product_id}", json=payload)

    def delete_product(self, product_id: int) -> None:
        self._request("DELETE", f"/admin/products/{product_id}")

    # ---------- categories ----------

    def list_categories(self) -> List[Category]:
        return [Category.from_dict(c) for c in self._list("/categories")]

    def create_category(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("POST", "/admin/categories", json=payload)

    def update_category(self, category_id: int, payload: Dict[str, Any]) -> None:
        self._request("PUT", f"/admin/categories/{category_id}", json=payload)

    def delete_category(self, category_id: int) -> None:
        self._request("DELETE", f"/admin/categories/{category_id}")

    # ---------- collections ----------

    def list_collections(self) -> List[Collection]:
        return [Collection.from_dict(c) for c in self._list("/collections")]

    def get_collection(self, collection_id: int) -> Collection:
        return Collection.from_dict(self._json("GET", f"/collections/{collection_id}"))

    def create_collection(self, payload: Dict[str, Any]) -> Collection:
        return Collection.from_dict(self._json("POST", "/admin/collections", json=payload))

    def update_collection(self, collection_id: int, payload: Dict[str, Any]) -> None:
        self._request("PUT", f"/admin/collections/{collection_id}", json=payload)

    def delete_collection(self, collection_id: int) -> None:
        self._request("DELETE", f"/admin/collections/{collection_id}")

    def add_product_to_collection(self, collection_id: int, product_id: int) -> None:
        self._request(
            "POST",
            f"/admin/collections/{collection_id}/products",
            json={"product_id": product_id},
        )

    def remove_product_from_collection(self, collection_id: int, product_id: int) -> None:
        self._request("DELETE", f"/admin/collections/{collection_id}/products/{product_id}")

    # ---------- contacts ----------

    def list_contacts(self) -> List[Contact]:
        return [Contact.from_dict(c) for c in self._list("/admin/contacts")]

    def submit_contact(self, payload: Dict[str, Any]) -> None:
        self._request("POST", "/contacts", json=payload)

    def delete_contact(self, contact_id: int) -> None:
        self._request("DELETE", f"/admin/contacts/{contact_id}")

    # ---------- FAQs ----------

    def list_faqs(self) -> List[FAQ]:
        return [FAQ.from_dict(f) for f in self._list("/faqs")]

    def get_faq(self, faq_id: int) -> FAQ:
        return FAQ.from_dict(self._json("GET", f"/admin/faqs/{faq_id}"))

    def create_faq(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("POST", "/admin/faqs", json=payload)

    def update_faq(self, faq_id: int, payload: Dict[str, Any]) -> None:
        self._request("PUT", f"/admin/faqs/{faq_id}", json=payload)

    def delete_faq(self, faq_id: int) -> None:
        self._request("DELETE", f"/admin/faqs/{faq_id}")

    # ---------- placeholders ----------

    def list_placeholders(self) -> List[Placeholder]:
        return [Placeholder.from_dict(p) for p in self._list("/admin/placeholders")]

    def get_placeholder(self, placeholder_id: int) -> Placeholder:
        return Placeholder.from_dict(self._json("GET", f"/admin/placeholders/{placeholder_id}"))

    def create_placeholder(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("POST", "/admin/placeholders", json=payload)

    def update_placeholder(self, placeholder_id: int, payload: Dict[str, Any]) -> None:
        self._request("PUT", f"/admin/placeholders/{placeholder_id}", json=payload)

    def delete_placeholder(self, placeholder_id: int) -> None:
        self._request("DELETE", f"/admin/placeholders/{placeholder_id}")

    def check_placeholder(self, path: str) -> Optional[Placeholder]:
        """Return the active placeholder configured for ``path``, if any."""
        data = self._json("GET", "/placeholder/check", params={"path": path})
        if not isinstance(data, dict) or data.get("exists") is not True:
            return None
        if not data.get("placeholder"):
            return None
        return Placeholder.from_dict(data["placeholder"])

    # ---------- uploads & maintenance ----------

    def upload_image(self, filename: str, stream: IO[bytes], content_type: str) -> str:
        """Upload an image and return the relative URL path the API stored it under."""
        data = self._json(
            "POST",
            "/admin/upload",
            files={"image": (filename, stream, content_type)},
        )
        url = data.get("url") if isinstance(data, dict) else None
        if not url:
            raise ApiError("Upload response did not include a URL")
        return str(url)

    def create_dump(self) -> Dict[str, Any]:
        """Ask the API to dump its database; returns filename and telegram_sent."""
        data = self._json("POST", "/admin/db/dump")
        return data if isinstance(data, dict) else {}

    def restore_dump(self, filename: str, stream: IO[bytes]) -> Dict[str, Any]:
        data = self._json(
            "POST",
            "/admin/db/restore",
            files={"dump": (filename, stream, "application/octet-stream")},
        )
        return data if isinstance(data, dict) else {}


# Global client instance
_client: Optional[StoreApiClient] = None


def get_api_client() -> StoreApiClient:
    """Get or create the process-wide API client."""
    global _client
    if _client is None:
        _client = StoreApiClient()
    return _client


def init_api_client(
    base_url: str = API_URL, timeout: float = REQUEST_TIMEOUT
) -> StoreApiClient:
    """Replace the process-wide API client (used by the app factory and tests)."""
    global _client
    _client = StoreApiClient(base_url=base_url, timeout=timeout)
    return _client
