"""Data models mirrored from the store API's JSON.

The API owns every invariant; these records are read-mostly snapshots that live
for a single request. ``from_dict`` is lenient about missing keys and ``null``
lists because older rows in the API's database predate some columns.
"""

import re
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

__all__ = [
    "Product",
    "Category",
    "Collection",
    "Contact",
    "FAQ",
    "Placeholder",
    "parse_timestamp",
]

_FRACTION_RE = re.compile(r"\.(\d+)")


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp as emitted by the API.

    Returns None for empty or unparseable input.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # Go emits up to nine trimmed fractional digits; normalise to microseconds
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


@dataclass
class Product:
    """A catalog item."""

    id: int
    name: str
    category: str = ""
    price: float = 0.0
    rating: float = 0.0
    reviews: int = 0
    description: str = ""
    image: str = ""
    images: List[str] = field(default_factory=list)
    color: str = ""
    dimensions: str = ""
    material: str = ""
    features: List[str] = field(default_factory=list)
    featured: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        return cls(
            id=_as_int(data.get("id")),
            name=data.get("name") or "",
            category=data.get("category") or "",
            price=_as_float(data.get("price")),
            rating=_as_float(data.get("rating")),
            reviews=_as_int(data.get("reviews")),
            description=data.get("description") or "",
            image=data.get("image") or "",
            images=[img for img in _as_list(data.get("images")) if img],
            color=data.get("color") or "",
            dimensions=data.get("dimensions") or "",
            material=data.get("material") or "",
            features=[f for f in _as_list(data.get("features")) if f],
            featured=bool(data.get("featured", False)),
        )

    @property
    def gallery(self) -> List[str]:
        """All images, falling back to the single main image."""
        if self.images:
            return list(self.images)
        if self.image:
            return [self.image]
        return []


@dataclass
class Category:
    id: int
    name: str
    description: str = ""
    icon: str = ""
    href: str = ""
    image: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            id=_as_int(data.get("id")),
            name=data.get("name") or "",
            description=data.get("description") or "",
            icon=data.get("icon") or "",
            href=data.get("href") or "",
            image=data.get("image") or "",
        )

    def to_payload(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload.pop("id")
        return payload


@dataclass
class Collection:
    """A curated group of products.

    ``count`` is maintained by the API; ``products`` is only populated by the
    single-collection endpoint.
    """

    id: int
    name: str
    description: str = ""
    image: str = ""
    count: int = 0
    products: List[Product] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Collection":
        return cls(
            id=_as_int(data.get("id")),
            name=data.get("name") or "",
            description=data.get("description") or "",
            image=data.get("image") or "",
            count=_as_int(data.get("count")),
            products=[Product.from_dict(p) for p in _as_list(data.get("products"))],
        )

    @property
    def product_ids(self) -> List[int]:
        return [p.id for p in self.products]

    def to_payload(self) -> Dict[str, Any]:
        # Membership is managed through the products sub-resource
        return {"name": self.name, "description": self.description, "image": self.image}


@dataclass
class Contact:
    id: int
    name: str
    email: str
    phone: str = ""
    message: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Contact":
        return cls(
            id=_as_int(data.get("id")),
            name=data.get("name") or "",
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            message=data.get("message") or "",
            created_at=parse_timestamp(data.get("created_at")),
        )


@dataclass
class FAQ:
    id: int
    question: str
    answer: str = ""
    order: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FAQ":
        return cls(
            id=_as_int(data.get("id")),
            question=data.get("question") or "",
            answer=data.get("answer") or "",
            order=_as_int(data.get("order")),
        )


@dataclass
class Placeholder:
    """A "coming soon" page configured for a site path."""

    id: int
    path: str
    title: str = ""
    message: str = ""
    is_active: bool = True
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Placeholder":
        return cls(
            id=_as_int(data.get("id")),
            path=data.get("path") or "",
            title=data.get("title") or "",
            message=data.get("message") or "",
            is_active=bool(data.get("is_active", True)),
            created_at=parse_timestamp(data.get("created_at")),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "title": self.title,
            "message": self.message,
            "is_active": self.is_active,
        }
