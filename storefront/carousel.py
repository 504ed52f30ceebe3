"""Image carousel state for product galleries.

The carousel is server-rendered: the current slide travels in the ``image``
query parameter and the prev/next arrows are plain links to the wrapped index.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from .config import BACKEND_PUBLIC_URL, PLACEHOLDER_IMAGE

__all__ = [
    "Carousel",
    "next_index",
    "prev_index",
    "clamp_index",
    "resolve_image_url",
]


def next_index(index: int, count: int) -> int:
    if count <= 0:
        return 0
    return (index + 1) % count


def prev_index(index: int, count: int) -> int:
    if count <= 0:
        return 0
    return (index - 1 + count) % count


def clamp_index(raw: Any, count: int) -> int:
    """Turn a query-string value into a valid slide index.

    Non-integers give 0; out-of-range integers wrap modulo ``count``.
    """
    if count <= 0:
        return 0
    try:
        index = int(raw)
    except (TypeError, ValueError):
        return 0
    return index % count


def resolve_image_url(path: Optional[str], backend_url: str = BACKEND_PUBLIC_URL) -> str:
    """Map an image reference from the API to something a browser can load.

    Uploaded files come back as ``/uploads/<name>`` relative to the API host.
    """
    if not path:
        return PLACEHOLDER_IMAGE
    if path.startswith("/uploads/"):
        return f"{backend_url.rstrip('/')}{path}"
    return path


@dataclass
class Carousel:
    """A gallery with a current slide, as needed by the templates."""

    images: List[str] = field(default_factory=list)
    index: int = 0

    @classmethod
    def for_images(
        cls, images: List[str], raw_index: Any = 0, backend_url: str = BACKEND_PUBLIC_URL
    ) -> "Carousel":
        urls = [resolve_image_url(img, backend_url) for img in images]
        return cls(images=urls, index=clamp_index(raw_index, len(urls)))

    @property
    def count(self) -> int:
        return len(self.images)

    @property
    def has_multiple(self) -> bool:
        return self.count > 1

    @property
    def current(self) -> str:
        if not self.images:
            return PLACEHOLDER_IMAGE
        return self.images[self.index]

    @property
    def next_index(self) -> int:
        return next_index(self.index, self.count)

    @property
    def prev_index(self) -> int:
        return prev_index(self.index, self.count)
