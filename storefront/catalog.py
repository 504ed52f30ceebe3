"""Catalog list helpers: category filter, sort order, related items.

All functions are pure: they take the product list fetched from the API and
return a new list, never mutating their input.
"""

from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .models import FAQ, Category, Product

__all__ = [
    "ALL_CATEGORIES",
    "DEFAULT_SORT",
    "SORT_OPTIONS",
    "available_categories",
    "filter_products",
    "sort_products",
    "apply_catalog_view",
    "related_products",
    "new_arrivals",
    "sort_faqs",
]

# Sentinel label for "no category filter", shown as the first radio option
ALL_CATEGORIES = "Все"

DEFAULT_SORT = "featured"

# (key, label) in the order the select box shows them
SORT_OPTIONS: List[Tuple[str, str]] = [
    ("featured", "Рекомендуемые"),
    ("price-low", "Цена: по возрастанию"),
    ("price-high", "Цена: по убыванию"),
    ("rating", "Высший рейтинг"),
]

_SORT_KEYS: Dict[str, Tuple[Callable[[Product], float], bool]] = {
    "price-low": (lambda p: p.price, False),
    "price-high": (lambda p: p.price, True),
    "rating": (lambda p: p.rating, True),
}


def available_categories(
    categories: Iterable[Category], products: Iterable[Product]
) -> List[str]:
    """Category labels for the filter sidebar.

    Uses the API's category list; when that is empty, falls back to the
    distinct categories present on products, in first-seen order.
    """
    names = [c.name for c in categories if c.name]
    if not names:
        names = list(dict.fromkeys(p.category for p in products if p.category))
    return [ALL_CATEGORIES] + names


def filter_products(products: Iterable[Product], category: Optional[str]) -> List[Product]:
    if not category or category == ALL_CATEGORIES:
        return list(products)
    return [p for p in products if p.category == category]


def sort_products(products: Iterable[Product], sort_by: Optional[str]) -> List[Product]:
    """Order products by one of ``SORT_OPTIONS``.

    ``featured`` and unknown keys keep the API order. Ties keep their
    relative order (``sorted`` is stable, including with ``reverse=True``).
    """
    items = list(products)
    sort_key = _SORT_KEYS.get(sort_by or DEFAULT_SORT)
    if sort_key is None:
        return items
    key, reverse = sort_key
    return sorted(items, key=key, reverse=reverse)


def apply_catalog_view(
    products: Iterable[Product], category: Optional[str], sort_by: Optional[str]
) -> List[Product]:
    """Filter by category, then sort."""
    return sort_products(filter_products(products, category), sort_by)


def related_products(products: Iterable[Product], product: Product, limit: int = 3) -> List[Product]:
    """Products to suggest under a product page.

    Same category first; if the category has nothing else, any other products.
    """
    others = [p for p in products if p.id != product.id]
    same_category = [p for p in others if p.category == product.category]
    return (same_category or others)[:limit]


def new_arrivals(products: Iterable[Product], limit: int = 6) -> List[Product]:
    """Most recently added products, newest first (ids are assigned in order)."""
    return sorted(products, key=lambda p: p.id, reverse=True)[:limit]


def sort_faqs(faqs: Iterable[FAQ]) -> List[FAQ]:
    return sorted(faqs, key=lambda f: (f.order, f.id))
