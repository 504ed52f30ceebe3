"""Shared test fixtures for the storefront test suite."""

import os
from unittest.mock import MagicMock

import pytest

# Keep test runs from writing JSONL files into the project's logs/ directory
os.environ.setdefault("LOG_TO_FILE", "False")

from storefront.api_client import StoreApiClient  # noqa: E402
from storefront.models import FAQ, Category, Collection, Placeholder, Product  # noqa: E402


def make_product(product_id, **overrides):
    """Build a Product with sensible defaults for tests."""
    data = {
        "id": product_id,
        "name": f"Товар {product_id}",
        "category": "Кровати",
        "price": 10000.0,
        "rating": 4.5,
        "reviews": 10,
        "description": "Описание",
    }
    data.update(overrides)
    return Product(**data)


@pytest.fixture
def sample_products():
    """A small catalog with ties on price and rating."""
    return [
        make_product(1, name="Кровать Верона", category="Кровати", price=45000, rating=4.8,
                     images=["/uploads/a.jpg", "/uploads/b.jpg", "/uploads/c.jpg"], featured=True),
        make_product(2, name="Матрас Комфорт", category="Матрасы", price=18000, rating=4.5),
        make_product(3, name="Дверь Классика", category="Двери", price=18000, rating=4.9),
        make_product(4, name="Кровать Сочи", category="Кровати", price=32000, rating=4.5,
                     image="/uploads/sochi.jpg"),
        make_product(5, name="Раковина Лотос", category="Сантехника", price=9500, rating=4.2),
    ]


@pytest.fixture
def sample_categories():
    return [
        Category(id=1, name="Кровати", description="Кровати для номеров"),
        Category(id=2, name="Матрасы", description="Ортопедические матрасы"),
        Category(id=3, name="Двери", description="Межкомнатные двери"),
        Category(id=4, name="Сантехника", description="Раковины и смесители"),
    ]


@pytest.fixture
def sample_faqs():
    return [
        FAQ(id=3, question="Доставка?", answer="По всей России", order=2),
        FAQ(id=1, question="Гарантия?", answer="2 года", order=1),
        FAQ(id=2, question="Оплата?", answer="Безналичный расчет", order=1),
    ]


@pytest.fixture
def mock_api(sample_products, sample_categories, sample_faqs):
    """MagicMock standing in for StoreApiClient, pre-loaded with sample data."""
    client = MagicMock(spec=StoreApiClient)
    client.list_products.return_value = sample_products
    client.list_featured_products.return_value = [p for p in sample_products if p.featured]
    client.list_categories.return_value = sample_categories
    client.list_collections.return_value = [
        Collection(id=1, name="Отель у моря", description="Светлые тона", count=2),
    ]
    client.list_faqs.return_value = sample_faqs
    client.list_contacts.return_value = []
    client.list_placeholders.return_value = []
    client.check_placeholder.return_value = None
    client.get_product.side_effect = lambda pid: next(p for p in sample_products if p.id == pid)
    return client


@pytest.fixture
def sample_placeholder():
    return Placeholder(id=7, path="/sale", title="Распродажа скоро", message="Следите за новостями")


@pytest.fixture
def client(mock_api, monkeypatch):
    """Flask test client wired to the mock API."""
    from storefront.app import app

    monkeypatch.setattr("storefront.api_client._client", mock_api)
    app.config["TESTING"] = True

    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def product_factory():
    """Return the ``make_product`` builder."""
    return make_product
