"""Test JSON-to-model conversion."""

from datetime import timezone

from storefront.models import (
    FAQ,
    Category,
    Collection,
    Contact,
    Placeholder,
    Product,
    parse_timestamp,
)


class TestProductFromDict:
    """Test Product.from_dict leniency."""

    def test_full_record(self):
        product = Product.from_dict(
            {
                "id": 4,
                "name": "Кровать",
                "category": "Кровати",
                "price": 45000,
                "rating": "4.8",
                "reviews": 12,
                "description": "d",
                "image": "/uploads/a.jpg",
                "images": ["/uploads/a.jpg", "/uploads/b.jpg"],
                "features": ["Массив"],
                "featured": True,
            }
        )
        assert product.id == 4
        assert product.price == 45000.0
        assert product.rating == 4.8
        assert product.images == ["/uploads/a.jpg", "/uploads/b.jpg"]
        assert product.featured is True

    def test_null_lists_become_empty(self):
        product = Product.from_dict({"id": 1, "name": "x", "images": None, "features": None})
        assert product.images == []
        assert product.features == []
        assert product.price == 0.0
        assert product.featured is False

    def test_gallery_prefers_images(self):
        product = Product(id=1, name="x", image="/uploads/main.jpg", images=["/uploads/a.jpg"])
        assert product.gallery == ["/uploads/a.jpg"]

    def test_gallery_falls_back_to_main_image(self):
        assert Product(id=1, name="x", image="/uploads/main.jpg").gallery == ["/uploads/main.jpg"]
        assert Product(id=1, name="x").gallery == []

    def test_category_payload_drops_id(self):
        payload = Category(id=1, name="x", icon="🛏").to_payload()
        assert "id" not in payload
        assert payload == {"name": "x", "description": "", "icon": "🛏", "href": "", "image": ""}


class TestCollectionFromDict:
    """Test Collection.from_dict."""

    def test_products_nested(self):
        collection = Collection.from_dict(
            {"id": 2, "name": "Лофт", "count": 2, "products": [{"id": 5, "name": "a"}, {"id": 7, "name": "b"}]}
        )
        assert collection.product_ids == [5, 7]
        assert collection.count == 2

    def test_list_endpoint_has_no_products(self):
        collection = Collection.from_dict({"id": 2, "name": "Лофт", "products": None})
        assert collection.products == []
        assert collection.to_payload() == {"name": "Лофт", "description": "", "image": ""}


class TestTimestamps:
    """Test RFC 3339 parsing."""

    def test_zulu_with_nanoseconds(self):
        value = parse_timestamp("2024-03-01T10:20:30.123456789Z")
        assert value.year == 2024
        assert value.microsecond == 123456
        assert value.tzinfo == timezone.utc

    def test_short_fraction_and_offset(self):
        value = parse_timestamp("2024-03-01T10:20:30.5+03:00")
        assert value.microsecond == 500000
        assert value.utcoffset().total_seconds() == 3 * 3600

    def test_invalid_or_empty(self):
        assert parse_timestamp("") is None
        assert parse_timestamp(None) is None
        assert parse_timestamp("yesterday") is None

    def test_contact_created_at(self):
        contact = Contact.from_dict(
            {"id": 1, "name": "A", "email": "a@b.c", "created_at": "2024-03-01T10:20:30Z"}
        )
        assert contact.created_at.hour == 10


class TestSmallRecords:
    """Test FAQ and Placeholder."""

    def test_faq_order_defaults_to_zero(self):
        assert FAQ.from_dict({"id": 1, "question": "Q"}).order == 0

    def test_placeholder_active_by_default(self):
        placeholder = Placeholder.from_dict({"id": 1, "path": "/sale", "title": "Скоро"})
        assert placeholder.is_active is True
        assert placeholder.to_payload() == {
            "path": "/sale",
            "title": "Скоро",
            "message": "",
            "is_active": True,
        }
