"""Test catalog filtering, sorting and related-product selection."""

import pytest

from storefront.catalog import (
    ALL_CATEGORIES,
    SORT_OPTIONS,
    apply_catalog_view,
    available_categories,
    filter_products,
    new_arrivals,
    related_products,
    sort_faqs,
    sort_products,
)


def ids(products):
    return [p.id for p in products]


class TestFilterProducts:
    """Test category filtering."""

    def test_all_categories_returns_everything(self, sample_products):
        assert ids(filter_products(sample_products, ALL_CATEGORIES)) == [1, 2, 3, 4, 5]

    def test_empty_category_returns_everything(self, sample_products):
        assert ids(filter_products(sample_products, "")) == [1, 2, 3, 4, 5]
        assert ids(filter_products(sample_products, None)) == [1, 2, 3, 4, 5]

    def test_filter_keeps_only_matching_category(self, sample_products):
        result = filter_products(sample_products, "Кровати")
        assert ids(result) == [1, 4]
        assert all(p.category == "Кровати" for p in result)

    def test_unknown_category_gives_empty_list(self, sample_products):
        assert filter_products(sample_products, "Люстры") == []

    def test_input_not_mutated(self, sample_products):
        before = ids(sample_products)
        filter_products(sample_products, "Кровати")
        assert ids(sample_products) == before


class TestSortProducts:
    """Test the catalog sort orders."""

    def test_price_low_is_non_decreasing(self, sample_products):
        prices = [p.price for p in sort_products(sample_products, "price-low")]
        assert prices == sorted(prices)

    def test_price_high_is_non_increasing(self, sample_products):
        prices = [p.price for p in sort_products(sample_products, "price-high")]
        assert prices == sorted(prices, reverse=True)

    def test_rating_is_non_increasing(self, sample_products):
        ratings = [p.rating for p in sort_products(sample_products, "rating")]
        assert ratings == sorted(ratings, reverse=True)

    def test_price_ties_keep_api_order(self, sample_products):
        # Products 2 and 3 share a price of 18000
        assert ids(sort_products(sample_products, "price-low")) == [5, 2, 3, 4, 1]
        assert ids(sort_products(sample_products, "price-high")) == [1, 4, 2, 3, 5]

    def test_rating_ties_keep_api_order(self, sample_products):
        # Products 2 and 4 share a rating of 4.5
        assert ids(sort_products(sample_products, "rating")) == [3, 1, 2, 4, 5]

    @pytest.mark.parametrize("sort_by", ["featured", "", None, "bogus"])
    def test_featured_and_unknown_keep_api_order(self, sample_products, sort_by):
        assert ids(sort_products(sample_products, sort_by)) == [1, 2, 3, 4, 5]

    def test_sort_options_cover_every_key(self):
        keys = [key for key, _label in SORT_OPTIONS]
        assert keys == ["featured", "price-low", "price-high", "rating"]


class TestApplyCatalogView:
    """Test filter then sort together."""

    def test_filter_then_sort(self, sample_products):
        result = apply_catalog_view(sample_products, "Кровати", "price-low")
        assert ids(result) == [4, 1]

    def test_result_is_subset_of_input(self, sample_products):
        result = apply_catalog_view(sample_products, "Матрасы", "rating")
        assert set(ids(result)) <= set(ids(sample_products))


class TestAvailableCategories:
    """Test the category list shown in the filter sidebar."""

    def test_uses_api_categories(self, sample_categories, sample_products):
        options = available_categories(sample_categories, sample_products)
        assert options == [ALL_CATEGORIES, "Кровати", "Матрасы", "Двери", "Сантехника"]

    def test_falls_back_to_product_categories(self, sample_products):
        options = available_categories([], sample_products)
        assert options == [ALL_CATEGORIES, "Кровати", "Матрасы", "Двери", "Сантехника"]

    def test_no_data_gives_only_all(self):
        assert available_categories([], []) == [ALL_CATEGORIES]


class TestRelatedProducts:
    """Test product suggestions."""

    def test_same_category_excluding_self(self, sample_products):
        product = sample_products[0]
        assert ids(related_products(sample_products, product)) == [4]

    def test_falls_back_to_other_products(self, sample_products):
        product = sample_products[1]  # only mattress in the catalog
        assert ids(related_products(sample_products, product)) == [1, 3, 4]

    def test_limit_respected(self, sample_products):
        product = sample_products[4]
        assert len(related_products(sample_products, product, limit=2)) == 2


class TestNewArrivals:
    """Test the new-arrivals selection."""

    def test_newest_first(self, sample_products):
        assert ids(new_arrivals(sample_products)) == [5, 4, 3, 2, 1]

    def test_limit(self, sample_products):
        assert ids(new_arrivals(sample_products, limit=2)) == [5, 4]


class TestSortFaqs:
    """Test FAQ ordering."""

    def test_sorted_by_order_then_id(self, sample_faqs):
        assert [f.id for f in sort_faqs(sample_faqs)] == [1, 2, 3]
