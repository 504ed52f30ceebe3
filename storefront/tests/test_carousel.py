"""Test carousel index arithmetic and image URL resolution."""

import pytest

from storefront.carousel import (
    Carousel,
    clamp_index,
    next_index,
    prev_index,
    resolve_image_url,
)
from storefront.config import PLACEHOLDER_IMAGE

BACKEND = "http://api.example.com"


class TestIndexArithmetic:
    """Test next/prev wrapping."""

    @pytest.mark.parametrize("count", [1, 2, 3, 7])
    def test_next_stays_in_range(self, count):
        for index in range(count):
            assert 0 <= next_index(index, count) < count

    @pytest.mark.parametrize("count", [1, 2, 3, 7])
    def test_next_then_prev_is_identity(self, count):
        for index in range(count):
            assert prev_index(next_index(index, count), count) == index

    def test_next_wraps_from_last_to_first(self):
        assert next_index(2, 3) == 0

    def test_prev_wraps_from_first_to_last(self):
        assert prev_index(0, 3) == 2

    def test_single_image_stays_put(self):
        assert next_index(0, 1) == 0
        assert prev_index(0, 1) == 0

    def test_empty_gallery(self):
        assert next_index(0, 0) == 0
        assert prev_index(0, 0) == 0


class TestClampIndex:
    """Test parsing of the ?image= query value."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("0", 0), ("2", 2), ("3", 0), ("-1", 2), ("abc", 0), (None, 0), ("", 0)],
    )
    def test_values(self, raw, expected):
        assert clamp_index(raw, 3) == expected

    def test_empty_gallery(self):
        assert clamp_index("5", 0) == 0


class TestResolveImageUrl:
    """Test mapping API image paths to browser URLs."""

    def test_uploads_prefixed_with_backend(self):
        assert resolve_image_url("/uploads/x.jpg", BACKEND) == f"{BACKEND}/uploads/x.jpg"

    def test_trailing_slash_on_backend(self):
        assert resolve_image_url("/uploads/x.jpg", BACKEND + "/") == f"{BACKEND}/uploads/x.jpg"

    def test_absolute_url_unchanged(self):
        url = "https://cdn.example.com/x.jpg"
        assert resolve_image_url(url, BACKEND) == url

    def test_empty_gives_placeholder(self):
        assert resolve_image_url("", BACKEND) == PLACEHOLDER_IMAGE
        assert resolve_image_url(None, BACKEND) == PLACEHOLDER_IMAGE


class TestCarousel:
    """Test the template-facing Carousel object."""

    def test_for_images_resolves_and_clamps(self):
        carousel = Carousel.for_images(["/uploads/a.jpg", "/uploads/b.jpg"], "5", BACKEND)
        assert carousel.images == [f"{BACKEND}/uploads/a.jpg", f"{BACKEND}/uploads/b.jpg"]
        assert carousel.index == 1
        assert carousel.current == f"{BACKEND}/uploads/b.jpg"
        assert carousel.next_index == 0
        assert carousel.prev_index == 0

    def test_single_image_has_no_arrows(self):
        carousel = Carousel.for_images(["/uploads/a.jpg"], 0, BACKEND)
        assert not carousel.has_multiple

    def test_empty_gallery_shows_placeholder(self):
        carousel = Carousel.for_images([], "3", BACKEND)
        assert carousel.count == 0
        assert carousel.index == 0
        assert carousel.current == PLACEHOLDER_IMAGE
