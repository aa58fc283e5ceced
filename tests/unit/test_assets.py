"""Unit tests for asset URL resolution."""

import pytest

from news_feed.exceptions import InvalidAssetReference
from news_feed.services.assets import AssetURLResolver, extract_ref

REF = "image-Tb9Ew8CXIwaY6R1kjMvI0uRR-2000x3000-jpg"
URL = "https://cdn.sanity.io/images/abc123/production/Tb9Ew8CXIwaY6R1kjMvI0uRR-2000x3000.jpg"


@pytest.fixture
def resolver():
    return AssetURLResolver(
        project_id="abc123",
        dataset="production",
        placeholder_url="https://example.com/placeholder.png",
    )


class TestResolve:
    """Tests for AssetURLResolver.resolve."""

    def test_resolves_image_object(self, resolver):
        poster = {"_type": "image", "asset": {"_ref": REF, "_type": "reference"}}
        assert resolver.resolve(poster) == URL

    def test_resolves_reference_object(self, resolver):
        assert resolver.resolve({"_ref": REF}) == URL

    def test_resolves_reference_string(self, resolver):
        assert resolver.resolve(REF) == URL

    def test_is_idempotent(self, resolver):
        """Test that resolving the same reference twice gives the same URL."""
        assert resolver.resolve(REF) == resolver.resolve(REF)

    def test_png_format(self, resolver):
        url = resolver.resolve("image-abc-10x20-png")
        assert url.endswith("/abc-10x20.png")

    def test_size_parameters(self, resolver):
        url = resolver.resolve(REF, width=400)
        assert url == URL + "?w=400"

        url = resolver.resolve(REF, width=400, height=300)
        assert url == URL + "?w=400&h=300"

    def test_custom_base_url(self):
        resolver = AssetURLResolver("p1", "staging", base_url="https://images.example.com/")
        assert resolver.resolve("image-abc-1x1-gif") == "https://images.example.com/images/p1/staging/abc-1x1.gif"

    @pytest.mark.parametrize("reference", [
        None,
        "",
        {},
        {"asset": {}},
        {"asset": None},
        {"_ref": 12},
        "file-abc-pdf",
        "image-abc-jpg",
        "image-abc-12x-jpg",
    ])
    def test_rejects_malformed_references(self, resolver, reference):
        with pytest.raises(InvalidAssetReference):
            resolver.resolve(reference)


class TestResolveOrPlaceholder:
    """Tests for the degrading variant."""

    def test_valid_reference(self, resolver):
        assert resolver.resolve_or_placeholder(REF) == URL

    def test_invalid_reference_gives_placeholder(self, resolver):
        assert resolver.resolve_or_placeholder({"asset": None}) == "https://example.com/placeholder.png"

    def test_missing_poster_gives_placeholder(self, resolver):
        assert resolver.resolve_or_placeholder(None) == "https://example.com/placeholder.png"


def test_extract_ref_prefers_asset():
    assert extract_ref({"asset": {"_ref": REF}, "_ref": "other"}) == REF
