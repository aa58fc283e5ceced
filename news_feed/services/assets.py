"""Asset URL resolution.

Turns opaque image references minted by the content store into display URLs.
Resolution is pure string work; nothing is fetched or checked for
reachability.
"""

import re
from typing import Any, Optional
from urllib.parse import urlencode

from news_feed.config import ServerConfig
from news_feed.exceptions import InvalidAssetReference
from news_feed.logging_config import get_logger

# image-<assetId>-<width>x<height>-<format>
IMAGE_REF_PATTERN = re.compile(
    r"^image-(?P<asset_id>[A-Za-z0-9]+)-(?P<width>\d+)x(?P<height>\d+)-(?P<format>[a-z0-9]+)$"
)


def extract_ref(asset_reference: Any) -> str:
    """Pull the reference string out of any accepted poster shape.

    Accepts an image object ({"asset": {"_ref": ...}}), a bare reference
    object ({"_ref": ...}) or the reference string itself.

    Raises:
        InvalidAssetReference: If no reference string can be found
    """
    value = asset_reference
    if isinstance(value, dict) and "asset" in value:
        value = value["asset"]
    if isinstance(value, dict):
        value = value.get("_ref")

    if not isinstance(value, str) or not value:
        raise InvalidAssetReference(f"No asset reference in {asset_reference!r}")

    return value


class AssetURLResolver:
    """Resolves image references to CDN URLs for one project and dataset."""

    def __init__(
        self,
        project_id: str,
        dataset: str,
        base_url: str = "https://cdn.sanity.io",
        placeholder_url: str = "",
    ):
        self.project_id = project_id
        self.dataset = dataset
        self.base_url = base_url.rstrip("/")
        self.placeholder_url = placeholder_url

    @classmethod
    def from_config(cls, config: ServerConfig) -> "AssetURLResolver":
        return cls(
            project_id=config.project_id,
            dataset=config.dataset,
            base_url=config.asset_base_url,
            placeholder_url=config.placeholder_image_url,
        )

    def resolve(
        self,
        asset_reference: Any,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> str:
        """Resolve an asset reference to a fully-qualified URL.

        Args:
            asset_reference: Image object, reference object or reference string
            width: Optional display width in pixels
            height: Optional display height in pixels

        Returns:
            URL string

        Raises:
            InvalidAssetReference: If the reference is missing or malformed
        """
        ref = extract_ref(asset_reference)
        match = IMAGE_REF_PATTERN.match(ref)
        if match is None:
            raise InvalidAssetReference(f"Malformed image reference: {ref!r}")

        filename = "{asset_id}-{width}x{height}.{format}".format(**match.groupdict())
        url = f"{self.base_url}/images/{self.project_id}/{self.dataset}/{filename}"

        size = {}
        if width:
            size["w"] = int(width)
        if height:
            size["h"] = int(height)
        if size:
            url += "?" + urlencode(size)

        return url

    def resolve_or_placeholder(self, asset_reference: Any, **size) -> str:
        """Resolve a reference, degrading to the placeholder URL on failure."""
        try:
            return self.resolve(asset_reference, **size)
        except InvalidAssetReference as e:
            logger = get_logger(__name__)
            logger.warning(f"Using placeholder image: {e}")
            return self.placeholder_url
