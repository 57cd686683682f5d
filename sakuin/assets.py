"""Bundled static assets.

The bundle is the ``web/dist`` package data directory, shipped read-only
with the package and opened once at startup.
"""

import logging
import mimetypes
from importlib import resources
from importlib.resources.abc import Traversable

from .models import Asset
from .utils import clean_request_path

logger = logging.getLogger(__name__)

ASSET_PACKAGE = "sakuin.web"
ASSET_ROOT = "dist"
NOT_FOUND_ASSET = "404.html"


class AssetStore:
    """Read-only view over the asset bundle."""

    def __init__(self, root: Traversable | None = None):
        if root is None:
            root = resources.files(ASSET_PACKAGE).joinpath(ASSET_ROOT)
        self._root = root

    def open(self, name: str) -> Asset:
        """Read an asset by its bundle-relative name.

        Raises FileNotFoundError when there is no file by that name.
        """
        node = self._root
        for part in name.split("/"):
            if part:
                node = node.joinpath(part)
        if not node.is_file():
            raise FileNotFoundError(name)

        media_type, _ = mimetypes.guess_type(node.name)
        return Asset(
            name=name,
            content=node.read_bytes(),
            media_type=media_type or "application/octet-stream",
        )


class AssetResolver:
    """Look up assets, substituting the not-found document on a miss.

    Expects the route prefix to be stripped already.
    """

    def __init__(self, store: AssetStore, not_found: str = NOT_FOUND_ASSET):
        self.store = store
        self.not_found = not_found

    def open(self, asset_path: str) -> Asset:
        name = clean_request_path(asset_path).lstrip("/")
        try:
            return self.store.open(name)
        except FileNotFoundError:
            logger.debug("Asset %r not found, serving %s", asset_path, self.not_found)
        return self.store.open(self.not_found)
