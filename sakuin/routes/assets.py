"""Asset routes for Sakuin.

Serves the bundled CSS/JS/images. Unknown asset paths get the bundled
not-found document instead of an error.
"""

from fastapi import APIRouter, Request
from fastapi.responses import Response

router = APIRouter(prefix="/assets", tags=["assets"])


@router.api_route("/{asset_path:path}", methods=["GET", "HEAD"])
async def get_asset(request: Request, asset_path: str) -> Response:
    """Get a bundled asset.

    The /assets/ prefix is already stripped from ``asset_path``.

    Returns:
        The asset bytes, or the bundle's 404.html when the asset is missing
    """
    asset = request.app.state.assets.open(asset_path)
    return Response(content=asset.content, media_type=asset.media_type)
