"""Browse routes for Sakuin.

Serves the data directory: directories render as an HTML index with
breadcrumbs, files download as attachments, and anything else is a 404.
"""

import logging
from http import HTTPStatus

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse, Response
from jinja2 import TemplateError

from ..listing import build_breadcrumbs, build_listing
from ..models import ResolvedTarget, TargetKind, ViewModel
from ..resolver import resolve
from ..utils import display_name, path_from_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["browse"])

DIRECTORY_TEMPLATE = "index.html"
NOT_FOUND_TEMPLATE = "404.html"


def server_error() -> PlainTextResponse:
    """Generic 500; details stay in the log."""
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    return PlainTextResponse(status.phrase, status_code=status.value)


def render_not_found(request: Request, target: ResolvedTarget) -> Response:
    logger.info("404 - %s", target.display_path or "/")
    templates = request.app.state.templates
    try:
        return templates.TemplateResponse(
            request,
            NOT_FOUND_TEMPLATE,
            {},
            status_code=HTTPStatus.NOT_FOUND.value,
        )
    except TemplateError:
        logger.exception("Failed to render %s", NOT_FOUND_TEMPLATE)
        return server_error()


def render_directory(request: Request, target: ResolvedTarget) -> Response:
    """Render the directory template for a resolved directory."""
    settings = request.app.state.settings

    try:
        files = build_listing(target.path, target.display_path)
    except OSError:
        logger.exception("Failed to list %s", target.path)
        return server_error()

    view = ViewModel(
        breadcrumbs=build_breadcrumbs(target.display_path),
        files=files,
    )

    try:
        response = request.app.state.templates.TemplateResponse(
            request,
            DIRECTORY_TEMPLATE,
            {"view": view, "prefix": settings.prefix},
        )
    except TemplateError:
        logger.exception("Failed to render %s for %s", DIRECTORY_TEMPLATE, target.display_path or "/")
        return server_error()

    logger.info("200 - DIR %s", target.display_path or "/")
    return response


def render_file(request: Request, target: ResolvedTarget) -> Response:
    """Stream a resolved file as a download.

    Conditional and range requests are negotiated by FileResponse.
    """
    if not target.regular:
        logger.error("Refusing to stream %s: not a regular file", target.path)
        return server_error()

    logger.info("200 - FILE %s", target.display_path)
    return FileResponse(
        target.path,
        filename=display_name(target.name),
        content_disposition_type="attachment",
    )


def data_request_path(request: Request, request_path: str) -> str:
    """Request path below the data route, keeping on-disk bytes.

    The routed ``request_path`` has non-UTF-8 escapes replaced; the raw
    path keeps them so such files stay reachable from their links.
    """
    raw = request.scope.get("raw_path")
    if not raw:
        return request_path

    path = path_from_url(raw)
    prefix = request.app.state.settings.prefix
    if display_name(path) != request.scope["path"] or not path.startswith(prefix + "/"):
        return request_path
    return path[len(prefix):]


@router.api_route("/{request_path:path}", methods=["GET", "HEAD"], response_class=HTMLResponse)
async def browse(request: Request, request_path: str) -> Response:
    """Browse the data directory.

    For directories:
        Renders the listing page (breadcrumbs + entries), status 200

    For files:
        Streams the file with Content-Disposition: attachment

    Raises:
        404: Path not found under the data directory
        500: Filesystem or template failure (details are logged only)
    """
    settings = request.app.state.settings

    try:
        target = resolve(settings.data_dir, data_request_path(request, request_path))
    except OSError:
        logger.exception("Failed to stat %r", request_path)
        return server_error()

    if target.kind is TargetKind.MISSING:
        return render_not_found(request, target)
    if target.kind is TargetKind.DIRECTORY:
        return render_directory(request, target)
    return render_file(request, target)
