"""Sakuin HTTP server - FastAPI application."""

import argparse
import logging
import time
from http import HTTPStatus
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from . import __version__
from .assets import AssetResolver, AssetStore
from .config import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_PREFIX, LOG_LEVELS, Settings, env_default
from .routes.assets import router as assets_router
from .routes.browse import router as browse_router

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "web" / "templates"


def log_request(request: Request, status_code: int, started: float):
    elapsed = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method, request.url.path, status_code, elapsed,
    )


def create_app(settings: Settings, asset_store: AssetStore | None = None) -> FastAPI:
    """Build the application for one data directory.

    Settings, templates and the asset bundle live on ``app.state`` and
    are never modified once the app is built.
    """
    app = FastAPI(
        title="Sakuin",
        description="Browsable HTTP index of a directory tree",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.settings = settings
    app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    app.state.assets = AssetResolver(asset_store or AssetStore())

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log_request(request, HTTPStatus.INTERNAL_SERVER_ERROR.value, started)
            raise
        log_request(request, response.status_code, started)
        return response

    # Assets first so the data route never shadows them
    app.include_router(assets_router)
    app.include_router(browse_router, prefix=settings.prefix)

    return app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sakuin",
        description="Expose a directory tree over HTTP as a browsable file index",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Start the HTTP server")
    serve.add_argument(
        "--dir",
        dest="data_dir",
        default=env_default("DIR"),
        help="Path to the data directory to expose (env: SAKUIN_DIR)"
    )
    serve.add_argument(
        "--host",
        default=env_default("HOST", DEFAULT_HOST),
        help=f"Address to listen on (default: {DEFAULT_HOST})"
    )
    serve.add_argument(
        "--port",
        type=int,
        default=env_default("PORT", str(DEFAULT_PORT)),
        help=f"Port to listen on (default: {DEFAULT_PORT})"
    )
    serve.add_argument(
        "--prefix",
        default=env_default("PREFIX", DEFAULT_PREFIX),
        help=f"URL prefix of the data route (default: {DEFAULT_PREFIX})"
    )
    serve.add_argument(
        "--log-level",
        type=str.upper,
        default=env_default("LOG_LEVEL", "INFO"),
        choices=LOG_LEVELS,
        help="Logging level (default: INFO)"
    )
    return parser


def load_settings(parser: argparse.ArgumentParser, args: argparse.Namespace) -> Settings:
    """Validate CLI arguments, exiting through the parser when invalid."""
    try:
        return Settings(
            data_dir=args.data_dir,
            host=args.host,
            port=args.port,
            prefix=args.prefix,
            log_level=args.log_level,
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        parser.error(problems)


def main(argv: list[str] | None = None):
    """Run the application."""
    import uvicorn

    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings(parser, args)

    logging.basicConfig(
        level=settings.logging_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = create_app(settings)

    logger.info("Sakuin will now expose %s", settings.data_dir)
    logger.info("Listening on http://%s:%d%s/", settings.host, settings.port, settings.prefix)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
