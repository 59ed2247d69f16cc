from __future__ import annotations

import argparse
import logging

import uvicorn
from fastapi import FastAPI

from devsel.api import register_routes
from devsel.app.container import AppContainer, build_container
from devsel.app.settings import Settings, load_settings
from devsel.logging_setup import setup_logging, uvicorn_log_level

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, container: AppContainer | None = None) -> FastAPI:
    resolved_settings = settings or load_settings()
    resolved_container = container or build_container(resolved_settings)

    app = FastAPI(title="devsel API", version="0.1.0")
    app.state.container = resolved_container
    register_routes(app)
    logger.info("default selector backend: %s", resolved_container.default_formatter.family)
    return app


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run devsel web service")
    parser.add_argument("--host", default=None, help="Bind host. Defaults to DEVSEL_HOST or 127.0.0.1")
    parser.add_argument("--port", type=int, default=None, help="Bind port. Defaults to DEVSEL_PORT or 8686")
    parser.add_argument("--reload", action="store_true")
    return parser


def serve(
    settings: Settings,
    host: str | None = None,
    port: int | None = None,
    reload: bool = False,
    log_level: str | None = None,
) -> None:
    level = uvicorn_log_level(log_level or settings.log_level)
    # Reload re-imports the app in a child process, so uvicorn needs an import string.
    app = "devsel.app.main:create_app" if reload else create_app(settings=settings)
    uvicorn.run(
        app,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        factory=reload,
        log_level=level,
    )


def main():
    args = _build_arg_parser().parse_args()
    settings = load_settings()
    setup_logging(settings.log_level)
    serve(settings, host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
