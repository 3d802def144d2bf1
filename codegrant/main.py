from __future__ import annotations

import logging

from fastapi import FastAPI

from codegrant.api.clients import router as clients_router
from codegrant.api.health import router as health_router
from codegrant.api.metrics_endpoint import router as metrics_router
from codegrant.api.oauth import router as oauth_router
from codegrant.core.config import SETTINGS, Settings
from codegrant.core.logging import setup_logging
from codegrant.middleware.metrics import MetricsMiddleware
from codegrant.middleware.request_context import RequestContextMiddleware
from codegrant.services.authorization_server import AuthorizationServer
from codegrant.services.client_service import InvalidClientParameters

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)


def _seed_client(server: AuthorizationServer, settings: Settings) -> None:
    """Register one client from SEED_REDIRECT_URIS, if set."""
    if not settings.seed_redirect_uris:
        return
    try:
        client = server.register_client(
            {"redirect_uris": list(settings.seed_redirect_uris)}
        )
    except InvalidClientParameters:
        logger.exception("SEED_REDIRECT_URIS rejected")
        raise
    logger.info(
        "Seed client registered  client_id=%s redirect_uris=%s",
        client.client_id,
        ",".join(client.redirect_uris),
    )


def create_app(
    server: AuthorizationServer | None = None,
    settings: Settings = SETTINGS,
) -> FastAPI:
    """Build an app around its own AuthorizationServer.

    Each call gets independent client and pending-request state unless a
    server is passed in.
    """
    if server is None:
        server = AuthorizationServer()
        _seed_client(server, settings)

    app = FastAPI(
        title="codegrant",
        docs_url="/docs" if settings.is_dev else None,
        redoc_url="/redoc" if settings.is_dev else None,
    )
    app.state.authorization_server = server

    # Last-added runs first: RequestContext → Metrics → route handler
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(metrics_router)
    app.include_router(health_router)
    app.include_router(clients_router)
    app.include_router(oauth_router)

    return app


app = create_app()

logger.info(
    "codegrant started  env=%s log_level=%s port=%d docs=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "on" if SETTINGS.is_dev else "off",
)
