"""Health and readiness endpoints.

  /health (liveness):  the process can answer.
  /ready  (readiness): this instance can take traffic.

All state is in memory, so there is no backing service that can be down;
both probes pass whenever the process responds.  /health also reports how
many clients are registered, which is handy right after a deploy with
SEED_REDIRECT_URIS.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from codegrant.api.dependencies import get_server
from codegrant.services.authorization_server import AuthorizationServer

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(server: AuthorizationServer = Depends(get_server)) -> dict:
    return {
        "status": "ok",
        "checks": {"clients_registered": len(server.list_clients())},
    }


@router.get("/ready")
async def ready() -> Response:
    return Response(status_code=200)
