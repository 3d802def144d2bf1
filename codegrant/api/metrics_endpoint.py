"""Prometheus metrics endpoint (text exposition format, not JSON).

Besides the HTTP metrics this exposes the consent-flow counters, e.g.:

  oauth_approve_outcomes_total{outcome="access_denied"} 3.0
  oauth_approve_outcomes_total{outcome="code_issued"} 41.0
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
