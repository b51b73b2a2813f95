"""Prometheus scrape endpoint.

Returns the text exposition format, not JSON, e.g.:

  # TYPE orders_created_total counter
  orders_created_total 12.0
  payment_verifications_total{result="failed"} 1.0

Restrict access at the ingress in production; counters reveal order
volume.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
