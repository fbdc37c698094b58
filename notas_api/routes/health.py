"""
Notas API — Root and Health Check Routes
=========================================

What:  GET / (service banner) and GET /health (dependency probe).
Who:   Humans checking a deployment, Docker health checks, load balancers.

Status levels:
    - healthy:   Database reachable (HTTP 200)
    - unhealthy: Database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from notas_api import __version__
from notas_api.database import Store, get_store
from notas_api.exceptions import StoreError
from notas_api.schemas.records import HealthResponse, RootResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()

ENDPOINTS = ["/login", "/usuarios", "/materias", "/estudiantes", "/notas"]


@router.get("/", response_model=RootResponse, summary="Service banner")
async def root() -> RootResponse:
    return RootResponse(
        msg="API funcionando correctamente",
        timestamp=datetime.now(timezone.utc),
        endpoints=ENDPOINTS,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(store: Store = Depends(get_store)):
    """
    Probes the database with SELECT 1.

    Why lightweight: health checks run every few seconds; a real query
    against the record tables would waste pool connections.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        await store.ping()
    except (StoreError, OSError) as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(status_code=200 if overall == "healthy" else 503, content=body.model_dump())
