"""
Utilbox Backend: Health Check Route
====================================

What:  GET /health for monitoring and load balancer health checks.
How:   Reports "ok" plus the number of credentials held in memory. The route
       is only reachable after the lifespan has loaded the store, so a
       response always means startup completed.
"""

import logging
import time

from fastapi import APIRouter, Depends

from utilbox import __version__
from utilbox.schemas.api import HealthResponse
from utilbox.services.credential_store import CredentialStore, get_credential_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads, used for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    store: CredentialStore = Depends(get_credential_store),
) -> HealthResponse:
    return HealthResponse(
        status="ok",
        users_loaded=len(store),
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
