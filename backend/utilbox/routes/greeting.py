"""
Utilbox Backend: Greeting Route Handler
========================================

What:  POST /api/greeting, echoes the greeting back with a timestamp.
Why:   Lets a client confirm end to end that it can reach the server and
       that text survives the round trip unchanged.
Who:   Mounted by main.create_app(); logic lives in GreetingService.

Responses:
    200: {success, message, receivedGreeting, timestamp}
    400: greeting missing, empty, not a string or not encodable text
"""

import logging

from fastapi import APIRouter

from utilbox.schemas.api import ErrorResponse, GreetingRequest, GreetingResponse
from utilbox.services.greeting_service import greeting_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Greeting"])


@router.post(
    "/greeting",
    response_model=GreetingResponse,
    responses={
        200: {"description": "Greeting received", "model": GreetingResponse},
        400: {"description": "Greeting missing or empty", "model": ErrorResponse},
    },
    summary="Echo a greeting",
)
async def post_greeting(body: GreetingRequest) -> GreetingResponse:
    return greeting_service.receive(body.greeting)
