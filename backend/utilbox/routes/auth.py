"""
Utilbox Backend: Login Route Handler
=====================================

What:  POST /api/login, checks credentials against the loaded store.
How:   The CredentialStore snapshot built at startup is injected with
       Depends(get_credential_store); the route never touches module globals.

Responses:
    200: {success, message, username, timestamp}  (password never echoed)
    400: username or password missing
    401: "Invalid username or password" (same for unknown user and wrong password)
"""

import logging

from fastapi import APIRouter, Depends

from utilbox.schemas.api import ErrorResponse, LoginRequest, LoginResponse
from utilbox.services.auth_service import auth_service
from utilbox.services.credential_store import CredentialStore, get_credential_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        200: {"description": "Credentials accepted", "model": LoginResponse},
        400: {"description": "Username or password missing", "model": ErrorResponse},
        401: {"description": "Invalid username or password", "model": ErrorResponse},
    },
    summary="Check a username/password pair",
)
async def post_login(
    body: LoginRequest,
    store: CredentialStore = Depends(get_credential_store),
) -> LoginResponse:
    # 503 from the dependency if the store was never loaded
    return auth_service.login(store, body.username, body.password)
