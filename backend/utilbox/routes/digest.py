"""
Utilbox Backend: Digest Route Handler
======================================

What:  POST /api/hash, returns the SHA-256 hex digest of `message`.
When:  Clients use it to fingerprint text or compare two values without
       sending them side by side. It is not a password hashing endpoint.
"""

import logging

from fastapi import APIRouter

from utilbox.schemas.api import ErrorResponse, HashRequest, HashResponse
from utilbox.services.hash_service import hash_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Hash"])


@router.post(
    "/hash",
    response_model=HashResponse,
    responses={
        200: {"description": "Digest computed", "model": HashResponse},
        400: {"description": "Message missing or empty", "model": ErrorResponse},
    },
    summary="Compute a SHA-256 digest",
    description=(
        "Hashes the UTF-8 bytes of `message` with SHA-256 and returns the "
        "lowercase hexadecimal digest. Deterministic: the same message always "
        "produces the same digest."
    ),
)
async def post_hash(body: HashRequest) -> HashResponse:
    return hash_service.digest(body.message)
