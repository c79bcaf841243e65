"""
Utilbox Backend: Digest Service
================================

What:  Computes the SHA-256 digest of a message.
How:   hashlib over the UTF-8 encoding of the message, rendered as lowercase
       hex. No salt, no truncation: a plain digest utility, not a password hash.
Who:   Called by POST /api/hash.
"""

import hashlib
import logging
from typing import Optional

from utilbox.exceptions import ValidationError
from utilbox.schemas.api import HashResponse

logger = logging.getLogger(__name__)

ALGORITHM = "SHA-256"


def sha256_hex(message: str) -> str:
    """Lowercase hex SHA-256 of the UTF-8 bytes of `message`."""
    return hashlib.sha256(message.encode("utf-8")).hexdigest()


class HashService:

    def digest(self, message: Optional[str]) -> HashResponse:
        """
        Hash a non-empty message.

        Raises:
            ValidationError if the message is missing or empty.
        """
        if not message:
            raise ValidationError(message="Message is required", field="message")

        digest = sha256_hex(message)
        # Length only: the message itself may be sensitive
        logger.debug("Computed %s digest for %d-char message", ALGORITHM, len(message))

        return HashResponse(
            message="Hash generated successfully",
            original_message=message,
            hash=digest,
            algorithm=ALGORITHM,
        )


hash_service = HashService()
