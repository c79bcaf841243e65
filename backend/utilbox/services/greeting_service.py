"""
Utilbox Backend: Greeting Service
==================================

What:  Echoes a client greeting back with a server timestamp.
Who:   Called by POST /api/greeting.
When:  Every greeting request; the greeting is logged at INFO so operators
       can see traffic arriving.
"""

import logging
from typing import Optional

from utilbox.exceptions import ValidationError
from utilbox.schemas.api import GreetingResponse

logger = logging.getLogger(__name__)


class GreetingService:
    """Stateless echo of a non-empty greeting."""

    def receive(self, greeting: Optional[str]) -> GreetingResponse:
        """
        Validate and echo a greeting.

        Raises:
            ValidationError if the greeting is missing or empty.
        """
        logger.info("Received greeting: %s", greeting)

        # Empty string counts as missing
        if not greeting:
            raise ValidationError(message="Greeting is required", field="greeting")

        return GreetingResponse(
            message="Greeting received successfully",
            received_greeting=greeting,
        )


greeting_service = GreetingService()
