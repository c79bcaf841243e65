"""
Utilbox Backend: Pydantic Request/Response Schemas
===================================================

What:  Pydantic models defining the API contract of every endpoint.
How:   FastAPI parses request bodies into the request models, serializes the
       response models, and generates the OpenAPI docs from both.
When:  Parsed on every request (input) and serialized on every response (output).

Naming:
    Python attributes are snake_case; the wire format is camelCase
    (`receivedGreeting`, `firstNumber`, `usersLoaded`). The alias generator
    handles the mapping and FastAPI serializes responses by alias.

Request models are deliberately loose: presence, emptiness and numeric
parsing are checked by the services, in a fixed order, so every failure maps
to a 400 envelope with a specific message instead of a generic schema error.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


def utc_timestamp() -> str:
    """UTC ISO 8601 with millisecond precision, e.g. 2026-10-19T12:00:00.123Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


# ══════════════════════════════════════════════════════════════════════════
# Request Models: What clients POST
# ══════════════════════════════════════════════════════════════════════════


class RequestModel(CamelModel):
    """
    What:  Base for every request body.
    Why:   The JSON parser accepts lone surrogate escapes ("\\ud800") and
           turns them into Python strings that cannot be encoded as UTF-8.
           Hashing or echoing such a value would fail deep inside a service
           or the response serializer and surface as a 500; rejecting it here
           makes it a 400 "Invalid request body" like any other bad input.
    How:   A wildcard validator runs after field parsing on every field of
           every subclass, including the `Any`-typed calculator fields.
    """

    @field_validator("*", mode="after")
    @classmethod
    def reject_unencodable_strings(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                value.encode("utf-8")
            except UnicodeEncodeError as e:
                raise ValueError("string is not valid UTF-8 text") from e
        return value


class GreetingRequest(RequestModel):
    # Typed str: a number or object is a 400, not an echo of non-text
    greeting: Optional[str] = Field(default=None, description="Greeting to echo back")


class LoginRequest(RequestModel):
    username: Optional[str] = Field(default=None, description="Account username")
    password: Optional[str] = Field(default=None, description="Account password (never echoed)")


class HashRequest(RequestModel):
    message: Optional[str] = Field(default=None, description="Text to digest")


class CalculationRequest(RequestModel):
    """
    What:  Operands and operator for the four-function calculator.

    Operands accept JSON numbers or numeric strings ("12.5"), so they are
    typed `Any` here and parsed by CalculatorService. Absent and null both
    arrive as None; the number 0 is a legitimate operand.
    """
    first_number: Any = Field(default=None, description="Left operand (number or numeric string)")
    operator: Any = Field(default=None, description="One of +, -, *, /")
    second_number: Any = Field(default=None, description="Right operand (number or numeric string)")


# ══════════════════════════════════════════════════════════════════════════
# Response Models: The success envelope
# ══════════════════════════════════════════════════════════════════════════


class Envelope(CamelModel):
    """
    What:  Fields shared by every successful response.

    `success` and `message` are also present on every error response
    (see ErrorResponse), so clients parse both with one code path.
    """
    success: bool = Field(default=True, description="Whether the operation succeeded")
    message: str = Field(description="Human-readable outcome")
    timestamp: str = Field(
        default_factory=utc_timestamp,
        description="Server time the response was produced (UTC ISO 8601)",
    )


class GreetingResponse(Envelope):
    received_greeting: str = Field(description="The greeting exactly as received")


class LoginResponse(Envelope):
    username: str = Field(description="The authenticated username")


class HashResponse(Envelope):
    original_message: str = Field(description="The message that was digested")
    hash: str = Field(description="Lowercase hexadecimal digest")
    algorithm: str = Field(description="Digest algorithm name")


class CalculationResponse(Envelope):
    first_number: float = Field(description="Parsed left operand")
    operator: str = Field(description="Operator applied")
    second_number: float = Field(description="Parsed right operand")
    result: float = Field(description="Double-precision result")


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(CamelModel):
    """
    What:  Error envelope returned by every global exception handler.

    Example:
        {
            "success": false,
            "message": "Invalid numbers provided",
            "error": "validation_error",
            "requestId": "1f2e3d4c"
        }
    """
    success: bool = Field(default=False)
    message: str = Field(description="Human-readable error description")
    error: str = Field(description="Machine-readable error code")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(CamelModel):
    status: str = Field(description="Always 'ok' once startup has completed")
    timestamp: str = Field(default_factory=utc_timestamp)
    users_loaded: int = Field(description="Number of credential entries held in memory")
    version: str = Field(description="Application version")
    uptime_seconds: float = Field(description="Seconds since the application started")
