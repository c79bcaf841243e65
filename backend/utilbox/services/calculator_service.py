"""
Utilbox Backend: Calculator Service
====================================

What:  Four-function arithmetic on two operands.
Why:   Clients send operands as JSON numbers or as strings straight from a
       form field; both must give the same result and the same errors.
Who:   Called by POST /api/calculate.

Validation order (each step only runs if the previous one passed):
    1. Presence:   both operands not None, operator a non-empty string
    2. Parsing:    both operands are finite decimal numbers
    3. Operator:   one of + - * /
    4. Division:   second operand is not zero when operator is /

Presence is tested with `is None`, so 0 and 0.0 are valid operands.
Arithmetic is plain IEEE-754 double precision; there is no rounding policy.
"""

import logging
import math
import operator as op
import re
from typing import Any, Callable, Dict

from utilbox.exceptions import ValidationError
from utilbox.schemas.api import CalculationResponse

logger = logging.getLogger(__name__)

OPERATIONS: Dict[str, Callable[[float, float], float]] = {
    "+": op.add,
    "-": op.sub,
    "*": op.mul,
    "/": op.truediv,
}

# Plain decimal notation with optional exponent: "12", "-3.5", ".5", "1e3"
NUMERIC_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def parse_operand(value: Any) -> float:
    """
    Convert a JSON number or numeric string to a finite float.

    Raises:
        ValueError for booleans, non-numeric strings, NaN/Infinity and any
        other JSON type; OverflowError for integers too large for a double.
    """
    if isinstance(value, bool):
        raise ValueError("booleans are not numbers")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not NUMERIC_RE.match(text):
            raise ValueError(f"not a decimal number: {value!r}")
        number = float(text)
    else:
        raise ValueError(f"unsupported operand type: {type(value).__name__}")

    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    return number


class CalculatorService:
    """Stateless; one shared instance serves every request."""

    def calculate(self, first_number: Any, operator: Any, second_number: Any) -> CalculationResponse:
        """
        Validate the request and evaluate `first_number operator second_number`.

        Raises:
            ValidationError with one of:
                "firstNumber, operator, and secondNumber are required"
                "Invalid numbers provided"
                "Invalid operator. Valid operators are: +, -, *, /"
                "Cannot divide by zero"
        """
        # ── Step 1: Presence ──────────────────────────────────────────────
        if (
            first_number is None
            or second_number is None
            or not isinstance(operator, str)
            or not operator
        ):
            raise ValidationError(
                message="firstNumber, operator, and secondNumber are required",
            )

        # ── Step 2: Numeric parsing ───────────────────────────────────────
        try:
            left = parse_operand(first_number)
            right = parse_operand(second_number)
        except (ValueError, OverflowError) as e:
            raise ValidationError(
                message="Invalid numbers provided",
                context={"reason": str(e)},
            ) from e

        # ── Step 3: Operator ──────────────────────────────────────────────
        operation = OPERATIONS.get(operator)
        if operation is None:
            raise ValidationError(
                message=f"Invalid operator. Valid operators are: {', '.join(OPERATIONS)}",
                field="operator",
                context={"operator": operator},
            )

        # ── Step 4: Division by zero ──────────────────────────────────────
        if operator == "/" and right == 0:
            raise ValidationError(message="Cannot divide by zero", field="secondNumber")

        # Overflow yields inf, serialized as JSON null
        result = operation(left, right)
        logger.debug("Calculated %r %s %r = %r", left, operator, right, result)

        return CalculationResponse(
            message="Calculation performed successfully",
            first_number=left,
            operator=operator,
            second_number=right,
            result=result,
        )


calculator_service = CalculatorService()
