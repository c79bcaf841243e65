"""
Utilbox Backend: Calculator Route Handler
==========================================

What:  POST /api/calculate, evaluates `firstNumber operator secondNumber`.
How:   Operands may be JSON numbers or numeric strings; every validation
       failure (missing field, invalid number, invalid operator, division by
       zero) is a 400 raised by CalculatorService.
Who:   Mounted by main.create_app().

Example:
    POST {"firstNumber": "12.5", "operator": "*", "secondNumber": 2}
    200  {"success": true, "result": 25.0, "firstNumber": 12.5, ...}
"""

import logging

from fastapi import APIRouter

from utilbox.schemas.api import CalculationRequest, CalculationResponse, ErrorResponse
from utilbox.services.calculator_service import calculator_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Calculator"])


@router.post(
    "/calculate",
    response_model=CalculationResponse,
    responses={
        200: {"description": "Calculation performed", "model": CalculationResponse},
        400: {
            "description": "Missing field, invalid number, invalid operator or division by zero",
            "model": ErrorResponse,
        },
    },
    summary="Four-function calculator",
)
async def post_calculate(body: CalculationRequest) -> CalculationResponse:
    # Raw values: presence and parsing are checked by the service, in order
    return calculator_service.calculate(
        first_number=body.first_number,
        operator=body.operator,
        second_number=body.second_number,
    )
