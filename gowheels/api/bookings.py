import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from gowheels.core.logger import logger
from gowheels.models.booking import (
    BookingRequest,
    BookingResponse,
    MessageResponse,
    OutcomeStatus,
)
from gowheels.services.booking_service import BookingService

router = APIRouter()


def get_booking_service(request: Request) -> BookingService:
    return request.app.state.booking_service


def internal_error_response(request: Request, exc: Exception) -> JSONResponse:
    body = MessageResponse(message="Internal server error")
    if request.app.state.settings.show_error_detail:
        body.error = str(exc)
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


@router.post("/book")
async def book(request: Request, booking_service: BookingService = Depends(get_booking_service)):
    """
    Accepts a booking request.

    The body is read manually so that wrongly typed fields end up as a 400 with
    a readable message instead of FastAPI's 422.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.info("⚠️ Booking body is not valid JSON, treating it as empty")
        payload = {}

    outcome = await booking_service.submit(BookingRequest.from_payload(payload))

    if outcome.status == OutcomeStatus.REJECTED:
        return JSONResponse(
            status_code=400,
            content=MessageResponse(message=outcome.error.message).model_dump(exclude_none=True),
        )

    if outcome.status == OutcomeStatus.FAILED:
        return internal_error_response(request, outcome.error)

    response = BookingResponse(message="Booking confirmed", booking=outcome.booking)
    return JSONResponse(status_code=200, content=response.model_dump(mode="json"))
