from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.application.dto.booking_email import BookingEmailRequest
from app.application.dto.contact_notification import ContactNotificationRequest
from app.application.exceptions import PayloadValidationError, UpstreamDeliveryError
from app.application.use_cases.booking_email import SendBookingEmailUseCase
from app.application.use_cases.booking_reminders import SendBookingRemindersUseCase
from app.application.use_cases.contact_notification import SendContactNotificationUseCase
from app.wiring.dependencies import (
    get_booking_reminders_use_case,
    get_send_booking_email_use_case,
    get_send_contact_notification_use_case,
)


router = APIRouter(prefix="/functions/v1")
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, PATCH, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _error(status_code: int, error: str, details: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "details": details})


async def _read_json(request: Request) -> Any:
    body = await request.body()
    return json.loads(body.decode("utf-8")) if body else None


@router.options("/{function_name:path}")
def preflight(function_name: str) -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@router.api_route("/booking-reminders", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def booking_reminders(
    uc: SendBookingRemindersUseCase = Depends(get_booking_reminders_use_case),
) -> JSONResponse:
    try:
        result = await run_in_threadpool(uc.run)
    except Exception as e:
        logger.exception("Reminder function error", extra={"error": str(e)})
        return _error(500, "Failed to process reminders", str(e))

    return JSONResponse(
        content={"success": True, "message": "Reminder check completed", "results": result.as_payload()}
    )


@router.post("/send-booking-email")
async def send_booking_email(
    request: Request,
    uc: SendBookingEmailUseCase = Depends(get_send_booking_email_use_case),
) -> JSONResponse:
    try:
        payload = await _read_json(request)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("JSON parsing error", extra={"error": str(e)})
        return _error(400, "Invalid JSON format in request body", str(e))

    try:
        email_request = BookingEmailRequest.parse(payload)
    except PayloadValidationError as e:
        return _error(400, e.error, e.details)

    try:
        response = await run_in_threadpool(uc.execute, email_request)
    except UpstreamDeliveryError as e:
        return _error(500, "Failed to send client email", str(e))
    except Exception as e:
        logger.exception("Email function error", extra={"error": str(e)})
        return _error(500, "Internal server error", str(e))

    return JSONResponse(content=response)


@router.post("/send-contact-notification")
async def send_contact_notification(
    request: Request,
    uc: SendContactNotificationUseCase = Depends(get_send_contact_notification_use_case),
) -> JSONResponse:
    try:
        payload = await _read_json(request)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("JSON parsing error", extra={"error": str(e)})
        return _error(400, "Invalid JSON format in request body", str(e))

    try:
        notification = ContactNotificationRequest.parse(payload)
    except PayloadValidationError as e:
        return _error(400, e.error, e.details)

    try:
        response = await run_in_threadpool(uc.execute, notification)
    except UpstreamDeliveryError as e:
        return _error(500, "Failed to send contact notification", str(e))
    except Exception as e:
        logger.exception("Contact notification function error", extra={"error": str(e)})
        return _error(500, "Internal server error", str(e))

    return JSONResponse(content=response)
