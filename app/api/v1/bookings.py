from fastapi import APIRouter, Body, Depends, HTTPException

from app.api.v1.schemas import (
    AdminNotificationResultsSchema,
    ReminderLabelSchema,
    ReminderSentSchema,
    ReminderStatusSchema,
    ReminderWindowSchema,
)
from app.application.dto.booking_email import BookingEmailRequest
from app.application.exceptions import (
    BookingNotFoundError,
    MalformedTimeError,
    PayloadValidationError,
    StoreFetchError,
    UpstreamDeliveryError,
)
from app.application.use_cases.booking_email import SendBookingEmailUseCase
from app.application.use_cases.send_reminder import SendReminderUseCase
from app.wiring.dependencies import get_send_booking_email_use_case, get_send_reminder_use_case

router = APIRouter()


@router.get("/bookings/{booking_id}/reminder", response_model=ReminderStatusSchema)
def reminder_status(
    booking_id: str,
    uc: SendReminderUseCase = Depends(get_send_reminder_use_case),
):
    try:
        status = uc.status(booking_id)
    except BookingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except MalformedTimeError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreFetchError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return ReminderStatusSchema(
        booking_id=status.booking_id,
        status=status.status,
        window=ReminderWindowSchema(
            total_hours=status.window.total_hours,
            is_within_24_hours=status.window.is_within_24_hours,
            is_within_1_hour=status.window.is_within_1_hour,
        ),
        label=ReminderLabelSchema(
            text=status.label.text, disabled=status.label.disabled, variant=status.label.variant
        ),
        time_remaining=status.time_remaining,
    )


@router.post("/bookings/{booking_id}/reminder", response_model=ReminderSentSchema)
def send_reminder(
    booking_id: str,
    uc: SendReminderUseCase = Depends(get_send_reminder_use_case),
):
    try:
        sent = uc.execute(booking_id)
    except BookingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PayloadValidationError as e:
        raise HTTPException(status_code=400, detail=e.details)
    except MalformedTimeError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreFetchError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except UpstreamDeliveryError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return ReminderSentSchema(
        booking_id=sent.booking_id,
        reminder_type=sent.reminder_type,
        hours_until_appointment=sent.hours_until_appointment,
        message=f"{sent.description} reminder email sent successfully.",
    )


@router.post("/bookings/admin-notifications", response_model=AdminNotificationResultsSchema)
def notify_admins(
    payload: dict = Body(...),
    uc: SendBookingEmailUseCase = Depends(get_send_booking_email_use_case),
):
    payload.setdefault("type", "admin-notification")
    try:
        request = BookingEmailRequest.parse(payload)
    except PayloadValidationError as e:
        raise HTTPException(status_code=400, detail=e.details)
    return AdminNotificationResultsSchema(results=uc.notify_admins(request))
