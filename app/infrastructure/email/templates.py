from __future__ import annotations

from datetime import date, datetime
from html import escape
from urllib.parse import quote

from app.application.utils.time_format import describe_time_remaining
from app.domain.entities.booking import Booking
from app.domain.entities.contact import ContactMessage
from app.domain.entities.studio import LocationConfig, StudioConfig

BASE_STYLES = """
    <style>
      body { font-family: 'Helvetica Neue', Arial, sans-serif; line-height: 1.6; color: #333; margin: 0; padding: 0; }
      .container { max-width: 600px; margin: 0 auto; background: #ffffff; }
      .header { background: linear-gradient(135deg, #FFD700, #FFA500); padding: 30px; text-align: center; }
      .header h1 { color: #0f0f23; margin: 0; font-size: 28px; font-weight: bold; }
      .header p { color: #0f0f23; margin: 5px 0 0 0; font-size: 16px; }
      .content { padding: 30px; }
      .card { background: #f8f9fa; border-left: 4px solid #FFD700; padding: 20px; margin: 20px 0; border-radius: 8px; }
      .detail-row { display: flex; justify-content: space-between; margin: 10px 0; padding: 8px 0; border-bottom: 1px solid #eee; }
      .detail-label { font-weight: 600; color: #666; }
      .detail-value { font-weight: 500; color: #333; }
      .highlight { color: #FFD700; font-weight: bold; }
      .footer { background: #0f0f23; color: #ffffff; padding: 20px; text-align: center; font-size: 14px; }
      .button { display: inline-block; background: #FFD700; color: #0f0f23; padding: 12px 24px; text-decoration: none; border-radius: 6px; font-weight: bold; margin: 10px 5px; }
      .urgent { background: #ff6b6b; color: white; padding: 15px; border-radius: 8px; margin: 15px 0; text-align: center; }
      .notice { background: #4CAF50; color: white; padding: 15px; border-radius: 8px; margin: 15px 0; text-align: center; }
      .location-section { background: #f0f8ff; border: 1px solid #b3d9ff; padding: 15px; border-radius: 8px; margin: 15px 0; }
      .message-content { background: #ffffff; border: 1px solid #ddd; padding: 15px; border-radius: 8px; margin: 15px 0; }
    </style>
"""


def format_long_date(value: date) -> str:
    return f"{value:%A, %B} {value.day}, {value.year}"


def format_short_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def _money(value: float) -> str:
    return f"${value:.2f}"


def _row(label: str, value: str, value_class: str = "detail-value") -> str:
    return (
        '<div class="detail-row">'
        f'<span class="detail-label">{label}:</span>'
        f'<span class="{value_class}">{value}</span>'
        "</div>"
    )


def _document(title: str, studio: StudioConfig, subtitle: str, body: str, footer_line: str) -> str:
    name = escape(studio.studio_name)
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{escape(title)}</title>\n"
        f"{BASE_STYLES}"
        "</head>\n<body>\n"
        '<div class="container">\n'
        f'<div class="header"><h1>{name}</h1><p>{escape(subtitle)}</p></div>\n'
        f'<div class="content">\n{body}\n</div>\n'
        f'<div class="footer"><p>{name} - Luxury Nail Artistry</p><p>{escape(footer_line)}</p></div>\n'
        "</div>\n</body>\n</html>\n"
    )


def render_location_section(location: LocationConfig | None) -> str:
    if location is None or not location.include_in_confirmation:
        return "<p>Studio address will be provided separately for privacy and security.</p>"

    display = escape(location.display_address or "Private Studio, Nashville TN")
    heading = '<h3 style="color: #0f0f23; margin-bottom: 15px;">Studio Location</h3>'

    if location.delivery_method == "inline":
        lines = [f"<p><strong>{display}</strong></p>"]
        if location.parking_instructions:
            lines.append(f"<p><strong>Parking:</strong> {escape(location.parking_instructions)}</p>")
        if location.access_instructions:
            lines.append(f"<p><strong>Access:</strong> {escape(location.access_instructions)}</p>")
        if location.google_maps_link:
            lines.append(
                f'<p><strong>Directions:</strong> <a href="{escape(location.google_maps_link)}" '
                'style="color: #FFD700; text-decoration: none;">Click here for Google Maps</a></p>'
            )
        return f'<div class="location-section">{heading}{"".join(lines)}</div>'

    if location.delivery_method == "separate":
        return (
            f'<div class="location-section">{heading}'
            "<p><strong>Address details will be sent separately 24 hours before your appointment</strong> "
            "for privacy and security.</p>"
            "<p>You'll receive complete directions, parking information, and access instructions "
            "closer to your appointment date.</p></div>"
        )

    if location.delivery_method == "both":
        return (
            f'<div class="location-section">{heading}'
            f"<p><strong>{display}</strong></p>"
            "<p><em>Complete address and detailed directions will be sent separately "
            "24 hours before your appointment.</em></p></div>"
        )

    return ""


def _add_on_names(booking: Booking, with_prices: bool = False) -> str:
    if with_prices:
        return ", ".join(f"{escape(a.name)} (+{_money(a.price)})" for a in booking.selected_add_ons)
    return ", ".join(escape(a.name) for a in booking.selected_add_ons)


def _appointment_card(booking: Booking, heading: str, include_date: bool = True) -> str:
    rows = [_row("Service", escape(booking.service_name))]
    if include_date:
        rows.append(_row("Date", format_long_date(booking.appointment_date)))
    rows.append(_row("Time", escape(booking.appointment_time), "detail-value highlight"))
    if booking.confirmation_number:
        rows.append(_row("Confirmation", f"#{escape(booking.confirmation_number)}"))
    rows.append(_row("Total Cost", _money(booking.total_cost), "detail-value highlight"))
    if booking.selected_add_ons:
        rows.append(_row("Add-Ons", _add_on_names(booking)))
    return f'<div class="card"><h3 style="margin-top: 0; color: #0f0f23;">{heading}</h3>{"".join(rows)}</div>'


def _checklist(booking: Booking) -> str:
    return (
        "<ul>"
        "<li>Come with clean, polish-free nails</li>"
        "<li>Arrive 5 minutes early</li>"
        f"<li>Bring payment for <strong>{_money(booking.total_cost)}</strong></li>"
        "<li>Bring inspiration photos if desired</li>"
        "</ul>"
    )


def render_confirmation(booking: Booking, studio: StudioConfig, location: LocationConfig | None) -> str:
    rows = [
        _row("Confirmation Number", f"#{escape(booking.confirmation_number)}", "detail-value highlight"),
        _row("Service", escape(booking.service_name)),
        _row("Date", format_long_date(booking.appointment_date)),
        _row("Time", escape(booking.appointment_time)),
        _row("Service Price", _money(booking.service_price)),
    ]
    if booking.selected_add_ons:
        rows.append(_row("Add-Ons", _add_on_names(booking, with_prices=True)))
        rows.append(_row("Add-Ons Total", f"+{_money(booking.add_ons_total)}"))
    rows.append(_row("Total Investment", _money(booking.total_cost), "detail-value highlight"))
    if booking.notes:
        rows.append(_row("Your Notes", escape(booking.notes)))

    body = (
        "<h2>Booking Confirmed!</h2>"
        f"<p>Dear {escape(booking.client_name)},</p>"
        f"<p>Thank you for choosing {escape(studio.studio_name)}! Your appointment has been confirmed.</p>"
        f'<div class="card"><h3 style="margin-top: 0; color: #0f0f23;">Appointment Details</h3>{"".join(rows)}</div>'
        f"{render_location_section(location)}"
        "<h3>Before Your Visit</h3>"
        "<ul>"
        "<li>Please arrive with clean, polish-free nails</li>"
        "<li>Arrive 5 minutes early for check-in</li>"
        "<li>Bring inspiration photos if you have specific designs in mind</li>"
        f"<li>Payment due at time of service: <strong>{_money(booking.total_cost)}</strong></li>"
        "<li>Please reschedule if feeling unwell (48hr notice required)</li>"
        "</ul>"
        "<p><strong>Cancellation Policy:</strong> 48-hour notice required for cancellations or changes. "
        "Same-day cancellations forfeit deposit.</p>"
        f"<p>Questions or changes: {escape(studio.studio_phone)} / {escape(studio.studio_email)}</p>"
        "<p>Looking forward to seeing you soon!</p>"
    )
    return _document(
        f"Booking Confirmation - {studio.studio_name}",
        studio,
        "Luxury Nail Artistry",
        body,
        f"Nashville, Tennessee | {studio.studio_email}",
    )


def render_reminder_24h(booking: Booking, studio: StudioConfig, location: LocationConfig | None) -> str:
    body = (
        "<h2>Your Appointment is Tomorrow!</h2>"
        f"<p>Dear {escape(booking.client_name)},</p>"
        "<p>This is a friendly reminder that your nail appointment is scheduled for tomorrow.</p>"
        f"{_appointment_card(booking, 'Tomorrow&#x27;s Appointment')}"
        f"{render_location_section(location)}"
        f"<h3>Final Reminders</h3>{_checklist(booking)}"
        f"<p>Need to reschedule? Please call or text <strong>{escape(studio.studio_phone)}</strong> immediately.</p>"
        "<p>Can't wait to see you tomorrow!</p>"
    )
    return _document(
        "Appointment Reminder - Tomorrow",
        studio,
        "Appointment Reminder",
        body,
        f"Nashville, Tennessee | {studio.studio_phone}",
    )


def render_reminder_1h(booking: Booking, studio: StudioConfig, location: LocationConfig | None) -> str:
    address = "Private Studio, Nashville TN"
    parking = ""
    if location is not None:
        address = location.full_address or location.display_address or address
        if location.parking_instructions:
            parking = f"<br><strong>Parking:</strong> {escape(location.parking_instructions)}"

    body = (
        '<div class="urgent"><h2 style="margin: 0;">Your appointment starts in 1 hour!</h2></div>'
        f"<p>Dear {escape(booking.client_name)},</p>"
        f"<p>Your nail appointment at {escape(studio.studio_name)} starts in approximately 1 hour.</p>"
        f"{_appointment_card(booking, 'Today&#x27;s Appointment', include_date=False)}"
        '<div class="location-section"><h3>Getting Here</h3>'
        f"<p><strong>{escape(studio.studio_name)}</strong><br>{escape(address)}{parking}</p></div>"
        "<h3>Contact Info</h3>"
        "<p>If you're running late or have any issues:<br>"
        f"<strong>Call/Text:</strong> {escape(studio.studio_phone)}<br>"
        f"<strong>Email:</strong> {escape(studio.studio_email)}</p>"
        "<p>See you very soon!</p>"
    )
    return _document(
        "Appointment Starting Soon",
        studio,
        "Your Appointment Starts Soon!",
        body,
        f"Nashville, Tennessee | {studio.studio_phone}",
    )


def render_reminder_custom(
    booking: Booking,
    studio: StudioConfig,
    location: LocationConfig | None,
    hours_until_appointment: float,
) -> str:
    body = (
        "<h2>Your Appointment is Coming Up!</h2>"
        f"<p>Dear {escape(booking.client_name)},</p>"
        "<p>This is a friendly reminder that your nail appointment is scheduled "
        f"{describe_time_remaining(hours_until_appointment)}.</p>"
        f"{_appointment_card(booking, 'Upcoming Appointment')}"
        f"{render_location_section(location)}"
        f"<h3>Before Your Visit</h3>{_checklist(booking)}"
        "<p><strong>Need to reschedule?</strong> Please contact me at least 48 hours in advance:</p>"
        f"<p>{escape(studio.studio_phone)}<br>{escape(studio.studio_email)}</p>"
        "<p>Looking forward to seeing you!</p>"
    )
    return _document(
        "Upcoming Appointment Reminder",
        studio,
        "Appointment Reminder",
        body,
        f"Nashville, Tennessee | {studio.studio_phone}",
    )


def render_admin_notification(booking: Booking, studio: StudioConfig) -> str:
    rows = [
        _row("Client", escape(booking.client_name), "detail-value highlight"),
        _row("Email", escape(booking.client_email)),
        _row("Phone", escape(booking.client_phone)),
        _row("Service", escape(booking.service_name)),
        _row("Date", format_long_date(booking.appointment_date)),
        _row("Time", escape(booking.appointment_time)),
        _row("Confirmation", f"#{escape(booking.confirmation_number)}"),
    ]
    if booking.selected_add_ons:
        rows.append(_row("Add-Ons", _add_on_names(booking, with_prices=True)))
    rows.append(_row("Total", _money(booking.total_cost), "detail-value highlight"))
    if booking.notes:
        rows.append(_row("Client Notes", escape(booking.notes)))

    body = (
        '<div class="notice"><h2 style="margin: 0;">New Booking Received!</h2></div>'
        f'<div class="card"><h3 style="margin-top: 0; color: #0f0f23;">Booking Details</h3>{"".join(rows)}</div>'
        "<p>Check your admin dashboard to manage this booking.</p>"
    )
    return _document(
        f"New Booking - {studio.studio_name}",
        studio,
        "New Booking Notification",
        body,
        f"{studio.studio_name} Admin System",
    )


def render_contact_notification(message: ContactMessage, studio: StudioConfig) -> str:
    received = message.created_at or ""
    try:
        parsed = datetime.fromisoformat(received.replace("Z", "+00:00"))
        received = f"{format_long_date(parsed.date())} at {parsed:%I:%M %p}".replace(" at 0", " at ")
    except ValueError:
        pass

    rows = [
        _row("Name", escape(message.full_name), "detail-value highlight"),
        _row("Email", escape(message.email)),
    ]
    if message.phone:
        rows.append(_row("Phone", escape(message.phone)))
    rows += [
        _row("Inquiry Type", escape(message.inquiry_type)),
        _row("Subject", escape(message.subject)),
        _row("Received", escape(received)),
    ]

    reply_link = (
        f"mailto:{escape(message.email)}?subject={quote('Re: ' + message.subject)}"
        f"&body={quote('Dear ' + message.first_name + ',')}"
    )
    body = (
        '<div class="notice"><h2 style="margin: 0;">New Message Received!</h2>'
        '<p style="margin: 5px 0 0 0;">A potential client has contacted you through your website</p></div>'
        f'<div class="card"><h3 style="margin-top: 0; color: #0f0f23;">Contact Details</h3>{"".join(rows)}</div>'
        "<h3>Message Content</h3>"
        f'<div class="message-content"><p style="margin: 0; white-space: pre-wrap;">{escape(message.message)}</p></div>'
        '<div style="text-align: center; margin: 30px 0;">'
        f'<a href="{reply_link}" class="button">Reply to {escape(message.first_name)}</a>'
        f'<a href="tel:{escape(message.phone or "")}" class="button">Call {escape(message.phone or "Client")}</a>'
        "</div>"
        "<p><strong>Response Time Goal:</strong> Aim to respond within 24 hours for the best client experience.</p>"
    )
    return _document(
        f"New Contact Message - {studio.studio_name}",
        studio,
        f"{studio.studio_name} Admin",
        body,
        "This is an automated notification from your website contact form",
    )
