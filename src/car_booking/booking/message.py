"""
Booking summary and WhatsApp share message.
"""
from datetime import date, time
from typing import Optional
from urllib.parse import quote

from ..engine.models import PriceEstimate
from ..engine.pricing_engine import format_currency
from .state import BookingState


DECORATION_PRICING = {
    'No': 0,
    'Artificial': 0,
    'Fresh': 7000,
}

BUSINESS_NAME = "Valley Wedding Cars"


def decoration_cost(state: BookingState) -> int:
    """Add-on charged on top of the estimate for the chosen decoration."""
    if state.want_decoration != 'Yes':
        return 0
    return DECORATION_PRICING.get(state.decoration_type or 'Artificial', 0)


def booking_total(state: BookingState, estimate: PriceEstimate) -> int:
    """Estimate total plus decoration add-on."""
    return estimate.total + decoration_cost(state)


def _format_event_date(value: str) -> str:
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return value
    return f"{parsed.day} {parsed.strftime('%B %Y')}"


def _format_event_time(value: str) -> str:
    try:
        parsed = time.fromisoformat(value)
    except ValueError:
        return value
    return parsed.strftime('%I:%M %p').lower()


def compose_booking_message(state: BookingState, estimate: Optional[PriceEstimate] = None) -> str:
    """
    Build the WhatsApp booking request text.

    Raises:
        ValueError: if car, full name or phone is missing
    """
    if not state.car_name or not state.full_name or not state.phone:
        raise ValueError("Vehicle selection, name and phone number are required")

    lines = [f"*{BUSINESS_NAME} - Booking Request*", ""]

    lines.append("*Customer Details:*")
    lines.append(f"Name: {state.full_name}")
    lines.append(f"Phone: {state.phone}")
    if state.email:
        lines.append(f"Email: {state.email}")

    lines.append("")
    lines.append("*Booking Details:*")
    lines.append(f"Enquiry Type: {state.enquiry_type or 'Not specified'}")
    lines.append(f"Service Type: {state.service_type or 'Not specified'}")
    lines.append(f"Vehicle: {state.car_name}")
    if state.want_decoration == 'Yes':
        lines.append(f"Decoration: {state.decoration_type or 'Artificial'}")
    if state.want_name_plate == 'Yes' and state.name_plate_details:
        lines.append(f"Name Plate: {state.name_plate_details}")
    if state.start_location:
        lines.append(f"Start Location: {state.start_location}")
    if state.end_location:
        lines.append(f"End Location: {state.end_location}")
    if state.kms:
        lines.append(f"Estimated Distance: {state.kms:g} km")
    if state.event_date:
        lines.append(f"Event Date: {_format_event_date(state.event_date)}")
    if state.event_time:
        lines.append(f"Event Time: {_format_event_time(state.event_time)}")
    if state.driving_option:
        driving = 'With Driver' if state.driving_option == 'WITH_DRIVER' else 'Self Drive'
        lines.append(f"Driving Option: {driving}")

    if estimate is not None:
        decoration = decoration_cost(state)
        lines.append("")
        lines.append("*Price Estimate:*")
        lines.append(f"Base Fare: {format_currency(estimate.base)}")
        lines.append(f"Distance Component: {format_currency(estimate.per_km_component)}")
        for adjustment in estimate.adjustments:
            sign = '+' if adjustment.delta >= 0 else ''
            lines.append(f"{adjustment.rule_name}: {sign}{format_currency(adjustment.delta)}")
        if decoration > 0:
            lines.append(f"Decoration Add-on: +{format_currency(decoration)}")
        lines.append(f"Total Estimate: *{format_currency(booking_total(state, estimate))}*")

    if state.special_requests:
        lines.append("")
        lines.append(f"Special Requests: {state.special_requests}")

    return "\n".join(lines) + "\n"


def whatsapp_link(message: str, phone: str = '') -> str:
    """wa.me deep link carrying the message."""
    return f"https://wa.me/{phone}?text={quote(message, safe='')}"
