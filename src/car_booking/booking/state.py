"""
Booking form state.

The form is a frozen value; every field change produces a new state
through update_booking().
"""
import math
from dataclasses import dataclass, replace
from typing import Optional


TEXT_FIELDS = (
    'enquiry_type', 'service_type', 'start_location', 'end_location',
    'event_date', 'event_time', 'full_name', 'email', 'phone',
    'special_requests',
)

DRIVING_OPTIONS = ('WITH_DRIVER', 'SELF_DRIVE')


@dataclass(frozen=True)
class BookingState:
    """Everything the customer has entered so far."""
    enquiry_type: str = ''
    service_type: str = ''
    car_id: Optional[str] = None
    car_name: Optional[str] = None
    want_decoration: str = 'No'
    decoration_type: str = ''
    want_name_plate: str = 'No'
    name_plate_details: str = ''
    start_location: str = ''
    end_location: str = ''
    kms: float = 0
    event_date: str = ''
    event_time: str = ''
    full_name: str = ''
    email: str = ''
    phone: str = ''
    special_requests: str = ''
    driving_option: str = ''


def _parse_kms(value) -> float:
    try:
        kms = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(kms):
        return 0
    return max(0, kms)


def update_booking(state: BookingState, name: str, value, cars: Optional[dict] = None) -> BookingState:
    """
    Return the state after the form field `name` changed to `value`.

    Args:
        state: Current booking state
        name: Form field name
        value: New field value
        cars: Optional {car_id: car_name} lookup used for the 'car_id' field

    Unknown fields leave the state unchanged.
    """
    if name in TEXT_FIELDS:
        return replace(state, **{name: value or ''})

    if name == 'want_decoration':
        if value == 'Yes':
            return replace(state, want_decoration='Yes',
                           decoration_type=state.decoration_type or 'Artificial')
        return replace(state, want_decoration='No', decoration_type='')

    if name == 'decoration_type':
        return replace(state, decoration_type=value or '')

    if name == 'want_name_plate':
        if value == 'Yes':
            return replace(state, want_name_plate='Yes')
        return replace(state, want_name_plate='No', name_plate_details='')

    if name == 'name_plate_details':
        return replace(state, name_plate_details=value or '')

    if name == 'car_id':
        lookup = cars or {}
        if value in lookup:
            return replace(state, car_id=value, car_name=lookup[value])
        return replace(state, car_id=None, car_name=None)

    if name == 'kms':
        return replace(state, kms=_parse_kms(value))

    if name == 'driving_option':
        return replace(state, driving_option=value if value in DRIVING_OPTIONS else '')

    return state
