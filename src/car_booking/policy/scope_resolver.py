"""
Scope Resolver - Classifies a trip as inside or outside the service area.
"""
import re
from typing import Iterable, Optional

from ..config.settings import DEFAULT_SERVICE_AREA_PINS


PIN_CODE_PATTERN = re.compile(r'\b(\d{6})\b')


def extract_pin_code(location: Optional[str]) -> Optional[str]:
    """Return the last 6-digit PIN code in a free-text location."""
    if not location:
        return None
    matches = PIN_CODE_PATTERN.findall(location)
    return matches[-1] if matches else None


class ScopeResolver:
    """
    Resolves the trip scope from pickup and drop-off locations.

    Waterfall:
    1. Neither location has a PIN: 'srinagar'
    2. A location without a PIN counts as inside the service area
    3. Both inside: 'srinagar', otherwise 'outside_srinagar'
    """

    def __init__(self, service_pins: Iterable[str] = DEFAULT_SERVICE_AREA_PINS):
        self.service_pins = frozenset(service_pins)

    def resolve_scope(self, start: Optional[str], end: Optional[str]) -> str:
        start_pin = extract_pin_code(start)
        end_pin = extract_pin_code(end)

        if not start_pin and not end_pin:
            return 'srinagar'

        start_in = start_pin in self.service_pins if start_pin else True
        end_in = end_pin in self.service_pins if end_pin else True
        return 'srinagar' if start_in and end_in else 'outside_srinagar'
