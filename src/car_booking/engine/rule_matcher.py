"""
Rule Matcher - Decides which price rules apply to a trip and applies them.

Used by the pricing engine to layer discounts, surcharges and
multipliers on top of the base fare.
"""
import logging
import math
from datetime import date, datetime, timezone
from typing import Optional

from .models import PriceRule


logger = logging.getLogger(__name__)

# Python weekday(): Monday=0 ... Saturday=5, Sunday=6
WEEKEND_DAYS = frozenset({5, 6})

# Rules scoped 'custom' carry no geographic or calendar meaning of their own.
# True: they always apply. False: they are never auto-applied.
APPLY_CUSTOM_RULES = True


def is_weekend(when: date) -> bool:
    """True when the UTC day of `when` is a Saturday or Sunday."""
    if isinstance(when, datetime):
        if when.tzinfo is not None:
            when = when.astimezone(timezone.utc)
        return when.weekday() in WEEKEND_DAYS
    return when.weekday() in WEEKEND_DAYS


class RuleMatcher:
    """
    Matches price rules against a trip context and applies them to a
    running total.

    Applicability:
    1. Inactive rules never apply
    2. 'weekend' rules apply when the trip date is a weekend
    3. 'srinagar' / 'outside_srinagar' rules apply when they equal the trip scope
    4. 'custom' rules follow the apply_custom policy
    """

    def __init__(self, apply_custom: bool = APPLY_CUSTOM_RULES):
        self.apply_custom = apply_custom

    def match_reason(self, rule: PriceRule, scope: str, weekend: bool) -> Optional[str]:
        """
        Return why a rule applies, or None if it does not.
        """
        if not rule.active:
            return None

        if rule.scope == 'weekend':
            return "weekend" if weekend else None

        if rule.scope == 'custom':
            return "custom" if self.apply_custom else None

        if rule.scope == scope:
            return f"scope={scope}"

        return None

    def apply_rule_to_total(self, rule: PriceRule, running_total: float) -> Optional[tuple[float, float]]:
        """
        Apply a single rule to the running total.

        Returns (new_total, delta), or None when the rule must be skipped
        (non-positive multiplier, unknown type, or a total that would no
        longer be a finite amount).
        """
        if rule.type in ('discount', 'surcharge'):
            # Sign of value decides direction; type is a label only
            delta = running_total * rule.value
            new_total = running_total + delta
        elif rule.type == 'multiplier':
            if rule.value <= 0:
                logger.warning("Skipping rule %s: multiplier %s is not positive", rule.id, rule.value)
                return None
            new_total = running_total * rule.value
            delta = new_total - running_total
        else:
            logger.warning("Skipping rule %s: unknown type %r", rule.id, rule.type)
            return None

        if not math.isfinite(new_total):
            logger.warning("Skipping rule %s: total %s is not a finite amount", rule.id, new_total)
            return None

        return new_total, delta
