"""
Pricing Engine - Estimates a trip price from a car's fare and price rules.

Resolution order:
1. Distance component = per_km x kms (both floored at zero)
2. Running total = base (floored at zero) + distance component
3. Each applicable rule, in supplied order, adjusts the running total
4. Total = running total floored at zero, rounded half-up to whole rupees

The engine is pure: no storage, no network, no shared state.
"""
import logging
import math
from datetime import date
from typing import Iterable, Optional

from .models import PriceRule, PriceAdjustment, PriceEstimate
from .rule_matcher import RuleMatcher, APPLY_CUSTOM_RULES, is_weekend


logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def estimate(
    base: float,
    per_km: float,
    kms: float,
    rules: Iterable[PriceRule],
    when: date,
    scope: str,
    apply_custom: Optional[bool] = None,
) -> PriceEstimate:
    """
    Estimate a trip price with an itemized breakdown.

    Args:
        base: Car base fare
        per_km: Rate per kilometre
        kms: Trip distance
        rules: Price rules, applied in the order given
        when: Trip date; only its UTC weekday is used
        scope: Trip scope, 'srinagar' or 'outside_srinagar'
        apply_custom: Override for the 'custom' scope policy

    Returns:
        PriceEstimate whose adjustments reconcile to the total

    Raises:
        ValueError: if base plus distance is not a finite amount
    """
    matcher = RuleMatcher(APPLY_CUSTOM_RULES if apply_custom is None else apply_custom)
    weekend = is_weekend(when)

    per_km_component = max(per_km, 0) * max(kms, 0)
    running_total = max(base, 0) + per_km_component
    if not math.isfinite(running_total):
        raise ValueError(f"Trip amount {running_total} is not a finite number")
    adjustments = []

    for rule in rules:
        reason = matcher.match_reason(rule, scope, weekend)
        if reason is None:
            logger.debug("Rule %s (%s) not applicable", rule.id, rule.scope)
            continue

        applied = matcher.apply_rule_to_total(rule, running_total)
        if applied is None:
            continue

        running_total, delta = applied
        adjustments.append(PriceAdjustment(rule_id=rule.id, rule_name=rule.rule_name, delta=delta))
        logger.debug("Rule %s applied (%s): delta %.2f -> %.2f", rule.id, reason, delta, running_total)

    return PriceEstimate(
        base=max(base, 0),
        per_km_component=per_km_component,
        adjustments=adjustments,
        total=round_half_up(max(0, running_total)),
    )


def format_currency(value: float) -> str:
    """
    Format an amount in rupees with Indian digit grouping.

    12345678 -> '₹1,23,45,678'; fractions are rounded away.
    """
    amount = round_half_up(abs(value))
    sign = "-" if value < 0 and amount else ""

    digits = str(amount)
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])

    return f"{sign}₹{digits}"
