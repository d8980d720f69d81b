"""Engine subpackage - core price estimation logic."""
from .pricing_engine import estimate, format_currency
from .models import Car, PriceRule, PriceAdjustment, PriceEstimate
from .rule_matcher import RuleMatcher, APPLY_CUSTOM_RULES, is_weekend

__all__ = [
    'estimate', 'format_currency',
    'Car', 'PriceRule', 'PriceAdjustment', 'PriceEstimate',
    'RuleMatcher', 'APPLY_CUSTOM_RULES', 'is_weekend',
]
