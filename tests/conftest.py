import pytest

from car_booking.engine.models import PriceRule


@pytest.fixture
def make_rule():
    """Factory for price rules with sensible defaults."""
    counter = {'n': 0}

    def _make(type='discount', scope='srinagar', value=-0.15, active=True, rule_id=None, name=None):
        counter['n'] += 1
        rid = rule_id or f"rule-{counter['n']}"
        return PriceRule(
            id=rid,
            rule_name=name or rid,
            type=type,
            scope=scope,
            value=value,
            active=active,
        )

    return _make
