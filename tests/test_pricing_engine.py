from datetime import date, datetime, timezone

import pytest

from car_booking.engine import estimate, format_currency
from car_booking.engine.pricing_engine import round_half_up


TUESDAY = datetime(2024, 6, 4, 10, 0, tzinfo=timezone.utc)
SATURDAY = datetime(2024, 6, 8, 10, 0, tzinfo=timezone.utc)
SUNDAY = datetime(2024, 6, 9, 10, 0, tzinfo=timezone.utc)


def reconciled_total(result):
    return round_half_up(max(0, result.base + result.per_km_component + sum(a.delta for a in result.adjustments)))


@pytest.mark.parametrize("base,per_km,kms", [
    (0, 0, 0),
    (16000, 0, 0),
    (10000, 50, 20),
    (2500, 12, 37.5),
    (999, 7, 0.5),
])
def test_no_rules_total_is_base_plus_distance(base, per_km, kms):
    result = estimate(base, per_km, kms, [], TUESDAY, 'srinagar')
    assert result.adjustments == []
    assert result.total == round_half_up(base + per_km * kms)


def test_distance_component():
    """base=10000, perKm=50, kms=20, no rules."""
    result = estimate(10000, 50, 20, [], TUESDAY, 'srinagar')
    assert result.base == 10000
    assert result.per_km_component == 1000
    assert result.total == 11000


def test_srinagar_discount(make_rule):
    rules = [make_rule('discount', 'srinagar', -0.15, rule_id='sri')]
    result = estimate(16000, 0, 0, rules, TUESDAY, 'srinagar')

    assert result.total == 13600
    assert len(result.adjustments) == 1
    assert result.adjustments[0].rule_id == 'sri'
    assert result.adjustments[0].delta == pytest.approx(-2400)


def test_outside_surcharge(make_rule):
    rules = [make_rule('surcharge', 'outside_srinagar', 0.10)]
    result = estimate(16000, 0, 0, rules, TUESDAY, 'outside_srinagar')

    assert result.total == 17600
    assert [a.delta for a in result.adjustments] == [pytest.approx(1600)]


def test_scope_mismatch_skips_rule(make_rule):
    rules = [make_rule('discount', 'srinagar', -0.15)]
    result = estimate(16000, 0, 0, rules, TUESDAY, 'outside_srinagar')

    assert result.total == 16000
    assert result.adjustments == []


def test_chained_percentages_compound(make_rule):
    rules = [
        make_rule('discount', 'srinagar', -0.15, rule_id='d'),
        make_rule('surcharge', 'srinagar', 0.10, rule_id='s'),
    ]
    result = estimate(10000, 0, 0, rules, TUESDAY, 'srinagar')

    assert [a.rule_id for a in result.adjustments] == ['d', 's']
    assert result.adjustments[0].delta == pytest.approx(-1500)
    # 10% of the discounted 8500, not of the original 10000
    assert result.adjustments[1].delta == pytest.approx(850)
    assert result.total == 9350


def test_rule_order_changes_breakdown(make_rule):
    a = make_rule('discount', 'srinagar', -0.15, rule_id='a')
    b = make_rule('surcharge', 'srinagar', 0.10, rule_id='b')

    ab = estimate(10000, 0, 0, [a, b], TUESDAY, 'srinagar')
    ba = estimate(10000, 0, 0, [b, a], TUESDAY, 'srinagar')

    assert [x.delta for x in ab.adjustments] != [x.delta for x in ba.adjustments]
    assert ba.adjustments[0].delta == pytest.approx(1000)
    assert ba.adjustments[1].delta == pytest.approx(-1650)


def test_rule_order_changes_adjustments_with_multiplier(make_rule):
    m = make_rule('multiplier', 'srinagar', 1.5)
    d = make_rule('discount', 'srinagar', -0.15)
    md = estimate(10000, 0, 0, [m, d], TUESDAY, 'srinagar')
    dm = estimate(10000, 0, 0, [d, m], TUESDAY, 'srinagar')
    assert md.adjustments[0].delta == pytest.approx(5000)
    assert dm.adjustments[0].delta == pytest.approx(-1500)
    assert md.adjustments[1].delta == pytest.approx(-2250)
    assert dm.adjustments[1].delta == pytest.approx(4250)
    # Scaling commutes, so only the breakdown differs
    assert md.total == dm.total == 12750


def test_zero_rules_commute(make_rule):
    a = make_rule('discount', 'srinagar', 0.0)
    b = make_rule('surcharge', 'srinagar', 0.0)

    ab = estimate(10000, 0, 0, [a, b], TUESDAY, 'srinagar')
    ba = estimate(10000, 0, 0, [b, a], TUESDAY, 'srinagar')
    assert [x.delta for x in ab.adjustments] == [x.delta for x in ba.adjustments] == [0, 0]
    assert ab.total == ba.total == 10000


@pytest.mark.parametrize("value", [0, -1.5, -0.0001])
def test_non_positive_multiplier_is_skipped(make_rule, value):
    rules = [make_rule('multiplier', 'srinagar', value)]
    result = estimate(16000, 0, 0, rules, TUESDAY, 'srinagar')

    assert result.adjustments == []
    assert result.total == 16000


def test_multiplier_applies_to_running_total(make_rule):
    rules = [
        make_rule('discount', 'srinagar', -0.15),
        make_rule('multiplier', 'srinagar', 1.25),
    ]
    result = estimate(16000, 0, 0, rules, TUESDAY, 'srinagar')

    assert result.adjustments[1].delta == pytest.approx(3400)
    assert result.total == 17000


def test_unit_multiplier_recorded_with_zero_delta(make_rule):
    rules = [make_rule('multiplier', 'srinagar', 1, rule_id='noop')]
    result = estimate(16000, 0, 0, rules, TUESDAY, 'srinagar')

    assert len(result.adjustments) == 1
    assert result.adjustments[0].rule_id == 'noop'
    assert result.adjustments[0].delta == 0
    assert result.total == 16000


def test_positive_discount_increases_price(make_rule):
    """Type is a label; the signed value decides direction."""
    rules = [make_rule('discount', 'srinagar', 0.10)]
    result = estimate(10000, 0, 0, rules, TUESDAY, 'srinagar')
    assert result.total == 11000


def test_negative_surcharge_decreases_price(make_rule):
    rules = [make_rule('surcharge', 'srinagar', -0.10)]
    result = estimate(10000, 0, 0, rules, TUESDAY, 'srinagar')
    assert result.total == 9000


def test_inactive_rules_never_apply(make_rule):
    rules = [
        make_rule('discount', 'srinagar', -0.15, active=False),
        make_rule('surcharge', 'weekend', 0.20, active=False),
        make_rule('multiplier', 'custom', 2.0, active=False),
    ]
    result = estimate(16000, 0, 0, rules, SATURDAY, 'srinagar')
    assert result.adjustments == []
    assert result.total == 16000


def test_unknown_rule_type_is_skipped(make_rule):
    rules = [make_rule('fixed_amount', 'srinagar', 500)]
    result = estimate(16000, 0, 0, rules, TUESDAY, 'srinagar')
    assert result.adjustments == []
    assert result.total == 16000


@pytest.mark.parametrize("when", [SATURDAY, SUNDAY, date(2024, 6, 8)])
def test_weekend_rule_applies_on_weekend(make_rule, when):
    rules = [make_rule('surcharge', 'weekend', 0.20)]
    result = estimate(10000, 0, 0, rules, when, 'outside_srinagar')
    assert result.total == 12000


def test_weekend_rule_skipped_on_tuesday(make_rule):
    rules = [make_rule('surcharge', 'weekend', 0.20)]
    result = estimate(10000, 0, 0, rules, TUESDAY, 'srinagar')
    assert result.adjustments == []
    assert result.total == 10000


def test_weekend_uses_utc_day(make_rule):
    rules = [make_rule('surcharge', 'weekend', 0.20)]
    # Friday evening in UTC-5 is already Saturday in UTC
    friday_local = datetime.fromisoformat('2024-06-07T20:00:00-05:00')
    # Monday morning in IST is still Sunday in UTC
    monday_local = datetime.fromisoformat('2024-06-10T02:00:00+05:30')
    # Saturday early morning in IST is still Friday in UTC
    saturday_local = datetime.fromisoformat('2024-06-08T03:00:00+05:30')

    assert estimate(10000, 0, 0, rules, friday_local, 'srinagar').total == 12000
    assert estimate(10000, 0, 0, rules, monday_local, 'srinagar').total == 12000
    assert estimate(10000, 0, 0, rules, saturday_local, 'srinagar').total == 10000


def test_weekend_and_scope_rules_stack(make_rule):
    rules = [
        make_rule('discount', 'srinagar', -0.15),
        make_rule('surcharge', 'weekend', 0.10),
    ]
    result = estimate(10000, 0, 0, rules, SUNDAY, 'srinagar')
    assert len(result.adjustments) == 2
    assert result.total == 9350


def test_custom_rules_always_apply_by_default(make_rule):
    rules = [make_rule('surcharge', 'custom', 0.05)]
    result = estimate(10000, 0, 0, rules, TUESDAY, 'srinagar')
    assert len(result.adjustments) == 1
    assert result.total == 10500


def test_custom_rules_never_apply_when_disabled(make_rule):
    rules = [make_rule('surcharge', 'custom', 0.05)]
    result = estimate(10000, 0, 0, rules, TUESDAY, 'srinagar', apply_custom=False)
    assert result.adjustments == []
    assert result.total == 10000


def test_negative_inputs_are_clamped():
    result = estimate(-500, -10, 20, [], TUESDAY, 'srinagar')
    assert result.base == 0
    assert result.per_km_component == 0
    assert result.total == 0

    result = estimate(1000, 10, -20, [], TUESDAY, 'srinagar')
    assert result.per_km_component == 0
    assert result.total == 1000


def test_total_floored_at_zero(make_rule):
    rules = [make_rule('discount', 'srinagar', -1.5)]
    result = estimate(10000, 0, 0, rules, TUESDAY, 'srinagar')
    assert result.adjustments[0].delta == pytest.approx(-15000)
    assert result.total == 0
    assert reconciled_total(result) == result.total


def test_rule_overflowing_the_total_is_skipped(make_rule):
    rules = [
        make_rule('multiplier', 'srinagar', 1e308, rule_id='huge'),
        make_rule('discount', 'srinagar', -0.15, rule_id='srinagar'),
    ]
    result = estimate(16000, 0, 0, rules, TUESDAY, 'srinagar')

    assert [a.rule_id for a in result.adjustments] == ['srinagar']
    assert result.total == 13600


def test_non_finite_trip_amount_is_rejected():
    with pytest.raises(ValueError):
        estimate(1e308, 1e308, 1e308, [], TUESDAY, 'srinagar')


def test_total_rounds_half_up():
    # 2.5 km at 1/km: Math.round semantics give 3, not banker's 2
    assert estimate(0, 1, 2.5, [], TUESDAY, 'srinagar').total == 3
    assert estimate(0, 1, 3.5, [], TUESDAY, 'srinagar').total == 4
    assert estimate(0, 1, 3.4, [], TUESDAY, 'srinagar').total == 3


def test_intermediate_totals_are_not_rounded(make_rule):
    rules = [
        make_rule('discount', 'srinagar', -0.333),
        make_rule('surcharge', 'srinagar', 0.333),
    ]
    result = estimate(1001, 0, 0, rules, TUESDAY, 'srinagar')
    # 1001 * 0.667 = 667.667, then * 1.333 = 889.99...
    assert result.adjustments[0].delta == pytest.approx(-333.333)
    assert result.adjustments[1].delta == pytest.approx(667.667 * 0.333)
    assert result.total == 890


@pytest.mark.parametrize("base,per_km,kms,specs,scope,when", [
    (16000, 0, 0, [('discount', 'srinagar', -0.15)], 'srinagar', TUESDAY),
    (10000, 25, 120, [('surcharge', 'outside_srinagar', 0.1), ('multiplier', 'weekend', 1.2)], 'outside_srinagar', SATURDAY),
    (7999, 13, 17.3, [('discount', 'custom', -0.07), ('multiplier', 'srinagar', 0.9), ('surcharge', 'weekend', 0.05)], 'srinagar', SUNDAY),
    (5000, 0, 0, [('discount', 'srinagar', -3.0), ('multiplier', 'srinagar', 2.0)], 'srinagar', TUESDAY),
    (132000, 40, 250, [('multiplier', 'srinagar', -1), ('surcharge', 'outside_srinagar', 0.1)], 'srinagar', TUESDAY),
])
def test_breakdown_reconciles_to_total(make_rule, base, per_km, kms, specs, scope, when):
    rules = [make_rule(t, s, v) for t, s, v in specs]
    result = estimate(base, per_km, kms, rules, when, scope)
    assert result.total == reconciled_total(result)


def test_estimate_wire_format(make_rule):
    rules = [make_rule('discount', 'srinagar', -0.15, rule_id='sri', name='Srinagar Discount')]
    data = estimate(16000, 10, 4, rules, TUESDAY, 'srinagar').to_dict()

    assert set(data) == {'base', 'perKmComponent', 'adjustments', 'total'}
    assert data['perKmComponent'] == 40
    assert data['adjustments'][0]['ruleId'] == 'sri'
    assert data['adjustments'][0]['rule_name'] == 'Srinagar Discount'
    assert data['total'] == 13634


def test_does_not_mutate_rules(make_rule):
    rules = [make_rule('discount', 'srinagar', -0.15)]
    snapshot = [r.to_dict() for r in rules]
    estimate(16000, 0, 0, rules, TUESDAY, 'srinagar')
    estimate(16000, 0, 0, rules, TUESDAY, 'srinagar')
    assert [r.to_dict() for r in rules] == snapshot


@pytest.mark.parametrize("value,expected", [
    (0, "₹0"),
    (999, "₹999"),
    (1000, "₹1,000"),
    (13600, "₹13,600"),
    (132000, "₹1,32,000"),
    (12345678, "₹1,23,45,678"),
    (1600.4, "₹1,600"),
    (-2400, "-₹2,400"),
    (-0.2, "₹0"),
])
def test_format_currency(value, expected):
    assert format_currency(value) == expected
