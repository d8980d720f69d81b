"""
Streamlit UI for the wedding car booking site.

Features:
- Booking form with live price estimate
- WhatsApp share link for the booking request
- Admin tabs for the car inventory and price rules
"""
import streamlit as st
import pandas as pd
from datetime import datetime, timezone

from car_booking.config.settings import get_settings
from car_booking.engine import estimate, format_currency
from car_booking.policy.scope_resolver import ScopeResolver
from car_booking.services.cars_service import CarsService
from car_booking.services.rules_service import RulesService
from car_booking.services.validators import parse_car_payload, parse_price_rule_payload
from car_booking.booking.state import BookingState, update_booking
from car_booking.booking.message import booking_total, compose_booking_message, decoration_cost, whatsapp_link
from car_booking.engine.models import CAR_CATEGORIES, RULE_TYPES, RULE_SCOPES


st.set_page_config(
    page_title="Valley Wedding Cars",
    layout="wide",
)


@st.cache_resource
def get_services():
    """Get cached service instances."""
    settings = get_settings()
    return settings, CarsService(settings.cars_csv), RulesService(settings.rules_csv)


try:
    settings, cars_service, rules_service = get_services()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()

scope_resolver = ScopeResolver(settings.service_area_pins)

if 'booking' not in st.session_state:
    st.session_state.booking = BookingState()


def set_field(name: str, value, cars: dict = None):
    st.session_state.booking = update_booking(st.session_state.booking, name, value, cars)


st.title("Valley Wedding Cars")
st.caption(f"Booking & Estimates | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3 = st.tabs(["🚗 Book a Car", "🛠️ Cars", "🔧 Price Rules"])


# ============================================================================
# TAB 1: BOOKING FORM
# ============================================================================
with tab1:
    active_cars = cars_service.list_cars(include_inactive=False)
    car_lookup = {c.id: c.name for c in active_cars}

    col1, col2 = st.columns([1.6, 1.4], gap="large")

    with col1:
        if not active_cars:
            st.warning("No cars available right now.")
        else:
            car_id = st.selectbox(
                "Vehicle",
                options=list(car_lookup),
                format_func=lambda cid: car_lookup[cid],
            )
            set_field('car_id', car_id, car_lookup)

        c1, c2 = st.columns(2)
        with c1:
            set_field('enquiry_type', st.selectbox("Enquiry Type", ["", "Wedding", "Reception", "Other"]))
            set_field('start_location', st.text_input("Start Location (with PIN)"))
            event_date = st.date_input("Event Date", value=None)
            set_field('event_date', event_date.isoformat() if event_date else '')
        with c2:
            set_field('service_type', st.selectbox("Service Type", ["", "Pickup & Drop", "Full Day"]))
            set_field('end_location', st.text_input("End Location (with PIN)"))
            set_field('kms', st.number_input("Estimated Distance (km)", min_value=0.0, value=0.0, step=5.0))
            event_time = st.time_input("Event Time", value=None)
            set_field('event_time', event_time.strftime('%H:%M') if event_time else '')

        set_field('want_decoration', st.radio("Decoration", ["No", "Yes"], horizontal=True))
        if st.session_state.booking.want_decoration == 'Yes':
            set_field('decoration_type', st.radio("Decoration Type", ["Artificial", "Fresh"], horizontal=True))

        set_field('want_name_plate', st.radio("Name Plate", ["No", "Yes"], horizontal=True))
        if st.session_state.booking.want_name_plate == 'Yes':
            set_field('name_plate_details', st.text_input("Name Plate Details"))

        set_field('driving_option', st.radio(
            "Driving Option", ["WITH_DRIVER", "SELF_DRIVE"],
            format_func=lambda v: "With Driver" if v == "WITH_DRIVER" else "Self Drive",
            horizontal=True,
        ))

        st.markdown("##### Contact")
        set_field('full_name', st.text_input("Full Name"))
        set_field('phone', st.text_input("Phone (10 digits)"))
        set_field('email', st.text_input("Email"))
        set_field('special_requests', st.text_area("Special Requests", height=80))

    with col2:
        st.subheader("Price Estimate")
        booking = st.session_state.booking

        with st.container(border=True):
            car = cars_service.get_car(booking.car_id) if booking.car_id else None
            if car is None:
                st.info("Select a vehicle to see the estimate.")
                result = None
            else:
                scope = scope_resolver.resolve_scope(booking.start_location, booking.end_location)
                when = datetime.now(timezone.utc)
                if booking.event_date:
                    when = datetime.fromisoformat(booking.event_date)

                result = estimate(
                    base=car.base_price,
                    per_km=car.per_km,
                    kms=booking.kms,
                    rules=rules_service.list_rules(include_inactive=False),
                    when=when,
                    scope=scope,
                    apply_custom=settings.apply_custom_rules,
                )
                decoration = decoration_cost(booking)

                st.caption(f"Trip scope: **{scope}**")
                rows = [
                    {'Item': 'Base Fare', 'Amount': format_currency(result.base)},
                    {'Item': 'Distance', 'Amount': format_currency(result.per_km_component)},
                ]
                for a in result.adjustments:
                    sign = '+' if a.delta >= 0 else ''
                    rows.append({'Item': a.rule_name, 'Amount': f"{sign}{format_currency(a.delta)}"})
                if decoration:
                    rows.append({'Item': 'Decoration Add-on', 'Amount': f"+{format_currency(decoration)}"})
                st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
                st.metric("Total", format_currency(booking_total(booking, result)))

        if result is not None:
            try:
                message = compose_booking_message(booking, result)
                st.link_button("💬 Send on WhatsApp", whatsapp_link(message, settings.whatsapp_phone),
                               use_container_width=True)
                with st.expander("Preview message"):
                    st.text(message)
            except ValueError as e:
                st.caption(str(e))


# ============================================================================
# TAB 2: CAR INVENTORY
# ============================================================================
with tab2:
    st.subheader("🛠️ Car Inventory")

    all_cars = cars_service.list_cars()
    car_names = {c.id: c.name for c in all_cars}
    cars_df = pd.DataFrame([c.to_dict() for c in all_cars])
    if cars_df.empty:
        st.info("No cars yet.")
    else:
        st.dataframe(cars_df, use_container_width=True, hide_index=True)

    editing_car = st.selectbox(
        "Edit car", [""] + list(car_names), key="car_edit",
        format_func=lambda cid: car_names[cid] if cid else "➕ New car",
    )
    car = cars_service.get_car(editing_car) if editing_car else None

    with st.form(f"car_form_{editing_car}", clear_on_submit=car is None):
        st.markdown(f"##### {'✏️ Update Car' if car else '➕ Add Car'}")
        c1, c2, c3 = st.columns(3)
        name = c1.text_input("Name", value=car.name if car else "")
        category = c2.selectbox("Category", CAR_CATEGORIES,
                                index=CAR_CATEGORIES.index(car.category) if car else 0)
        image_url = c3.text_input("Image URL", value=(car.image_url or "") if car else "")
        base_price = c1.number_input("Base Price", min_value=0, value=car.base_price if car else 0, step=500)
        per_km = c2.number_input("Per km", min_value=0, value=car.per_km if car else 0, step=5)
        active = c3.checkbox("Active", value=car.active if car else True, key=f"car_active_{editing_car}")

        if st.form_submit_button("Update Car" if car else "Save Car", type="primary"):
            try:
                payload = parse_car_payload({
                    'name': name, 'category': category, 'base_price': base_price,
                    'per_km': per_km, 'image_url': image_url or None, 'active': active,
                })
                if car:
                    cars_service.update_car(car.id, payload)
                    st.toast(f"Updated {payload['name']}")
                else:
                    cars_service.create_car(payload)
                    st.toast("Car saved")
                st.rerun()
            except ValueError as e:
                st.error(str(e))

    if car and st.button("🗑️ Delete Car"):
        cars_service.delete_car(car.id)
        st.rerun()


# ============================================================================
# TAB 3: PRICE RULES
# ============================================================================
with tab3:
    st.subheader("🔧 Price Rules")
    st.caption("Rules apply in the order listed; percentages compound on the running total.")

    all_rules = rules_service.list_rules()
    rule_names = {r.id: r.rule_name for r in all_rules}
    rules_df = pd.DataFrame([r.to_dict() for r in all_rules])
    if rules_df.empty:
        st.info("No price rules.")
    else:
        st.dataframe(rules_df, use_container_width=True, hide_index=True)
        stats = rules_service.get_stats()
        m1, m2, m3 = st.columns(3)
        m1.metric("Rules", stats['total'])
        m2.metric("Active", stats['active'])
        m3.metric("Inactive", stats['inactive'])

    editing_rule = st.selectbox(
        "Edit rule", [""] + list(rule_names), key="rule_edit",
        format_func=lambda rid: rule_names[rid] if rid else "➕ New rule",
    )
    rule = rules_service.get_rule(editing_rule) if editing_rule else None

    with st.form(f"rule_form_{editing_rule}", clear_on_submit=rule is None):
        st.markdown(f"##### {'✏️ Update Rule' if rule else '➕ Add Rule'}")
        c1, c2 = st.columns(2)
        rule_name = c1.text_input("Rule Name", value=rule.rule_name if rule else "")
        rule_type = c2.selectbox("Type", RULE_TYPES, index=RULE_TYPES.index(rule.type) if rule else 0)
        scope = c1.selectbox("Scope", RULE_SCOPES, index=RULE_SCOPES.index(rule.scope) if rule else 0)
        value = c2.number_input("Value", value=rule.value if rule else 0.0, step=0.05, format="%.2f")
        active = st.checkbox("Active", value=rule.active if rule else True, key=f"rule_active_{editing_rule}")

        if st.form_submit_button("Update Rule" if rule else "Save Rule", type="primary"):
            try:
                payload = parse_price_rule_payload({
                    'rule_name': rule_name, 'type': rule_type, 'scope': scope,
                    'value': value, 'active': active,
                })
                if rule:
                    rules_service.update_rule(rule.id, payload)
                    st.toast(f"Updated {payload['rule_name']}")
                else:
                    rules_service.create_rule(payload)
                    st.toast("Rule saved")
                st.rerun()
            except ValueError as e:
                st.error(str(e))

    if rule and st.button("🗑️ Delete Rule"):
        rules_service.delete_rule(rule.id)
        st.rerun()
