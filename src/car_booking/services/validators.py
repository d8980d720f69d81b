"""
Payload models for admin writes.

Admin mutations pass through here before reaching storage; the pricing
engine itself assumes validated input. The API declares these models as
request bodies, the Streamlit screens go through the parse_* helpers.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..engine.models import CarCategory, RuleScope, RuleType
from ..engine.pricing_engine import round_half_up


# Upper bounds keep every estimate a finite, printable amount
MAX_PRICE = 10_000_000
MAX_RULE_VALUE = 100.0

FIELD_MESSAGES = {
    'id': "Invalid id",
    'name': "Name is required",
    'category': "Invalid category",
    'base_price': "base_price must be a non-negative number",
    'per_km': "per_km must be a non-negative number",
    'image_url': "image_url must be a string",
    'rule_name': "rule_name is required",
    'type': "Invalid type",
    'scope': "Invalid scope",
    'value': "value must be a number",
    'active': "active must be true or false",
}


class ValidationError(ValueError):
    """Raised when an admin payload is malformed."""


def _reject_bool(value: Any, info: ValidationInfo) -> Any:
    # JSON true/false would otherwise coerce to 1.0/0.0
    if isinstance(value, bool):
        raise ValueError(FIELD_MESSAGES[info.field_name])
    return value


def _required_text(value: str, info: ValidationInfo) -> str:
    value = value.strip()
    if not value:
        raise ValueError(FIELD_MESSAGES[info.field_name])
    return value


class CarPayload(BaseModel):
    """Request model for creating or replacing a car."""
    model_config = ConfigDict(allow_inf_nan=False)

    id: Optional[str] = None
    name: str
    category: CarCategory = 'sedan'
    base_price: float
    per_km: float = 0
    image_url: Optional[str] = None
    active: bool = True

    @field_validator('category', mode='before')
    @classmethod
    def default_category(cls, value):
        return value or 'sedan'

    @field_validator('per_km', mode='before')
    @classmethod
    def missing_rate_is_zero(cls, value):
        return 0 if value is None else value

    @field_validator('base_price', 'per_km', mode='before')
    @classmethod
    def prices_are_numbers(cls, value, info: ValidationInfo):
        return _reject_bool(value, info)

    @field_validator('base_price', 'per_km')
    @classmethod
    def prices_in_range(cls, value: float, info: ValidationInfo) -> float:
        if value < 0:
            raise ValueError(FIELD_MESSAGES[info.field_name])
        if value > MAX_PRICE:
            raise ValueError(f"{info.field_name} must not exceed {MAX_PRICE}")
        return value

    @field_validator('name')
    @classmethod
    def name_required(cls, value: str, info: ValidationInfo) -> str:
        return _required_text(value, info)

    @field_validator('id', 'image_url')
    @classmethod
    def blank_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    def to_record(self) -> dict:
        """Normalized fields for storage; prices rounded to whole rupees."""
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'base_price': round_half_up(self.base_price),
            'per_km': round_half_up(self.per_km),
            'image_url': self.image_url,
            'active': self.active,
        }


class PriceRulePayload(BaseModel):
    """
    Request model for creating or replacing a price rule.

    Discount and surcharge values may carry either sign; only
    multipliers are constrained (must be > 0).
    """
    model_config = ConfigDict(allow_inf_nan=False)

    id: Optional[str] = None
    rule_name: str
    type: RuleType
    scope: RuleScope
    value: float
    active: bool = True

    @field_validator('value', mode='before')
    @classmethod
    def value_is_number(cls, value, info: ValidationInfo):
        return _reject_bool(value, info)

    @field_validator('value')
    @classmethod
    def value_in_range(cls, value: float) -> float:
        if abs(value) > MAX_RULE_VALUE:
            raise ValueError(f"value must be between -{MAX_RULE_VALUE:g} and {MAX_RULE_VALUE:g}")
        return value

    @field_validator('rule_name')
    @classmethod
    def rule_name_required(cls, value: str, info: ValidationInfo) -> str:
        return _required_text(value, info)

    @field_validator('id')
    @classmethod
    def blank_id_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @model_validator(mode='after')
    def multiplier_is_positive(self) -> 'PriceRulePayload':
        if self.type == 'multiplier' and self.value <= 0:
            raise ValueError("Multiplier must be greater than zero")
        return self

    def to_record(self) -> dict:
        return self.model_dump()


def error_message(exc: PydanticValidationError) -> str:
    """One readable message for the first problem in a payload."""
    error = exc.errors()[0]
    if error['type'] == 'value_error':
        return str(error['ctx']['error'])
    loc = error.get('loc') or ('',)
    return FIELD_MESSAGES.get(loc[0], "Invalid payload")


def parse_car_payload(body: Any) -> dict:
    """
    Validate and normalize a car create/update payload.

    Prices are rounded to whole rupees.
    """
    try:
        return CarPayload.model_validate(body).to_record()
    except PydanticValidationError as e:
        raise ValidationError(error_message(e)) from e


def parse_price_rule_payload(body: Any) -> dict:
    """Validate and normalize a price rule create/update payload."""
    try:
        return PriceRulePayload.model_validate(body).to_record()
    except PydanticValidationError as e:
        raise ValidationError(error_message(e)) from e
