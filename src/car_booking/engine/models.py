"""
Records handled by the booking service: cars, price rules and the
itemized estimate the engine returns.

Cars and rules round-trip through CSV rows; estimates and adjustments
serialize to the JSON shape the estimate endpoint returns.
"""
from dataclasses import dataclass, field
from typing import Literal, Optional, get_args


CarCategory = Literal['sedan', 'suv', 'luxury', 'vintage', 'other']
RuleType = Literal['discount', 'surcharge', 'multiplier']
RuleScope = Literal['srinagar', 'outside_srinagar', 'weekend', 'custom']

CAR_CATEGORIES = get_args(CarCategory)
RULE_TYPES = get_args(RuleType)
RULE_SCOPES = get_args(RuleScope)
TRIP_SCOPES = ('srinagar', 'outside_srinagar')


@dataclass
class Car:
    """A rentable vehicle offering."""
    id: str
    name: str
    category: str = 'sedan'
    base_price: int = 0
    per_km: int = 0
    image_url: Optional[str] = None
    active: bool = True
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'base_price': self.base_price,
            'per_km': self.per_km,
            'image_url': self.image_url,
            'active': self.active,
            'created_at': self.created_at,
        }

    def to_csv_row(self) -> dict:
        """Convert to CSV row format."""
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'base_price': str(self.base_price),
            'per_km': str(self.per_km),
            'image_url': self.image_url or '',
            'active': 'true' if self.active else 'false',
            'created_at': self.created_at or '',
        }

    @classmethod
    def from_csv_row(cls, row: dict) -> 'Car':
        """Create Car from CSV row."""
        return cls(
            id=row.get('id', ''),
            name=row.get('name', ''),
            category=row.get('category') or 'sedan',
            base_price=int(float(row.get('base_price') or 0)),
            per_km=int(float(row.get('per_km') or 0)),
            image_url=row.get('image_url') or None,
            active=(row.get('active') or 'true').lower() == 'true',
            created_at=row.get('created_at') or None,
        )

    def to_public_dict(self) -> dict:
        """Fields echoed back alongside a price estimate."""
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'base_price': self.base_price,
            'per_km': self.per_km,
            'image_url': self.image_url,
        }


@dataclass
class PriceRule:
    """
    A pricing adjustment applied at estimate time.

    For discount/surcharge, value is a signed fraction of the running
    total (-0.15 = 15% off). For multiplier, value scales the running
    total (1.10 = +10%).
    """
    id: str
    rule_name: str
    type: str
    scope: str
    value: float
    active: bool = True
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'rule_name': self.rule_name,
            'type': self.type,
            'scope': self.scope,
            'value': self.value,
            'active': self.active,
            'created_at': self.created_at,
        }

    def to_csv_row(self) -> dict:
        """Convert to CSV row format."""
        return {
            'id': self.id,
            'rule_name': self.rule_name,
            'type': self.type,
            'scope': self.scope,
            'value': repr(float(self.value)),
            'active': 'true' if self.active else 'false',
            'created_at': self.created_at or '',
        }

    @classmethod
    def from_csv_row(cls, row: dict) -> 'PriceRule':
        """Create PriceRule from CSV row."""
        return cls(
            id=row.get('id', ''),
            rule_name=row.get('rule_name', ''),
            type=row.get('type', ''),
            scope=row.get('scope', ''),
            value=float(row.get('value') or 0),
            active=(row.get('active') or 'true').lower() == 'true',
            created_at=row.get('created_at') or None,
        )


@dataclass
class PriceAdjustment:
    """A single rule's signed contribution to the final price."""
    rule_id: str
    rule_name: str
    delta: float

    def to_dict(self) -> dict:
        return {'ruleId': self.rule_id, 'rule_name': self.rule_name, 'delta': self.delta}


@dataclass
class PriceEstimate:
    """Complete result of a price estimation."""
    base: float
    per_km_component: float
    adjustments: list[PriceAdjustment] = field(default_factory=list)
    total: int = 0

    def to_dict(self) -> dict:
        """Convert to the wire format returned by the estimate endpoint."""
        return {
            'base': self.base,
            'perKmComponent': self.per_km_component,
            'adjustments': [a.to_dict() for a in self.adjustments],
            'total': self.total,
        }
