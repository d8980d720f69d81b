"""
Rules Service - CRUD operations for price rules.
Handles reading/writing price_rules.csv.
"""
import logging
import uuid
from pathlib import Path
from typing import Optional

import pandas as pd

from ..engine.models import PriceRule
from .csv_store import read_rows, write_rows, utc_timestamp


logger = logging.getLogger(__name__)


class RulesService:
    """Service for managing price rules."""

    CSV_COLUMNS = ['id', 'rule_name', 'type', 'scope', 'value', 'active', 'created_at']

    def __init__(self, rules_csv_path: Path):
        self.rules_csv_path = rules_csv_path

    def list_rules(self, include_inactive: bool = True) -> list[PriceRule]:
        """
        List rules in creation order.

        This order is the order the engine compounds them in.
        """
        rules = [PriceRule.from_csv_row(row) for row in read_rows(self.rules_csv_path)]
        if not include_inactive:
            rules = [r for r in rules if r.active]
        # Stable sort keeps file order for equal timestamps
        return sorted(rules, key=lambda r: r.created_at or '')

    def get_rule(self, rule_id: str) -> Optional[PriceRule]:
        """Get a single rule by ID."""
        for rule in self.list_rules():
            if rule.id == rule_id:
                return rule
        return None

    def create_rule(self, payload: dict) -> PriceRule:
        """Create a new rule from a validated payload."""
        rule = PriceRule(
            id=payload.get('id') or uuid.uuid4().hex,
            rule_name=payload['rule_name'],
            type=payload['type'],
            scope=payload['scope'],
            value=float(payload['value']),
            active=payload.get('active', True),
            created_at=utc_timestamp(),
        )

        if self.get_rule(rule.id):
            raise ValueError(f"Rule with ID '{rule.id}' already exists")

        rules = self.list_rules()
        rules.append(rule)
        self._write_rules(rules)

        logger.info("Created price rule %s (%s, %s, %s)", rule.id, rule.type, rule.scope, rule.value)
        return rule

    def update_rule(self, rule_id: str, updates: dict) -> PriceRule:
        """Update an existing rule."""
        rules = self.list_rules()

        for i, rule in enumerate(rules):
            if rule.id == rule_id:
                for key, value in updates.items():
                    if key in ('id', 'created_at'):
                        continue
                    if hasattr(rule, key):
                        setattr(rule, key, value)
                rules[i] = rule
                break
        else:
            raise ValueError(f"Rule with ID '{rule_id}' not found")

        self._write_rules(rules)
        logger.info("Updated price rule %s", rule_id)
        return rules[i]

    def delete_rule(self, rule_id: str) -> bool:
        """Delete a rule."""
        rules = self.list_rules()
        original_count = len(rules)
        rules = [r for r in rules if r.id != rule_id]

        if len(rules) == original_count:
            raise ValueError(f"Rule with ID '{rule_id}' not found")

        self._write_rules(rules)
        logger.info("Deleted price rule %s", rule_id)
        return True

    def _write_rules(self, rules: list[PriceRule]):
        """Write rules back to CSV."""
        write_rows(self.rules_csv_path, self.CSV_COLUMNS, [r.to_csv_row() for r in rules])

    def get_stats(self) -> dict:
        """Get statistics about rules."""
        df = pd.DataFrame([r.to_dict() for r in self.list_rules()], columns=self.CSV_COLUMNS)
        active = int(df['active'].astype(bool).sum())

        return {
            'total': len(df),
            'active': active,
            'inactive': len(df) - active,
            'by_scope': {k: int(v) for k, v in df['scope'].value_counts().items()},
            'by_type': {k: int(v) for k, v in df['type'].value_counts().items()},
        }
