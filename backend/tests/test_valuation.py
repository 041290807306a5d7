"""Tests for offer round valuation."""

from app.services.ledger import OfferedItem
from app.services.valuation import calculate_value


def test_sums_estimated_values():
    assert calculate_value([{"estimated_value": 100}, {"estimated_value": 50}]) == 150


def test_missing_value_counts_as_zero():
    assert calculate_value([{}]) == 0


def test_none_value_counts_as_zero():
    assert calculate_value([{"estimated_value": None}, {"estimated_value": 25}]) == 25


def test_empty_round_is_zero():
    assert calculate_value([]) == 0


def test_accepts_offered_items():
    items = [
        OfferedItem(name="Camera", estimated_value=2000),
        OfferedItem(name="Lens", estimated_value=1500),
        OfferedItem(name="Strap", estimated_value=None),
    ]
    assert calculate_value(items) == 3500
