from collections.abc import Iterable, Mapping
from typing import Any


def _estimated_value(item: Any) -> float:
    if isinstance(item, Mapping):
        value = item.get("estimated_value")
    else:
        value = getattr(item, "estimated_value", None)
    return float(value or 0)


def calculate_value(items: Iterable[Any]) -> float:
    """Sum the estimated values of an offer round; missing values count as 0."""
    return sum((_estimated_value(item) for item in items), 0.0)
