"""
Low-stock alerts.

An item alerts when it has a minimum stock limit and its available quantity
is at or below that limit. Severity is derived from the shortage as a
percentage of the limit through a tiering function, so presentation layers
can pick their own scheme.
"""

import logging
from typing import Callable, Iterable, Union

import pandas as pd

from . import settings
from .schemas import Alert, FlattenedItem
from .sorting import SortDirection, sort_records

logger = logging.getLogger(__name__)

Tiering = Callable[[float], str]

SORTABLE_FIELDS = ("name", "available", "shortage", "shortage_percentage")


def make_tiering(
    cutoffs: Iterable[tuple[float, str]], default: str = settings.DEFAULT_SEVERITY
) -> Tiering:
    """
    Builds a tiering function from (exclusive lower bound, label) pairs.
    The highest bound that the percentage exceeds decides the label.
    """
    ordered = sorted(cutoffs, key=lambda pair: pair[0], reverse=True)

    def tiering(percentage: float) -> str:
        for bound, label in ordered:
            if percentage > bound:
                return label
        return default

    return tiering


three_tier_severity = make_tiering([(50, "Critical"), (25, "High")], "Warning")
two_tier_severity = make_tiering([(50, "Critical")], "Warning")
configured_severity = make_tiering(settings.SEVERITY_CUTOFFS, settings.DEFAULT_SEVERITY)


def is_alertable(available: float, minimum_stock: float) -> bool:
    return minimum_stock > 0 and available <= minimum_stock


def shortage_percentage(shortage: float, minimum_stock: float) -> float:
    if minimum_stock <= 0:
        return 0.0
    return shortage / minimum_stock * 100


def evaluate_alerts(
    items: Iterable[FlattenedItem], tiering: Tiering = configured_severity
) -> list[Alert]:
    """
    Returns one alert per alertable item, most severe first.
    Items with equal shortage percentage keep their snapshot order.
    """
    alerts = []
    for item in items:
        if not is_alertable(item.available, item.minimum_stock):
            continue
        shortage = max(0.0, item.minimum_stock - item.available)
        percentage = shortage_percentage(shortage, item.minimum_stock)
        alerts.append(
            Alert(
                item_id=item.item_id,
                name=item.name,
                available=item.available,
                minimum_stock=item.minimum_stock,
                shortage=shortage,
                shortage_percentage=percentage,
                severity=tiering(percentage),
                main_group=item.main_group,
                subgroup=item.subgroup,
            )
        )

    logger.debug(f"{len(alerts)} items at or below their minimum stock.")
    return sort_records(alerts, "shortage_percentage", SortDirection.DESC)


def filter_alerts(alerts: Iterable[Alert], text: str) -> list[Alert]:
    """Case-insensitive substring filter on the item name."""
    needle = (text or "").strip().lower()
    if not needle:
        return list(alerts)
    return [alert for alert in alerts if needle in alert.name.lower()]


def sort_alerts(
    alerts: Iterable[Alert],
    field: str = "name",
    direction: Union[SortDirection, str] = SortDirection.ASC,
) -> list[Alert]:
    if field not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort alerts by {field!r}. Choose from {SORTABLE_FIELDS}.")
    return sort_records(alerts, field, direction)


def alerts_frame(alerts: Iterable[Alert]) -> pd.DataFrame:
    """Tabular view of the alerts, using the schema aliases as column headings."""
    columns = [info.alias or name for name, info in Alert.model_fields.items()]
    rows = [alert.model_dump(by_alias=True) for alert in alerts]
    return pd.DataFrame(rows, columns=columns)
