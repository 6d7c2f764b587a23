"""
Grouped and global summaries over a (filtered) collection of units.

Totals are plain left-to-right float sums, so per-partition sums reconstruct
the global totals up to float drift: every unit lands in exactly one brand,
one type and one color group.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, Hashable, Iterable, List, Mapping, Optional

from .config import settings
from .errors import ValidationError
from .lifecycle import is_opened


@dataclass
class GroupSummary:
    key: str
    name: str
    unit_count: int = 0
    total_weight: float = 0.0
    total_remaining_weight: float = 0.0
    color_code: Optional[str] = None


@dataclass
class InventoryOverview:
    by_brand: List[GroupSummary] = field(default_factory=list)
    by_type: List[GroupSummary] = field(default_factory=list)
    by_color: List[GroupSummary] = field(default_factory=list)


@dataclass(frozen=True)
class LowStockEntry:
    id: object
    color_name: str
    brand_name: str
    type_name: str
    remaining_weight: float
    total_weight: float
    percent_remaining: int


@dataclass
class InventoryStats:
    total_units: int = 0
    total_weight: float = 0.0
    total_remaining_weight: float = 0.0
    total_spend: float = 0.0
    opened_count: int = 0
    unopened_count: int = 0
    low_stock: List[LowStockEntry] = field(default_factory=list)


@dataclass(frozen=True)
class PriceTrendPoint:
    date: date
    price: float
    brand_name: str
    type_name: str
    color_name: str


@dataclass
class PriceStats:
    trend: List[PriceTrendPoint] = field(default_factory=list)
    average_price: float = 0.0
    min_price: float = 0.0
    max_price: float = 0.0
    total_count: int = 0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _lookup(names: Optional[Mapping], key) -> str:
    if names and key in names:
        return names[key]
    return str(key)


def _group(units: Iterable, key_fn: Callable, name_fn: Callable) -> Dict[Hashable, GroupSummary]:
    groups: Dict[Hashable, GroupSummary] = {}
    for u in units:
        k = key_fn(u)
        row = groups.get(k)
        if row is None:
            row = GroupSummary(key=str(k), name=name_fn(u))
            groups[k] = row
        row.unit_count += 1
        row.total_weight += u.total_weight
        row.total_remaining_weight += u.remaining_weight
    return groups


def summarize_by_brand(units: Iterable, brand_names: Optional[Mapping] = None) -> List[GroupSummary]:
    return list(_group(units, lambda u: u.brand_id, lambda u: _lookup(brand_names, u.brand_id)).values())


def summarize_by_type(units: Iterable, type_names: Optional[Mapping] = None) -> List[GroupSummary]:
    return list(_group(units, lambda u: u.type_id, lambda u: _lookup(type_names, u.type_id)).values())


def summarize_by_color(units: Iterable) -> List[GroupSummary]:
    groups: Dict[str, GroupSummary] = {}
    for u in units:
        k = (u.color_name or "").lower()
        row = groups.get(k)
        if row is None:
            # First spelling seen is the display name
            row = GroupSummary(key=k, name=u.color_name)
            groups[k] = row
        row.unit_count += 1
        row.total_weight += u.total_weight
        row.total_remaining_weight += u.remaining_weight
        if not row.color_code and u.color_code:
            row.color_code = u.color_code
    return list(groups.values())


def build_overview(
    units: Iterable,
    brand_names: Optional[Mapping] = None,
    type_names: Optional[Mapping] = None,
) -> InventoryOverview:
    units = list(units)
    return InventoryOverview(
        by_brand=summarize_by_brand(units, brand_names),
        by_type=summarize_by_type(units, type_names),
        by_color=summarize_by_color(units),
    )


def validate_threshold(threshold: Optional[float]) -> float:
    if threshold is None:
        return settings.low_stock_threshold
    try:
        threshold = float(threshold)
    except (TypeError, ValueError):
        raise ValidationError("Threshold must be a number between 0 and 1", field="threshold")
    if math.isnan(threshold) or threshold < 0 or threshold > 1:
        raise ValidationError("Threshold must be a number between 0 and 1", field="threshold")
    return threshold


def is_low_stock(unit, threshold: float) -> bool:
    if unit.remaining_weight <= 0 or unit.total_weight <= 0:
        return False
    return unit.remaining_weight / unit.total_weight <= threshold


def compute_stats(
    units: Iterable,
    threshold: Optional[float] = None,
    brand_names: Optional[Mapping] = None,
    type_names: Optional[Mapping] = None,
) -> InventoryStats:
    threshold = validate_threshold(threshold)
    stats = InventoryStats()

    for u in units:
        stats.total_units += 1
        stats.total_weight += u.total_weight
        stats.total_remaining_weight += u.remaining_weight
        stats.total_spend += u.unit_price

        if is_opened(u):
            stats.opened_count += 1
        else:
            stats.unopened_count += 1

        if is_low_stock(u, threshold):
            stats.low_stock.append(
                LowStockEntry(
                    id=u.id,
                    color_name=u.color_name,
                    brand_name=_lookup(brand_names, u.brand_id),
                    type_name=_lookup(type_names, u.type_id),
                    remaining_weight=u.remaining_weight,
                    total_weight=u.total_weight,
                    percent_remaining=round_half_up(u.remaining_weight / u.total_weight * 100),
                )
            )
    return stats


def compute_price_stats(
    units: Iterable,
    brand_names: Optional[Mapping] = None,
    type_names: Optional[Mapping] = None,
) -> PriceStats:
    ordered = sorted(units, key=lambda u: u.acquired_on)
    if not ordered:
        return PriceStats()

    trend = [
        PriceTrendPoint(
            date=u.acquired_on,
            price=u.unit_price,
            brand_name=_lookup(brand_names, u.brand_id),
            type_name=_lookup(type_names, u.type_id),
            color_name=u.color_name,
        )
        for u in ordered
    ]
    prices = [u.unit_price for u in ordered]
    total = 0.0
    for p in prices:
        total += p
    return PriceStats(
        trend=trend,
        average_price=total / len(prices),
        min_price=min(prices),
        max_price=max(prices),
        total_count=len(prices),
    )
