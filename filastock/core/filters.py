"""
Conjunctive filtering over inventory units.

Each predicate is optional; a unit is kept only when it satisfies every
predicate that is set. Depleted units are hidden unless ``include_depleted``
is set or ``status`` asks for them explicitly.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional
from uuid import UUID

from .lifecycle import UnitStatus, is_opened


@dataclass(frozen=True)
class UnitFilter:
    brand_id: Optional[UUID] = None
    type_id: Optional[UUID] = None
    color: Optional[str] = None
    color_code: Optional[str] = None
    status: Optional[UnitStatus] = None
    is_opened: Optional[bool] = None
    include_depleted: bool = False

    @property
    def color_needle(self) -> Optional[str]:
        if self.color is None:
            return None
        needle = self.color.strip().lower()
        return needle or None

    @property
    def color_code_needle(self) -> Optional[str]:
        if self.color_code is None:
            return None
        needle = self.color_code.strip().lower()
        return needle or None

    @property
    def hides_depleted(self) -> bool:
        if self.include_depleted:
            return False
        return self.status is None or UnitStatus(self.status) != UnitStatus.DEPLETED


def matches(unit, f: UnitFilter) -> bool:
    status = UnitStatus(unit.status)

    if f.hides_depleted and status == UnitStatus.DEPLETED:
        return False
    if f.brand_id is not None and unit.brand_id != f.brand_id:
        return False
    if f.type_id is not None and unit.type_id != f.type_id:
        return False

    needle = f.color_needle
    if needle is not None and needle not in (unit.color_name or "").lower():
        return False
    code_needle = f.color_code_needle
    if code_needle is not None and code_needle not in (unit.color_code or "").lower():
        return False

    if f.status is not None and status != UnitStatus(f.status):
        return False
    if f.is_opened is not None and is_opened(unit) != f.is_opened:
        return False
    return True


def apply_filter(units: Iterable, f: Optional[UnitFilter] = None) -> List:
    f = f or UnitFilter()
    return [u for u in units if matches(u, f)]


def sql_conditions(model, f: UnitFilter) -> list:
    """Exact predicates that can be pushed down to the database.

    The color and color code substring matches are left to ``apply_filter`` so that case folding
    behaves the same on every backend.
    """
    conds = []
    if f.brand_id is not None:
        conds.append(model.brand_id == f.brand_id)
    if f.type_id is not None:
        conds.append(model.type_id == f.type_id)
    if f.status is not None:
        conds.append(model.status == UnitStatus(f.status))
    if f.hides_depleted:
        conds.append(model.status != UnitStatus.DEPLETED)
    if f.is_opened is True:
        conds.append(model.status != UnitStatus.UNOPENED)
    elif f.is_opened is False:
        conds.append(model.status == UnitStatus.UNOPENED)
    return conds
