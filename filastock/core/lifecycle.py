"""
Unit lifecycle: UNOPENED -> OPENED -> DEPLETED, and DEPLETED -> OPENED (restore).

The transition functions work on anything carrying ``status``, ``opened_at``
and ``depleted_at`` attributes (the ORM model in practice). A refused
transition raises before touching the unit.
"""

import enum
import logging
import math
from datetime import datetime, timezone
from typing import Optional, Tuple

from .errors import InvalidTransitionError

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class UnitStatus(str, enum.Enum):
    UNOPENED = "unopened"
    OPENED = "opened"
    DEPLETED = "depleted"


def utcnow() -> datetime:
    # Stored timestamps are naive UTC (SQLite drops tzinfo anyway)
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def is_opened(unit) -> bool:
    """Derived projection: a depleted unit has been opened too."""
    return UnitStatus(unit.status) != UnitStatus.UNOPENED


def _require(unit, expected: UnitStatus, action: str) -> None:
    current = UnitStatus(unit.status)
    if current != expected:
        raise InvalidTransitionError(action, current)


def open_unit(unit, at: Optional[datetime] = None):
    _require(unit, UnitStatus.UNOPENED, "open")
    unit.status = UnitStatus.OPENED
    unit.opened_at = as_naive_utc(at) or utcnow()
    logger.debug("unit %s opened at %s", getattr(unit, "id", None), unit.opened_at)
    return unit


def deplete_unit(unit, at: Optional[datetime] = None):
    _require(unit, UnitStatus.OPENED, "deplete")
    unit.status = UnitStatus.DEPLETED
    unit.depleted_at = as_naive_utc(at) or utcnow()
    logger.debug("unit %s depleted at %s", getattr(unit, "id", None), unit.depleted_at)
    return unit


def restore_unit(unit):
    _require(unit, UnitStatus.DEPLETED, "restore")
    unit.status = UnitStatus.OPENED
    unit.depleted_at = None
    logger.debug("unit %s restored", getattr(unit, "id", None))
    return unit


def initial_state(
    opened: bool = False,
    opened_at: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> Tuple[UnitStatus, Optional[datetime]]:
    """Status and opened_at for a unit created directly in its first state."""
    if not opened:
        return UnitStatus.UNOPENED, None
    return UnitStatus.OPENED, as_naive_utc(opened_at) or as_naive_utc(now) or utcnow()


def age_in_days(unit, reference: Optional[datetime] = None) -> Optional[int]:
    """Whole days since the unit was opened, or None when it never was.

    Clamped at 0 so an ``opened_at`` in the future (clock skew) never yields a
    negative age.
    """
    opened_at = as_naive_utc(getattr(unit, "opened_at", None))
    if opened_at is None:
        return None
    reference = as_naive_utc(reference) or utcnow()
    days = math.floor((reference - opened_at).total_seconds() / SECONDS_PER_DAY)
    return max(0, days)
