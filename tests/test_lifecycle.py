from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from filastock.core import lifecycle
from filastock.core.errors import InvalidTransitionError
from filastock.core.lifecycle import UnitStatus

T0 = datetime(2026, 3, 1, 12, 0, 0)
T1 = datetime(2026, 3, 20, 8, 30, 0)


def _unit(status=UnitStatus.UNOPENED, opened_at=None, depleted_at=None):
    return SimpleNamespace(id="u1", status=status, opened_at=opened_at, depleted_at=depleted_at)


def _snapshot(unit):
    return (unit.status, unit.opened_at, unit.depleted_at)


def test_open_sets_status_and_timestamp():
    unit = lifecycle.open_unit(_unit(), at=T0)
    assert unit.status == UnitStatus.OPENED
    assert unit.opened_at == T0
    assert unit.depleted_at is None


def test_open_defaults_to_now():
    before = lifecycle.utcnow()
    unit = lifecycle.open_unit(_unit())
    assert unit.opened_at >= before


def test_open_then_deplete():
    unit = lifecycle.open_unit(_unit(), at=T0)
    lifecycle.deplete_unit(unit, at=T1)
    assert unit.status == UnitStatus.DEPLETED
    assert unit.opened_at == T0
    assert unit.depleted_at == T1


def test_restore_keeps_opened_at():
    unit = _unit(UnitStatus.DEPLETED, opened_at=T0, depleted_at=T1)
    lifecycle.restore_unit(unit)
    assert unit.status == UnitStatus.OPENED
    assert unit.depleted_at is None
    assert unit.opened_at == T0


@pytest.mark.parametrize(
    "action, unit",
    [
        (lifecycle.deplete_unit, _unit()),
        (lifecycle.restore_unit, _unit()),
        (lifecycle.restore_unit, _unit(UnitStatus.OPENED, opened_at=T0)),
        (lifecycle.open_unit, _unit(UnitStatus.OPENED, opened_at=T0)),
        (lifecycle.open_unit, _unit(UnitStatus.DEPLETED, opened_at=T0, depleted_at=T1)),
        (lifecycle.deplete_unit, _unit(UnitStatus.DEPLETED, opened_at=T0, depleted_at=T1)),
    ],
)
def test_refused_transition_leaves_unit_unchanged(action, unit):
    before = _snapshot(unit)
    with pytest.raises(InvalidTransitionError):
        action(unit)
    assert _snapshot(unit) == before


def test_status_accepts_stored_string_values():
    unit = _unit("unopened")
    lifecycle.open_unit(unit, at=T0)
    assert unit.status == UnitStatus.OPENED


def test_aware_timestamps_are_stored_as_naive_utc():
    at = datetime(2026, 3, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    unit = lifecycle.open_unit(_unit(), at=at)
    assert unit.opened_at == datetime(2026, 3, 1, 12, 0)
    assert unit.opened_at.tzinfo is None


def test_is_opened_projection():
    assert lifecycle.is_opened(_unit()) is False
    assert lifecycle.is_opened(_unit(UnitStatus.OPENED, opened_at=T0)) is True
    assert lifecycle.is_opened(_unit(UnitStatus.DEPLETED, opened_at=T0, depleted_at=T1)) is True


def test_initial_state():
    assert lifecycle.initial_state(False, T0) == (UnitStatus.UNOPENED, None)
    assert lifecycle.initial_state(True, T0) == (UnitStatus.OPENED, T0)
    status, opened_at = lifecycle.initial_state(True, None, now=T1)
    assert status == UnitStatus.OPENED
    assert opened_at == T1


class TestAgeInDays:
    def test_none_when_never_opened(self):
        assert lifecycle.age_in_days(_unit(), reference=T1) is None

    def test_floors_partial_days(self):
        unit = _unit(UnitStatus.OPENED, opened_at=T0)
        assert lifecycle.age_in_days(unit, reference=T0 + timedelta(days=2, hours=23)) == 2

    def test_same_instant_is_zero(self):
        unit = _unit(UnitStatus.OPENED, opened_at=T0)
        assert lifecycle.age_in_days(unit, reference=T0) == 0

    def test_future_opened_at_clamps_to_zero(self):
        unit = _unit(UnitStatus.OPENED, opened_at=T0 + timedelta(days=5))
        assert lifecycle.age_in_days(unit, reference=T0) == 0

    def test_depleted_unit_still_has_an_age(self):
        unit = _unit(UnitStatus.DEPLETED, opened_at=T0, depleted_at=T1)
        assert lifecycle.age_in_days(unit, reference=T0 + timedelta(days=10)) == 10

    def test_aware_reference(self):
        unit = _unit(UnitStatus.OPENED, opened_at=T0)
        reference = (T0 + timedelta(days=3)).replace(tzinfo=timezone.utc)
        assert lifecycle.age_in_days(unit, reference=reference) == 3
