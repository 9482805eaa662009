"""
Shared test fixtures.

Vehicles get a controllable clock so timestamps and staleness can be
asserted without sleeping.
"""

from datetime import datetime, timedelta, timezone

import pytest

from fleet.domain.entities import Vehicle
from fleet.domain.enums import FULL_BATTERY, VehicleState


START = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_vehicle(clock):
    """Build a vehicle resting in *state* without firing any hooks."""

    def _make(state=VehicleState.READY, battery=FULL_BATTERY, **kwargs):
        return Vehicle(battery=battery, initial_state=state, clock=clock, **kwargs)

    return _make
