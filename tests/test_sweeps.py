"""Unit tests for the fleet-wide sweeps."""

from datetime import datetime, timedelta

import pytest

from fleet.domain.enums import VehicleEvent, VehicleState
from fleet.domain.errors import InvalidTransition
from fleet.domain.sweeps import (
    STALE_AFTER,
    sweep_ready_and_battery_low_to_bounty,
    sweep_stale_ready_to_unknown,
)


class _RacingVehicle:
    """Reports the event as fireable, then loses the race when firing."""

    id = 99
    state = VehicleState.READY

    def __init__(self, last_change_of_state=None):
        self.last_change_of_state = last_change_of_state

    def can_fire(self, event):
        return True

    def fire(self, event):
        return InvalidTransition(event.value, VehicleState.RIDING)


class TestSweepToBounty:
    def test_only_ready_and_battery_low_change(self, make_vehicle):
        fleet = {state: make_vehicle(state) for state in VehicleState}
        errors = sweep_ready_and_battery_low_to_bounty(fleet.values())

        assert errors == []
        for start, vehicle in fleet.items():
            if start in (VehicleState.READY, VehicleState.BATTERY_LOW):
                assert vehicle.state == VehicleState.BOUNTY
            else:
                assert vehicle.state == start

    def test_empty_fleet(self):
        assert sweep_ready_and_battery_low_to_bounty([]) == []

    def test_failure_is_collected_and_scan_continues(self, make_vehicle):
        after = make_vehicle(VehicleState.READY)
        errors = sweep_ready_and_battery_low_to_bounty([_RacingVehicle(), after])

        assert len(errors) == 1
        assert isinstance(errors[0], InvalidTransition)
        assert after.state == VehicleState.BOUNTY

    def test_bounty_stamps_timestamp(self, make_vehicle, clock):
        vehicle = make_vehicle(VehicleState.READY)
        clock.advance(hours=3)
        sweep_ready_and_battery_low_to_bounty([vehicle])
        assert vehicle.last_change_of_state == clock.now


class TestSweepToUnknown:
    def test_stale_ready_goes_unknown(self, make_vehicle, clock):
        vehicle = make_vehicle(VehicleState.READY)
        now = clock.advance(hours=49)
        assert sweep_stale_ready_to_unknown([vehicle], now=now) == []
        assert vehicle.state == VehicleState.UNKNOWN

    def test_exactly_48_hours_counts_as_stale(self, make_vehicle, clock):
        vehicle = make_vehicle(VehicleState.READY)
        now = clock.advance(hours=48)
        sweep_stale_ready_to_unknown([vehicle], now=now)
        assert vehicle.state == VehicleState.UNKNOWN

    def test_recent_ready_is_untouched(self, make_vehicle, clock):
        vehicle = make_vehicle(VehicleState.READY)
        now = clock.advance(hours=47, minutes=59)
        sweep_stale_ready_to_unknown([vehicle], now=now)
        assert vehicle.state == VehicleState.READY

    @pytest.mark.parametrize(
        "state", [s for s in VehicleState if s is not VehicleState.READY]
    )
    def test_stale_non_ready_is_untouched(self, make_vehicle, clock, state):
        vehicle = make_vehicle(state)
        now = clock.advance(days=10)
        assert sweep_stale_ready_to_unknown([vehicle], now=now) == []
        assert vehicle.state == state

    def test_custom_threshold(self, make_vehicle, clock):
        vehicle = make_vehicle(VehicleState.READY)
        now = clock.advance(hours=2)
        sweep_stale_ready_to_unknown([vehicle], now=now, stale_after=timedelta(hours=1))
        assert vehicle.state == VehicleState.UNKNOWN

    def test_mixed_fleet(self, make_vehicle, clock):
        stale = make_vehicle(VehicleState.READY)
        clock.advance(hours=30)
        fresh = make_vehicle(VehicleState.READY)
        riding = make_vehicle(VehicleState.RIDING, last_change_of_state=stale.last_change_of_state)
        now = clock.advance(hours=20)

        sweep_stale_ready_to_unknown([stale, fresh, riding], now=now)

        assert stale.state == VehicleState.UNKNOWN
        assert fresh.state == VehicleState.READY
        assert riding.state == VehicleState.RIDING

    def test_failure_is_collected_and_scan_continues(self, make_vehicle, clock):
        racing = _RacingVehicle(last_change_of_state=clock.now)
        after = make_vehicle(VehicleState.READY)
        now = clock.advance(hours=72)

        errors = sweep_stale_ready_to_unknown([racing, after], now=now)

        assert len(errors) == 1
        assert errors[0].operation == VehicleEvent.UNKNOWN.value
        assert after.state == VehicleState.UNKNOWN

    def test_naive_timestamp_does_not_stop_the_scan(self, make_vehicle, clock):
        naive = make_vehicle(VehicleState.READY)
        naive.last_change_of_state = datetime(2024, 2, 1, 9, 0)
        aware = make_vehicle(VehicleState.READY)
        now = clock.advance(hours=48)

        assert sweep_stale_ready_to_unknown([naive, aware], now=now) == []
        assert naive.state == VehicleState.UNKNOWN
        assert aware.state == VehicleState.UNKNOWN

    def test_naive_now_is_read_as_utc(self, make_vehicle, clock):
        vehicle = make_vehicle(VehicleState.READY)
        naive_now = clock.advance(hours=49).replace(tzinfo=None)
        sweep_stale_ready_to_unknown([vehicle], now=naive_now)
        assert vehicle.state == VehicleState.UNKNOWN

    def test_default_threshold_is_two_days(self):
        assert STALE_AFTER == timedelta(hours=48)
