"""
Fleet-wide sweeps.

Each sweep scans the vehicles it is given, fires at most one event per
vehicle, and returns the failures it met.  A failure never stops the scan
and vehicles are independent of each other.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from .entities import Vehicle, as_utc, utcnow
from .enums import VehicleEvent
from .errors import InvalidTransition

logger = logging.getLogger(__name__)

STALE_AFTER = timedelta(hours=48)


def sweep_ready_and_battery_low_to_bounty(
    vehicles: Iterable[Vehicle],
) -> list[InvalidTransition]:
    """Put every ``ready`` or ``batteryLow`` vehicle on bounty."""
    errors: list[InvalidTransition] = []
    for vehicle in vehicles:
        if not vehicle.can_fire(VehicleEvent.BOUNTY):
            continue
        err = vehicle.fire(VehicleEvent.BOUNTY)
        if err is not None:
            logger.debug("Bounty sweep skipped vehicle %s: %s", vehicle.id, err)
            errors.append(err)
    return errors


def sweep_stale_ready_to_unknown(
    vehicles: Iterable[Vehicle],
    now: Optional[datetime] = None,
    stale_after: timedelta = STALE_AFTER,
) -> list[InvalidTransition]:
    """Mark ``ready`` vehicles untouched for *stale_after* as ``unknown``."""
    now = as_utc(now or utcnow())
    errors: list[InvalidTransition] = []
    for vehicle in vehicles:
        if now - as_utc(vehicle.last_change_of_state) < stale_after:
            continue
        if not vehicle.can_fire(VehicleEvent.UNKNOWN):
            continue
        err = vehicle.fire(VehicleEvent.UNKNOWN)
        if err is not None:
            logger.debug("Unknown sweep skipped vehicle %s: %s", vehicle.id, err)
            errors.append(err)
    return errors
