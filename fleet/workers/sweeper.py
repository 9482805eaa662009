"""
Background Sweep Worker
=======================

Runs every ``SWEEP_INTERVAL_SECONDS`` (default 300 s).

Each cycle
----------
1. Ask the fleet provider for the current vehicles.
2. Mark ``ready`` vehicles untouched for ``STALE_AFTER_HOURS`` as ``unknown``.
3. Once per UTC day, after ``BOUNTY_SWEEP_AT``, put every ``ready`` /
   ``batteryLow`` vehicle on bounty so hunters collect it for charging.

Vehicle state is not locked here.  The loop and the per-vehicle
operations must share one event loop (or the caller must serialise access
per vehicle) so a sweep never interleaves with another mutation.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence

from fleet.config import settings
from fleet.domain.entities import Vehicle, utcnow
from fleet.domain.enums import VehicleState
from fleet.domain.errors import VehicleError
from fleet.domain.sweeps import (
    sweep_ready_and_battery_low_to_bounty,
    sweep_stale_ready_to_unknown,
)

logger = logging.getLogger(__name__)

FleetProvider = Callable[[], Sequence[Vehicle]]

_task: asyncio.Task | None = None
_stop_event: asyncio.Event | None = None


@dataclass
class SweepReport:
    to_unknown: int = 0
    to_bounty: int = 0
    errors: list[VehicleError] = field(default_factory=list)


# ── Public API ────────────────────────────────────────────────────────


async def start_sweep_loop(fleet_provider: FleetProvider) -> None:
    global _task, _stop_event
    _stop_event = asyncio.Event()
    _task = asyncio.create_task(_loop(fleet_provider, _stop_event))
    logger.info(
        "Sweep worker started (interval=%ds)", settings.sweep_interval_seconds
    )


async def stop_sweep_loop() -> None:
    global _task, _stop_event
    if _stop_event:
        _stop_event.set()
    if _task:
        _task.cancel()
        try:
            await _task
        except asyncio.CancelledError:
            pass
    _task = None
    _stop_event = None
    logger.info("Sweep worker stopped")


def run_sweep_cycle(
    vehicles: Sequence[Vehicle],
    now: Optional[datetime] = None,
    include_bounty: bool = True,
) -> SweepReport:
    """Execute one sweep cycle over *vehicles*."""
    report = SweepReport()

    before = [v.state for v in vehicles]
    report.errors.extend(
        sweep_stale_ready_to_unknown(
            vehicles,
            now=now,
            stale_after=timedelta(hours=settings.stale_after_hours),
        )
    )
    after_unknown = [v.state for v in vehicles]
    report.to_unknown = _count_moved(before, after_unknown, VehicleState.UNKNOWN)

    if include_bounty:
        report.errors.extend(sweep_ready_and_battery_low_to_bounty(vehicles))
        after_bounty = [v.state for v in vehicles]
        report.to_bounty = _count_moved(after_unknown, after_bounty, VehicleState.BOUNTY)

    for err in report.errors:
        logger.warning("Sweep failure: %s", err)
    if report.to_unknown or report.to_bounty:
        logger.info(
            "Sweep cycle: %d to unknown, %d to bounty, %d errors",
            report.to_unknown,
            report.to_bounty,
            len(report.errors),
        )
    return report


def bounty_sweep_due(now: datetime, last_run: Optional[date]) -> bool:
    """True once per day, from ``settings.bounty_sweep_at`` onwards."""
    return now.time() >= settings.bounty_sweep_at and last_run != now.date()


# ── Internals ─────────────────────────────────────────────────────────


def _count_moved(
    before: list[VehicleState], after: list[VehicleState], target: VehicleState
) -> int:
    return sum(1 for b, a in zip(before, after) if b is not target and a is target)


async def _loop(fleet_provider: FleetProvider, stop_event: asyncio.Event) -> None:
    """Periodic loop: run a sweep cycle then sleep."""
    last_bounty: Optional[date] = None
    while not stop_event.is_set():
        try:
            now = utcnow()
            include_bounty = bounty_sweep_due(now, last_bounty)
            run_sweep_cycle(
                list(fleet_provider()), now=now, include_bounty=include_bounty
            )
            if include_bounty:
                last_bounty = now.date()
        except Exception:
            logger.exception("Unhandled error in sweep cycle")
        # Wait for the interval or until stop is signalled
        try:
            await asyncio.wait_for(
                stop_event.wait(), timeout=settings.sweep_interval_seconds
            )
            break
        except asyncio.TimeoutError:
            pass  # next cycle
