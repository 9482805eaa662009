"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Vehicle``: a table-driven ``StateMachine`` enforces
  the lifecycle (ready -> riding -> ready | bounty -> collected -> dropped
  -> ready), with ``batteryLow`` redirecting straight to ``bounty``.
- Every operation consults ``authorize`` first, so role branching lives in
  one matrix instead of in each method.

Operations return ``None`` on success or a ``VehicleError``; nothing is
mutated when an error is returned.
"""

from __future__ import annotations

from dataclasses import InitVar, dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from .authorization import Access, Action, authorize
from .enums import (
    FULL_BATTERY,
    LOW_BATTERY_THRESHOLD,
    STATE_REDIRECTS,
    VEHICLE_TRANSITIONS,
    Role,
    VehicleEvent,
    VehicleState,
)
from .errors import InvalidTransition, PermissionDenied, VehicleError
from .state_machine import StateMachine


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def clamp_battery(level: int) -> int:
    return max(0, min(FULL_BATTERY, level))


@dataclass(eq=False)
class Vehicle:
    id: Optional[int] = None
    battery: int = FULL_BATTERY
    last_change_of_state: Optional[datetime] = None
    clock: Callable[[], datetime] = field(default=utcnow, repr=False)
    initial_state: InitVar[VehicleState] = VehicleState.READY
    _fsm: StateMachine[VehicleState, VehicleEvent] = field(
        init=False, repr=False
    )

    def __post_init__(self, initial_state: VehicleState) -> None:
        if self.last_change_of_state is None:
            self.last_change_of_state = self.clock()
        self.last_change_of_state = as_utc(self.last_change_of_state)
        self._fsm = StateMachine(
            initial_state,
            VEHICLE_TRANSITIONS,
            on_enter=self._on_enter_state,
            redirects=STATE_REDIRECTS,
        )

    @classmethod
    def create(
        cls, id: Optional[int] = None, clock: Callable[[], datetime] = utcnow
    ) -> "Vehicle":
        """A fresh vehicle: ready, fully charged, stamped now."""
        return cls(id=id, clock=clock)

    # ── State machine access ──────────────────────────────────────────

    @property
    def state(self) -> VehicleState:
        return self._fsm.current

    def current_state(self) -> VehicleState:
        return self._fsm.current

    def can_fire(self, event: VehicleEvent) -> bool:
        return self._fsm.can_fire(event)

    def fire(self, event: VehicleEvent) -> Optional[InvalidTransition]:
        return self._fsm.fire(event)

    def _on_enter_state(self, state: VehicleState) -> None:
        self.last_change_of_state = as_utc(self.clock())

    # ── Role-gated operations ─────────────────────────────────────────

    def start_ride(self, role: Role) -> Optional[VehicleError]:
        return self._perform(
            Action.START_RIDE, role, VehicleEvent.START_RIDE, VehicleState.RIDING
        )

    def finish_ride(self, battery_left: int, role: Role) -> Optional[VehicleError]:
        """Store the reported battery and end the ride.

        A validated finish below ``LOW_BATTERY_THRESHOLD`` fires
        ``batteryLow`` (and so lands in ``bounty``); an admin finish always
        forces ``ready``.  The level is clamped to 0..100.
        """
        access = authorize(Action.FINISH_RIDE, role)
        if access is Access.DENIED:
            return PermissionDenied(Action.FINISH_RIDE.value, role)

        if access is Access.FORCED:
            self.battery = clamp_battery(battery_left)
            self._fsm.force_state(VehicleState.READY)
            return None

        if not self._fsm.can_fire(VehicleEvent.FINISH_RIDE):
            return InvalidTransition(Action.FINISH_RIDE.value, self.state)
        self.battery = clamp_battery(battery_left)
        if self.battery < LOW_BATTERY_THRESHOLD:
            return self._fsm.fire(VehicleEvent.BATTERY_LOW)
        return self._fsm.fire(VehicleEvent.FINISH_RIDE)

    def collect(self, role: Role) -> Optional[VehicleError]:
        return self._perform(
            Action.COLLECT, role, VehicleEvent.COLLECTED, VehicleState.COLLECTED
        )

    def drop(self, role: Role) -> Optional[VehicleError]:
        return self._perform(
            Action.DROP, role, VehicleEvent.DROPPED, VehicleState.DROPPED
        )

    def ready(self, role: Role) -> Optional[VehicleError]:
        """Back into service; the battery is reset to full."""
        return self._perform(
            Action.READY,
            role,
            VehicleEvent.READY,
            VehicleState.READY,
            before=self._recharge,
        )

    def set_battery_low(self, role: Role) -> Optional[VehicleError]:
        return self._perform(Action.SET_BATTERY_LOW, role, None, VehicleState.BATTERY_LOW)

    def set_bounty(self, role: Role) -> Optional[VehicleError]:
        return self._perform(Action.SET_BOUNTY, role, None, VehicleState.BOUNTY)

    def unknown(self, role: Role) -> Optional[VehicleError]:
        return self._perform(Action.UNKNOWN, role, VehicleEvent.UNKNOWN, None)

    # ── Internals ─────────────────────────────────────────────────────

    def _recharge(self) -> None:
        self.battery = FULL_BATTERY

    def _perform(
        self,
        action: Action,
        role: Role,
        event: Optional[VehicleEvent],
        forced_state: Optional[VehicleState],
        before: Optional[Callable[[], None]] = None,
    ) -> Optional[VehicleError]:
        access = authorize(action, role)

        if access is Access.VALIDATED and event is not None:
            if not self._fsm.can_fire(event):
                return InvalidTransition(action.value, self.state)
            if before is not None:
                before()
            return self._fsm.fire(event)

        if access is Access.FORCED and forced_state is not None:
            if before is not None:
                before()
            self._fsm.force_state(forced_state)
            return None

        return PermissionDenied(action.value, role)
