"""
Role-based authorization for vehicle operations.

Every operation is classified per role before the state machine is
touched:

* ``VALIDATED`` -- the event must be allowed from the current state.
* ``FORCED``    -- the target state is set directly (admin override).
* ``DENIED``    -- the role may not perform the operation.

Pairs missing from the matrix are denied.
"""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Mapping

from .enums import Role


class Action(str, enum.Enum):
    START_RIDE = "startRide"
    FINISH_RIDE = "finishRide"
    COLLECT = "collect"
    DROP = "drop"
    READY = "ready"
    SET_BATTERY_LOW = "setBatteryLow"
    SET_BOUNTY = "setBounty"
    UNKNOWN = "unknown"


class Access(str, enum.Enum):
    VALIDATED = "validated"
    FORCED = "forced"
    DENIED = "denied"


_V, _F = Access.VALIDATED, Access.FORCED

AUTHORIZATION_MATRIX: Mapping[Action, Mapping[Role, Access]] = MappingProxyType({
    Action.START_RIDE: {Role.END_USER: _V, Role.HUNTER: _V, Role.ADMIN: _F},
    Action.FINISH_RIDE: {Role.END_USER: _V, Role.HUNTER: _V, Role.ADMIN: _F},
    Action.COLLECT: {Role.HUNTER: _V, Role.ADMIN: _F},
    Action.DROP: {Role.HUNTER: _V, Role.ADMIN: _F},
    Action.READY: {Role.HUNTER: _V, Role.ADMIN: _F},
    Action.SET_BATTERY_LOW: {Role.ADMIN: _F},
    Action.SET_BOUNTY: {Role.ADMIN: _F},
    Action.UNKNOWN: {Role.ADMIN: _V},
})


def authorize(action: Action, role: Role) -> Access:
    return AUTHORIZATION_MATRIX.get(action, {}).get(role, Access.DENIED)
