"""Domain enumerations and state-transition rules."""

import enum
from types import MappingProxyType
from typing import Mapping


class VehicleState(str, enum.Enum):
    READY = "ready"
    RIDING = "riding"
    BATTERY_LOW = "batteryLow"
    BOUNTY = "bounty"
    COLLECTED = "collected"
    DROPPED = "dropped"
    UNKNOWN = "unknown"


class VehicleEvent(str, enum.Enum):
    START_RIDE = "startRide"
    FINISH_RIDE = "finishRide"
    BATTERY_LOW = "batteryLow"
    BOUNTY = "bounty"
    COLLECTED = "collected"
    DROPPED = "dropped"
    READY = "ready"
    UNKNOWN = "unknown"


class Role(str, enum.Enum):
    END_USER = "EndUser"
    HUNTER = "Hunter"
    ADMIN = "Admin"


# State machine: maps event -> (allowed source states, destination state)
VEHICLE_TRANSITIONS: Mapping[
    VehicleEvent, tuple[frozenset[VehicleState], VehicleState]
] = MappingProxyType({
    VehicleEvent.START_RIDE: (frozenset({VehicleState.READY}), VehicleState.RIDING),
    VehicleEvent.FINISH_RIDE: (frozenset({VehicleState.RIDING}), VehicleState.READY),
    VehicleEvent.BATTERY_LOW: (frozenset({VehicleState.RIDING}), VehicleState.BATTERY_LOW),
    VehicleEvent.BOUNTY: (
        frozenset({VehicleState.READY, VehicleState.BATTERY_LOW}),
        VehicleState.BOUNTY,
    ),
    VehicleEvent.COLLECTED: (frozenset({VehicleState.BOUNTY}), VehicleState.COLLECTED),
    VehicleEvent.DROPPED: (frozenset({VehicleState.COLLECTED}), VehicleState.DROPPED),
    VehicleEvent.READY: (frozenset({VehicleState.DROPPED}), VehicleState.READY),
    VehicleEvent.UNKNOWN: (frozenset({VehicleState.READY}), VehicleState.UNKNOWN),
})

# Entering the key state immediately forces the value state
STATE_REDIRECTS: Mapping[VehicleState, VehicleState] = MappingProxyType({
    VehicleState.BATTERY_LOW: VehicleState.BOUNTY,
})

FULL_BATTERY = 100
LOW_BATTERY_THRESHOLD = 20  # finishing a ride below this creates a bounty
