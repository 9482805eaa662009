"""
Vehicle error taxonomy.

Entity operations *return* these instead of raising them, so callers can
treat a refused action as an ordinary outcome.  They still subclass
``Exception`` so an outer layer may raise one at its own boundary.
"""

from __future__ import annotations

from .enums import Role, VehicleState


class VehicleError(Exception):
    """Base class for every refused vehicle operation."""


class PermissionDenied(VehicleError):
    """The caller's role may not perform the operation at all."""

    def __init__(self, operation: str, role: Role):
        self.operation = operation
        self.role = role
        super().__init__(f"{role.value} is not allowed to perform '{operation}'")


class InvalidTransition(VehicleError):
    """The role is allowed, but the current state does not permit the event."""

    def __init__(self, operation: str, state: VehicleState):
        self.operation = operation
        self.state = state
        label = getattr(state, "value", state)
        super().__init__(f"cannot perform '{operation}' while the vehicle is {label}")
