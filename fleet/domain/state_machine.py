"""
Table-driven finite state machine.

The engine knows nothing about vehicles: it evaluates a static
``event -> (sources, destination)`` table, holds the current state, and
calls ``on_enter`` every time a state is entered.  ``redirects`` lists
states that are never rested in: entering one immediately forces the
mapped state, which fires ``on_enter`` again.
"""

from __future__ import annotations

from typing import Callable, Generic, Hashable, Mapping, Optional, TypeVar

from .errors import InvalidTransition

S = TypeVar("S", bound=Hashable)
E = TypeVar("E", bound=Hashable)


class StateMachine(Generic[S, E]):
    def __init__(
        self,
        initial: S,
        transitions: Mapping[E, tuple[frozenset[S], S]],
        on_enter: Optional[Callable[[S], None]] = None,
        redirects: Optional[Mapping[S, S]] = None,
    ):
        self._current = initial
        self._transitions = transitions
        self._on_enter = on_enter
        self._redirects = redirects or {}

    @property
    def current(self) -> S:
        return self._current

    def can_fire(self, event: E) -> bool:
        """True iff *event* is allowed from the current state."""
        sources, _ = self._transitions[event]
        return self._current in sources

    def fire(self, event: E) -> Optional[InvalidTransition]:
        """Move along *event*, or return an error without touching state."""
        if not self.can_fire(event):
            return InvalidTransition(getattr(event, "value", str(event)), self._current)
        _, destination = self._transitions[event]
        self._enter(destination)
        return None

    def force_state(self, state: S) -> None:
        """Set the state unconditionally.  Entry hooks still run."""
        self._enter(state)

    def _enter(self, state: S) -> None:
        self._current = state
        if self._on_enter is not None:
            self._on_enter(state)
        redirect = self._redirects.get(state)
        if redirect is not None:
            self._enter(redirect)
