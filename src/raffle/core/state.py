"""
State machine for a raffle draw session.

States:
    IDLE: Wheel populated, waiting for a spin request
    SPINNING: Winner chosen, wheel animating towards its target
    SETTLING: Animation finished, winner being handed to listeners
    AWAITING_REFILL: Winner announced, wheel not yet repopulated
    COMPLETE: Every identifier has been drawn
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Callable, Any
import logging

logger = logging.getLogger(__name__)


class DrawState(Enum):
    """Draw session states."""
    IDLE = auto()
    SPINNING = auto()
    SETTLING = auto()
    AWAITING_REFILL = auto()
    COMPLETE = auto()


@dataclass
class StateContext:
    """Context data carried alongside the current state."""
    generation: int = 0
    last_winner: int | None = None
    data: dict[str, Any] = field(default_factory=dict)


StateListener = Callable[[DrawState, DrawState, StateContext], None]


class StateMachine:
    """
    Tracks the draw session state and validates transitions.

    Illegal transitions are rejected (logged and reported as False) so a
    caller can never, for example, start a spin while one is in flight.
    """

    VALID_TRANSITIONS: list[tuple[DrawState, DrawState]] = [
        (DrawState.IDLE, DrawState.SPINNING),

        (DrawState.SPINNING, DrawState.SETTLING),

        (DrawState.SETTLING, DrawState.AWAITING_REFILL),

        # Refill either reopens the wheel or ends the draw
        (DrawState.AWAITING_REFILL, DrawState.IDLE),
        (DrawState.AWAITING_REFILL, DrawState.COMPLETE),
    ]

    def __init__(self, initial_state: DrawState = DrawState.IDLE) -> None:
        self._state = initial_state
        self._context = StateContext()
        self._listeners: list[StateListener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.debug(f"StateMachine initialized with state: {initial_state.name}")

    @property
    def state(self) -> DrawState:
        """Get current state."""
        return self._state

    @property
    def context(self) -> StateContext:
        """Get current context."""
        return self._context

    def can_transition(self, to_state: DrawState) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: DrawState, **context_updates: Any) -> bool:
        """
        Attempt to transition to a new state.

        Args:
            to_state: Target state
            **context_updates: Context attributes to overwrite

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state

        for key, value in context_updates.items():
            if key == "data":
                self._context.data.update(value)
            elif hasattr(self._context, key):
                setattr(self._context, key, value)

        logger.debug(f"State transition: {old_state.name} -> {to_state.name}")
        self._notify(old_state, to_state)
        return True

    def add_listener(self, callback: StateListener) -> None:
        """Add a state change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: StateListener) -> None:
        """Remove a state change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def reset(self, generation: int = 0) -> None:
        """Force the machine back to IDLE with a fresh context.

        Reset is allowed from every state, so it bypasses the transition table.
        """
        old_state = self._state
        self._state = DrawState.IDLE
        self._context = StateContext(generation=generation)
        self._notify(old_state, DrawState.IDLE)
        logger.debug("StateMachine reset to IDLE")

    def _notify(self, old_state: DrawState, new_state: DrawState) -> None:
        for listener in self._listeners:
            try:
                listener(old_state, new_state, self._context)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")
