"""Draw session: the spin/settle/refill cycle on top of the pool and spinner.

Flow of one draw::

    IDLE --spin()--> SPINNING --spin_duration--> SETTLING --> AWAITING_REFILL
         <--------------------- refill_delay ---------------------/
                                     (or COMPLETE once the pool is empty)

Timers are tagged with the session generation they were scheduled in;
``reset()`` bumps the generation and cancels them, so a stale timer can never
touch the fresh state even if its cancellation raced with it.
"""

from dataclasses import dataclass
from typing import Callable, Optional
import logging
import random

from raffle.animation.tween import RotationTween
from raffle.config.settings import DrawSettings
from raffle.core.events import Event, EventBus, EventType, winner_event
from raffle.core.scheduler import Scheduler, TimerHandle
from raffle.core.state import DrawState, StateMachine
from raffle.draw.pool import DrawPool
from raffle.draw.wheel import SpinPlan, WheelSpinner

logger = logging.getLogger(__name__)

SpinCompleteCallback = Callable[[int], None]


@dataclass(frozen=True)
class DrawSnapshot:
    """Read-only view of a draw session."""

    state: DrawState
    visible: tuple[int, ...]
    drawn: tuple[int, ...]
    remaining_count: int
    rotation: float
    last_winner: Optional[int]

    @property
    def is_spinning(self) -> bool:
        return self.state == DrawState.SPINNING

    @property
    def is_complete(self) -> bool:
        return self.remaining_count == 0


class DrawSession:
    """Runs a raffle draw until every identifier has been picked.

    Args:
        scheduler: Delivers the completion, announcement and refill timers
        settings: Pool size, wheel size, timings and spin tuning
        rng: Random source shared by pool and spinner. When omitted a generator
            seeded with ``settings.seed`` is used (unseeded if that is None)
        event_bus: Bus to publish draw events on; a private one when omitted
        on_spin_complete: Listener for winners, same as :meth:`on_spin_complete`
    """

    def __init__(
        self,
        scheduler: Scheduler,
        settings: Optional[DrawSettings] = None,
        *,
        rng: Optional[random.Random] = None,
        event_bus: Optional[EventBus] = None,
        on_spin_complete: Optional[SpinCompleteCallback] = None,
    ) -> None:
        self.settings = settings or DrawSettings()
        self._scheduler = scheduler
        self._rng = rng or random.Random(self.settings.seed)
        self.event_bus = event_bus or EventBus()

        self.pool = DrawPool(
            self.settings.universe_size,
            self.settings.wheel_capacity,
            rng=self._rng,
        )
        self.spinner = WheelSpinner(
            self._rng,
            min_full_spins=self.settings.min_full_spins,
            extra_full_spins=self.settings.extra_full_spins,
            jitter_fraction=self.settings.jitter_fraction,
            pointer_angle=self.settings.pointer_angle,
            duration_ms=self.settings.spin_duration_ms,
        )
        self.state_machine = StateMachine()
        self.state_machine.add_listener(self._on_state_changed)

        self._generation = 0
        self._timers: list[TimerHandle] = []
        self._rotation = 0.0
        self._plan: Optional[SpinPlan] = None
        self._tween: Optional[RotationTween] = None
        self._last_winner: Optional[int] = None

        if on_spin_complete is not None:
            self.on_spin_complete(on_spin_complete)

        logger.info(
            f"Draw session ready: {self.pool.remaining_count} identifiers, "
            f"{len(self.pool.visible)} on the wheel"
        )

    # Snapshots

    @property
    def state(self) -> DrawState:
        return self.state_machine.state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def visible(self) -> tuple[int, ...]:
        return self.pool.visible

    @property
    def drawn(self) -> tuple[int, ...]:
        return self.pool.drawn

    @property
    def remaining_count(self) -> int:
        return self.pool.remaining_count

    @property
    def is_spinning(self) -> bool:
        return self.state == DrawState.SPINNING

    @property
    def is_complete(self) -> bool:
        return self.pool.is_exhausted

    @property
    def rotation(self) -> float:
        """Absolute rotation the dial is at, or heading to while spinning."""
        return self._rotation

    @property
    def last_plan(self) -> Optional[SpinPlan]:
        return self._plan

    @property
    def last_winner(self) -> Optional[int]:
        return self._last_winner

    @property
    def display_segments(self) -> tuple[int, ...]:
        """Segments a presenter should draw.

        Between the end of a spin and the refill the landed wheel (winner
        included) stays on screen, even though the winner has already left
        the pool.
        """
        if self._plan is not None and self.state in (
            DrawState.SETTLING,
            DrawState.AWAITING_REFILL,
        ):
            return self._plan.segments
        return self.pool.visible

    @property
    def can_spin(self) -> bool:
        return self.state == DrawState.IDLE and bool(self.pool.visible)

    def snapshot(self) -> DrawSnapshot:
        return DrawSnapshot(
            state=self.state,
            visible=self.pool.visible,
            drawn=self.pool.drawn,
            remaining_count=self.pool.remaining_count,
            rotation=self._rotation,
            last_winner=self._last_winner,
        )

    # Commands

    def on_spin_complete(self, callback: SpinCompleteCallback) -> Callable[[], None]:
        """Call ``callback(winner)`` once per completed spin.

        Returns:
            Unsubscribe function
        """
        def handler(event: Event) -> None:
            callback(event.data["winner"])

        return self.event_bus.subscribe(EventType.SPIN_COMPLETE, handler)

    def spin(self) -> Optional[SpinPlan]:
        """Start a spin if the wheel is idle and not empty.

        Returns:
            The spin plan, or None when the request was ignored
        """
        if not self.can_spin:
            logger.debug(
                f"Spin ignored in state {self.state.name} "
                f"with {len(self.pool.visible)} segments"
            )
            return None

        plan = self.spinner.plan(self.pool.visible, self._rotation)
        if plan is None:
            return None

        self.state_machine.transition(DrawState.SPINNING)
        self._plan = plan
        self._rotation = plan.final_rotation
        self._tween = RotationTween(
            start=plan.start_rotation,
            end=plan.final_rotation,
            duration=plan.duration_ms,
        ).play()

        self._schedule(plan.duration_ms, self._complete_spin, "spin-complete")
        self.event_bus.emit(Event(
            EventType.SPIN_STARTED,
            data={
                "segments": plan.segments,
                "final_rotation": plan.final_rotation,
                "duration_ms": plan.duration_ms,
                "generation": self._generation,
            },
        ))
        logger.info(f"Spinning {len(plan.segments)} segments")
        return plan

    def reset(self) -> None:
        """Put every identifier back, cancel pending timers and return to IDLE.

        The dial keeps its accumulated rotation so the next spin starts where
        the wheel visibly is.
        """
        self._generation += 1
        self._cancel_timers()

        if self._tween is not None:
            self._tween.stop()
            self._rotation = self._tween.value
            self._tween = None

        self._plan = None
        self._last_winner = None
        self.pool.reset()
        self.state_machine.reset(generation=self._generation)

        self.event_bus.emit(Event(
            EventType.DRAW_RESET,
            data={"generation": self._generation, "visible": self.pool.visible},
        ))
        logger.info(f"Draw reset (generation {self._generation})")

    def update(self, delta_ms: float) -> float:
        """Advance the dial animation and return the angle to display."""
        if self._tween is None:
            return self._rotation
        return self._tween.update(delta_ms)

    @property
    def display_rotation(self) -> float:
        """Angle the dial is currently shown at."""
        if self._tween is None:
            return self._rotation
        return self._tween.value

    # Timer callbacks

    def _complete_spin(self) -> None:
        plan = self._plan
        assert plan is not None
        generation = self._generation

        self.state_machine.transition(DrawState.SETTLING, last_winner=plan.winner)
        if self._reset_since(generation):
            return
        if self._tween is not None and not self._tween.is_finished:
            self._tween.update(self._tween.duration)

        self.pool.record_winner(plan.winner)
        self._last_winner = plan.winner
        logger.info(f"Winner: {plan.winner}")

        self.event_bus.emit(winner_event(EventType.SPIN_COMPLETE, plan.winner, self._generation))
        # Winner listeners may reset the draw; the follow-up timers belong to
        # the old generation and must not be scheduled under the new one
        if self._reset_since(generation):
            return

        self.state_machine.transition(DrawState.AWAITING_REFILL)
        self._schedule(self.settings.announce_delay_ms, self._announce_winner, "announce")
        self._schedule(self.settings.refill_delay_ms, self._refill, "refill")

    def _announce_winner(self) -> None:
        if self._last_winner is None:
            return
        self.event_bus.emit(
            winner_event(EventType.WINNER_ANNOUNCED, self._last_winner, self._generation)
        )

    def _refill(self) -> None:
        generation = self._generation
        visible = self.pool.populate_visible()
        self.event_bus.emit(Event(
            EventType.WHEEL_REFILLED,
            data={"visible": visible, "generation": self._generation},
        ))
        if self._reset_since(generation):
            return

        if self.pool.is_exhausted:
            self.state_machine.transition(DrawState.COMPLETE)
            self.event_bus.emit(Event(
                EventType.DRAW_COMPLETE,
                data={"drawn": self.pool.drawn, "generation": self._generation},
            ))
            logger.info(f"Draw complete: {list(self.pool.drawn)}")
        else:
            self.state_machine.transition(DrawState.IDLE)

    # Plumbing

    def _reset_since(self, generation: int) -> bool:
        if generation == self._generation:
            return False
        logger.debug(f"Draw was reset during a generation {generation} callback")
        return True

    def _schedule(self, delay_ms: float, callback: Callable[[], None], label: str) -> None:
        generation = self._generation

        def fire() -> None:
            if generation != self._generation:
                logger.debug(
                    f"Dropping stale {label} timer from generation {generation}"
                )
                return
            callback()

        self._timers = [t for t in self._timers if t.pending]
        self._timers.append(self._scheduler.schedule(delay_ms, fire, label=label))

    def _cancel_timers(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    def _on_state_changed(self, old: DrawState, new: DrawState, context) -> None:
        self.event_bus.emit(Event(
            EventType.STATE_CHANGED,
            data={"from": old, "to": new, "generation": self._generation},
        ))
