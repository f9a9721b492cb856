"""Core framework components for the raffle draw."""

from .state import DrawState, StateMachine
from .events import EventBus, Event, EventType
from .scheduler import Scheduler, ManualScheduler, AsyncioScheduler, TimerHandle

__all__ = [
    "DrawState",
    "StateMachine",
    "EventBus",
    "Event",
    "EventType",
    "Scheduler",
    "ManualScheduler",
    "AsyncioScheduler",
    "TimerHandle",
]
