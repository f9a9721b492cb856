"""
Main entry point for the raffle wheel.

Runs a complete draw on an asyncio loop: spin, announce the winner, refill the
wheel, spin again, until every number has been drawn.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from raffle.config.settings import Settings, get_settings
from raffle.core.events import Event, EventType
from raffle.core.scheduler import AsyncioScheduler
from raffle.core.state import DrawState
from raffle.draw.session import DrawSession

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Spin the raffle wheel until every number is drawn")
    parser.add_argument("--universe", type=int, default=None, help="How many numbers are in the draw")
    parser.add_argument("--wheel", type=int, default=None, help="How many numbers fit on the wheel")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible draw")
    parser.add_argument("--speed", type=float, default=1.0, help="Time scale (0.1 = ten times faster)")
    parser.add_argument("--frames", type=Path, default=None, help="Directory for a PNG of every landing")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return a copy of ``settings`` with command line values applied."""
    draw_updates = {
        key: value
        for key, value in (
            ("universe_size", args.universe),
            ("wheel_capacity", args.wheel),
            ("seed", args.seed),
        )
        if value is not None
    }
    draw = settings.draw.model_copy(update=draw_updates)
    return settings.model_copy(update={"draw": draw, "debug": settings.debug or args.debug})


async def run_draw(
    settings: Settings,
    time_scale: float = 1.0,
    frames_dir: Optional[Path] = None,
) -> tuple[int, ...]:
    """Run a full draw and return the winners in order."""
    loop = asyncio.get_running_loop()
    scheduler = AsyncioScheduler(loop, time_scale=time_scale)
    session = DrawSession(scheduler, settings.draw)
    finished: asyncio.Future = loop.create_future()

    def on_loop_error(loop: asyncio.AbstractEventLoop, context: dict) -> None:
        # Errors raised in timer callbacks end the draw
        if finished.done():
            loop.default_exception_handler(context)
            return
        error = context.get("exception") or RuntimeError(context["message"])
        finished.set_exception(error)

    def on_draw_complete(event: Event) -> None:
        if not finished.done():
            finished.set_result(None)

    def on_state_changed(event: Event) -> None:
        if event.data["to"] == DrawState.IDLE:
            loop.call_soon(session.spin)

    def on_announced(event: Event) -> None:
        winner = event.data["winner"]
        print(f"Winner #{len(session.drawn)}: {winner}  ({session.remaining_count} left)")

    def on_spin_complete(winner: int) -> None:
        plan = session.last_plan
        if frames_dir is None or plan is None:
            return
        from raffle.graphics.wheel import save_wheel_image

        path = frames_dir / f"spin_{len(session.drawn):03d}_{winner}.png"
        save_wheel_image(path, plan.segments, plan.final_rotation, settings.render)

    session.event_bus.subscribe(EventType.STATE_CHANGED, on_state_changed)
    session.event_bus.subscribe(EventType.WINNER_ANNOUNCED, on_announced)
    session.event_bus.subscribe(EventType.DRAW_COMPLETE, on_draw_complete)
    session.on_spin_complete(on_spin_complete)

    previous_handler = loop.get_exception_handler()
    loop.set_exception_handler(on_loop_error)
    try:
        session.spin()
        await finished
    finally:
        loop.set_exception_handler(previous_handler)
    return session.drawn


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    load_dotenv()

    args = parse_args(argv)
    settings = apply_overrides(get_settings(), args)
    setup_logging(settings.debug)

    logger.info("Raffle starting...")

    try:
        drawn = asyncio.run(run_draw(settings, time_scale=args.speed, frames_dir=args.frames))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    print(f"All numbers drawn: {', '.join(str(n) for n in drawn)}")
    logger.info("Raffle stopped")


if __name__ == "__main__":
    main()
