"""
Tick source for the emulator.

run_loop paces Chip8.tick() with any clock exposing pygame's
`Clock.tick(framerate)` and feeds the 60Hz timers alongside it.
"""

import logging
from typing import Callable, Optional, Protocol

from .config import EmulatorConfig
from .emulator import Chip8
from .errors import Chip8Error

logger = logging.getLogger(__name__)


class Clock(Protocol):
    def tick(self, framerate: float = 0) -> int:
        ...


def run_loop(emulator: Chip8, clock: Clock,
             config: Optional[EmulatorConfig] = None,
             max_ticks: Optional[int] = None,
             on_tick: Optional[Callable[[Chip8], bool]] = None,
             run_while_stopped: bool = False) -> int:
    """
    Drive the emulator until it stops.

    Args:
        emulator: a started Chip8
        clock: paces the loop at config.cycle_hz
        config: defaults to the emulator's own configuration
        max_ticks: stop after this many ticks
        on_tick: called before every tick; returning False ends the loop
        run_while_stopped: keep ticking (without executing or timing) after
            the emulator stops, so a host can pause and resume it

    Returns:
        number of ticks run
    """
    config = config or emulator.config
    timer_steps = config.timer_steps_per_tick
    timer_debt = 0.0
    ticks = 0

    while emulator.running or run_while_stopped:
        if max_ticks is not None and ticks >= max_ticks:
            break
        if on_tick is not None and on_tick(emulator) is False:
            break

        clock.tick(config.cycle_hz)
        try:
            emulator.tick()
        except Chip8Error as e:
            logger.error("Emulation stopped: %s", e)
            logger.error("%s", emulator.state.dump())
            raise

        if not emulator.running:
            ticks += 1
            continue

        timer_debt += timer_steps
        while timer_debt >= 1.0:
            emulator.update_timers()
            timer_debt -= 1.0

        ticks += 1

    return ticks
