"""
The CHIP-8 machine: state, CPU and the collaborators it talks to.

A host drives it by calling tick() at a steady cadence after start().
Rendering happens at the end of a tick, and only when the last cycles
changed the display.
"""

import logging
import random
from typing import Optional, Protocol

from .config import EmulatorConfig
from .cpu import Chip8CPU
from .display import DisplayBuffer
from .errors import Chip8Error, LoadError, NotLoadedError
from .keyboard import Keyboard
from .loader import Loader
from .state import CPUState

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    def render(self, display: DisplayBuffer) -> None:
        ...

    def clear(self) -> None:
        ...


class Chip8:
    """Complete CHIP-8 virtual machine"""

    def __init__(self,
                 renderer: Optional[Renderer] = None,
                 loader: Optional[Loader] = None,
                 keyboard: Optional[Keyboard] = None,
                 rng: Optional[random.Random] = None,
                 config: Optional[EmulatorConfig] = None):
        self.renderer = renderer
        self.loader = loader
        self.config = config or EmulatorConfig()
        self.state = CPUState()
        self.cpu = Chip8CPU(self.state, keyboard=keyboard, rng=rng,
                            on_clear=self._clear_screen)
        self.running = False
        self.loaded = False

        self.reset()

    # ─── Convenience accessors ───

    @property
    def memory(self):
        return self.state.memory

    @property
    def display(self) -> DisplayBuffer:
        return self.state.display

    @property
    def V(self):
        return self.state.V

    @property
    def keyboard(self) -> Optional[Keyboard]:
        return self.cpu.keyboard

    @keyboard.setter
    def keyboard(self, keyboard: Optional[Keyboard]):
        self.cpu.keyboard = keyboard

    @property
    def request_render(self) -> bool:
        """True when the display changed since the last render"""
        return self.cpu.draw_flag

    @request_render.setter
    def request_render(self, value: bool):
        self.cpu.draw_flag = value

    # ─── Lifecycle ───

    def reset(self):
        """Reset CPU to initial state"""
        self.state.reset()
        self.running = False
        self.loaded = False
        self.request_render = False
        logger.info("Reset")
        return self

    def load(self, config):
        """
        Fetch a program through the loader and copy it to 0x200.

        A failing loader or an oversized image raises LoadError with
        memory untouched. The machine is left stopped and unloaded
        until a later load succeeds.
        """
        self.running = False
        self.loaded = False
        if self.loader is None:
            raise LoadError(config, "no loader configured")

        data = self.loader.load(config)
        return self.load_bytes(data, source=config)

    def load_bytes(self, data: bytes, source="<bytes>"):
        """Load ROM data into memory"""
        self.running = False
        self.loaded = False
        self.state.memory.load_program(bytes(data), source=source)
        self.loaded = True
        logger.info("Loaded %s (%d bytes)", source, len(data))
        return self

    def start(self):
        """Let tick() execute cycles; refuses until a program is loaded"""
        if not self.loaded:
            raise NotLoadedError()
        self.running = True
        logger.info("Started at $%03X", self.state.PC)
        return self

    def stop(self):
        self.running = False
        logger.info("Stopped at $%03X", self.state.PC)
        return self

    # ─── Execution ───

    def run_cycle(self) -> Optional[int]:
        """
        Run exactly one fetch-decode-execute step.

        A fatal error (unknown opcode, stack fault) stops the machine and
        propagates to the caller.
        """
        try:
            return self.cpu.cycle()
        except Chip8Error as e:
            self.running = False
            raise

    def tick(self):
        """One host interval: run the configured cycles, then render if needed"""
        if self.running:
            for _ in range(self.config.cycles_per_tick):
                self.run_cycle()
                if not self.running:
                    break

        if self.request_render:
            if self.renderer is not None:
                self.renderer.render(self.state.display)
            self.request_render = False

    def update_timers(self):
        """Decrement timers (call at 60Hz)"""
        if self.state.delay_timer > 0:
            self.state.delay_timer -= 1

        if self.state.sound_timer > 0:
            self.state.sound_timer -= 1

    @property
    def sound_active(self) -> bool:
        return self.state.sound_timer > 0

    def _clear_screen(self):
        if self.renderer is not None:
            self.renderer.clear()
