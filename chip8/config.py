"""Emulator configuration settings."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .constants import CYCLE_HZ, TIMER_HZ

# Colors (RGB)
COLORS = {
    'bg_dark': (15, 15, 25),
    'fg_green': (0, 255, 128),
    'fg_amber': (255, 176, 0),
    'fg_white': (220, 220, 220),
    'fg_blue': (100, 180, 255),
}


@dataclass
class EmulatorConfig:
    """Emulator configuration settings"""
    # Timing
    cycle_hz: int = CYCLE_HZ
    cycles_per_tick: int = 1
    timer_hz: int = TIMER_HZ
    decrement_timers: bool = True

    # Display
    scale: int = 12
    fg_color: Tuple[int, int, int] = COLORS['fg_green']
    bg_color: Tuple[int, int, int] = COLORS['bg_dark']
    glow: bool = True

    # ROMs
    rom_dir: Optional[Path] = None

    def __post_init__(self):
        if self.cycle_hz <= 0:
            raise ValueError(f"cycle_hz must be positive, got {self.cycle_hz}")
        if self.cycles_per_tick < 1:
            raise ValueError(f"cycles_per_tick must be at least 1, got {self.cycles_per_tick}")
        if self.timer_hz < 0:
            raise ValueError(f"timer_hz must not be negative, got {self.timer_hz}")
        if self.scale < 1:
            raise ValueError(f"scale must be at least 1, got {self.scale}")

    @property
    def timer_steps_per_tick(self) -> float:
        """Timer decrements owed per driver tick"""
        if not self.decrement_timers:
            return 0.0
        return self.timer_hz / self.cycle_hz
