"""
pygame host: window, keypad and the 30Hz tick source.

Controls:
  CHIP-8 Keypad: 1234 / QWER / ASDF / ZXCV
  P = Pause/Resume
  ESC = Exit
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
import pygame

from .config import COLORS, EmulatorConfig
from .constants import DISPLAY_H, DISPLAY_W
from .display import DisplayBuffer
from .driver import run_loop
from .emulator import Chip8
from .errors import Chip8Error
from .keyboard import KeypadState
from .loader import FileLoader

logger = logging.getLogger(__name__)

GLOW_UPSCALE = 4                        # Internal upscale for glow blur
BLOOM_STRENGTH = 0.55                   # Glow intensity (0.0-1.0)
BLUR_RADIUS = 1                         # Box blur passes (0-3)

# Keyboard mapping (QWERTY -> CHIP-8 hex keypad)
# CHIP-8 Keypad:    Keyboard:
# 1 2 3 C          1 2 3 4
# 4 5 6 D          Q W E R
# 7 8 9 E          A S D F
# A 0 B F          Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


# ═══════════════════════════════════════════════════════════════════════════════
# RENDERER
# ═══════════════════════════════════════════════════════════════════════════════

class PygameRenderer:
    """Paints the display buffer onto a pygame surface, with optional phosphor glow"""

    def __init__(self, surface: pygame.Surface, scale: int,
                 fg_color: Tuple[int, int, int] = COLORS['fg_green'],
                 bg_color: Tuple[int, int, int] = COLORS['bg_dark'],
                 glow: bool = True):
        self.surface = surface
        self.width = DISPLAY_W
        self.height = DISPLAY_H
        self.scale = scale
        self.fg_color = fg_color
        self.bg_color = bg_color
        self.glow = glow
        self.final_size = (self.width * scale, self.height * scale)
        self.frames = 0

    @staticmethod
    def box_blur(arr: np.ndarray, passes: int = 1) -> np.ndarray:
        """Fast box blur using rolling averages"""
        a = arr.copy()
        for _ in range(passes):
            # Horizontal blur
            a = (np.roll(a, 1, axis=1) + a + np.roll(a, -1, axis=1)) / 3.0
            # Vertical blur
            a = (np.roll(a, 1, axis=0) + a + np.roll(a, -1, axis=0)) / 3.0
        return a

    def colorize(self, frame: np.ndarray) -> np.ndarray:
        """
        Map a (height, width) 0-1 frame to a (width, height, 3) RGB array,
        the axis order pygame.surfarray expects.
        """
        base = frame.T.astype(np.float32)
        fg = np.array(self.fg_color, dtype=np.float32)
        bg = np.array(self.bg_color, dtype=np.float32)
        rgb = bg + base[:, :, None] * (fg - bg)
        return np.ascontiguousarray(rgb, dtype=np.uint8)

    def _glow_surface(self, frame: np.ndarray) -> pygame.Surface:
        up = np.kron(frame.T.astype(np.float32), np.ones((GLOW_UPSCALE, GLOW_UPSCALE), dtype=np.float32))
        glow = self.box_blur(up, passes=1 + BLUR_RADIUS)
        glow = np.clip(glow * BLOOM_STRENGTH, 0.0, 1.0)

        glow_rgb = np.zeros(glow.shape + (3,), dtype=np.uint8)
        for i, c in enumerate(self.fg_color):
            glow_rgb[:, :, i] = (glow * c).astype(np.uint8)

        return pygame.transform.smoothscale(pygame.surfarray.make_surface(glow_rgb), self.final_size)

    def render(self, display: DisplayBuffer):
        """Paint the current 64x32 buffer"""
        frame = display.as_2d()
        base_surf = pygame.surfarray.make_surface(self.colorize(frame))
        self.surface.blit(pygame.transform.scale(base_surf, self.final_size), (0, 0))

        if self.glow:
            self.surface.blit(self._glow_surface(frame), (0, 0), special_flags=pygame.BLEND_ADD)

        self.frames += 1
        if pygame.display.get_init() and pygame.display.get_surface() is self.surface:
            pygame.display.flip()

    def clear(self):
        """Blank the screen"""
        self.surface.fill(self.bg_color)
        if pygame.display.get_init() and pygame.display.get_surface() is self.surface:
            pygame.display.flip()


# ═══════════════════════════════════════════════════════════════════════════════
# EVENT HANDLING
# ═══════════════════════════════════════════════════════════════════════════════

def handle_events(emulator: Chip8, keypad: KeypadState, events: List[pygame.event.Event]) -> bool:
    """
    Feed key events to the keypad and handle host shortcuts.

    Returns:
        False once the user asked to quit
    """
    for event in events:
        if event.type == pygame.QUIT:
            return False

        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            elif event.key == pygame.K_p:
                if emulator.running:
                    emulator.stop()
                    keypad.release_all()
                else:
                    emulator.start()
            elif event.key in KEY_MAP:
                keypad.key_down(KEY_MAP[event.key])

        elif event.type == pygame.KEYUP:
            if event.key in KEY_MAP:
                keypad.key_up(KEY_MAP[event.key])

    return True


# ═══════════════════════════════════════════════════════════════════════════════
# ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cats-chip8", description="Run a CHIP-8 program.")
    parser.add_argument("rom", help="ROM file (.ch8/.c8 suffix may be omitted)")
    parser.add_argument("--hz", type=int, default=EmulatorConfig.cycle_hz,
                        help="driver ticks per second")
    parser.add_argument("--cycles-per-tick", type=int, default=1,
                        help="instructions executed per tick")
    parser.add_argument("--scale", type=int, default=EmulatorConfig.scale,
                        help="window pixels per CHIP-8 pixel")
    parser.add_argument("--no-timers", action="store_true",
                        help="never decrement DT/ST")
    parser.add_argument("--no-glow", action="store_true",
                        help="disable the phosphor glow")
    parser.add_argument("--rom-dir", type=Path, default=None,
                        help="directory searched for ROMs")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def config_from_args(args: argparse.Namespace) -> EmulatorConfig:
    return EmulatorConfig(
        cycle_hz=args.hz,
        cycles_per_tick=args.cycles_per_tick,
        decrement_timers=not args.no_timers,
        scale=args.scale,
        glow=not args.no_glow,
        rom_dir=args.rom_dir,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="[%(levelname)s] %(name)s: %(message)s")

    try:
        config = config_from_args(args)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2

    keypad = KeypadState()
    loader = FileLoader(config.rom_dir)
    emulator = Chip8(loader=loader, keyboard=keypad, config=config)
    try:
        emulator.load(args.rom)
    except Chip8Error as e:
        print(e, file=sys.stderr)
        roms = loader.list_roms()
        if roms:
            print("Available ROMs:", file=sys.stderr)
            for rom in roms:
                print(f"  {rom.name}", file=sys.stderr)
        return 1

    pygame.init()
    pygame.display.set_caption(f"Cat's CHIP-8 - {Path(args.rom).stem}")
    screen = pygame.display.set_mode((DISPLAY_W * config.scale, DISPLAY_H * config.scale))
    logger.debug("Window %dx%d, %d Hz x %d cycles", screen.get_width(), screen.get_height(),
                 config.cycle_hz, config.cycles_per_tick)
    emulator.renderer = PygameRenderer(screen, config.scale, config.fg_color,
                                       config.bg_color, glow=config.glow)
    emulator.renderer.clear()

    emulator.start()
    try:
        run_loop(emulator, pygame.time.Clock(), config,
                 on_tick=lambda emu: handle_events(emu, keypad, pygame.event.get()),
                 run_while_stopped=True)
    except Chip8Error as e:
        print(f"Emulation stopped: {e}", file=sys.stderr)
        return 1
    finally:
        pygame.quit()

    return 0
