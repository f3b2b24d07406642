import random

import pytest

from chip8 import Chip8, KeypadState


class RecordingRenderer:
    """Renderer double that remembers what it was asked to do"""

    def __init__(self):
        self.frames = []
        self.clears = 0

    def render(self, display):
        self.frames.append(display.pixels.copy())

    def clear(self):
        self.clears += 1


class FakeClock:
    """Stands in for pygame.time.Clock"""

    def __init__(self):
        self.calls = []

    def tick(self, framerate=0):
        self.calls.append(framerate)
        return 0


def words(*opcodes):
    """Assemble 16-bit opcodes into a big-endian program image"""
    out = bytearray()
    for op in opcodes:
        out += bytes([(op >> 8) & 0xFF, op & 0xFF])
    return bytes(out)


def run(emu, opcodes, cycles=None):
    """Load opcodes at 0x200 and execute them"""
    emu.load_bytes(words(*opcodes))
    for _ in range(len(opcodes) if cycles is None else cycles):
        emu.run_cycle()
    return emu


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def keypad():
    return KeypadState()


@pytest.fixture
def emu(renderer):
    return Chip8(renderer=renderer, rng=random.Random(1234))


@pytest.fixture
def clock():
    return FakeClock()
