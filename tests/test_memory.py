"""Memory and display buffer tests."""

import numpy as np
import pytest

from chip8 import DisplayBuffer, Memory, ProgramTooLargeError
from chip8.constants import FONTSET, MAX_PROGRAM_SIZE, PROGRAM_START


class TestMemory:
    def test_font_at_address_zero(self):
        mem = Memory()
        for digit in range(16):
            base = Memory.font_address(digit)
            assert mem[base:base + 5] == FONTSET[digit * 5:digit * 5 + 5]

    def test_write_masks_value(self):
        mem = Memory()
        mem.write(0x300, 0x1FF)
        assert mem.read(0x300) == 0xFF

    def test_addresses_wrap(self):
        """0x1000 aliases 0x000"""
        mem = Memory()
        mem.write(0x1005, 0x42)
        assert mem.read(0x005) == 0x42
        assert mem.read(0x2005) == 0x42

    def test_read_word_across_end(self):
        mem = Memory()
        mem.write(0xFFF, 0xAB)
        assert mem.read_word(0xFFF) == (0xAB << 8) | FONTSET[0]

    def test_reset_zeroes_program_area(self):
        mem = Memory()
        mem.load_program(b"\x01\x02\x03")
        mem.write(0x100, 9)
        mem.reset()
        assert mem[PROGRAM_START:PROGRAM_START + 3] == bytes(3)
        assert mem.read(0x100) == 0
        assert mem[0:80] == FONTSET

    def test_load_program_returns_size(self):
        assert Memory().load_program(b"\x00" * 10) == 10

    def test_too_large(self):
        mem = Memory()
        with pytest.raises(ProgramTooLargeError) as exc:
            mem.load_program(bytes(MAX_PROGRAM_SIZE + 2), source="big.ch8")
        assert exc.value.limit == MAX_PROGRAM_SIZE
        assert "big.ch8" in str(exc.value)


class TestDisplayBuffer:
    def test_flat_row_major(self):
        display = DisplayBuffer()
        assert len(display) == 64 * 32
        display.toggle(3, 2)
        assert display[3 + 2 * 64] == 1
        assert display.as_2d()[2, 3] == 1

    def test_toggle_reports_collision(self):
        display = DisplayBuffer()
        assert display.toggle(5, 5) is False
        assert display.toggle(5, 5) is True
        assert display.get(5, 5) == 0

    def test_column_64_is_not_wrapped(self):
        """x=64 is left alone and the flat index lands on (0, y+1)"""
        display = DisplayBuffer()
        display.toggle(64, 3)
        assert display.pixels[64 + 3 * 64] == 1
        assert display.get(0, 4) == 1
        assert display.get(0, 3) == 0

    def test_row_32_falls_off(self):
        """y=32 is past the last row and is dropped"""
        display = DisplayBuffer()
        assert display.toggle(5, 32) is False
        assert display.lit() == 0

    def test_past_edge_wraps_once(self):
        """x=65, y=33 come back to (1, 1)"""
        display = DisplayBuffer()
        display.toggle(65, 33)
        assert display.get(1, 1) == 1

    def test_wrap_is_single_subtraction(self):
        """x=129 becomes 65, which the flat index places at (1, y+1)"""
        display = DisplayBuffer()
        display.toggle(129, 0)
        assert display.get(1, 1) == 1

    def test_clear(self):
        display = DisplayBuffer()
        display.toggle(1, 1)
        display.toggle(10, 20)
        assert display.lit() == 2
        display.clear()
        assert not np.any(display.pixels)

    def test_as_2d_shares_storage(self):
        display = DisplayBuffer()
        display.as_2d()[31, 63] = 1
        assert display.pixels[-1] == 1
