"""Monochrome 64x32 display buffer."""

import numpy as np

from .constants import DISPLAY_H, DISPLAY_W


class DisplayBuffer:
    """
    One byte per pixel, row-major, flat: pixel (x, y) lives at x + y*64.

    A coordinate strictly greater than its dimension is pulled back by
    one width/height only. x=64 is therefore not wrapped and spills into
    column 0 of the next row, y=32 falls off the end of the buffer, and a
    sprite drawn more than a full screen away lands on the wrong row or
    off the buffer entirely. Pixels off the buffer are dropped.
    """

    def __init__(self, width: int = DISPLAY_W, height: int = DISPLAY_H):
        self.width = width
        self.height = height
        self.pixels = np.zeros(width * height, dtype=np.uint8)

    def __len__(self) -> int:
        return len(self.pixels)

    def __getitem__(self, index):
        return self.pixels[index]

    def clear(self):
        self.pixels.fill(0)

    def _index(self, x: int, y: int) -> int:
        if x > self.width:
            x -= self.width
        elif x < 0:
            x += self.width

        if y > self.height:
            y -= self.height
        elif y < 0:
            y += self.height

        return x + y * self.width

    def get(self, x: int, y: int) -> int:
        index = self._index(x, y)
        if not 0 <= index < len(self.pixels):
            return 0
        return int(self.pixels[index])

    def toggle(self, x: int, y: int) -> bool:
        """
        XOR the pixel at (x, y).

        Returns:
            True if a lit pixel was switched off (collision)
        """
        index = self._index(x, y)
        if not 0 <= index < len(self.pixels):
            return False

        self.pixels[index] ^= 1
        return not self.pixels[index]

    def as_2d(self) -> np.ndarray:
        """(height, width) view sharing storage with the flat buffer"""
        return self.pixels.reshape((self.height, self.width))

    def lit(self) -> int:
        """Number of pixels currently on"""
        return int(self.pixels.sum())
