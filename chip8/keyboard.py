"""
Hex keypad collaborator.

The CPU asks two things of a keyboard: whether a key is down (SKP/SKNP)
and which key, if any, has been pressed while it waits on LD Vx, K.
wait_for_key never blocks; the CPU parks and polls it once per cycle.
"""

import logging
from typing import List, Optional, Protocol

from .constants import NUM_KEYS

logger = logging.getLogger(__name__)


class Keyboard(Protocol):
    def is_pressed(self, key: int) -> bool:
        ...

    def wait_for_key(self) -> Optional[int]:
        ...


class KeypadState:
    """16-key pressed state fed by the host's key events"""

    def __init__(self):
        self.keys: List[bool] = [False] * NUM_KEYS
        self._last_pressed: Optional[int] = None

    def key_down(self, key: int):
        """Handle key press"""
        if 0 <= key < NUM_KEYS:
            self.keys[key] = True
            self._last_pressed = key
            logger.debug("Key %X down", key)

    def key_up(self, key: int):
        """Handle key release"""
        if 0 <= key < NUM_KEYS:
            self.keys[key] = False
            logger.debug("Key %X up", key)

    def release_all(self):
        self.keys = [False] * NUM_KEYS
        self._last_pressed = None

    def is_pressed(self, key: int) -> bool:
        return self.keys[key & 0xF]

    def wait_for_key(self) -> Optional[int]:
        """Most recently pressed key that is still down, else the lowest held key"""
        if self._last_pressed is not None and self.keys[self._last_pressed]:
            return self._last_pressed
        for i, pressed in enumerate(self.keys):
            if pressed:
                return i
        return None
