"""
4KB CHIP-8 address space.

0x000-0x1FF is the interpreter area and holds the hex font sprites,
programs are copied in from 0x200. Every address is wrapped into range,
so I/PC arithmetic that runs off the end comes back around to 0x000.
"""

import logging
from typing import Union

from .constants import (
    ADDRESS_MASK,
    FONTSET,
    FONT_SPRITE_SIZE,
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
)
from .errors import ProgramTooLargeError

logger = logging.getLogger(__name__)


class Memory:
    """Byte-addressable RAM with the font table preloaded"""

    def __init__(self):
        self.data = bytearray(MEMORY_SIZE)
        self._load_fontset()

    def __len__(self) -> int:
        return MEMORY_SIZE

    def __getitem__(self, address: Union[int, slice]):
        if isinstance(address, slice):
            return bytes(self.data[address])
        return self.read(address)

    def __setitem__(self, address: int, value: int):
        self.write(address, value)

    def _load_fontset(self):
        """Load built-in font sprites to memory"""
        self.data[0:len(FONTSET)] = FONTSET

    def reset(self):
        """Zero every byte and reload the font table"""
        self.data[:] = bytes(MEMORY_SIZE)
        self._load_fontset()

    def read(self, address: int) -> int:
        return self.data[address & ADDRESS_MASK]

    def write(self, address: int, value: int):
        self.data[address & ADDRESS_MASK] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Big-endian 16-bit read, used for opcode fetch"""
        return (self.read(address) << 8) | self.read(address + 1)

    def load_program(self, data: bytes, source="<bytes>") -> int:
        """
        Copy a program image into memory at PROGRAM_START.

        The size is checked before anything is written, so a rejected
        image leaves memory untouched.

        Returns:
            number of bytes written
        """
        if len(data) > MAX_PROGRAM_SIZE:
            raise ProgramTooLargeError(source, len(data), MAX_PROGRAM_SIZE)

        self.data[PROGRAM_START:PROGRAM_START + len(data)] = data
        logger.debug("Loaded %d bytes from %s at $%03X", len(data), source, PROGRAM_START)
        return len(data)

    @staticmethod
    def font_address(digit: int) -> int:
        """Base address of the sprite for hex digit `digit`"""
        return digit * FONT_SPRITE_SIZE
