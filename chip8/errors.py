"""Exceptions raised by the CHIP-8 core."""

from typing import Optional


class Chip8Error(Exception):
    """Base class for every emulator error"""


class UnknownOpcodeError(Chip8Error):
    """Raised when the decoder meets an opcode outside the instruction table"""

    def __init__(self, opcode: int, address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(f"Unknown opcode ${opcode:04X} at ${address:03X}")


class StackOverflowError(Chip8Error):
    """CALL with every stack slot in use"""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Stack overflow at ${address:03X}")


class StackUnderflowError(Chip8Error):
    """RET with an empty stack"""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Stack underflow at ${address:03X}")


class LoadError(Chip8Error):
    """The loader could not deliver a program image"""

    def __init__(self, source, reason: Optional[str] = None):
        self.source = source
        self.reason = reason
        message = f"Failed to load ROM: {source}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ProgramTooLargeError(LoadError):
    """Program image does not fit between PROGRAM_START and the end of memory"""

    def __init__(self, source, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(source, f"{size} bytes, limit is {limit}")


class NotLoadedError(Chip8Error):
    """start() before a program image was loaded"""

    def __init__(self):
        super().__init__("No program loaded")
