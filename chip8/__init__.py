"""Cat's CHIP-8 - a CHIP-8 virtual machine."""

from .config import EmulatorConfig
from .cpu import Chip8CPU, Instruction, decode
from .display import DisplayBuffer
from .emulator import Chip8, Renderer
from .errors import (
    Chip8Error,
    LoadError,
    NotLoadedError,
    ProgramTooLargeError,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
)
from .keyboard import Keyboard, KeypadState
from .loader import BytesLoader, FileLoader, Loader
from .memory import Memory
from .state import CPUState

__version__ = "0.1.0"

__all__ = [
    "BytesLoader",
    "CPUState",
    "Chip8",
    "Chip8CPU",
    "Chip8Error",
    "DisplayBuffer",
    "EmulatorConfig",
    "FileLoader",
    "Instruction",
    "Keyboard",
    "KeypadState",
    "LoadError",
    "Loader",
    "Memory",
    "NotLoadedError",
    "ProgramTooLargeError",
    "Renderer",
    "StackOverflowError",
    "StackUnderflowError",
    "UnknownOpcodeError",
    "decode",
]
