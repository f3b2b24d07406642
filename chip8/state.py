"""
CHIP-8 register file.

CPUState owns everything a running program can touch: memory, the V
registers, I, PC, SP, the return stack, both timers and the display
buffer. Nothing outside the emulator instance holds a reference into it.
"""

from dataclasses import dataclass, field
from typing import List

from .constants import NUM_REGISTERS, PROGRAM_START, STACK_SIZE
from .display import DisplayBuffer
from .errors import StackOverflowError, StackUnderflowError
from .memory import Memory


@dataclass
class CPUState:
    """CHIP-8 CPU state container"""
    # Memory
    memory: Memory = field(default_factory=Memory)

    # Registers
    V: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)  # V0-VF
    I: int = 0              # Index register (16-bit)
    PC: int = PROGRAM_START # Program counter
    SP: int = 0             # Stack pointer

    # Stack
    stack: List[int] = field(default_factory=lambda: [0] * STACK_SIZE)

    # Timers
    delay_timer: int = 0
    sound_timer: int = 0

    # Display (64x32)
    display: DisplayBuffer = field(default_factory=DisplayBuffer)

    # Wait for key state
    waiting_for_key: bool = False
    key_register: int = 0

    def reset(self):
        """Zero memory, registers and display, reload the font, PC=0x200"""
        self.memory.reset()
        self.V[:] = [0] * NUM_REGISTERS
        self.I = 0
        self.PC = PROGRAM_START
        self.SP = 0
        self.stack[:] = [0] * STACK_SIZE
        self.delay_timer = 0
        self.sound_timer = 0
        self.display.clear()
        self.waiting_for_key = False
        self.key_register = 0

    def push(self, address: int):
        """Push a return address; raises StackOverflowError when all 16 slots are used"""
        if self.SP >= STACK_SIZE:
            raise StackOverflowError(self.PC - 2)
        self.stack[self.SP] = address
        self.SP += 1

    def pop(self) -> int:
        if self.SP <= 0:
            raise StackUnderflowError(self.PC - 2)
        self.SP -= 1
        return self.stack[self.SP]

    def dump(self) -> str:
        """One-line register summary for logs"""
        regs = " ".join(f"{v:02X}" for v in self.V)
        return (f"PC=${self.PC:03X} I=${self.I:03X} SP={self.SP} "
                f"DT={self.delay_timer:02X} ST={self.sound_timer:02X} V=[{regs}]")
