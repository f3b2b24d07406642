"""
CHIP-8 instruction decoder and dispatcher.

Opcodes are two big-endian bytes at PC. PC is advanced past the opcode
before it executes, so jumps/calls/returns assign PC and skips add 2.
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

from .constants import FLAG_REGISTER
from .errors import UnknownOpcodeError
from .keyboard import Keyboard
from .memory import Memory
from .state import CPUState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Instruction:
    """Fields of a decoded opcode"""
    opcode: int
    addr: int       # nnn
    x: int
    y: int
    byte: int       # kk
    nibble: int     # n

    @property
    def family(self) -> int:
        """Top nibble, the primary dispatch key"""
        return (self.opcode & 0xF000) >> 12


def decode(opcode: int) -> Instruction:
    """Extract common opcode parts"""
    return Instruction(
        opcode=opcode,
        addr=opcode & 0x0FFF,
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
        byte=opcode & 0x00FF,
        nibble=opcode & 0x000F,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# CHIP-8 CPU CORE
# ═══════════════════════════════════════════════════════════════════════════════

class Chip8CPU:
    """Fetch-decode-execute over a CPUState"""

    def __init__(self, state: CPUState,
                 keyboard: Optional[Keyboard] = None,
                 rng: Optional[random.Random] = None,
                 on_clear: Optional[Callable[[], None]] = None):
        self.state = state
        self.keyboard = keyboard
        self.rng = rng or random.Random()
        self.on_clear = on_clear
        self.draw_flag = False

    def fetch(self) -> int:
        """Fetch next 16-bit opcode and step PC past it"""
        opcode = self.state.memory.read_word(self.state.PC)
        self.state.PC += 2
        return opcode

    def cycle(self) -> Optional[int]:
        """
        Execute one instruction.

        While parked on LD Vx, K the cycle only polls the keyboard.

        Returns:
            the executed opcode, or None if the cycle was spent waiting
        """
        if self.state.waiting_for_key:
            self._poll_key()
            return None

        address = self.state.PC
        opcode = self.fetch()
        logger.debug("%03X: %04X", address, opcode)
        self.execute(decode(opcode), address)
        return opcode

    def execute(self, ins: Instruction, address: int):
        """Decode and execute a single opcode fetched from `address`"""
        s = self.state
        V = s.V
        x, y = ins.x, ins.y

        # ─── 0x0XXX ───
        if ins.family == 0x0:
            if ins.opcode == 0x00E0:
                # 00E0: CLS
                s.display.clear()
                if self.on_clear is not None:
                    self.on_clear()
                self.draw_flag = True
            elif ins.opcode == 0x00EE:
                # 00EE: RET
                s.PC = s.pop()
            else:
                raise UnknownOpcodeError(ins.opcode, address)

        # ─── 1NNN: JP addr ───
        elif ins.family == 0x1:
            s.PC = ins.addr

        # ─── 2NNN: CALL addr ───
        elif ins.family == 0x2:
            s.push(s.PC)
            s.PC = ins.addr

        # ─── 3XKK: SE Vx, byte ───
        elif ins.family == 0x3:
            if V[x] == ins.byte:
                s.PC += 2

        # ─── 4XKK: SNE Vx, byte ───
        elif ins.family == 0x4:
            if V[x] != ins.byte:
                s.PC += 2

        # ─── 5XY0: SE Vx, Vy ───
        elif ins.family == 0x5:
            if ins.nibble != 0x0:
                raise UnknownOpcodeError(ins.opcode, address)
            if V[x] == V[y]:
                s.PC += 2

        # ─── 6XKK: LD Vx, byte ───
        elif ins.family == 0x6:
            V[x] = ins.byte

        # ─── 7XKK: ADD Vx, byte ───
        elif ins.family == 0x7:
            V[x] = (V[x] + ins.byte) & 0xFF

        # ─── 8XYN: ALU operations ───
        elif ins.family == 0x8:
            self._alu(ins, address)

        # ─── 9XY0: SNE Vx, Vy ───
        elif ins.family == 0x9:
            if ins.nibble != 0x0:
                raise UnknownOpcodeError(ins.opcode, address)
            if V[x] != V[y]:
                s.PC += 2

        # ─── ANNN: LD I, addr ───
        elif ins.family == 0xA:
            s.I = ins.addr

        # ─── BNNN: JP V0, addr ───
        elif ins.family == 0xB:
            s.PC = ins.addr + V[0]

        # ─── CXKK: RND Vx, byte ───
        elif ins.family == 0xC:
            V[x] = self.rng.randint(0, 255) & ins.byte

        # ─── DXYN: DRW Vx, Vy, nibble ───
        elif ins.family == 0xD:
            self._draw_sprite(V[x], V[y], ins.nibble)

        # ─── EX9E/EXA1: Key operations ───
        elif ins.family == 0xE:
            if ins.byte == 0x9E:
                # EX9E: SKP Vx
                if self.keyboard is not None and self.keyboard.is_pressed(V[x] & 0xF):
                    s.PC += 2
            elif ins.byte == 0xA1:
                # EXA1: SKNP Vx
                if self.keyboard is not None and not self.keyboard.is_pressed(V[x] & 0xF):
                    s.PC += 2
            else:
                raise UnknownOpcodeError(ins.opcode, address)

        # ─── FXKK: Misc operations ───
        else:
            self._misc(ins, address)

    def _alu(self, ins: Instruction, address: int):
        V = self.state.V
        x, y = ins.x, ins.y
        z = ins.nibble

        if z == 0x0:
            # 8XY0: LD Vx, Vy
            V[x] = V[y]

        elif z == 0x1:
            # 8XY1: OR Vx, Vy
            V[x] |= V[y]

        elif z == 0x2:
            # 8XY2: AND Vx, Vy
            V[x] &= V[y]

        elif z == 0x3:
            # 8XY3: XOR Vx, Vy
            V[x] ^= V[y]

        elif z == 0x4:
            # 8XY4: ADD Vx, Vy (VF = carry)
            result = V[x] + V[y]
            V[FLAG_REGISTER] = 1 if result > 255 else 0
            V[x] = result & 0xFF

        elif z == 0x5:
            # 8XY5: SUB Vx, Vy (VF = NOT borrow)
            V[FLAG_REGISTER] = 1 if V[x] > V[y] else 0
            V[x] = (V[x] - V[y]) & 0xFF

        elif z == 0x6:
            # 8XY6: SHR Vx
            V[FLAG_REGISTER] = V[x] & 0x1
            V[x] >>= 1

        elif z == 0x7:
            # 8XY7: SUBN Vx, Vy (VF = NOT borrow)
            V[FLAG_REGISTER] = 1 if V[y] > V[x] else 0
            V[x] = (V[y] - V[x]) & 0xFF

        elif z == 0xE:
            # 8XYE: SHL Vx
            V[FLAG_REGISTER] = 1 if V[x] & 0x80 else 0
            V[x] = (V[x] << 1) & 0xFF

        else:
            raise UnknownOpcodeError(ins.opcode, address)

    def _misc(self, ins: Instruction, address: int):
        s = self.state
        V = s.V
        mem = s.memory
        x = ins.x
        nn = ins.byte

        if nn == 0x07:
            # FX07: LD Vx, DT
            V[x] = s.delay_timer

        elif nn == 0x0A:
            # FX0A: LD Vx, K
            if self.keyboard is not None:
                s.waiting_for_key = True
                s.key_register = x
                self._poll_key()

        elif nn == 0x15:
            # FX15: LD DT, Vx
            s.delay_timer = V[x]

        elif nn == 0x18:
            # FX18: LD ST, Vx
            s.sound_timer = V[x]

        elif nn == 0x1E:
            # FX1E: ADD I, Vx
            s.I = (s.I + V[x]) & 0xFFFF

        elif nn == 0x29:
            # FX29: LD F, Vx
            s.I = Memory.font_address(V[x])

        elif nn == 0x33:
            # FX33: LD B, Vx (BCD)
            value = V[x]
            mem.write(s.I, value // 100)
            mem.write(s.I + 1, (value // 10) % 10)
            mem.write(s.I + 2, value % 10)

        elif nn == 0x55:
            # FX55: LD [I], Vx (store V0-Vx)
            for i in range(x + 1):
                mem.write(s.I + i, V[i])

        elif nn == 0x65:
            # FX65: LD Vx, [I] (load V0-Vx)
            for i in range(x + 1):
                V[i] = mem.read(s.I + i)

        else:
            raise UnknownOpcodeError(ins.opcode, address)

    def _poll_key(self):
        if self.keyboard is None:
            self.state.waiting_for_key = False
            return
        key = self.keyboard.wait_for_key()
        if key is not None:
            self.state.V[self.state.key_register] = key & 0xF
            self.state.waiting_for_key = False
            logger.debug("Key %X stored in V%X", key, self.state.key_register)

    def _draw_sprite(self, x: int, y: int, height: int):
        """XOR an 8xN sprite from memory[I] onto the display at (x, y)"""
        s = self.state
        V = s.V
        V[FLAG_REGISTER] = 0

        for cy in range(height):
            sprite_byte = s.memory.read(s.I + cy)
            for cx in range(8):
                if sprite_byte & 0x80:
                    if s.display.toggle(x + cx, y + cy):
                        V[FLAG_REGISTER] = 1
                sprite_byte <<= 1

        self.draw_flag = True
