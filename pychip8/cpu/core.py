"""CHIP-8 register file and instruction execution."""

from __future__ import annotations

from dataclasses import dataclass, field

from pychip8.bus import PROGRAM_START, Memory
from pychip8.io.keypad import first_pressed
from pychip8.devices.rng import RandomSource, SystemRandomSource
from pychip8.devices.timers import TimerPair
from pychip8.utils import debug_enabled, debug_log
from pychip8.video.font import large_glyph_address, small_glyph_address
from pychip8.video.framebuffer import HIGH_RES, LOW_RES, Framebuffer

from .opcodes import RPL_REGISTER_COUNT, Instruction, decode

STACK_DEPTH = 16
FLAG_REGISTER = 0xF
SCROLL_COLUMNS = 4


class CPUError(Exception):
    """Base error for fatal execution failures."""


class StackOverflowError(CPUError):
    """Raised when CALL nests deeper than the call stack allows."""


class StackUnderflowError(CPUError):
    """Raised when RET executes with no active frame."""


class RegisterFile:
    """V0-VF, I, PC, the call stack and the Super-CHIP flag registers."""

    def __init__(self) -> None:
        self.v = bytearray(16)
        self._i = 0
        self.pc = PROGRAM_START
        self.sp = 0
        self.stack = [0] * STACK_DEPTH
        self.rpl = bytearray(RPL_REGISTER_COUNT)

    @property
    def i(self) -> int:
        return self._i

    @i.setter
    def i(self, value: int) -> None:
        self._i = value & 0x0FFF

    def reset(self) -> None:
        self.v[:] = bytes(16)
        self._i = 0
        self.pc = PROGRAM_START
        self.sp = 0
        self.stack = [0] * STACK_DEPTH
        self.rpl[:] = bytes(RPL_REGISTER_COUNT)

    def clone(self) -> "RegisterFile":
        copy = RegisterFile()
        copy.v[:] = self.v
        copy.i = self.i
        copy.pc = self.pc
        copy.sp = self.sp
        copy.stack = list(self.stack)
        copy.rpl[:] = self.rpl
        return copy

    def push(self, address: int) -> None:
        if self.sp >= STACK_DEPTH:
            raise StackOverflowError(f"call stack full ({STACK_DEPTH} frames) at pc={self.pc:#05x}")
        self.stack[self.sp] = address
        self.sp += 1

    def pop(self) -> int:
        if self.sp == 0:
            raise StackUnderflowError(f"return with empty call stack at pc={self.pc:#05x}")
        self.sp -= 1
        return self.stack[self.sp]


@dataclass
class Chip8CPU:
    """Fetch/decode/execute engine operating on the machine's components.

    ``step`` executes exactly one instruction. Errors from the taxonomy
    (:class:`~pychip8.cpu.opcodes.DecodeError`, :class:`CPUError`,
    :class:`~pychip8.bus.MemoryBoundsError`) propagate to the caller, which
    owns the halt policy.
    """

    memory: Memory
    framebuffer: Framebuffer
    timers: TimerPair
    random_source: RandomSource = field(default_factory=SystemRandomSource)
    registers: RegisterFile = field(default_factory=RegisterFile)

    exited: bool = False
    waiting_for_key: bool = False
    _keys: tuple[bool, ...] = field(default=(False,) * 16, repr=False)

    def reset(self) -> None:
        self.registers.reset()
        self.exited = False
        self.waiting_for_key = False

    def fetch(self) -> int:
        """Read the big-endian word at PC; a word straddling 0xFFF is out of bounds."""

        return self.memory.load16(self.registers.pc)

    def step(self, keys: tuple[bool, ...]) -> Instruction:
        """Execute the instruction at PC using the ``keys`` snapshot."""

        self._keys = keys
        pc_before = self.registers.pc
        instruction = decode(self.fetch())
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x %04x %s", pc_before, instruction.word, instruction.text)
        handler = getattr(self, instruction.op.handler)
        handler(instruction)
        return instruction

    def _advance(self, skip: bool = False) -> None:
        self.registers.pc += 4 if skip else 2

    # ------------------------------------------------------------------
    # Control flow

    def op_sys(self, _: Instruction) -> None:
        self._advance()

    def op_cls(self, _: Instruction) -> None:
        self.framebuffer.clear()
        self._advance()

    def op_ret(self, _: Instruction) -> None:
        self.registers.pc = self.registers.pop()

    def op_call(self, instruction: Instruction) -> None:
        self.registers.push(self.registers.pc + 2)
        self.registers.pc = instruction.nnn

    def op_jp(self, instruction: Instruction) -> None:
        self.registers.pc = instruction.nnn

    def op_jp_v0(self, instruction: Instruction) -> None:
        self.registers.pc = instruction.nnn + self.registers.v[0]

    def op_exit(self, _: Instruction) -> None:
        self.exited = True

    # ------------------------------------------------------------------
    # Conditional skips

    def op_se_vx_kk(self, instruction: Instruction) -> None:
        self._advance(self.registers.v[instruction.x] == instruction.kk)

    def op_sne_vx_kk(self, instruction: Instruction) -> None:
        self._advance(self.registers.v[instruction.x] != instruction.kk)

    def op_se_vx_vy(self, instruction: Instruction) -> None:
        v = self.registers.v
        self._advance(v[instruction.x] == v[instruction.y])

    def op_sne_vx_vy(self, instruction: Instruction) -> None:
        v = self.registers.v
        self._advance(v[instruction.x] != v[instruction.y])

    def op_skp(self, instruction: Instruction) -> None:
        key = self.registers.v[instruction.x] & 0x0F
        self._advance(self._keys[key])

    def op_sknp(self, instruction: Instruction) -> None:
        key = self.registers.v[instruction.x] & 0x0F
        self._advance(not self._keys[key])

    # ------------------------------------------------------------------
    # Register loads and arithmetic

    def op_ld_vx_kk(self, instruction: Instruction) -> None:
        self.registers.v[instruction.x] = instruction.kk
        self._advance()

    def op_add_vx_kk(self, instruction: Instruction) -> None:
        v = self.registers.v
        v[instruction.x] = (v[instruction.x] + instruction.kk) & 0xFF
        self._advance()

    def op_ld_vx_vy(self, instruction: Instruction) -> None:
        v = self.registers.v
        v[instruction.x] = v[instruction.y]
        self._advance()

    def op_or(self, instruction: Instruction) -> None:
        v = self.registers.v
        v[instruction.x] |= v[instruction.y]
        self._advance()

    def op_and(self, instruction: Instruction) -> None:
        v = self.registers.v
        v[instruction.x] &= v[instruction.y]
        self._advance()

    def op_xor(self, instruction: Instruction) -> None:
        v = self.registers.v
        v[instruction.x] ^= v[instruction.y]
        self._advance()

    def op_add_vx_vy(self, instruction: Instruction) -> None:
        v = self.registers.v
        total = v[instruction.x] + v[instruction.y]
        self._write_with_flag(instruction.x, total & 0xFF, total > 0xFF)

    def op_sub(self, instruction: Instruction) -> None:
        v = self.registers.v
        x, y = v[instruction.x], v[instruction.y]
        self._write_with_flag(instruction.x, (x - y) & 0xFF, x >= y)

    def op_subn(self, instruction: Instruction) -> None:
        v = self.registers.v
        x, y = v[instruction.x], v[instruction.y]
        self._write_with_flag(instruction.x, (y - x) & 0xFF, y >= x)

    def op_shr(self, instruction: Instruction) -> None:
        value = self.registers.v[instruction.x]
        self._write_with_flag(instruction.x, value >> 1, value & 0x01 != 0)

    def op_shl(self, instruction: Instruction) -> None:
        value = self.registers.v[instruction.x]
        self._write_with_flag(instruction.x, (value << 1) & 0xFF, value & 0x80 != 0)

    def op_rnd(self, instruction: Instruction) -> None:
        self.registers.v[instruction.x] = self.random_source.next_byte() & instruction.kk
        self._advance()

    def _write_with_flag(self, register: int, result: int, flag: bool) -> None:
        # Result first, then VF, so VF wins when the destination is VF itself.
        v = self.registers.v
        v[register] = result
        v[FLAG_REGISTER] = 1 if flag else 0
        self._advance()

    # ------------------------------------------------------------------
    # Index register and memory transfers

    def op_ld_i(self, instruction: Instruction) -> None:
        self.registers.i = instruction.nnn
        self._advance()

    def op_add_i_vx(self, instruction: Instruction) -> None:
        self.registers.i = self.registers.i + self.registers.v[instruction.x]
        self._advance()

    def op_ld_f_vx(self, instruction: Instruction) -> None:
        self.registers.i = small_glyph_address(self.registers.v[instruction.x])
        self._advance()

    def op_ld_hf_vx(self, instruction: Instruction) -> None:
        self.registers.i = large_glyph_address(self.registers.v[instruction.x])
        self._advance()

    def op_ld_b_vx(self, instruction: Instruction) -> None:
        value = self.registers.v[instruction.x]
        self.memory.write_block(self.registers.i, (value // 100, (value // 10) % 10, value % 10))
        self._advance()

    def op_ld_i_vx(self, instruction: Instruction) -> None:
        count = instruction.x + 1
        self.memory.write_block(self.registers.i, self.registers.v[:count])
        self._advance()

    def op_ld_vx_i(self, instruction: Instruction) -> None:
        count = instruction.x + 1
        self.registers.v[:count] = self.memory.read_block(self.registers.i, count)
        self._advance()

    def op_ld_r_vx(self, instruction: Instruction) -> None:
        count = instruction.x + 1
        self.registers.rpl[:count] = self.registers.v[:count]
        self._advance()

    def op_ld_vx_r(self, instruction: Instruction) -> None:
        count = instruction.x + 1
        self.registers.v[:count] = self.registers.rpl[:count]
        self._advance()

    # ------------------------------------------------------------------
    # Timers and keypad

    def op_ld_vx_dt(self, instruction: Instruction) -> None:
        self.registers.v[instruction.x] = self.timers.delay.value
        self._advance()

    def op_ld_dt_vx(self, instruction: Instruction) -> None:
        self.timers.delay.set(self.registers.v[instruction.x])
        self._advance()

    def op_ld_st_vx(self, instruction: Instruction) -> None:
        self.timers.sound.set(self.registers.v[instruction.x])
        self._advance()

    def op_ld_vx_k(self, instruction: Instruction) -> None:
        key = first_pressed(self._keys)
        if key is None:
            # PC stays put; the instruction is fetched again next step.
            self.waiting_for_key = True
            return
        self.waiting_for_key = False
        self.registers.v[instruction.x] = key
        self._advance()

    # ------------------------------------------------------------------
    # Display

    def op_drw(self, instruction: Instruction) -> None:
        v = self.registers.v
        x, y = v[instruction.x], v[instruction.y]
        if instruction.n == 0 and self.framebuffer.high_resolution:
            data = self.memory.read_block(self.registers.i, 32)
            rows = [(data[index] << 8) | data[index + 1] for index in range(0, 32, 2)]
            collision = self.framebuffer.draw_sprite(rows, x, y, width=16)
        else:
            rows = self.memory.read_block(self.registers.i, instruction.n)
            collision = self.framebuffer.draw_sprite(rows, x, y)
        v[FLAG_REGISTER] = 1 if collision else 0
        self._advance()

    def op_scd(self, instruction: Instruction) -> None:
        self.framebuffer.scroll_down(instruction.n)
        self._advance()

    def op_scr(self, _: Instruction) -> None:
        self.framebuffer.scroll_right(SCROLL_COLUMNS)
        self._advance()

    def op_scl(self, _: Instruction) -> None:
        self.framebuffer.scroll_left(SCROLL_COLUMNS)
        self._advance()

    def op_low(self, _: Instruction) -> None:
        self.framebuffer.resize(*LOW_RES)
        self._advance()

    def op_high(self, _: Instruction) -> None:
        self.framebuffer.resize(*HIGH_RES)
        self._advance()
