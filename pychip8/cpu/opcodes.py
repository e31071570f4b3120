"""Instruction decoding for the CHIP-8 (and Super-CHIP) instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterator, Mapping


class DecodeError(ValueError):
    """Raised when an instruction word matches no defined operation."""

    def __init__(self, word: int, reason: str = "undefined instruction") -> None:
        self.word = word & 0xFFFF
        super().__init__(f"{reason} {self.word:#06x}")


class Op(Enum):
    """Decoded operations; each value is the disassembly template."""

    SYS = "SYS {nnn:#05x}"
    CLS = "CLS"
    RET = "RET"
    SCD = "SCD {n}"
    SCR = "SCR"
    SCL = "SCL"
    EXIT = "EXIT"
    LOW = "LOW"
    HIGH = "HIGH"
    JP = "JP {nnn:#05x}"
    CALL = "CALL {nnn:#05x}"
    SE_VX_KK = "SE V{x:X}, {kk:#04x}"
    SNE_VX_KK = "SNE V{x:X}, {kk:#04x}"
    SE_VX_VY = "SE V{x:X}, V{y:X}"
    LD_VX_KK = "LD V{x:X}, {kk:#04x}"
    ADD_VX_KK = "ADD V{x:X}, {kk:#04x}"
    LD_VX_VY = "LD V{x:X}, V{y:X}"
    OR = "OR V{x:X}, V{y:X}"
    AND = "AND V{x:X}, V{y:X}"
    XOR = "XOR V{x:X}, V{y:X}"
    ADD_VX_VY = "ADD V{x:X}, V{y:X}"
    SUB = "SUB V{x:X}, V{y:X}"
    SHR = "SHR V{x:X}"
    SUBN = "SUBN V{x:X}, V{y:X}"
    SHL = "SHL V{x:X}"
    SNE_VX_VY = "SNE V{x:X}, V{y:X}"
    LD_I = "LD I, {nnn:#05x}"
    JP_V0 = "JP V0, {nnn:#05x}"
    RND = "RND V{x:X}, {kk:#04x}"
    DRW = "DRW V{x:X}, V{y:X}, {n}"
    SKP = "SKP V{x:X}"
    SKNP = "SKNP V{x:X}"
    LD_VX_DT = "LD V{x:X}, DT"
    LD_VX_K = "LD V{x:X}, K"
    LD_DT_VX = "LD DT, V{x:X}"
    LD_ST_VX = "LD ST, V{x:X}"
    ADD_I_VX = "ADD I, V{x:X}"
    LD_F_VX = "LD F, V{x:X}"
    LD_HF_VX = "LD HF, V{x:X}"
    LD_B_VX = "LD B, V{x:X}"
    LD_I_VX = "LD [I], V{x:X}"
    LD_VX_I = "LD V{x:X}, [I]"
    LD_R_VX = "LD R, V{x:X}"
    LD_VX_R = "LD V{x:X}, R"

    @property
    def mnemonic(self) -> str:
        return self.value.split(" ", 1)[0]

    @property
    def handler(self) -> str:
        return f"op_{self.name.lower()}"


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction word with its operand fields pre-extracted."""

    word: int
    op: Op

    @property
    def x(self) -> int:
        return (self.word >> 8) & 0x0F

    @property
    def y(self) -> int:
        return (self.word >> 4) & 0x0F

    @property
    def n(self) -> int:
        return self.word & 0x000F

    @property
    def kk(self) -> int:
        return self.word & 0x00FF

    @property
    def nnn(self) -> int:
        return self.word & 0x0FFF

    @property
    def text(self) -> str:
        return self.op.value.format(x=self.x, y=self.y, n=self.n, kk=self.kk, nnn=self.nnn)

    def __str__(self) -> str:
        return self.text


# Categories whose high nibble alone identifies the operation.
_PRIMARY_OPS: Final[Mapping[int, Op]] = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_VX_KK,
    0x4: Op.SNE_VX_KK,
    0x6: Op.LD_VX_KK,
    0x7: Op.ADD_VX_KK,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

# 0x5xy0 and 0x9xy0 additionally require a zero low nibble.
_REGISTER_COMPARE_OPS: Final[Mapping[int, Op]] = {
    0x5: Op.SE_VX_VY,
    0x9: Op.SNE_VX_VY,
}

_SYSTEM_OPS: Final[Mapping[int, Op]] = {
    0x00E0: Op.CLS,
    0x00EE: Op.RET,
    0x00FB: Op.SCR,
    0x00FC: Op.SCL,
    0x00FD: Op.EXIT,
    0x00FE: Op.LOW,
    0x00FF: Op.HIGH,
}

_ALU_OPS: Final[Mapping[int, Op]] = {
    0x0: Op.LD_VX_VY,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_VX_VY,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY_OPS: Final[Mapping[int, Op]] = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

_MISC_OPS: Final[Mapping[int, Op]] = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x30: Op.LD_HF_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_I_VX,
    0x65: Op.LD_VX_I,
    0x75: Op.LD_R_VX,
    0x85: Op.LD_VX_R,
}

RPL_REGISTER_COUNT: Final[int] = 8


def decode(word: int) -> Instruction:
    """Map a 16-bit instruction word onto an :class:`Instruction`."""

    word &= 0xFFFF
    category = word >> 12

    op: Op | None
    if category == 0x0:
        op = _decode_system(word)
    elif category == 0x8:
        op = _ALU_OPS.get(word & 0x000F)
    elif category == 0xE:
        op = _KEY_OPS.get(word & 0x00FF)
    elif category == 0xF:
        op = _MISC_OPS.get(word & 0x00FF)
    elif category in _REGISTER_COMPARE_OPS:
        op = _REGISTER_COMPARE_OPS[category] if word & 0x000F == 0 else None
    else:
        op = _PRIMARY_OPS[category]

    if op is None:
        raise DecodeError(word)

    instruction = Instruction(word, op)
    if op in (Op.LD_R_VX, Op.LD_VX_R) and instruction.x >= RPL_REGISTER_COUNT:
        raise DecodeError(word, "flag register transfer beyond V7")
    return instruction


def _decode_system(word: int) -> Op:
    op = _SYSTEM_OPS.get(word)
    if op is not None:
        return op
    if word & 0xFFF0 == 0x00C0:
        return Op.SCD
    return Op.SYS


def disassemble(data: bytes, origin: int = 0x200) -> Iterator[tuple[int, int, str]]:
    """Yield ``(address, word, text)`` for each word in ``data``.

    Words that do not decode are rendered as raw data. A trailing odd byte is
    emitted on its own.
    """

    for offset in range(0, len(data) - 1, 2):
        word = (data[offset] << 8) | data[offset + 1]
        try:
            text = decode(word).text
        except DecodeError:
            text = f"DW {word:#06x}"
        yield origin + offset, word, text
    if len(data) % 2:
        yield origin + len(data) - 1, data[-1], f"DB {data[-1]:#04x}"
