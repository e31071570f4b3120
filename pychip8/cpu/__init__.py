"""CPU package for the CHIP-8 emulator."""

from .core import Chip8CPU, CPUError, RegisterFile, StackOverflowError, StackUnderflowError
from .opcodes import DecodeError, Instruction, Op, decode, disassemble

__all__ = [
    "Chip8CPU",
    "RegisterFile",
    "CPUError",
    "StackOverflowError",
    "StackUnderflowError",
    "DecodeError",
    "Instruction",
    "Op",
    "decode",
    "disassemble",
]
