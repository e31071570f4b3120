"""CHIP-8 machine assembly and the host-facing step API."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pychip8.bus import (
    MAX_PROGRAM_SIZE,
    MEMORY_END,
    Memory,
    MemoryBoundsError,
    MemoryFault,
    RomTooLargeError,
)
from pychip8.cpu import Chip8CPU, CPUError, DecodeError, Instruction
from pychip8.devices import DEFAULT_TIMER_HZ, RandomSource, SystemRandomSource, TimerPair
from pychip8.devices.timers import Clock
from pychip8.io import Keypad
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import LOW_RES, Framebuffer

# Everything the core treats as fatal: the machine halts and reports it.
FATAL_ERRORS = (DecodeError, CPUError, MemoryFault)


class MachineState(Enum):
    RUNNING = "running"
    HALTED = "halted"


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    timer_hz: float = DEFAULT_TIMER_HZ
    keypad: Optional[Keypad] = None
    random_source: Optional[RandomSource] = None
    clock: Clock = time.monotonic
    trace_capacity: int = 0


@dataclass(frozen=True)
class StepResult:
    """Outcome of a single :meth:`Machine.step` call."""

    state: MachineState
    instruction: Instruction | None = None
    waiting_for_key: bool = False
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def halted(self) -> bool:
        return self.state is MachineState.HALTED


@dataclass(frozen=True)
class LoadResult:
    size: int
    error: MemoryFault | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class MachineSnapshot:
    """Debug view of the register file and timers."""

    state: MachineState
    pc: int
    i: int
    sp: int
    v: tuple[int, ...]
    stack: tuple[int, ...]
    dt: int
    st: int
    waiting_for_key: bool
    halt_reason: str | None

    def format_lines(self) -> list[str]:
        lines = [
            f"STATE {self.state.value}" + (f" ({self.halt_reason})" if self.halt_reason else ""),
            f"PC={self.pc:03X} I={self.i:03X} SP={self.sp:X} DT={self.dt:02X} ST={self.st:02X}",
        ]
        for row in range(0, 16, 8):
            lines.append(" ".join(f"V{index:X}={self.v[index]:02X}" for index in range(row, row + 8)))
        frames = " ".join(f"{address:03X}" for address in self.stack) or "-"
        lines.append(f"STACK {frames}")
        if self.waiting_for_key:
            lines.append("waiting for key")
        return lines


@dataclass
class Machine:
    """Owns memory, registers, framebuffer and timers; drives one step at a time."""

    memory: Memory
    framebuffer: Framebuffer
    timers: TimerPair
    keypad: Keypad
    cpu: Chip8CPU
    trace: TraceRecorder | None = None
    state: MachineState = MachineState.RUNNING
    halt_reason: str | None = None
    last_error: Exception | None = None
    program: bytes = b""
    steps: int = field(default=0, init=False)

    # ------------------------------------------------------------------
    # Host API

    def reset(self) -> None:
        """Return to the power-on state with the last loaded program in place.

        Always leaves the machine Running.
        """

        self.memory.reset()
        if self.program:
            self.memory.load_program(self.program)
        self.cpu.reset()
        self.framebuffer.resize(*LOW_RES)
        self.timers.reset()
        self.state = MachineState.RUNNING
        self.halt_reason = None
        self.last_error = None
        self.steps = 0
        if debug_enabled("machine"):
            debug_log("machine", "reset program=%d bytes", len(self.program))

    def load(self, rom: bytes) -> LoadResult:
        """Reset and copy ``rom`` into the program region."""

        rom = bytes(rom)
        if len(rom) > MAX_PROGRAM_SIZE:
            self.program = b""
            self.reset()
            error = RomTooLargeError(len(rom))
            self._fail(error)
            return LoadResult(0, error)
        self.program = rom
        self.reset()
        return LoadResult(len(rom))

    def step(self) -> StepResult:
        """Tick the timers and execute one instruction."""

        if self.state is MachineState.HALTED:
            return StepResult(self.state, error=self.last_error)

        keys = self.keypad.snapshot()
        self.timers.tick()

        registers_before = self.cpu.registers.clone() if self.trace is not None else None
        try:
            instruction = self.cpu.step(keys)
        except FATAL_ERRORS as exc:
            self._fail(exc)
            self._record(registers_before, None, note=type(exc).__name__)
            return StepResult(self.state, error=exc)

        self.steps += 1
        if self.cpu.exited:
            self.halt("exit")
        elif self.cpu.registers.pc > MEMORY_END:
            # The next fetch would start outside memory.
            error = MemoryBoundsError(self.cpu.registers.pc, 2)
            self._fail(error)
            self._record(registers_before, instruction, note=type(error).__name__)
            return StepResult(self.state, instruction, error=error)
        self._record(registers_before, instruction)
        return StepResult(self.state, instruction, self.cpu.waiting_for_key)

    def run(self, max_steps: int) -> int:
        """Step until halted or ``max_steps`` instructions; return steps taken."""

        taken = 0
        while taken < max_steps and self.state is MachineState.RUNNING:
            self.step()
            taken += 1
        return taken

    def halt(self, reason: str = "host request") -> None:
        if self.state is MachineState.HALTED:
            return
        self.state = MachineState.HALTED
        self.halt_reason = reason
        if debug_enabled("machine"):
            debug_log("machine", "halt reason=%s pc=%03x", reason, self.cpu.registers.pc)

    def dump(self) -> MachineSnapshot:
        registers = self.cpu.registers
        return MachineSnapshot(
            state=self.state,
            pc=registers.pc,
            i=registers.i,
            sp=registers.sp,
            v=tuple(registers.v),
            stack=tuple(registers.stack[: registers.sp]),
            dt=self.timers.delay.value,
            st=self.timers.sound.value,
            waiting_for_key=self.cpu.waiting_for_key,
            halt_reason=self.halt_reason,
        )

    # ------------------------------------------------------------------
    # Outputs for the host

    def framebuffer_snapshot(self) -> tuple[tuple[int, ...], ...]:
        return self.framebuffer.snapshot()

    @property
    def sound_active(self) -> bool:
        return self.timers.sound_active

    @property
    def halted(self) -> bool:
        return self.state is MachineState.HALTED

    # ------------------------------------------------------------------
    # Internals

    def _fail(self, exc: Exception) -> None:
        self.last_error = exc
        if debug_enabled("machine"):
            debug_log("machine", "fatal %s: %s", type(exc).__name__, exc)
        self.halt(f"{type(exc).__name__}: {exc}")

    def _record(self, registers_before, instruction: Instruction | None, note: str = "") -> None:
        if self.trace is None or registers_before is None:
            return
        self.trace.record_step(
            registers_before,
            None if instruction is None else instruction.word,
            dt=self.timers.delay.value,
            st=self.timers.sound.value,
            waiting=self.cpu.waiting_for_key,
            halted=self.halted,
            mnemonic="" if instruction is None else instruction.text,
            note=note,
        )
        if debug_enabled("trace"):
            self.trace.dump("trace", limit=1)


def create_machine(config: MachineConfig | None = None) -> Machine:
    """Instantiate a reset CHIP-8 machine with the requested configuration."""

    config = config or MachineConfig()
    memory = Memory()
    framebuffer = Framebuffer(*LOW_RES)
    timers = TimerPair(hz=config.timer_hz, clock=config.clock)
    keypad = config.keypad or Keypad()
    cpu = Chip8CPU(
        memory,
        framebuffer,
        timers,
        random_source=config.random_source or SystemRandomSource(),
    )

    trace_capacity = config.trace_capacity
    if trace_capacity <= 0 and debug_enabled("trace"):
        trace_capacity = 512
    trace = TraceRecorder(trace_capacity) if trace_capacity > 0 else None

    machine = Machine(memory, framebuffer, timers, keypad, cpu, trace=trace)
    machine.reset()
    return machine
