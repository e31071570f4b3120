"""Pygame front end for the CHIP-8 emulator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from pychip8.audio import SquareWaveBeeper
from pychip8.bus import RomTooLargeError
from pychip8.cpu import disassemble
from pychip8.devices import DEFAULT_TIMER_HZ, SystemRandomSource
from pychip8.loader import load_rom_from_path
from pychip8.system import Machine, MachineConfig, create_machine
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import LOW_RES, MONOCHROME, Renderer
from pychip8.video.renderer import RGBColor

_FRAME_RATE = 60
_DEFAULT_CYCLES_PER_FRAME = 10


@dataclass
class AppConfig:
    """Options collected by ``run.py``."""

    rom_path: Optional[Path] = None
    scale: int = 8
    cycles_per_frame: int = _DEFAULT_CYCLES_PER_FRAME
    timer_hz: float = DEFAULT_TIMER_HZ
    seed: Optional[int] = None
    fullscreen: bool = False
    trace_capacity: int = 0
    palette: Sequence[RGBColor] = MONOCHROME


class Chip8App:
    """Wires a :class:`Machine` to a pygame window, keyboard and mixer."""

    def __init__(self, config: AppConfig) -> None:
        if config.scale <= 0:
            raise ValueError("scale must be positive")
        if config.cycles_per_frame <= 0:
            raise ValueError("cycles_per_frame must be positive")
        self._config = config
        self._running = False
        self._paused = False
        self._machine: Machine | None = None
        self._beeper: SquareWaveBeeper | None = None
        self._renderer = Renderer(config.palette)

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass a ROM path")
        machine = self._create_machine(self._config.rom_path)
        self._machine = machine

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._config.rom_path.name}")
        self._init_audio(pygame)

        # High resolution frames render at half the configured scale.
        size = (LOW_RES[0] * self._config.scale, LOW_RES[1] * self._config.scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(size, flags)
        clock = pygame.time.Clock()

        self._running = True
        while self._running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    self._enter_debug_shell(machine)
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_F5:
                    self._reload(machine)
                elif event.type == pygame.KEYDOWN:
                    self._handle_key_event(pygame.key.name(event.key), pressed=True)
                elif event.type == pygame.KEYUP:
                    self._handle_key_event(pygame.key.name(event.key), pressed=False)

            if not self._paused:
                self._step_frame(machine)

            frame = self._render_frame(machine, size)
            screen.blit(frame.to_surface(), (0, 0))
            pygame.display.flip()

            if self._beeper is not None:
                self._beeper.set_active(machine.sound_active and not machine.halted)

            clock.tick(_FRAME_RATE)

        if self._beeper is not None:
            self._beeper.shutdown()
        pygame.quit()

    # ------------------------------------------------------------------
    # Machine lifecycle

    def _create_machine(self, rom_path: Path) -> Machine:
        machine = create_machine(
            MachineConfig(
                timer_hz=self._config.timer_hz,
                random_source=SystemRandomSource(self._config.seed),
                trace_capacity=self._config.trace_capacity,
            )
        )
        self._load_rom(machine, rom_path)
        return machine

    def _load_rom(self, machine: Machine, rom_path: Path) -> None:
        try:
            image = load_rom_from_path(rom_path)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        except RomTooLargeError as exc:
            raise RuntimeError(f"Failed to load ROM {rom_path}: {exc}") from exc

        result = machine.load(image.data)
        if not result.ok:
            raise RuntimeError(f"Failed to load ROM {rom_path}: {result.error}")
        if debug_enabled("machine"):
            debug_log("machine", "rom=%s size=%d", image.name, image.size)

    def _reload(self, machine: Machine) -> None:
        if self._config.rom_path is not None:
            self._load_rom(machine, self._config.rom_path)
            machine.keypad.reset()
            self._paused = False

    def _step_frame(self, machine: Machine) -> None:
        for _ in range(self._config.cycles_per_frame):
            result = machine.step()
            if result.halted:
                if result.error is not None and not self._paused:
                    print(f"Machine halted: {result.error}")
                    if machine.trace is not None:
                        for line in machine.trace.format_entries(16):
                            print(line)
                self._paused = True
                break

    def _render_frame(self, machine: Machine, size: tuple[int, int]):
        rows = machine.framebuffer_snapshot()
        scale = max(1, size[0] // machine.framebuffer.width)
        return self._renderer.render(rows, scale=scale)

    def _handle_key_event(self, name: str, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        if pressed:
            machine.keypad.press(name)
        else:
            machine.keypad.release(name)

    def _init_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=pygame.mixer.get_init()[0])
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    # ------------------------------------------------------------------
    # Debug shell

    def _enter_debug_shell(self, machine: Machine) -> None:
        print("\n=== CHIP-8 Debug Menu ===")
        print("Commands: [r]egisters, [t]race, [m]em <addr>, [d]isasm <addr>, [s]tep, [q]uit, [Enter] resume")
        while self._running:
            try:
                command = input("debug> ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                print("Resuming emulator.")
                return
            if not self.handle_debug_command(machine, command):
                return

    def handle_debug_command(self, machine: Machine, command: str) -> bool:
        """Run one debug shell command; return False when the shell should close."""

        if command in {"", "resume"}:
            return False
        if command in {"q", "quit", "exit"}:
            print("Exiting emulator.")
            self._running = False
            return False
        if command in {"r", "regs", "registers"}:
            for line in machine.dump().format_lines():
                print(line)
        elif command in {"t", "trace"}:
            if machine.trace is None:
                print("Tracing disabled; pass --trace N or set CHIP8_DEBUG=trace")
            else:
                for line in machine.trace.format_entries(32):
                    print(line)
        elif command in {"s", "step"}:
            result = machine.step()
            print(result.instruction.text if result.instruction is not None else result.state.value)
        elif command.startswith("m"):
            self._dump_memory(machine, command[1:].strip())
        elif command.startswith("d"):
            self._dump_disassembly(machine, command[1:].strip())
        else:
            print("Unknown command")
        return True

    def _dump_memory(self, machine: Machine, argument: str) -> None:
        start = _parse_address(argument, machine.dump().i)
        end = min(start + 0x40, len(machine.memory.snapshot()))
        data = machine.memory.snapshot()
        for address in range(start, end, 16):
            chunk = data[address : min(address + 16, end)]
            print(f"{address:03X}: " + " ".join(f"{value:02X}" for value in chunk))

    def _dump_disassembly(self, machine: Machine, argument: str) -> None:
        start = _parse_address(argument, machine.dump().pc)
        data = machine.memory.snapshot()[start : start + 32]
        for address, word, text in disassemble(data, start):
            print(f"{address:03X}: {word:04X}  {text}")


def _parse_address(text: str, default: int) -> int:
    if not text:
        return default & 0x0FFF
    try:
        return int(text, 16) & 0x0FFF
    except ValueError:
        print(f"Invalid address: {text}")
        return default & 0x0FFF
