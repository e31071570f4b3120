"""Command-line entry point for the CHIP-8 emulator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.bus import RomTooLargeError
from pychip8.devices import DEFAULT_TIMER_HZ
from pychip8.loader import load_rom_from_path
from pychip8.ui.app import AppConfig, Chip8App
from pychip8.video import MONOCHROME, PHOSPHOR

PALETTES = {"mono": MONOCHROME, "phosphor": PHOSPHOR}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 / Super-CHIP emulator",
    )
    parser.add_argument("rom", type=Path, help="Path to a raw CHIP-8 ROM image")
    parser.add_argument(
        "--scale",
        type=int,
        default=8,
        help="Window pixels per low-resolution pixel (default: 8)",
    )
    parser.add_argument(
        "--cycles-per-frame",
        type=int,
        default=10,
        help="Instructions executed per 60 Hz frame (default: 10)",
    )
    parser.add_argument(
        "--timer-hz",
        type=float,
        default=DEFAULT_TIMER_HZ,
        help="Delay/sound timer rate in Hertz (default: 60)",
    )
    parser.add_argument("--seed", type=int, help="Seed for the RND instruction")
    parser.add_argument(
        "--palette",
        choices=sorted(PALETTES),
        default="mono",
        help="Display colours",
    )
    parser.add_argument(
        "--trace",
        type=int,
        default=0,
        metavar="N",
        help="Keep the last N executed instructions for the debug shell",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Launch the emulator in fullscreen mode",
    )
    parser.add_argument(
        "--disassemble",
        action="store_true",
        help="Print the ROM disassembly and exit",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.exists():
        parser.error(f"ROM file not found: {args.rom}")
    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.cycles_per_frame <= 0:
        parser.error("--cycles-per-frame must be positive")
    if args.timer_hz <= 0:
        parser.error("--timer-hz must be positive")

    if args.disassemble:
        try:
            image = load_rom_from_path(args.rom)
        except RomTooLargeError as exc:
            parser.exit(1, f"run.py: {exc}\n")
        for line in image.disassembly():
            print(line)
        return 0

    config = AppConfig(
        rom_path=args.rom,
        scale=args.scale,
        cycles_per_frame=args.cycles_per_frame,
        timer_hz=args.timer_hz,
        seed=args.seed,
        fullscreen=args.fullscreen,
        trace_capacity=max(0, args.trace),
        palette=PALETTES[args.palette],
    )
    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
