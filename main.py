# main.py
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from typing import Iterable, List, TextIO

from debug import Debug
from errors import ConfigurationError, EnigmaError
from machine import Machine
from utilities import configure, describe, group_blocks, load_machine, preprocess_message

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()


@dataclass(slots=True)
class Config:
    """Runtime switches for the message driver."""

    block: int = 5                  # display group width
    debug: List[str] = field(default_factory=list)  # components to log
    log_file: str | None = None     # extra log destination


# ────────────────────────────────────────────────────────────────────────
#  1. Message processing
# ────────────────────────────────────────────────────────────────────────


def process(machine: Machine, lines: Iterable[str], out: TextIO, cfg: Config) -> None:
    """Run every line of *lines* through *machine*.

    Lines starting with ``*`` reconfigure the machine; any other line is
    converted and written to *out* in groups of ``cfg.block``.
    """
    configured = False
    for raw in lines:
        line = raw.rstrip("\r\n")
        if line.lstrip().startswith("*"):
            configure(machine, line.strip())
            configured = True
            debug.log("config", f"settings {describe(machine)}")
            continue
        if not configured:
            if not line.strip():
                continue
            raise ConfigurationError("Message appears before any settings line")

        converted = machine.convert_message(preprocess_message(line))
        out.write(group_blocks(converted, cfg.block) + "\n")


# ────────────────────────────────────────────────────────────────────────
#  2. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt messages with a rotor machine")
    p.add_argument("config", metavar="CONFIG", help="Rotor catalog (.conf text or .json).")
    p.add_argument("input", metavar="INPUT", nargs="?", help="Settings and messages (default: stdin).")
    p.add_argument("output", metavar="OUTPUT", nargs="?", help="Where to write results (default: stdout).")
    p.add_argument("--block", type=int, default=5, help="Output group width. Default: 5")
    p.add_argument(
        "--debug", metavar="COMPONENT", action="append", default=[],
        choices=sorted(Debug.components) + ["all"],
        help="Log a component (repeatable, or 'all').",
    )
    p.add_argument("--log-file", metavar="PATH", help="Also write debug logging to PATH.")
    return p.parse_args(argv)


# ────────────────────────────────────────────────────────────────────────
#  3. Main entry point
# ────────────────────────────────────────────────────────────────────────


def run(args: argparse.Namespace) -> None:
    cfg = Config(block=args.block, debug=args.debug, log_file=args.log_file)
    if cfg.block <= 0:
        raise ConfigurationError(f"Block size must be positive, got {cfg.block}")
    debug.enable_all(cfg.debug)
    if cfg.log_file:
        debug.log_to(cfg.log_file)
    try:
        _convert_files(args, cfg)
    finally:
        debug.close_file()


def _convert_files(args: argparse.Namespace, cfg: Config) -> None:
    machine = load_machine(args.config)

    src = open(args.input, encoding="utf-8") if args.input else sys.stdin
    try:
        dst = open(args.output, "w", encoding="utf-8") if args.output else sys.stdout
        try:
            process(machine, src, dst, cfg)
        except UnicodeDecodeError:
            raise ConfigurationError(f"{args.input or '<stdin>'}: not valid UTF-8") from None
        finally:
            if dst is not sys.stdout:
                dst.close()
    finally:
        if src is not sys.stdin:
            src.close()


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        run(args)
    except EnigmaError as exc:
        sys.exit(f"Error: {exc}")
    except OSError as exc:
        sys.exit(f"Error: could not open {exc.filename}: {exc.strerror}")


if __name__ == "__main__":
    main()
