# wheel_generator.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from random import Random, SystemRandom
from typing import Dict, List, Tuple

from alphabet import ALPHA26, ALPHA38, Alphabet
from errors import ConfigurationError
from permutation import Permutation
from utilities import check_alphabet

# (name, type, notches, permutation)
Wheel = Tuple[str, str, str, Permutation]

# ─── helpers ────────────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Return deterministic RNG when *seed* is given, else CSPRNG."""
    return Random(seed) if seed is not None else SystemRandom()  # CSPRNG


def make_rotor(alpha: Alphabet, rng: Random | SystemRandom) -> Permutation:
    """Return a random permutation of *alpha*."""
    chars = list(alpha.chars)
    rng.shuffle(chars)
    return Permutation.from_wiring("".join(chars), alpha)


def make_reflector(alpha: Alphabet, rng: Random | SystemRandom) -> Permutation:
    """Return a random involution of *alpha* with no fixed points."""
    if alpha.size() % 2:
        raise ValueError(f"A reflector needs an even alphabet, got {alpha.size()} symbols")
    remaining = list(alpha.chars)
    rng.shuffle(remaining)
    pairs = [a + b for a, b in zip(remaining[::2], remaining[1::2])]
    return Permutation.from_pairs(pairs, alpha)


def make_notches(alpha: Alphabet, max_n: int, rng: Random | SystemRandom) -> str:
    """Between 1 and *max_n* distinct notch symbols."""
    return "".join(rng.sample(alpha.chars, rng.randint(1, max(1, max_n))))


def build_catalog(
    alpha: Alphabet,
    *,
    rotors: int,
    fixed: int,
    reflectors: int,
    max_notches: int,
    rng: Random | SystemRandom,
) -> List[Wheel]:
    """Moving rotors R1…, fixed rotors F1…, reflectors A, B, …"""
    wheels: List[Wheel] = []
    for i in range(rotors):
        wheels.append((f"R{i + 1}", "M", make_notches(alpha, max_notches, rng), make_rotor(alpha, rng)))
    for i in range(fixed):
        wheels.append((f"F{i + 1}", "N", "", make_rotor(alpha, rng)))
    for i in range(reflectors):
        wheels.append((_refl_label(i), "R", "", make_reflector(alpha, rng)))
    return wheels


def _refl_label(idx: int) -> str:
    """A, B, …, Z, then UKW27, UKW28, …"""
    return chr(ord("A") + idx) if idx < 26 else f"UKW{idx + 1}"


# ─── output formatters ─────────────────────────────────────────────────


def emit_conf(wheels: List[Wheel], alpha: Alphabet, num_rotors: int, pawls: int) -> str:
    """Return the catalog in the textual config format."""
    lines: List[str] = [alpha.chars, f"{num_rotors} {pawls}"]
    for name, kind, notches, perm in wheels:
        lines.append(f"{name} {kind}{notches} {perm}".rstrip())
    lines.append("")  # trailing NL
    return "\n".join(lines)


def emit_json(wheels: List[Wheel], alpha: Alphabet, num_rotors: int, pawls: int) -> str:
    rotors: Dict[str, Dict[str, str]] = {}
    for name, kind, notches, perm in wheels:
        entry = {"type": kind, "cycles": str(perm)}
        if notches:
            entry["notches"] = notches
        rotors[name] = entry
    payload = {
        "alphabet": alpha.chars,
        "num_rotors": num_rotors,
        "pawls": pawls,
        "rotors": rotors,
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


# ─── CLI ───────────────────────────────────────────────────────────────


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a random rotor catalog.")
    p.add_argument(
        "--alphabet",
        default="26",
        help="26, 38 or a literal string of symbols (default 26)",
    )
    p.add_argument("--rotors", type=int, default=8, help="How many moving rotors (default 8)")
    p.add_argument("--fixed", type=int, default=2, help="How many fixed rotors (default 2)")
    p.add_argument("--reflectors", type=int, default=2, help="How many reflectors (default 2)")
    p.add_argument("--max-notches", type=int, default=2, help="Notches per moving rotor, at most (default 2)")
    p.add_argument("--num-rotors", type=int, default=5, help="Machine slots incl. reflector (default 5)")
    p.add_argument("--pawls", type=int, default=3, help="Driven slots (default 3)")
    p.add_argument(
        "--seed",
        type=int,
        help="Integer seed for deterministic output "
        "(omit for cryptographically strong randomness)",
    )
    p.add_argument(
        "--format",
        choices=["conf", "json"],
        default="conf",
        help="Output format (default conf)",
    )
    p.add_argument(
        "--outfile",
        type=Path,
        help="Write to this file (stdout if omitted)",
    )
    return p.parse_args(argv)


# ─── main ──────────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)

    # alphabet handling --------------------------------------------------
    alpha_map = {"26": ALPHA26, "38": ALPHA38}
    try:
        alphabet = check_alphabet(alpha_map.get(args.alphabet, args.alphabet))
    except ConfigurationError as exc:
        sys.exit(f"Error: {exc}")

    if not (0 <= args.pawls < args.num_rotors):
        sys.exit(f"Error: --pawls must be in 0–{args.num_rotors - 1}")
    if args.rotors < args.pawls or args.fixed < args.num_rotors - 1 - args.pawls:
        sys.exit("Error: not enough moving/fixed rotors to fill the machine")
    if args.reflectors < 1:
        sys.exit("Error: need at least one reflector")

    try:
        wheels = build_catalog(
            alphabet,
            rotors=args.rotors,
            fixed=args.fixed,
            reflectors=args.reflectors,
            max_notches=args.max_notches,
            rng=build_rng(args.seed),
        )
    except ValueError as exc:
        sys.exit(f"Error: {exc}")

    # choose formatter ---------------------------------------------------
    emit = emit_json if args.format == "json" else emit_conf
    text = emit(wheels, alphabet, args.num_rotors, args.pawls)

    # output --------------------------------------------------------------
    if args.outfile:
        args.outfile.write_text(text, encoding="utf-8")
        print(f"Wrote {args.outfile} ({args.format}, {len(wheels)} wheels)")
    else:
        sys.stdout.write(text)


if __name__ == "__main__":
    main()
