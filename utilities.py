# utilities.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List

from alphabet import Alphabet
from debug import Debug
from errors import ConfigurationError
from machine import Machine
from permutation import Permutation
from rotor_and_reflector import FixedRotor, MovingRotor, Reflector, Rotor

debug = Debug()

# ────────────────────────────────────────────────────────────────────────
#  0. Regex & trivial helpers
# ────────────────────────────────────────────────────────────────────────

_cycle_tok_re = re.compile(r"^\(.*\)$")
_type_re = re.compile(r"^([MNR])(.*)$")
_FORBIDDEN_IN_ALPHABET = set("*()")


def _tokens(text: str) -> Iterator[str]:
    return iter(text.split())


def _take(tokens: Iterator[str], what: str) -> str:
    try:
        return next(tokens)
    except StopIteration:
        raise ConfigurationError(f"Configuration truncated: expected {what}") from None


def _take_int(tokens: Iterator[str], what: str) -> int:
    tok = _take(tokens, what)
    try:
        return int(tok)
    except ValueError:
        raise ConfigurationError(f"Expected {what} as a number, got {tok!r}") from None


def check_alphabet(chars: str) -> Alphabet:
    """Alphabet for a catalog file: no whitespace, `*` or parentheses."""
    bad = {ch for ch in chars if ch in _FORBIDDEN_IN_ALPHABET or ch.isspace()}
    if bad:
        raise ConfigurationError(
            f"Bad formatting for alphabet {chars!r}: may not contain {''.join(sorted(bad))!r}"
        )
    return Alphabet(chars)


def make_rotor(name: str, kind: str, perm: Permutation, notches: str = "") -> Rotor:
    """Build a rotor of *kind* ``M``, ``N`` or ``R``."""
    if kind == "M":
        return MovingRotor(name, perm, notches)
    if notches:
        raise ConfigurationError(f"Rotor {name!r} of type {kind!r} cannot have notches")
    if kind == "N":
        return FixedRotor(name, perm)
    if kind == "R":
        return Reflector(name, perm)
    raise ConfigurationError(f"Rotor {name!r} has unknown type {kind!r}")


# ────────────────────────────────────────────────────────────────────────
#  1. Catalog readers
# ────────────────────────────────────────────────────────────────────────


def parse_config(text: str) -> Machine:
    """Build a Machine from the textual catalog format::

        ABCDEFGHIJKLMNOPQRSTUVWXYZ
        5 3
        I MQ  (AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)
        B R   (AE) (BN) (CK) ...
    """
    tokens = _tokens(text)
    alphabet = check_alphabet(_take(tokens, "alphabet"))
    num_rotors = _take_int(tokens, "number of rotor slots")
    pawls = _take_int(tokens, "number of pawls")

    rotors: List[Rotor] = []
    pending = next(tokens, None)
    while pending is not None:
        name = pending
        if _cycle_tok_re.match(name):
            raise ConfigurationError(f"Bad rotor description: cycle {name!r} without a rotor")
        type_tok = _take(tokens, f"type of rotor {name!r}")
        m = _type_re.match(type_tok)
        if not m:
            raise ConfigurationError(f"Bad rotor description for {name!r}: type {type_tok!r}")

        cycles: List[str] = []
        pending = next(tokens, None)
        while pending is not None and _cycle_tok_re.match(pending):
            cycles.append(pending)
            pending = next(tokens, None)

        perm = Permutation("".join(cycles), alphabet)
        rotors.append(make_rotor(name, m.group(1), perm, m.group(2)))
        debug.log("config", f"read {rotors[-1]!r}")

    return Machine(alphabet, num_rotors, pawls, rotors)


def _json_str(value: object, what: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"Expected {what} as a string, got {type(value).__name__}")
    return value


def _json_int(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigurationError(f"Expected {what} as a number, got {value!r}")
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Expected {what} as a number, got {value!r}") from None


def load_config(data: dict) -> Machine:
    """Build a Machine from the JSON catalog layout (already decoded)."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config must be a JSON object, got {type(data).__name__}")
    required = {"alphabet", "num_rotors", "pawls", "rotors"}
    missing = required - data.keys()
    if missing:
        raise ConfigurationError(f"Missing keys in config: {', '.join(sorted(missing))}")

    alphabet = check_alphabet(_json_str(data["alphabet"], "alphabet"))
    num_rotors = _json_int(data["num_rotors"], "num_rotors")
    pawls = _json_int(data["pawls"], "pawls")
    if not isinstance(data["rotors"], dict):
        raise ConfigurationError("'rotors' must map rotor names to rotor entries")

    rotors: List[Rotor] = []
    for name, entry in data["rotors"].items():
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Rotor {name!r} must be a JSON object")
        if "type" not in entry:
            raise ConfigurationError(f"Rotor {name!r} has no type")
        kind = _json_str(entry["type"], f"type of rotor {name!r}")
        notches = _json_str(entry.get("notches", ""), f"notches of rotor {name!r}")
        if "wiring" in entry:
            wiring = _json_str(entry["wiring"], f"wiring of rotor {name!r}")
            perm = Permutation.from_wiring(wiring, alphabet)
        else:
            cycles = _json_str(entry.get("cycles", ""), f"cycles of rotor {name!r}")
            perm = Permutation(cycles, alphabet)
        rotors.append(make_rotor(name, kind, perm, notches))

    return Machine(alphabet, num_rotors, pawls, rotors)


def load_machine(path: str | Path) -> Machine:
    """Read a catalog file; ``.json`` files use the JSON layout."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        raise ConfigurationError(f"{path}: not valid UTF-8") from None
    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"{path}: not valid JSON ({exc})") from exc
        return load_config(data)
    return parse_config(text)


# ────────────────────────────────────────────────────────────────────────
#  2. Settings lines
# ────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class Settings:
    """One ``* B Beta III IV I AXLE (HQ) (EX)`` line, split into parts."""

    rotors: List[str]
    positions: str
    rings: str | None = None
    plugboard: str = ""


def parse_settings(line: str, num_rotors: int) -> Settings:
    parts = line.split()
    if not parts or parts[0] != "*":
        raise ConfigurationError(f"Settings line must start with '*': {line!r}")
    if len(parts) < num_rotors + 2:
        raise ConfigurationError(
            f"Settings line needs {num_rotors} rotors and a position string: {line!r}"
        )

    rotors = parts[1 : num_rotors + 1]
    positions = parts[num_rotors + 1]
    rest = parts[num_rotors + 2 :]

    rings = None
    if rest and not rest[0].startswith("("):
        rings = rest.pop(0)
    return Settings(rotors, positions, rings, " ".join(rest))


def apply_settings(machine: Machine, settings: Settings) -> None:
    """Install *settings* on *machine*.

    The plugboard and all strings are checked before anything is changed,
    so a bad line leaves the previous configuration in place.
    """
    plugboard = Permutation(settings.plugboard, machine.alphabet)
    expected = machine.num_rotors() - 1
    for what, value in (("positions", settings.positions), ("rings", settings.rings)):
        if value is None:
            continue
        if len(value) != expected:
            raise ConfigurationError(f"{what.capitalize()} {value!r} must be {expected} symbols long")
        bad = [ch for ch in value if not machine.alphabet.contains(ch)]
        if bad:
            raise ConfigurationError(f"{what.capitalize()} symbol {bad[0]!r} not in alphabet")

    machine.insert_rotors(settings.rotors)
    machine.set_rotors(settings.positions)
    if settings.rings is not None:
        machine.set_rings(settings.rings)
    machine.set_plugboard(plugboard)


def configure(machine: Machine, line: str) -> Settings:
    """Parse and apply a settings line in one go."""
    settings = parse_settings(line, machine.num_rotors())
    apply_settings(machine, settings)
    return settings


# ────────────────────────────────────────────────────────────────────────
#  3. Text helpers
# ────────────────────────────────────────────────────────────────────────


def preprocess_message(msg: str) -> str:
    """Drop all whitespace; what is left must be alphabet symbols."""
    return "".join(msg.split())


def group_blocks(msg: str, block: int = 5) -> str:
    """Print-ready *msg* in groups of *block* (the last may be shorter)."""
    if block <= 0:
        raise ValueError(f"Block size must be positive, got {block}")
    clean = preprocess_message(msg)
    return " ".join(clean[i : i + block] for i in range(0, len(clean), block))


def describe(machine: Machine) -> Dict[str, str]:
    """Readable snapshot of the machine, handy for `--debug config`."""
    return {
        "rotors": " ".join(r.name for r in machine.rotors()),
        "positions": machine.positions(),
        "plugboard": str(machine.plugboard()),
    }


__all__ = [
    "Settings",
    "apply_settings",
    "check_alphabet",
    "configure",
    "describe",
    "group_blocks",
    "load_config",
    "load_machine",
    "make_rotor",
    "parse_config",
    "parse_settings",
    "preprocess_message",
]
