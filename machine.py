# machine.py  ─────────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Iterable, Sequence

from alphabet import Alphabet
from debug import Debug
from errors import ConfigurationError, RangeError
from permutation import Permutation
from rotor_and_reflector import Rotor

debug = Debug()


class Machine:
    """A complete rotor machine.

    Slot 0 holds the reflector, slots 1..num_rotors-1 hold the rotors from
    left to right; the rightmost ``pawls`` of them are driven.  Rotors are
    drawn from a shared catalog and referenced, not copied.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        pawls: int,
        all_rotors: Iterable[Rotor],
    ) -> None:
        if num_rotors <= 1:
            raise ConfigurationError(f"Need at least 2 rotor slots, got {num_rotors}")
        if not (0 <= pawls < num_rotors):
            raise ConfigurationError(
                f"Pawl count {pawls} must be in 0–{num_rotors - 1}"
            )

        catalog: dict[str, Rotor] = {}
        for rotor in all_rotors:
            if rotor.name in catalog:
                raise ConfigurationError(f"Rotor {rotor.name!r} defined twice")
            if rotor.alphabet != alphabet:
                raise ConfigurationError(
                    f"Rotor {rotor.name!r} does not use alphabet {alphabet.chars!r}"
                )
            catalog[rotor.name] = rotor

        self.alphabet = alphabet
        self._num_rotors = num_rotors
        self._pawls = pawls
        self._catalog = catalog
        self._slots: tuple[Rotor, ...] = ()
        self._plugboard = Permutation("", alphabet)

    # ── queries ─────────────────────────────────────────────────

    def num_rotors(self) -> int:
        return self._num_rotors

    def num_pawls(self) -> int:
        return self._pawls

    def available(self) -> list[str]:
        """Names of every rotor in the catalog."""
        return list(self._catalog)

    def rotors(self) -> tuple[Rotor, ...]:
        """The installed rotors, reflector first."""
        return self._slots

    def plugboard(self) -> Permutation:
        return self._plugboard

    def positions(self) -> str:
        """Window letters of the non-reflector slots, left to right."""
        return "".join(self.alphabet.to_char(r.setting()) for r in self._slots[1:])

    # ── configuration ───────────────────────────────────────────

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Install the rotors named *names* (``names[0]`` is the reflector).

        Every inserted rotor starts at setting 0 and ring 0.  Nothing is
        installed unless the whole assignment is valid.
        """
        if len(names) != self._num_rotors:
            raise ConfigurationError(
                f"Expected {self._num_rotors} rotor names, got {len(names)}"
            )
        if len(set(names)) != len(names):
            dup = next(n for n in names if list(names).count(n) > 1)
            raise ConfigurationError(f"Rotor {dup!r} named more than once")

        missing = [n for n in names if n not in self._catalog]
        if missing:
            raise ConfigurationError(f"Unknown rotor(s): {', '.join(missing)}")

        slots = tuple(self._catalog[n] for n in names)
        if not slots[0].reflecting():
            raise ConfigurationError(f"Rotor {names[0]!r} in slot 0 is not a reflector")

        first_driven = self._num_rotors - self._pawls
        for k, rotor in enumerate(slots[1:], start=1):
            if rotor.reflecting():
                raise ConfigurationError(
                    f"Reflector {rotor.name!r} can only go in slot 0, not slot {k}"
                )
            if k >= first_driven and not rotor.rotates():
                raise ConfigurationError(
                    f"Slot {k} is driven by a pawl but {rotor.name!r} does not move"
                )
            if k < first_driven and rotor.rotates():
                raise ConfigurationError(
                    f"Slot {k} has no pawl but {rotor.name!r} is a moving rotor"
                )

        for rotor in slots:
            rotor.set(0)
            rotor.set_ring(0)
        self._slots = slots
        debug.log("config", f"inserted {' '.join(names)}")

    def set_rotors(self, setting: str) -> None:
        """Set the non-reflector rotors from *setting*, leftmost first."""
        rotors = self._settable(setting, "setting")
        for rotor, ch in zip(rotors, setting):
            rotor.set(ch)
        debug.log("config", f"positions {setting}")

    def set_rings(self, rings: str) -> None:
        """Set the ring offsets of the non-reflector rotors, leftmost first."""
        rotors = self._settable(rings, "ring setting")
        for rotor, ch in zip(rotors, rings):
            rotor.set_ring(ch)
        debug.log("config", f"rings {rings}")

    def set_plugboard(self, plugboard: Permutation) -> None:
        if plugboard.alphabet != self.alphabet:
            raise ConfigurationError("Plugboard alphabet does not match the machine's")
        self._plugboard = plugboard
        debug.log("plugboard", f"plugboard {plugboard}")

    def _settable(self, setting: str, what: str) -> tuple[Rotor, ...]:
        self._require_rotors()
        if len(setting) != self._num_rotors - 1:
            raise ConfigurationError(
                f"{what.capitalize()} {setting!r} must be {self._num_rotors - 1} "
                f"symbols long"
            )
        for ch in setting:
            if not self.alphabet.contains(ch):
                raise ConfigurationError(f"{what.capitalize()} symbol {ch!r} not in alphabet")
        return self._slots[1:]

    def _require_rotors(self) -> None:
        if not self._slots:
            raise ConfigurationError("No rotors inserted")

    # ── stepping logic  ─────────────────────────────────────────

    def _step_rotors(self) -> None:
        """Advance rotors one key-press.

        Flags are decided from the pre-step state, then applied.  A rotor
        whose pawl engages the notch of its right neighbour advances, and
        carries that neighbour with it; each slot still moves at most once.
        """
        slots = self._slots
        last = len(slots) - 1

        # decide which rotors step (two-phase clarity)
        steps = [False] * len(slots)
        steps[last] = True
        for k in range(1, last):
            if slots[k].rotates() and slots[k + 1].at_notch():
                steps[k] = steps[k + 1] = True

        for rotor, step in zip(slots, steps):
            if step:
                rotor.advance()

    # ── encipher one symbol  ────────────────────────────────────

    def convert(self, c: int | str) -> int | str:
        """Convert index *c* after first advancing the machine.

        A string is treated as a whole message (see ``convert_message``).
        """
        if isinstance(c, str):
            return self.convert_message(c)

        size = self.alphabet.size()
        if not (0 <= c < size):
            raise RangeError(f"Index {c} out of range 0–{size - 1}")
        self._require_rotors()

        self._step_rotors()
        debug.log("stepping", f"positions {self.positions()}")

        signal = self._plugboard.permute(c)

        for rotor in reversed(self._slots):
            signal = rotor.convert_forward(signal)

        for rotor in self._slots[1:]:
            signal = rotor.convert_backward(signal)

        out = self._plugboard.invert(signal)
        debug.log("convert", f"{c} -> {out}")
        return out

    def convert_message(self, msg: str) -> str:
        """Convert every symbol of *msg*; whitespace passes through unchanged."""
        out: list[str] = []
        for ch in msg:
            if ch.isspace():
                out.append(ch)
            else:
                out.append(self.alphabet.to_char(self.convert(self.alphabet.to_int(ch))))
        return "".join(out)

    def __repr__(self) -> str:
        names = " ".join(r.name for r in self._slots) or "empty"
        return f"<Machine {names} pos={self.positions()!r}>"
