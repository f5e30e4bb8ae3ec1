# rotor_and_reflector.py
from __future__ import annotations

from alphabet import Alphabet
from debug import Debug
from errors import ConfigurationError
from permutation import Permutation

debug = Debug()


class Rotor:
    """A named permutation plus a rotational setting.

    Subclasses override only the capabilities that differ from the defaults
    here: it does not rotate, does not reflect, is never at a notch.
    """

    kind = "rotor"

    def __init__(self, name: str, perm: Permutation) -> None:
        self.name = name
        self.permutation = perm
        self._setting = 0
        self._ring = 0

    @property
    def alphabet(self) -> Alphabet:
        return self.permutation.alphabet

    def size(self) -> int:
        return self.permutation.size()

    # ── capabilities ---------------------------------------------
    def rotates(self) -> bool:
        return False

    def reflecting(self) -> bool:
        return False

    def at_notch(self) -> bool:
        return False

    def advance(self) -> None:
        """Advance one position, if possible.  By default, does nothing."""

    # ── setting & ring -------------------------------------------
    def setting(self) -> int:
        return self._setting

    def ring(self) -> int:
        return self._ring

    def set(self, posn: int | str) -> None:
        """Set the window position from an index (taken modulo size) or a symbol."""
        self._setting = self._position(posn)

    def set_ring(self, ring: int | str) -> None:
        """Shift the wiring against the lettered ring (Ringstellung)."""
        self._ring = self._position(ring)

    def _position(self, posn: int | str) -> int:
        if isinstance(posn, str):
            return self.alphabet.to_int(posn)
        return posn % self.size()

    # ── signal paths ---------------------------------------------
    def convert_forward(self, p: int) -> int:
        shift = self._setting - self._ring
        mapped = self.permutation.permute(p + shift)
        return (mapped - shift) % self.size()

    def convert_backward(self, e: int) -> int:
        shift = self._setting - self._ring
        mapped = self.permutation.invert(e + shift)
        return (mapped - shift) % self.size()

    # ── niceties -------------------------------------------------
    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} pos={self._setting} ring={self._ring}>"


class MovingRotor(Rotor):
    """A rotor driven by a pawl; its notches let the rotor on its left advance."""

    kind = "moving"

    def __init__(self, name: str, perm: Permutation, notches: str) -> None:
        super().__init__(name, perm)
        for ch in notches:
            perm.alphabet.to_int(ch)        # raises SymbolLookupError
        self.notches = frozenset(notches)

    def rotates(self) -> bool:
        return True

    def at_notch(self) -> bool:
        return self.alphabet.to_char(self._setting) in self.notches

    def advance(self) -> None:
        self._setting = (self._setting + 1) % self.size()
        debug.log("rotor", f"{self.name} -> {self.alphabet.to_char(self._setting)}")


class FixedRotor(Rotor):
    """A rotor that can be set by hand but never steps."""

    kind = "fixed"


class Reflector(Rotor):
    """The turn-around wheel: a fixed-point-free permutation, never turned."""

    kind = "reflector"

    def __init__(self, name: str, perm: Permutation) -> None:
        if not perm.derangement():
            raise ConfigurationError(
                f"Reflector {name!r} wiring must have no fixed points: {perm}"
            )
        super().__init__(name, perm)

    def reflecting(self) -> bool:
        return True

    def set(self, posn: int | str) -> None:
        if self._position(posn) != 0:
            raise ConfigurationError(f"Reflector {self.name!r} has only one position")

    def set_ring(self, ring: int | str) -> None:
        if self._position(ring) != 0:
            raise ConfigurationError(f"Reflector {self.name!r} has no ring setting")
