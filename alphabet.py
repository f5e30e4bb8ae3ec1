# alphabet.py
from __future__ import annotations

from debug import Debug
from errors import ConfigurationError, RangeError, SymbolLookupError

debug = Debug()

ALPHA26 = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
ALPHA38 = ALPHA26 + "0123456789#/"


# ── Alphabet ──────────────────────────────────────────────────────
class Alphabet:
    """An ordered set of distinct symbols, each numbered from 0."""

    def __init__(self, chars: str = ALPHA26) -> None:
        if not chars:
            raise ConfigurationError("Alphabet must contain at least one symbol")

        index: dict[str, int] = {}
        for i, ch in enumerate(chars):
            if ch in index:
                raise ConfigurationError(
                    f"Duplicate symbol {ch!r} in alphabet {chars!r}"
                )
            index[ch] = i

        self.chars: str = chars
        self._alpha_to_index = index
        debug.log("alphabet", f"built {len(chars)}-symbol alphabet {chars!r}")

    def size(self) -> int:
        return len(self.chars)

    def contains(self, symbol: str) -> bool:
        return symbol in self._alpha_to_index

    # symbol → integer index
    def to_int(self, symbol: str) -> int:
        try:
            return self._alpha_to_index[symbol]
        except KeyError:
            raise SymbolLookupError(
                f"Symbol {symbol!r} is not in alphabet {self.chars!r}"
            ) from None

    # integer index → symbol
    def to_char(self, index: int) -> str:
        if not (0 <= index < len(self.chars)):
            hi = len(self.chars) - 1
            raise RangeError(f"Index {index} out of range 0–{hi}")
        return self.chars[index]

    # ── niceties ------------------------------------------------------
    __len__ = size
    __contains__ = contains

    def __iter__(self):
        return iter(self.chars)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self.chars == other.chars

    def __hash__(self) -> int:
        return hash(self.chars)

    def __repr__(self) -> str:
        return f"<Alphabet {self.chars!r}>"
