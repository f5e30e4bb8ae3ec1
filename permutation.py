# permutation.py
from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from alphabet import Alphabet
from debug import Debug
from errors import ConfigurationError, SymbolLookupError

debug = Debug()

_cycle_re = re.compile(r"\(([^()]*)\)")


def parse_cycles(spec: str | Iterable[str]) -> list[str]:
    """Split cycle notation such as ``"(BACD) (EF)"`` into ``["BACD", "EF"]``.

    Whitespace is ignored everywhere and empty ``()`` groups are dropped.
    An iterable of cycles may be given instead of a string; parentheses on
    its items are optional.
    """
    if not isinstance(spec, str):
        cycles = ["".join(ch for ch in c if not ch.isspace() and ch not in "()")
                  for c in spec]
        return [c for c in cycles if c]

    text = "".join(spec.split())
    cycles: list[str] = []
    pos = 0
    for m in _cycle_re.finditer(text):
        if m.start() != pos:
            raise ConfigurationError(
                f"Unexpected {text[pos:m.start()]!r} in cycle specification {spec!r}"
            )
        if m.group(1):
            cycles.append(m.group(1))
        pos = m.end()
    if pos != len(text):
        raise ConfigurationError(
            f"Unexpected {text[pos:]!r} in cycle specification {spec!r}"
        )
    return cycles


class Permutation:
    """A permutation of an alphabet, written as disjoint cycles.

    Symbols that appear in no cycle map to themselves.  Both directions are
    precomputed as integer lookup tables, so ``permute``/``invert`` on
    indices are single list reads.
    """

    def __init__(self, cycles: str | Iterable[str], alphabet: Alphabet) -> None:
        self.alphabet = alphabet
        self._cycles: list[str] = []
        fwd: dict[str, str] = {}

        for cycle in parse_cycles(cycles):
            for ch in cycle:
                if not alphabet.contains(ch):
                    raise SymbolLookupError(
                        f"Cycle symbol {ch!r} is not in alphabet {alphabet.chars!r}"
                    )
                if ch in fwd:
                    raise ConfigurationError(
                        f"Symbol {ch!r} appears more than once in cycles {cycles!r}"
                    )
                fwd[ch] = ch        # placeholder, marks the symbol as used
            for a, b in zip(cycle, cycle[1:] + cycle[0]):
                fwd[a] = b
            if len(cycle) > 1:
                self._cycles.append(cycle)

        self._fwd_sym = fwd
        self._rev_sym = {b: a for a, b in fwd.items()}

        # integer lookup tables
        chars = alphabet.chars
        self._fwd = [alphabet.to_int(fwd.get(c, c)) for c in chars]
        self._rev = [0] * len(chars)
        for i, j in enumerate(self._fwd):
            self._rev[j] = i

        debug.log("permutation", f"{self} over {chars!r}")

    # ── alternative constructors ----------------------------------
    @classmethod
    def from_wiring(cls, wiring: str, alphabet: Alphabet) -> "Permutation":
        """Build from a wiring string where ``wiring[i]`` is the image of
        ``alphabet[i]`` (the way rotor tables are usually printed)."""
        if sorted(wiring) != sorted(alphabet.chars):
            raise ConfigurationError(
                f"Wiring {wiring!r} must be a permutation of alphabet {alphabet.chars!r}"
            )
        image = dict(zip(alphabet.chars, wiring))
        seen: set[str] = set()
        cycles: list[str] = []
        for start in alphabet.chars:
            if start in seen:
                continue
            cycle = []
            ch = start
            while ch not in seen:
                seen.add(ch)
                cycle.append(ch)
                ch = image[ch]
            cycles.append("".join(cycle))
        return cls(cycles, alphabet)

    @classmethod
    def from_pairs(
        cls,
        pairs: str | Sequence[str | tuple[str, str]],
        alphabet: Alphabet,
    ) -> "Permutation":
        """Build a plugboard-style set of swaps from ``["AB", "CD"]``
        (or ``"AB CD"``)."""
        if isinstance(pairs, str):
            pairs = pairs.split()

        used: set[str] = set()
        cycles: list[str] = []
        for raw in pairs:
            # normalise to (a, b)
            if len(raw) != 2:
                raise ConfigurationError(f"Pair {raw!r} must be exactly 2 symbols")
            a, b = raw

            if a == b:
                raise ConfigurationError(f"Pair cannot map a symbol to itself: {a!r}")
            if a in used or b in used:
                dup = a if a in used else b
                raise ConfigurationError(f"Symbol {dup!r} already used in another pair")
            if not alphabet.contains(a) or not alphabet.contains(b):
                bad = b if alphabet.contains(a) else a
                raise SymbolLookupError(f"Symbol {bad!r} not in alphabet")

            cycles.append(a + b)
            used.update((a, b))
        return cls(cycles, alphabet)

    # ── queries ---------------------------------------------------
    def size(self) -> int:
        return self.alphabet.size()

    def wrap(self, p: int) -> int:
        """Return *p* reduced into 0..size-1 (floored, so -1 wraps to size-1)."""
        return p % self.size()

    def permute(self, p: int | str) -> int | str:
        """Apply the permutation to an index (taken modulo size) or a symbol."""
        if isinstance(p, str):
            self._require(p)
            return self._fwd_sym.get(p, p)
        return self._fwd[self.wrap(p)]

    def invert(self, c: int | str) -> int | str:
        """Apply the inverse permutation to an index (modulo size) or a symbol."""
        if isinstance(c, str):
            self._require(c)
            return self._rev_sym.get(c, c)
        return self._rev[self.wrap(c)]

    def derangement(self) -> bool:
        """True iff no symbol maps to itself."""
        return all(i != j for i, j in enumerate(self._fwd))

    def cycles(self) -> tuple[str, ...]:
        """The non-trivial cycles, in the order they were given."""
        return tuple(self._cycles)

    # ── helpers ---------------------------------------------------
    def _require(self, symbol: str) -> None:
        if not self.alphabet.contains(symbol):
            raise SymbolLookupError(
                f"Symbol {symbol!r} is not in alphabet {self.alphabet.chars!r}"
            )

    def __str__(self) -> str:
        return " ".join(f"({c})" for c in self._cycles)

    def __repr__(self) -> str:
        return f"<Permutation {self} size={self.size()}>"
