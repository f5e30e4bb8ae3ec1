# errors.py
from __future__ import annotations


class EnigmaError(Exception):
    """Root of everything the simulator raises on bad input."""


class ConfigurationError(EnigmaError, ValueError):
    """Bad machine, rotor, alphabet or settings description."""


class SymbolLookupError(EnigmaError, LookupError):
    """Symbol is not a member of the alphabet in use."""


class RangeError(EnigmaError, IndexError):
    """Index outside 0..size-1 of the alphabet in use."""
