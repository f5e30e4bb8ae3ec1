"""Shared fixtures for the rotor machine tests."""

from pathlib import Path

import pytest

from alphabet import Alphabet
from debug import Debug
from machine import Machine
from permutation import Permutation
from rotor_and_reflector import FixedRotor, MovingRotor, Reflector
from utilities import load_machine

CONFIGS = Path(__file__).resolve().parent.parent / "configs"


@pytest.fixture
def upper():
    return Alphabet()


@pytest.fixture
def default_machine():
    return load_machine(CONFIGS / "default.conf")


@pytest.fixture
def six():
    return Alphabet("ABCDEF")


@pytest.fixture
def small_catalog(six):
    """Three moving rotors, one fixed rotor and one reflector over ABCDEF."""
    return [
        Reflector("REF", Permutation("(AB) (CD) (EF)", six)),
        FixedRotor("FIX", Permutation("(ACE)", six)),
        MovingRotor("L", Permutation("(ABCDEF)", six), "A"),
        MovingRotor("M", Permutation("(AFB) (CE)", six), "B"),
        MovingRotor("R", Permutation("(ADBECF)", six), "C"),
    ]


@pytest.fixture
def four_slot(six, small_catalog):
    """REF + L M R, all three rotors driven."""
    machine = Machine(six, 4, 3, small_catalog)
    machine.insert_rotors(["REF", "L", "M", "R"])
    return machine


@pytest.fixture
def restore_debug():
    saved = Debug.components.copy()
    dbg = Debug()
    yield dbg
    dbg.close_file()
    Debug.components.clear()
    Debug.components.update(saved)
