import logging

import pytest

from alphabet import Alphabet
from debug import Debug
from machine import Machine
from permutation import Permutation
from rotor_and_reflector import MovingRotor, Reflector


def _one_rotor_machine():
    six = Alphabet("ABCDEF")
    m = Machine(six, 2, 1, [
        Reflector("REF", Permutation("(AB) (CD) (EF)", six)),
        MovingRotor("R", Permutation("(ABC)", six), "C"),
    ])
    m.insert_rotors(["REF", "R"])
    return m


def test_components_off_by_default():
    assert not any(Debug.components.values())


def test_switches_are_shared(restore_debug):
    other = Debug()
    restore_debug.enable("rotor")
    assert Debug.components["rotor"]
    other.disable("rotor")
    assert not Debug.components["rotor"]


def test_enable_all(restore_debug):
    restore_debug.enable_all(["all"])
    assert all(Debug.components.values())


def test_unknown_component(restore_debug):
    with pytest.raises(ValueError):
        restore_debug.enable("warp-drive")


def test_stepping_is_logged(restore_debug, caplog):
    m = _one_rotor_machine()
    restore_debug.enable("stepping", "rotor")
    with caplog.at_level(logging.DEBUG, logger="ENIGMA"):
        m.convert(0)
    assert "[STEPPING] positions B" in caplog.text
    assert "[ROTOR] R -> B" in caplog.text


def test_disabled_component_is_silent(restore_debug, caplog):
    with caplog.at_level(logging.DEBUG, logger="ENIGMA"):
        restore_debug.log("convert", "hidden")
    assert "hidden" not in caplog.text


def test_log_to_file(restore_debug, tmp_path):
    path = tmp_path / "enigma.log"
    restore_debug.log_to(str(path))
    restore_debug.enable("stepping")
    _one_rotor_machine().convert(0)
    restore_debug.close_file()
    text = path.read_text(encoding="utf-8")
    assert "[ENIGMA]" in text
    assert "[STEPPING] positions B" in text


def test_log_to_replaces_previous_file(restore_debug, tmp_path):
    first, second = tmp_path / "a.log", tmp_path / "b.log"
    restore_debug.enable("config")
    restore_debug.log_to(str(first))
    restore_debug.log_to(str(second))
    restore_debug.log("config", "only here")
    restore_debug.close_file()
    assert "only here" not in first.read_text(encoding="utf-8")
    assert "only here" in second.read_text(encoding="utf-8")
    assert not any(
        isinstance(h, logging.FileHandler) for h in logging.getLogger("ENIGMA").handlers
    )
