import pytest

from alphabet import Alphabet
from errors import ConfigurationError, SymbolLookupError
from permutation import Permutation
from rotor_and_reflector import FixedRotor, MovingRotor, Reflector, Rotor

ROTOR_I = "(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)"


@pytest.fixture
def rotor_i(upper):
    return MovingRotor("I", Permutation(ROTOR_I, upper), "Q")


def test_default_capabilities(upper):
    r = Rotor("plain", Permutation("", upper))
    assert not r.rotates()
    assert not r.reflecting()
    assert not r.at_notch()
    r.advance()
    assert r.setting() == 0


def test_fixed_rotor_never_moves(upper):
    r = FixedRotor("Beta", Permutation("(ALBEVFCYODJWUGNMQTZSKPR) (HIX)", upper))
    r.set("C")
    r.advance()
    assert r.setting() == 2
    assert not r.rotates()
    assert not r.at_notch()


def test_set_by_index_wraps(rotor_i):
    rotor_i.set(27)
    assert rotor_i.setting() == 1
    rotor_i.set(-1)
    assert rotor_i.setting() == 25


def test_set_by_symbol(rotor_i):
    rotor_i.set("Q")
    assert rotor_i.setting() == 16


def test_set_by_unknown_symbol(rotor_i):
    with pytest.raises(SymbolLookupError):
        rotor_i.set("?")


def test_convert_at_setting_zero_is_the_permutation(rotor_i):
    assert rotor_i.convert_forward(0) == 4        # A -> E
    assert rotor_i.convert_backward(4) == 0


def test_convert_with_offset(rotor_i):
    rotor_i.set("F")                               # setting 5
    # (10 -> K -> N = 13) - 5
    assert rotor_i.convert_forward(5) == 8
    # (9 + 5 = 14 -> O; O's predecessor is M = 12) - 5
    assert rotor_i.convert_backward(9) == 7


def test_forward_backward_are_inverse(rotor_i):
    for s in range(26):
        rotor_i.set(s)
        for p in range(26):
            assert rotor_i.convert_backward(rotor_i.convert_forward(p)) == p


def test_moving_rotor_notch_and_advance(rotor_i):
    assert rotor_i.rotates()
    rotor_i.set("P")
    assert not rotor_i.at_notch()
    rotor_i.advance()
    assert rotor_i.at_notch()
    rotor_i.set("Z")
    rotor_i.advance()
    assert rotor_i.setting() == 0


def test_multiple_notches(upper):
    r = MovingRotor("VI", Permutation("(AJQDVLEOZWIYTS) (CGMNHFUX) (BPRK)", upper), "ZM")
    r.set("M")
    assert r.at_notch()
    r.set("Z")
    assert r.at_notch()
    r.set("N")
    assert not r.at_notch()


def test_notch_outside_alphabet(upper):
    with pytest.raises(SymbolLookupError):
        MovingRotor("bad", Permutation("", upper), "1")


def test_ring_shifts_wiring_not_notch(rotor_i):
    plain = MovingRotor("I'", rotor_i.permutation, "Q")
    rotor_i.set_ring("B")
    rotor_i.set("B")
    # same effective offset as an unringed rotor at A
    for p in range(26):
        assert rotor_i.convert_forward(p) == plain.convert_forward(p)
    rotor_i.set("Q")
    assert rotor_i.at_notch()


def test_reflector(upper):
    b = Reflector("B", Permutation(
        "(AE) (BN) (CK) (DQ) (FU) (GY) (HW) (IJ) (LO) (MP) (RX) (SZ) (TV)", upper))
    assert b.reflecting()
    assert not b.rotates()
    b.set(0)
    b.set("A")
    assert b.convert_forward(0) == 4
    with pytest.raises(ConfigurationError):
        b.set(1)
    with pytest.raises(ConfigurationError):
        b.set("C")
    with pytest.raises(ConfigurationError):
        b.set_ring("B")
    assert b.setting() == 0


def test_reflector_must_be_derangement():
    with pytest.raises(ConfigurationError):
        Reflector("bad", Permutation("(AB)", Alphabet("ABC")))


def test_repr(rotor_i):
    assert "MovingRotor I" in repr(rotor_i)
