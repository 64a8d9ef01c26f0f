import pytest

from SurfaceLogic import Pauli


def test_protocol_tags():
    assert Pauli.X.tag == 1
    assert Pauli.Y.tag == 2
    assert Pauli.Z.tag == 3
    assert Pauli.from_tag(3) is Pauli.Z
    with pytest.raises(ValueError):
        Pauli.from_tag(0)
    with pytest.raises(ValueError):
        Pauli.from_tag(4)


def test_coerce():
    assert Pauli.coerce("x") is Pauli.X
    assert Pauli.coerce(2) is Pauli.Y
    assert Pauli.coerce(Pauli.Z) is Pauli.Z
    with pytest.raises(ValueError):
        Pauli.coerce("Q")


def test_bits_round_trip():
    for p in Pauli:
        assert Pauli.from_bits(*p.bits) is p
    assert Pauli.Y.bits == (1, 1)


def test_commutation():
    assert Pauli.X.commutes_with(Pauli.X)
    assert Pauli.X.commutes_with(Pauli.I)
    assert not Pauli.X.commutes_with(Pauli.Z)
    assert not Pauli.Y.commutes_with(Pauli.X)
    assert Pauli.Z.commutes_with(Pauli.Z)


def test_str():
    assert str(Pauli.X) == "X"
    assert repr(Pauli.I) == "I"
