"""Tests for the Weil pairing."""

import pytest

from conftest import some_point
from isogeny_cracker.arith.curve import IDENTITY
from isogeny_cracker.arith.pairing import weil_pairing
from isogeny_cracker.errors import OrderMismatch


class TestWeilPairing:
    @pytest.mark.parametrize("ell,e", [(2, 4), (3, 3)])
    def test_exact_order(self, e0, basis16, basis27, ell, e):
        P, Q = basis16 if ell == 2 else basis27
        w = weil_pairing(e0, P, Q, ell, e)
        assert w ** (ell**e) == 1
        assert w ** (ell ** (e - 1)) != 1

    def test_bilinear(self, e0, basis16):
        P, Q = basis16
        w = weil_pairing(e0, P, Q, 2, 4)
        for a, b in [(1, 2), (3, 5), (7, 4), (15, 9)]:
            aP = e0.multiply(P, a)
            bQ = e0.multiply(Q, b)
            assert weil_pairing(e0, aP, bQ, 2, 4) == w ** (a * b)

    def test_bilinear_odd(self, e0, basis27):
        P, Q = basis27
        w = weil_pairing(e0, P, Q, 3, 3)
        for a, b in [(2, 1), (4, 7), (13, 26)]:
            assert weil_pairing(e0, e0.multiply(P, a), e0.multiply(Q, b), 3, 3) == w ** (a * b)

    def test_additive_in_second_argument(self, e0, basis16):
        P, Q = basis16
        w = weil_pairing(e0, P, Q, 2, 4)
        assert weil_pairing(e0, P, e0.add(Q, P), 2, 4) == w
        assert weil_pairing(e0, P, e0.add(Q, Q), 2, 4) == w * w

    def test_alternating(self, e0, basis16):
        P, Q = basis16
        w = weil_pairing(e0, P, Q, 2, 4)
        assert weil_pairing(e0, P, P, 2, 4) == 1
        assert weil_pairing(e0, Q, P, 2, 4) == w.inverse()

    def test_dependent_points(self, e0, basis27):
        P, _ = basis27
        assert weil_pairing(e0, P, e0.multiply(P, 5), 3, 3) == 1
        assert weil_pairing(e0, e0.multiply(P, 9), P, 3, 3) == 1

    def test_smaller_order_argument(self, e0, basis16):
        P, Q = basis16
        w = weil_pairing(e0, P, Q, 2, 4)
        assert weil_pairing(e0, P, e0.multiply(Q, 4), 2, 4) == w**4
        assert weil_pairing(e0, e0.multiply(P, 8), Q, 2, 4) == w**8

    def test_identity_argument(self, e0, basis16):
        P, _ = basis16
        assert weil_pairing(e0, P, IDENTITY, 2, 4) == 1
        assert weil_pairing(e0, IDENTITY, P, 2, 4) == 1

    def test_point_outside_torsion(self, e0, basis16):
        P, _ = basis16
        R = some_point(e0)
        while e0.prime_power_order(R, 2, 4) is not None:
            R = some_point(e0, R.x.a + 1)
        with pytest.raises(OrderMismatch):
            weil_pairing(e0, P, R, 2, 4)
