"""Tests for curves, points and isomorphisms."""

import pytest

from conftest import some_point
from isogeny_cracker.arith.curve import IDENTITY, Curve, Identity, Point


class TestCurve:
    def test_base_curve_j(self, e0):
        assert e0.j_invariant() == 1728

    def test_singular_rejected(self, field):
        with pytest.raises(ValueError):
            Curve(field.zero, field.zero)

    def test_equality(self, field, e0):
        assert Curve(field(1), field(0)) == e0
        assert Curve(field(2), field(0)) != e0


class TestGroupLaw:
    def test_points_on_curve(self, e0):
        P = some_point(e0, 1)
        Q = some_point(e0, P.x.a + 1)
        assert e0.contains(P)
        assert e0.contains(e0.add(P, Q))
        assert e0.contains(e0.double(P))

    def test_inverse(self, e0):
        P = some_point(e0)
        assert e0.add(P, e0.neg(P)) == IDENTITY
        assert e0.sub(P, P) == IDENTITY

    def test_identity_is_neutral(self, e0):
        P = some_point(e0)
        assert e0.add(P, IDENTITY) == P
        assert e0.add(IDENTITY, P) == P
        assert isinstance(e0.multiply(P, 0), Identity)

    def test_associativity(self, e0):
        P = some_point(e0, 1)
        Q = some_point(e0, P.x.a + 1)
        R = some_point(e0, Q.x.a + 1)
        assert e0.add(e0.add(P, Q), R) == e0.add(P, e0.add(Q, R))

    def test_group_exponent(self, e0):
        P = some_point(e0)
        assert e0.multiply(P, e0.exponent) == IDENTITY

    def test_negative_multiple(self, e0):
        P = some_point(e0)
        assert e0.multiply(P, -3) == e0.neg(e0.multiply(P, 3))

    def test_multiply_matches_repeated_addition(self, e0):
        P = some_point(e0)
        acc = IDENTITY
        for _ in range(7):
            acc = e0.add(acc, P)
        assert e0.multiply(P, 7) == acc

    def test_two_torsion(self, field, e0):
        pts = e0.two_torsion()
        assert len(pts) == 3
        assert Point(field.zero, field.zero) in pts
        for T in pts:
            assert e0.double(T) == IDENTITY

    def test_orders(self, e0, basis16):
        P, _ = basis16
        assert e0.has_order(P, 2, 4)
        assert not e0.has_order(P, 2, 3)
        assert e0.prime_power_order(P, 2, 10) == 4
        assert e0.prime_power_order(e0.double(P), 2, 10) == 3


class TestIsomorphisms:
    def test_scaled_curve(self, field):
        E = Curve(field(1), field(1))
        u = field(3, 5)
        E2 = Curve(u**4 * E.a, u**6 * E.b)
        isos = E.isomorphisms_to(E2)
        assert len(isos) == 2
        assert any(iso.u == u for iso in isos)
        P = some_point(E)
        for iso in isos:
            assert E2.contains(iso(P))

    def test_automorphisms_of_j_1728(self, e0):
        isos = e0.isomorphisms_to(e0)
        assert len(isos) == 4
        P = some_point(e0)
        images = {iso(P) for iso in isos}
        assert len(images) == 4
        assert P in images

    def test_different_j(self, field, e0):
        assert e0.isomorphisms_to(Curve(field(1), field(1))) == []

    def test_identity_maps_to_identity(self, e0):
        iso = e0.isomorphisms_to(e0)[0]
        assert iso(IDENTITY) == IDENTITY
