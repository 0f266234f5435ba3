"""Short Weierstrass curves y^2 = x^3 + ax + b over GF(p^2).

Points are plain immutable values; the curve object performs the group
law on them. The point at infinity is the explicit ``IDENTITY`` variant.
"""

from __future__ import annotations

from dataclasses import dataclass

from isogeny_cracker.arith.field import Fp2Element, Fp2Field
from isogeny_cracker.arith.poly import poly_roots
from isogeny_cracker.utils.constants import BASE_CURVE_A, BASE_CURVE_B


@dataclass(frozen=True)
class Point:
    """An affine point (x, y)."""

    x: Fp2Element
    y: Fp2Element


@dataclass(frozen=True)
class Identity:
    """The point at infinity."""


IDENTITY = Identity()

CurvePoint = Point | Identity


class Curve:
    """Elliptic curve y^2 = x^3 + ax + b over GF(p^2).

    Immutable once constructed; isogeny steps produce new curves.
    """

    __slots__ = ("a", "b", "field")

    def __init__(self, a: Fp2Element, b: Fp2Element) -> None:
        self.a = a
        self.b = b
        self.field: Fp2Field = a.field
        if (4 * a**3 + 27 * b * b).is_zero():
            raise ValueError(f"singular curve: a={a}, b={b}")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Curve) and self.a == other.a and self.b == other.b

    def __hash__(self) -> int:
        return hash((self.a, self.b))

    def __repr__(self) -> str:
        return f"Curve(y^2 = x^3 + ({self.a})x + ({self.b}))"

    @property
    def exponent(self) -> int:
        """Group exponent p + 1 of E(GF(p^2)) for the supersingular class."""
        return self.field.p + 1

    def j_invariant(self) -> Fp2Element:
        a3 = 4 * self.a**3
        return 1728 * a3 / (a3 + 27 * self.b * self.b)

    def rhs(self, x: Fp2Element) -> Fp2Element:
        return x * x * x + self.a * x + self.b

    def contains(self, P: CurvePoint) -> bool:
        if isinstance(P, Identity):
            return True
        return P.y * P.y == self.rhs(P.x)

    def lift_x(self, x: Fp2Element) -> Point | None:
        y = self.rhs(x).sqrt()
        if y is None:
            return None
        return Point(x, y)

    # -- Group law --

    def neg(self, P: CurvePoint) -> CurvePoint:
        if isinstance(P, Identity):
            return P
        return Point(P.x, -P.y)

    def add(self, P: CurvePoint, Q: CurvePoint) -> CurvePoint:
        if isinstance(P, Identity):
            return Q
        if isinstance(Q, Identity):
            return P
        if P.x == Q.x:
            if P.y != Q.y or P.y.is_zero():
                return IDENTITY
            lam = (3 * P.x * P.x + self.a) / (2 * P.y)
        else:
            lam = (Q.y - P.y) / (Q.x - P.x)
        x3 = lam * lam - P.x - Q.x
        y3 = lam * (P.x - x3) - P.y
        return Point(x3, y3)

    def sub(self, P: CurvePoint, Q: CurvePoint) -> CurvePoint:
        return self.add(P, self.neg(Q))

    def double(self, P: CurvePoint) -> CurvePoint:
        return self.add(P, P)

    def multiply(self, P: CurvePoint, k: int) -> CurvePoint:
        """Scalar multiplication k*P by double-and-add."""
        if k < 0:
            return self.multiply(self.neg(P), -k)
        result: CurvePoint = IDENTITY
        addend = P
        while k:
            if k & 1:
                result = self.add(result, addend)
            addend = self.add(addend, addend)
            k >>= 1
        return result

    # -- Orders --

    def has_order(self, P: CurvePoint, ell: int, e: int) -> bool:
        """True iff P has order exactly ell^e."""
        if e == 0:
            return isinstance(P, Identity)
        R = self.multiply(P, ell ** (e - 1))
        return not isinstance(R, Identity) and isinstance(self.multiply(R, ell), Identity)

    def prime_power_order(self, P: CurvePoint, ell: int, max_exponent: int) -> int | None:
        """Smallest t <= max_exponent with ell^t * P = identity, else None."""
        for t in range(max_exponent + 1):
            if isinstance(P, Identity):
                return t
            P = self.multiply(P, ell)
        return None

    # -- Special points and isomorphisms --

    def two_torsion(self) -> list[Point]:
        """The three points (r, 0) with r a root of x^3 + ax + b."""
        f = [self.b, self.a, self.field.zero, self.field.one]
        return [Point(r, self.field.zero) for r in poly_roots(f)]

    def isomorphisms_to(self, other: Curve) -> list[Isomorphism]:
        """All isomorphisms self -> other, empty when the j-invariants differ."""
        if self.j_invariant() != other.j_invariant():
            return []
        F = self.field
        a, b, a2, b2 = self.a, self.b, other.a, other.b
        if a.is_zero():
            us = poly_roots([-(b2 / b)] + [F.zero] * 5 + [F.one])
        elif b.is_zero():
            us = poly_roots([-(a2 / a)] + [F.zero] * 3 + [F.one])
        else:
            u = ((b2 * a) / (b * a2)).sqrt()
            us = [] if u is None else [u, -u]
        return [
            Isomorphism(self, other, u)
            for u in us
            if u**4 * a == a2 and u**6 * b == b2
        ]


@dataclass(frozen=True)
class Isomorphism:
    """(x, y) -> (u^2 x, u^3 y) from domain onto codomain."""

    domain: Curve
    codomain: Curve
    u: Fp2Element

    def __call__(self, P: CurvePoint) -> CurvePoint:
        if isinstance(P, Identity):
            return P
        u2 = self.u * self.u
        return Point(u2 * P.x, u2 * self.u * P.y)


def base_curve(field: Fp2Field) -> Curve:
    """y^2 = x^3 + x, supersingular with j = 1728."""
    return Curve(field(BASE_CURVE_A), field(BASE_CURVE_B))
