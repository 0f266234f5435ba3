"""Endomorphisms of the base curve y^2 = x^3 + ax with a in F_p.

pi is the p-power Frobenius and iota the distortion map (x, y) -> (-x, iy).
They anticommute, pi^2 = -p and iota^2 = -1, so
theta = x*iota + y*pi + z*pi*iota has degree x^2 + p(y^2 + z^2) and
trace zero: its dual is -theta.
"""

from __future__ import annotations

from isogeny_cracker.arith.curve import Curve, CurvePoint, Identity, Point
from isogeny_cracker.utils.types import Endomorphism


class EndomorphismOracle:
    """Evaluate Frobenius, the distortion map and their combinations."""

    def __init__(self, curve: Curve) -> None:
        if not curve.b.is_zero() or curve.a.b != 0:
            raise ValueError(f"distortion map needs y^2 = x^3 + ax with a in F_p, got {curve}")
        self.curve = curve
        self._i = curve.field.i

    def frobenius(self, P: CurvePoint) -> CurvePoint:
        if isinstance(P, Identity):
            return P
        return Point(P.x.conjugate(), P.y.conjugate())

    def distortion(self, P: CurvePoint) -> CurvePoint:
        if isinstance(P, Identity):
            return P
        return Point(-P.x, self._i * P.y)

    def theta(self, x: int, y: int, z: int, P: CurvePoint) -> CurvePoint:
        """x*iota(P) + y*pi(P) + z*pi(iota(P))."""
        E = self.curve
        iP = self.distortion(P)
        out = E.multiply(iP, x)
        out = E.add(out, E.multiply(self.frobenius(P), y))
        return E.add(out, E.multiply(self.frobenius(iP), z))

    def theta_hat(self, x: int, y: int, z: int, P: CurvePoint) -> CurvePoint:
        return self.curve.neg(self.theta(x, y, z, P))

    def evaluate(self, endo: Endomorphism, P: CurvePoint) -> CurvePoint:
        """scale * theta(P) + shift * P, with theta_hat when endo.dual."""
        E = self.curve
        base = self.theta_hat if endo.dual else self.theta
        image = E.multiply(base(endo.x, endo.y, endo.z, P), endo.scale)
        return E.add(image, E.multiply(P, endo.shift))
