"""Torsion basis generation for E[l^e] on supersingular curves over GF(p^2)."""

from __future__ import annotations

from isogeny_cracker.arith.curve import Curve, CurvePoint, Point
from isogeny_cracker.arith.pairing import weil_pairing
from isogeny_cracker.errors import OrderMismatch, SearchExhausted
from isogeny_cracker.utils.constants import BASIS_SEARCH_BOUND, TORSION_STRIDE


def torsion_basis(
    curve: Curve,
    ell: int,
    e: int,
    cofactor: int | None = None,
    stride: int = TORSION_STRIDE,
    bound: int = BASIS_SEARCH_BOUND,
) -> tuple[Point, Point]:
    """Find a basis (P, Q) of E[ell^e].

    Tries x = k*stride + (k^2 + 3)i for k = 1, 2, ..., lifts to a point
    when the right-hand side is a square and clears the cofactor. The
    imaginary part must move with k: for x = c + i with c in F_p, x - i is
    a square and every lift falls in one class of E / 2E. P is the first
    point of exact order ell^e; Q is the next one whose pairing with P
    has exact order ell^e.

    Args:
        curve: Curve over GF(p^2) with ell^e dividing the group exponent.
        ell: Prime.
        e: Exponent, at least 1.
        cofactor: Multiplier sending random points into E[ell^e]. Defaults
            to (p + 1) / ell^e.
        stride: Step between probed x-coordinates.
        bound: Number of x-coordinates probed before giving up.

    Returns:
        (P, Q) with e(P, Q) of order exactly ell^e.
    """
    n = ell**e
    if cofactor is None:
        if curve.exponent % n:
            raise OrderMismatch("torsion", "l^e does not divide p + 1", ell=ell, e=e)
        cofactor = curve.exponent // n
    F = curve.field
    top = ell ** (e - 1)
    P: Point | None = None
    for k in range(1, bound + 1):
        candidate = curve.lift_x(F(k * stride, k * k + 3))
        if candidate is None:
            continue
        R = curve.multiply(candidate, cofactor)
        if not isinstance(R, Point) or not curve.has_order(R, ell, e):
            continue
        if P is None:
            P = R
            continue
        # e(P, R)^(l^(e-1)) = e_l(l^(e-1) P, l^(e-1) R)
        w = weil_pairing(curve, curve.multiply(P, top), curve.multiply(R, top), ell, 1)
        if w != 1:
            return P, R
    raise SearchExhausted("torsion", "no basis within the probe bound", ell=ell, e=e, bound=bound)


def scale_basis(
    curve: Curve,
    P: CurvePoint,
    Q: CurvePoint,
    ell: int,
    e: int,
    s: int,
) -> tuple[CurvePoint, CurvePoint]:
    """Map a basis of E[ell^e] to a basis of E[ell^s], s <= e."""
    k = ell ** (e - s)
    return curve.multiply(P, k), curve.multiply(Q, k)
