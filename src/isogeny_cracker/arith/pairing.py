"""Weil pairing on prime-power torsion via Miller's algorithm."""

from __future__ import annotations

from isogeny_cracker.arith.curve import Curve, CurvePoint, Identity, Point
from isogeny_cracker.arith.field import Fp2Element
from isogeny_cracker.errors import OrderMismatch


class _Dependent(Exception):
    """A Miller line vanished at the evaluation point."""


def _line(curve: Curve, T: Point, S: Point, R: Point) -> Fp2Element:
    """Evaluate l_{T,S} / v_{T+S} at R."""
    if T.x == S.x and (T.y != S.y or T.y.is_zero()):
        value = R.x - T.x
        if value.is_zero():
            raise _Dependent
        return value
    if T.x == S.x:
        lam = (3 * T.x * T.x + curve.a) / (2 * T.y)
    else:
        lam = (S.y - T.y) / (S.x - T.x)
    x3 = lam * lam - T.x - S.x
    numerator = R.y - T.y - lam * (R.x - T.x)
    denominator = R.x - x3
    if numerator.is_zero() or denominator.is_zero():
        raise _Dependent
    return numerator / denominator


def _miller(curve: Curve, P: Point, R: Point, n: int) -> Fp2Element:
    """f_{n,P}(R) for P of exact order n."""
    f = curve.field.one
    T: CurvePoint = P
    for bit in bin(n)[3:]:
        f = f * f * _line(curve, T, T, R)
        T = curve.double(T)
        if bit == "1":
            f = f * _line(curve, T, P, R)
            T = curve.add(T, P)
    return f


def weil_pairing(
    curve: Curve,
    P: CurvePoint,
    Q: CurvePoint,
    ell: int,
    e: int,
) -> Fp2Element:
    """e_{ell^e}(P, Q) for P, Q in E[ell^e].

    Arguments of smaller order are handled through the compatibility
    e_{mn}(P, Q) = e_n(mP, Q) for Q in E[n], so the Miller loop always
    runs on two points of the same exact order.

    Returns:
        An ell^e-th root of unity; 1 whenever P and Q are dependent.
    """
    one = curve.field.one
    if isinstance(P, Identity) or isinstance(Q, Identity) or P == Q:
        return one
    tp = curve.prime_power_order(P, ell, e)
    tq = curve.prime_power_order(Q, ell, e)
    if tp is None or tq is None:
        raise OrderMismatch("pairing", "argument outside E[l^e]", ell=ell, e=e)
    # e_{l^e}(P, Q) = e_{l^tq}(l^(e-tq) P, Q), then the same on the other side
    P = curve.multiply(P, ell ** (e - tq))
    tp = max(tp - (e - tq), 0)
    inverted = False
    if tp < tq:
        P, Q = Q, P
        P = curve.multiply(P, ell ** (tq - tp))
        inverted = True
    t = min(tp, tq)
    if t == 0 or isinstance(P, Identity) or isinstance(Q, Identity) or P == Q:
        return one
    n = ell**t
    try:
        value = _miller(curve, P, Q, n) / _miller(curve, Q, P, n)
    except _Dependent:
        return one
    if n % 2 == 1:
        value = -value
    return value.inverse() if inverted else value
