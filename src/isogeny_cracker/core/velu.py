"""Velu isogenies of prime-power degree.

A degree-l step uses the kernel orbit {K, 2K, ..., (l-1)K}:

    t(Q) = 3 x_Q^2 + a,  u(Q) = 2 y_Q^2,  w(Q) = u(Q) + x_Q t(Q)
    a' = a - 5 sum t,     b' = b - 7 sum w
    X  = x + sum [t / (x - x_Q) + u / (x - x_Q)^2]
    Y  = y (1 - sum [t / (x - x_Q)^2 + 2u / (x - x_Q)^3])

A degree-l^e isogeny is a chain of such steps, scheduled by balanced
halving so the kernel generator is pushed through O(log e) levels
instead of e full re-evaluations.
"""

from __future__ import annotations

from collections.abc import Sequence

from isogeny_cracker.arith.curve import IDENTITY, Curve, CurvePoint, Identity, Point
from isogeny_cracker.errors import OrderMismatch


def isogeny_step(
    curve: Curve,
    K: CurvePoint,
    ell: int,
    points: Sequence[CurvePoint] = (),
) -> tuple[Curve, list[CurvePoint]]:
    """Isogeny with kernel <K>, K of prime order ell.

    Returns:
        (codomain, images) where points on the kernel map to IDENTITY.
    """
    orbit: list[Point] = []
    T = K
    for _ in range(ell - 1):
        if not isinstance(T, Point):
            raise OrderMismatch("velu", "kernel point order below l", ell=ell)
        orbit.append(T)
        T = curve.add(T, K)
    if not isinstance(T, Identity):
        raise OrderMismatch("velu", "kernel point order is not l", ell=ell)

    a = curve.a
    terms = []
    v = curve.field.zero
    w = curve.field.zero
    for Q in orbit:
        t = 3 * Q.x * Q.x + a
        u = 2 * Q.y * Q.y
        v = v + t
        w = w + u + Q.x * t
        terms.append((Q.x, t, u))
    codomain = Curve(a - 5 * v, curve.b - 7 * w)

    images: list[CurvePoint] = []
    for P in points:
        if isinstance(P, Identity) or any(P.x == xq for xq, _, _ in terms):
            images.append(IDENTITY)
            continue
        X = P.x
        dY = curve.field.zero
        for xq, t, u in terms:
            inv = (P.x - xq).inverse()
            inv2 = inv * inv
            X = X + t * inv + u * inv2
            dY = dY + t * inv2 + 2 * u * inv2 * inv
        images.append(Point(X, P.y * (1 - dY)))
    return codomain, images


def compute_isogeny(
    curve: Curve,
    K: CurvePoint,
    ell: int,
    e: int,
    points: Sequence[CurvePoint] = (),
) -> tuple[Curve, list[CurvePoint]]:
    """Isogeny with kernel <K>, K of exact order ell^e.

    Args:
        curve: Domain.
        K: Kernel generator; its order is validated.
        ell: Prime.
        e: Exponent (0 gives the identity map).
        points: Points to push through.

    Returns:
        (codomain, images of points), equal to e sequential prime steps.
    """
    if not curve.has_order(K, ell, e):
        raise OrderMismatch("velu", "kernel generator has the wrong order", ell=ell, e=e)
    if e == 0:
        return curve, list(points)
    return _chain(curve, K, ell, e, list(points))


def _chain(
    curve: Curve,
    K: CurvePoint,
    ell: int,
    n: int,
    points: list[CurvePoint],
) -> tuple[Curve, list[CurvePoint]]:
    if n == 1:
        return isogeny_step(curve, K, ell, points)
    h = n // 2
    S = curve.multiply(K, ell ** (n - h))
    curve, pushed = _chain(curve, S, ell, h, points + [K])
    K_image = pushed.pop()
    return _chain(curve, K_image, ell, n - h, pushed)
