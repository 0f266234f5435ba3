"""Discrete logarithms in cyclic groups of order l^e.

Pohlig-Hellman works digit by digit in base l; two pairings reduce a
two-dimensional log onto a torsion basis to two one-dimensional ones.
"""

from __future__ import annotations

from isogeny_cracker.arith.curve import Curve, CurvePoint
from isogeny_cracker.arith.field import Fp2Element
from isogeny_cracker.arith.pairing import weil_pairing
from isogeny_cracker.errors import OrderMismatch, SearchExhausted


def _digit(h: Fp2Element, gamma: Fp2Element, ell: int) -> int | None:
    acc = h.field.one
    for j in range(ell):
        if acc == h:
            return j
        acc = acc * gamma
    return None


def pohlig_hellman(a: Fp2Element, g: Fp2Element, ell: int, e: int) -> int:
    """x in [0, ell^e) with g^x = a, for g of exact order ell^e.

    The low e-1 digits come from matching (a * g^-x)^(l^(e-1-k)) against
    powers of gamma = g^(l^(e-1)); the top digit from a final sweep over
    j in [0, l).
    """
    if e == 0:
        return 0
    gamma = g ** (ell ** (e - 1))
    if gamma == 1 or gamma**ell != 1:
        raise OrderMismatch("dlog", "generator does not have order l^e", ell=ell, e=e)
    x = 0
    g_inv = g.inverse()
    for k in range(e - 1):
        h = (a * g_inv**x) ** (ell ** (e - 1 - k))
        d = _digit(h, gamma, ell)
        if d is None:
            raise SearchExhausted("dlog", "element outside <g>", ell=ell, e=e, digit=k)
        x += d * ell**k
    base = g**x
    step = gamma
    for j in range(ell):
        if base == a:
            return x + j * ell ** (e - 1)
        base = base * step
    raise SearchExhausted("dlog", "element outside <g>", ell=ell, e=e, digit=e - 1)


def pairing_dlog(
    curve: Curve,
    P: CurvePoint,
    Q: CurvePoint,
    R: CurvePoint,
    ell: int,
    e: int,
) -> tuple[int, int]:
    """(a, b) with R = aP + bQ, for (P, Q) a basis of E[ell^e].

    Uses e(P, R) = e(P, Q)^b and e(Q, R) = e(Q, P)^a.
    """
    e_pq = weil_pairing(curve, P, Q, ell, e)
    b = pohlig_hellman(weil_pairing(curve, P, R, ell, e), e_pq, ell, e)
    a = pohlig_hellman(weil_pairing(curve, Q, R, ell, e), e_pq.inverse(), ell, e)
    return a, b
