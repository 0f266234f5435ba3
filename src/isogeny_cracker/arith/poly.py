"""Dense univariate polynomials over GF(p^2) and root finding.

A polynomial is a list of coefficients, lowest degree first. The zero
polynomial is the empty list.
"""

from __future__ import annotations

from isogeny_cracker.arith.field import Fp2Element
from isogeny_cracker.errors import SearchExhausted, UndefinedEvaluation
from isogeny_cracker.utils.constants import ROOT_SEARCH_BOUND

Poly = list[Fp2Element]


def poly_trim(f: Poly) -> Poly:
    f = list(f)
    while f and f[-1].is_zero():
        f.pop()
    return f


def poly_eval(f: Poly, x: Fp2Element) -> Fp2Element:
    acc = x.field.zero
    for c in reversed(f):
        acc = acc * x + c
    return acc


def poly_sub(f: Poly, g: Poly) -> Poly:
    n = max(len(f), len(g))
    out = []
    for k in range(n):
        if k < len(f) and k < len(g):
            out.append(f[k] - g[k])
        elif k < len(f):
            out.append(f[k])
        else:
            out.append(-g[k])
    return poly_trim(out)


def poly_mul(f: Poly, g: Poly) -> Poly:
    if not f or not g:
        return []
    zero = f[0].field.zero
    out = [zero] * (len(f) + len(g) - 1)
    for i, a in enumerate(f):
        if a.is_zero():
            continue
        for j, b in enumerate(g):
            out[i + j] = out[i + j] + a * b
    return poly_trim(out)


def poly_monic(f: Poly) -> Poly:
    f = poly_trim(f)
    if not f:
        return f
    inv = f[-1].inverse()
    return [c * inv for c in f]


def poly_divmod(f: Poly, g: Poly) -> tuple[Poly, Poly]:
    """Quotient and remainder of f by g."""
    g = poly_trim(g)
    if not g:
        raise UndefinedEvaluation("poly", "division by the zero polynomial")
    r = poly_trim(f)
    zero = g[-1].field.zero
    q = [zero] * max(len(r) - len(g) + 1, 0)
    inv = g[-1].inverse()
    while len(r) >= len(g):
        c = r[-1] * inv
        shift = len(r) - len(g)
        q[shift] = c
        for k in range(len(g) - 1):
            r[shift + k] = r[shift + k] - c * g[k]
        r.pop()
        r = poly_trim(r)
    return poly_trim(q), r


def poly_gcd(f: Poly, g: Poly) -> Poly:
    """Monic gcd."""
    f, g = poly_trim(f), poly_trim(g)
    while g:
        f, g = g, poly_divmod(f, g)[1]
    return poly_monic(f)


def poly_powmod(base: Poly, k: int, mod: Poly) -> Poly:
    one = mod[-1].field.one
    result: Poly = [one]
    base = poly_divmod(base, mod)[1]
    while k:
        if k & 1:
            result = poly_divmod(poly_mul(result, base), mod)[1]
        base = poly_divmod(poly_mul(base, base), mod)[1]
        k >>= 1
    return result


def divide_linear(f: Poly, r: Fp2Element) -> tuple[Poly, Fp2Element]:
    """Synthetic division of f by (X - r): returns (quotient, f(r))."""
    f = poly_trim(f)
    if not f:
        return [], r.field.zero
    acc = f[-1]
    quotient = [acc]
    for c in reversed(f[:-1]):
        acc = acc * r + c
        quotient.append(acc)
    remainder = quotient.pop()
    return list(reversed(quotient)), remainder


def poly_roots(f: Poly, bound: int = ROOT_SEARCH_BOUND) -> list[Fp2Element]:
    """Distinct roots of f in GF(p^2).

    Isolates the split part gcd(f, X^q - X), q = p^2, then splits it with
    gcd(g, (X + delta)^((q-1)/2) - 1) for deterministic shifts delta.
    """
    f = poly_monic(f)
    if len(f) <= 1:
        return []
    F = f[0].field
    x = [F.zero, F.one]
    xq = poly_powmod(x, F.order, f)
    g = poly_gcd(f, poly_sub(xq, x))
    return _split(g, bound)


def _split(g: Poly, bound: int) -> list[Fp2Element]:
    degree = len(g) - 1
    if degree <= 0:
        return []
    F = g[0].field
    if degree == 1:
        return [-g[0]]
    if degree == 2:
        c, b = g[0], g[1]
        s = (b * b - 4 * c).sqrt()
        if s is None:
            raise SearchExhausted("roots", "split quadratic has no root", degree=2)
        return [(-b + s) / 2, (-b - s) / 2]
    e = (F.order - 1) // 2
    for t in range(bound):
        h = poly_powmod([F(t, 1), F.one], e, g)
        d = poly_gcd(g, poly_sub(h, [F.one]))
        if 0 < len(d) - 1 < degree:
            rest = poly_divmod(g, d)[0]
            return _split(d, bound) + _split(poly_monic(rest), bound)
    raise SearchExhausted("roots", "no splitting shift found", degree=degree, bound=bound)
