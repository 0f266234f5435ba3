"""SIDH-style multi-party setup and key generation.

Every party owns one prime l of p + 1 = f * prod l^e. A party's secret is
an integer s; its isogeny has kernel <P_l + s Q_l> and its public key is
the codomain together with the images of every other party's basis.
"""

from __future__ import annotations

import logging
from math import prod

import numpy as np

from isogeny_cracker.arith.curve import Curve, CurvePoint, Point, base_curve
from isogeny_cracker.arith.field import Fp2Field
from isogeny_cracker.core.torsion import torsion_basis
from isogeny_cracker.core.velu import compute_isogeny
from isogeny_cracker.errors import SearchExhausted
from isogeny_cracker.utils.constants import BASIS_SEARCH_BOUND, MAX_PRIME_COFACTOR
from isogeny_cracker.utils.math_helpers import is_prime
from isogeny_cracker.utils.types import AttackContext, PublicKey, TorsionBasis

logger = logging.getLogger(__name__)


def find_prime(exponents: dict[int, int], max_cofactor: int = MAX_PRIME_COFACTOR) -> int:
    """Smallest prime p = f * prod(l^e) - 1 with p = 3 mod 4."""
    base = prod(ell**e for ell, e in exponents.items())
    for f in range(1, max_cofactor + 1):
        p = f * base - 1
        if p % 4 == 3 and is_prime(p):
            logger.info("prime found: p = %d * %d - 1 = %d", f, base, p)
            return p
    raise SearchExhausted("prime_search", "no prime with cofactor in range", base=base,
                          max_cofactor=max_cofactor)


def _normalise_two_torsion(E: Curve, P: CurvePoint, Q: CurvePoint, e: int) -> tuple[CurvePoint, CurvePoint]:
    """Arrange 2^(e-1) Q = (0, 0), the 2-torsion point fixed by the distortion map."""
    origin = Point(E.field.zero, E.field.zero)
    k = 2 ** (e - 1)
    if E.multiply(Q, k) == origin:
        return P, Q
    if E.multiply(P, k) == origin:
        return Q, P
    return P, E.add(P, Q)


def setup(
    p: int,
    exponents: dict[int, int],
    secret_ell: int,
    bound: int = BASIS_SEARCH_BOUND,
) -> AttackContext:
    """Field, base curve and one torsion basis per prime."""
    if secret_ell not in exponents:
        raise ValueError(f"secret prime {secret_ell} not among {sorted(exponents)}")
    field = Fp2Field(p)
    E0 = base_curve(field)
    bases: dict[int, TorsionBasis] = {}
    for ell, e in sorted(exponents.items()):
        P, Q = torsion_basis(E0, ell, e, bound=bound)
        if ell == 2:
            P, Q = _normalise_two_torsion(E0, P, Q, e)
        bases[ell] = TorsionBasis(ell, e, P, Q)
    return AttackContext(field=field, base_curve=E0, bases=bases, secret_ell=secret_ell)


def keygen(ctx: AttackContext, secret: int) -> PublicKey:
    """Public key of the secret prime's party for secret s."""
    E0 = ctx.base_curve
    basis = ctx.secret_basis
    K = E0.add(basis.P, E0.multiply(basis.Q, secret))
    others = [ell for ell in ctx.bases if ell != ctx.secret_ell]
    points = [pt for ell in others for pt in (ctx.bases[ell].P, ctx.bases[ell].Q)]
    curve, images = compute_isogeny(E0, K, basis.ell, basis.exponent, points)
    return PublicKey(
        curve=curve,
        images={ell: (images[2 * i], images[2 * i + 1]) for i, ell in enumerate(others)},
    )


def random_secret(ctx: AttackContext, rng: np.random.Generator | None = None) -> int:
    rng = rng or np.random.default_rng()
    return int(rng.integers(0, ctx.secret_order))
