"""Search for attack endomorphisms psi = phi theta phi_hat + d of smooth degree.

With theta = x*iota + y*pi + z*pi*iota and A = deg phi,

    deg psi = A^2 (x^2 + p(y^2 + z^2)) + d^2.

The degree must split as W * m^k: W over the walk primes (kernels read
off the public torsion images) and m^k over the middle prime (recovered
by graph search).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from math import gcd, isqrt

from sympy.solvers.diophantine.diophantine import cornacchia

from isogeny_cracker.utils.constants import MODULAR_POLYNOMIALS
from isogeny_cracker.utils.math_helpers import divisors_of, factor_over
from isogeny_cracker.utils.types import AttackConfig, AttackParameters, Endomorphism

logger = logging.getLogger(__name__)


def solve_norm_equation(target: int, scale: int, p: int, max_yz: int) -> Iterator[tuple[int, int, int, int]]:
    """Yield (x, y, z, d) with scale^2 (x^2 + p(y^2 + z^2)) + d^2 = target.

    (y, z) runs over [0, max_yz]^2 by increasing y^2 + z^2; the remaining
    d^2 + (scale*x)^2 is solved with Cornacchia, which returns the
    primitive representations; a square remainder adds the x = 0 one.
    """
    pairs = sorted(
        ((y, z) for y in range(max_yz + 1) for z in range(max_yz + 1)),
        key=lambda t: (t[0] ** 2 + t[1] ** 2, t),
    )
    a2 = scale * scale
    for y, z in pairs:
        rest = target - a2 * p * (y * y + z * z)
        if rest < 1:
            break
        found = set(cornacchia(1, a2, rest) or ())
        root = isqrt(rest)
        if root * root == rest:
            found.add((root, 0))
        for d, x in sorted(found):
            yield int(x), y, z, int(d)


def is_usable(x: int, y: int, z: int, d: int, scale: int, secret_ell: int) -> bool:
    """Primitive with a shift coprime to the secret degree.

    (A theta + d) / 2 lies in the maximal order exactly when
    d = A z and A x = A y mod 2; this can only happen for even degree.
    """
    if (x, y, z) == (0, 0, 0) or d % secret_ell == 0:
        return False
    if gcd(gcd(x, y), gcd(z, d)) != 1:
        return False
    if (d - scale * z) % 2 == 0 and scale * (x - y) % 2 == 0:
        return False
    return True


def split_schedule(factors: dict[int, int]) -> tuple[tuple[tuple[int, int], ...], tuple[tuple[int, int], ...]]:
    """Balance prime powers between the forward and backward walks."""
    forward: list[tuple[int, int]] = []
    backward: list[tuple[int, int]] = []
    size_f = size_b = 1
    for ell, s in sorted(factors.items(), key=lambda t: -(t[0] ** t[1])):
        if size_f <= size_b:
            forward.append((ell, s))
            size_f *= ell**s
        else:
            backward.append((ell, s))
            size_b *= ell**s
    return tuple(sorted(forward)), tuple(sorted(backward))


def default_middle_ell(secret_ell: int) -> int:
    return 3 if secret_ell == 2 else 2


def find_attack_parameters(
    p: int,
    exponents: dict[int, int],
    secret_ell: int,
    config: AttackConfig | None = None,
) -> list[AttackParameters]:
    """Attack endomorphisms ordered by (middle exponent, degree).

    Args:
        p: Field characteristic.
        exponents: {prime: exponent} of the available torsion.
        secret_ell: Prime of the attacked party.
        config: Search box and middle-prime settings.

    Returns:
        At most config.max_candidates parameter sets.
    """
    config = config or AttackConfig()
    scale = secret_ell ** exponents[secret_ell]
    middle = config.middle_ell or default_middle_ell(secret_ell)
    if middle == secret_ell or middle not in exponents:
        raise ValueError(f"middle prime {middle} must divide p + 1 and differ from {secret_ell}")
    if middle not in MODULAR_POLYNOMIALS:
        raise ValueError(f"no modular polynomial for middle prime {middle}; use one of {sorted(MODULAR_POLYNOMIALS)}")
    walk = {ell: e for ell, e in exponents.items() if ell not in (secret_ell, middle)}

    found: list[AttackParameters] = []
    for k in range(config.min_middle_exponent, config.max_middle_exponent + 1):
        for w in divisors_of(walk):
            target = w * middle**k
            for x, y, z, d in solve_norm_equation(target, scale, p, config.max_yz):
                if not is_usable(x, y, z, d, scale, secret_ell):
                    continue
                factors = factor_over(w, walk) or {}
                forward, backward = split_schedule(factors)
                found.append(AttackParameters(
                    endomorphism=Endomorphism(x, y, z, scale=scale, shift=d),
                    degree=target,
                    forward=forward,
                    backward=backward,
                    middle_ell=middle,
                    middle_exponent=k,
                ))
            if len(found) >= config.max_candidates:
                break
        if len(found) >= config.max_candidates:
            break
    found.sort(key=lambda c: (c.middle_exponent, c.degree))
    logger.info("%d attack endomorphisms found (p=%d, secret %d^%d)", len(found), p,
                secret_ell, exponents[secret_ell])
    return found[: config.max_candidates]
