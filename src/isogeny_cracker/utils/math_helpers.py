"""Integer helpers shared by the arithmetic backend and the attack layer."""

from __future__ import annotations

from collections.abc import Iterable


def is_prime(n: int) -> bool:
    """Miller-Rabin primality test (deterministic below 3.3e24)."""
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0:
        return False
    d, r = n - 1, 0
    while d % 2 == 0:
        d //= 2
        r += 1
    for a in (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41):
        if a >= n:
            continue
        x = pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(r - 1):
            x = pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


def valuation(n: int, ell: int) -> int:
    """Largest v with ell^v dividing n. n must be non-zero."""
    if n == 0:
        raise ValueError("valuation of zero is unbounded")
    v = 0
    while n % ell == 0:
        n //= ell
        v += 1
    return v


def factor_over(n: int, primes: Iterable[int]) -> dict[int, int] | None:
    """Factor n over the given primes.

    Returns:
        {prime: exponent} for the primes dividing n, or None when a
        cofactor outside the list remains.
    """
    out: dict[int, int] = {}
    for ell in primes:
        if n % ell == 0:
            v = valuation(n, ell)
            out[ell] = v
            n //= ell**v
    return out if n == 1 else None


def divisors_of(exponents: dict[int, int]) -> list[int]:
    """All divisors of prod(l^e), ascending."""
    divs = [1]
    for ell, e in exponents.items():
        divs = [d * ell**k for d in divs for k in range(e + 1)]
    return sorted(divs)


def parse_exponents(text: str) -> dict[int, int]:
    """Parse "2:3,3:1,5:2" into {2: 3, 3: 1, 5: 2}."""
    out: dict[int, int] = {}
    for item in text.split(","):
        ell, _, e = item.strip().partition(":")
        out[int(ell)] = int(e) if e else 1
    return out
