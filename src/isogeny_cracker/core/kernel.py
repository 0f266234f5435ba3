"""Kernels of endomorphisms restricted to l^s-torsion.

An endomorphism acts on a basis (T1, T2) of E[l^s] through its action
matrix M, column j holding the coordinates of the image of T_{j+1}.
Its kernel on E[l^s] is cyclic and spanned by the null vector of M.
When l^i divides every entry the kernel contains E[l^i] and the cyclic
part lives at level s - i, which is where the vector is solved.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from isogeny_cracker.arith.curve import Curve, CurvePoint
from isogeny_cracker.arith.pairing import weil_pairing
from isogeny_cracker.core.dlog import pairing_dlog
from isogeny_cracker.core.endomorphism import EndomorphismOracle
from isogeny_cracker.errors import DegenerateEndomorphism, SearchExhausted
from isogeny_cracker.utils.math_helpers import valuation
from isogeny_cracker.utils.types import Endomorphism, KernelSolution

# Pivot scan order: M[0][1], M[1][1], M[0][0], M[1][0]
_PIVOTS = ((0, 1), (1, 1), (0, 0), (1, 0))


def find_ker(M: NDArray[np.object_], ell: int, e: int) -> tuple[int, bool]:
    """Null vector of M mod ell^e from the first unit pivot.

    Returns:
        (y, swapped): the vector is (1, y) when swapped is False and
        (y, 1) otherwise.
    """
    n = ell**e
    for r, c in _PIVOTS:
        pivot = int(M[r][c]) % n
        if pivot % ell == 0:
            continue
        other = int(M[r][1 - c]) % n
        y = -other * pow(pivot, -1, n) % n
        return y, c == 0
    raise DegenerateEndomorphism("kernel", "no unit entry in the action matrix", ell=ell, e=e)


def solve_kernel(M: NDArray[np.object_], ell: int, s: int) -> KernelSolution:
    """Strip the common l-valuation of M, then solve at precision s - i."""
    n = ell**s
    M = np.asarray(M, dtype=object) % n
    i = min(valuation(int(v), ell) if v else s for v in M.flat)
    if i >= s:
        raise DegenerateEndomorphism("kernel", "action matrix vanishes mod l^s", ell=ell, s=s)
    reduced = (M // ell**i) % ell ** (s - i)
    coeff, swapped = find_ker(reduced, ell, s - i)
    return KernelSolution(coeff=coeff, degree=s - i, swapped=swapped)


def action_matrix(
    oracle: EndomorphismOracle,
    P: CurvePoint,
    Q: CurvePoint,
    endo: Endomorphism,
    ell: int,
    s: int,
) -> NDArray[np.object_]:
    """Matrix of endo on the basis (P, Q) of E0[ell^s]."""
    E = oracle.curve
    a_p, b_p = pairing_dlog(E, P, Q, oracle.evaluate(endo, P), ell, s)
    a_q, b_q = pairing_dlog(E, P, Q, oracle.evaluate(endo, Q), ell, s)
    return np.array([[a_p, a_q], [b_p, b_q]], dtype=object) % ell**s


def determine_action(
    oracle: EndomorphismOracle,
    P: CurvePoint,
    Q: CurvePoint,
    endo: Endomorphism,
    ell: int,
    s: int,
) -> KernelSolution:
    return solve_kernel(action_matrix(oracle, P, Q, endo, ell, s), ell, s)


def determine_b_action(
    oracle: EndomorphismOracle,
    P: CurvePoint,
    Q: CurvePoint,
    endo: Endomorphism,
    ell: int,
    s: int,
) -> KernelSolution:
    """Kernel data of the dual endomorphism (theta replaced by theta_hat)."""
    return determine_action(oracle, P, Q, endo.dualized(), ell, s)


def determine_kernel(
    curve: Curve,
    sol: KernelSolution,
    T1: CurvePoint,
    T2: CurvePoint,
    ell: int,
    s: int,
) -> CurvePoint:
    """Kernel generator of order ell^sol.degree from a basis of E[ell^s]."""
    first, second = (T2, T1) if sol.swapped else (T1, T2)
    K = curve.add(first, curve.multiply(second, sol.coeff))
    return curve.multiply(K, ell ** (s - sol.degree))


def determine_kernel_back(
    curve: Curve,
    sol: KernelSolution,
    T1: CurvePoint,
    T2: CurvePoint,
    ell: int,
    s: int,
) -> tuple[CurvePoint, CurvePoint]:
    """Kernel generator plus a companion C completing it to a basis.

    C runs through l^(s-deg) * (T1 + k*T2), k = 0, 1, ... until
    e(K, C)^(l^(deg-1)) != 1.
    """
    K = determine_kernel(curve, sol, T1, T2, ell, s)
    k = ell ** (s - sol.degree)
    top = ell ** (sol.degree - 1)
    step = curve.multiply(T2, k)
    C = curve.multiply(T1, k)
    K_top = curve.multiply(K, top)
    for _ in range(ell + 1):
        if weil_pairing(curve, K_top, curve.multiply(C, top), ell, 1) != 1:
            return K, C
        C = curve.add(C, step)
    raise SearchExhausted("kernel", "no companion point", ell=ell, degree=sol.degree)
