"""Meet-in-the-middle search in the l-isogeny graph.

Nodes are j-invariants; the l-isogenous neighbours of j are the roots of
the classical modular polynomial Phi_l(j, Y). A path found on j-invariants
is then turned back into explicit isogenies by trying every cyclic
subgroup of order l at each step.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from isogeny_cracker.arith.curve import Curve, CurvePoint
from isogeny_cracker.arith.field import Fp2Element
from isogeny_cracker.arith.poly import Poly, divide_linear, poly_roots
from isogeny_cracker.core.torsion import torsion_basis
from isogeny_cracker.core.velu import isogeny_step
from isogeny_cracker.errors import PathNotFound
from isogeny_cracker.utils.constants import (
    BASIS_SEARCH_BOUND,
    MODULAR_POLYNOMIALS,
    ROOT_SEARCH_BOUND,
)

logger = logging.getLogger(__name__)

JPath = tuple[Fp2Element, ...]
Schedule = Sequence[tuple[int, int]]


def modular_polynomial(ell: int, j: Fp2Element) -> Poly:
    """Coefficients of Phi_ell(j, Y) in Y, lowest first."""
    F = j.field
    coeffs = [F.zero] * (ell + 2)
    for (i, k), c in MODULAR_POLYNOMIALS[ell].items():
        coeffs[k] = coeffs[k] + c * j**i
    return coeffs


def neighbours(
    j: Fp2Element,
    ell: int,
    parent: Fp2Element | None = None,
    bound: int = ROOT_SEARCH_BOUND,
) -> list[Fp2Element]:
    """Distinct ell-isogenous j-invariants, one occurrence of parent removed."""
    f = modular_polynomial(ell, j)
    if parent is not None:
        quotient, remainder = divide_linear(f, parent)
        if remainder.is_zero():
            f = quotient
    return poly_roots(f, bound)


def leaf_walks(j: Fp2Element, schedule: Schedule, bound: int = ROOT_SEARCH_BOUND) -> list[JPath]:
    """Every non-backtracking walk from j following the degree schedule."""
    walks: list[JPath] = [(j,)]
    for ell, k in schedule:
        for step in range(k):
            extended: list[JPath] = []
            for walk in walks:
                parent = walk[-2] if step > 0 else None
                for child in neighbours(walk[-1], ell, parent, bound):
                    extended.append(walk + (child,))
            walks = extended
    return walks


def path_degrees(schedule1: Schedule, schedule2: Schedule) -> tuple[int, ...]:
    """Degree of each edge of a path joined from the two schedules."""
    first = [ell for ell, k in schedule1 for _ in range(k)]
    second = [ell for ell, k in schedule2 for _ in range(k)]
    return tuple(first + second[::-1])


def iter_paths(
    j1: Fp2Element,
    j2: Fp2Element,
    schedule1: Schedule,
    schedule2: Schedule,
    bound: int = ROOT_SEARCH_BOUND,
) -> Iterator[JPath]:
    """Yield every path j1 -> j2 meeting between the two leaf sets.

    Raises:
        PathNotFound: when the leaf sets are disjoint.
    """
    walks1 = leaf_walks(j1, schedule1, bound)
    walks2 = leaf_walks(j2, schedule2, bound)
    logger.debug("leaf sets: %d from j1, %d from j2", len(walks1), len(walks2))
    by_leaf: dict[Fp2Element, list[JPath]] = {}
    for w in walks2:
        by_leaf.setdefault(w[-1], []).append(w)
    seen: set[JPath] = set()
    for w1 in walks1:
        for w2 in by_leaf.get(w1[-1], ()):
            path = w1 + tuple(reversed(w2[:-1]))
            if path not in seen:
                seen.add(path)
                yield path
    if not seen:
        raise PathNotFound(
            "graph_search", "leaf sets do not intersect",
            schedule1=list(schedule1), schedule2=list(schedule2),
        )


def brute_force(
    j1: Fp2Element,
    j2: Fp2Element,
    schedule1: Schedule,
    schedule2: Schedule,
    bound: int = ROOT_SEARCH_BOUND,
) -> JPath:
    """First path from j1 to j2 of the prescribed composite degree."""
    return next(iter_paths(j1, j2, schedule1, schedule2, bound))


def kernel_candidates(curve: Curve, ell: int, bound: int = BASIS_SEARCH_BOUND) -> list[CurvePoint]:
    """Generators of the ell + 1 subgroups of order ell.

    For ell = 2 these are the roots of the defining cubic; otherwise Q and
    P + kQ for a basis (P, Q) of E[ell].
    """
    if ell == 2:
        return list(curve.two_torsion())
    P, Q = torsion_basis(curve, ell, 1, bound=bound)
    out: list[CurvePoint] = [Q]
    T: CurvePoint = P
    for _ in range(ell):
        out.append(T)
        T = curve.add(T, Q)
    return out


def brute_step(
    curve: Curve,
    points: Sequence[CurvePoint],
    ell: int,
    j_next: Fp2Element,
    bound: int = BASIS_SEARCH_BOUND,
) -> Iterator[tuple[Curve, list[CurvePoint]]]:
    """Every ell-isogeny from curve whose codomain has j-invariant j_next."""
    for K in kernel_candidates(curve, ell, bound):
        codomain, images = isogeny_step(curve, K, ell, points)
        if codomain.j_invariant() == j_next:
            yield codomain, images


def iter_push_j_walk(
    curve: Curve,
    points: Sequence[CurvePoint],
    path: JPath,
    degrees: Sequence[int],
    target: Curve,
    bound: int = BASIS_SEARCH_BOUND,
) -> Iterator[list[CurvePoint]]:
    """Push points along a j-invariant path onto target.

    Yields the images on ``target`` for every choice of kernel matching the
    path and every isomorphism from the reconstructed end curve to target.
    """
    if curve.j_invariant() != path[0]:
        raise PathNotFound("push_j_walk", "path does not start at the curve", start=path[0])

    def descend(E: Curve, pts: list[CurvePoint], idx: int) -> Iterator[list[CurvePoint]]:
        if idx == len(degrees):
            for iso in E.isomorphisms_to(target):
                yield [iso(P) for P in pts]
            return
        for codomain, images in brute_step(E, pts, degrees[idx], path[idx + 1], bound):
            yield from descend(codomain, images, idx + 1)

    yield from descend(curve, list(points), 0)


def push_j_walk(
    curve: Curve,
    points: Sequence[CurvePoint],
    path: JPath,
    degrees: Sequence[int],
    target: Curve,
    bound: int = BASIS_SEARCH_BOUND,
) -> list[CurvePoint]:
    """First reconstruction of iter_push_j_walk."""
    for images in iter_push_j_walk(curve, points, path, degrees, target, bound):
        return images
    raise PathNotFound("push_j_walk", "no isogeny realises the path", length=len(degrees))
