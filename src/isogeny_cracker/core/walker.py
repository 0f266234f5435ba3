"""Walks along the kernels of an endomorphism, one prime power at a time."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from isogeny_cracker.arith.curve import Curve, CurvePoint
from isogeny_cracker.core.endomorphism import EndomorphismOracle
from isogeny_cracker.core.kernel import (
    determine_action,
    determine_b_action,
    determine_kernel,
    determine_kernel_back,
)
from isogeny_cracker.core.velu import compute_isogeny
from isogeny_cracker.utils.types import Endomorphism, WalkResult, WalkStep

logger = logging.getLogger(__name__)


class PathWalker:
    """Factor an endomorphism's kernel into prime-power isogeny steps.

    The action matrix of each step is computed on the base curve, where
    the endomorphism is known; the kernel is then built from the tracked
    images of that basis on the current curve. Steps for distinct primes
    commute, so their order only decides which points are tracked when.
    """

    def __init__(self, oracle: EndomorphismOracle, endomorphism: Endomorphism) -> None:
        self.oracle = oracle
        self.endomorphism = endomorphism

    def walk_forward(
        self,
        curve: Curve,
        points: Sequence[CurvePoint],
        steps: Sequence[WalkStep],
    ) -> WalkResult:
        points = list(points)
        for step in steps:
            basis = step.basis
            sol = determine_action(
                self.oracle, basis.P, basis.Q, self.endomorphism, step.ell, step.exponent
            )
            T1, T2 = points[step.tracked[0]], points[step.tracked[1]]
            K = determine_kernel(curve, sol, T1, T2, step.ell, step.exponent)
            logger.debug(
                "forward step %d^%d: kernel level %d, coeff %d", step.ell, step.exponent,
                sol.degree, sol.coeff,
            )
            curve, points = compute_isogeny(curve, K, step.ell, sol.degree, points)
        return WalkResult(curve, points)

    def walk_backward(
        self,
        curve: Curve,
        points: Sequence[CurvePoint],
        steps: Sequence[WalkStep],
    ) -> WalkResult:
        """Walk the dual endomorphism's kernels, keeping a companion per step.

        The companion of each step is appended to the point list before the
        step is applied; its image generates the kernel of the step's dual.
        """
        points = list(points)
        companions: list[tuple[int, int, int]] = []
        for step in steps:
            basis = step.basis
            sol = determine_b_action(
                self.oracle, basis.P, basis.Q, self.endomorphism, step.ell, step.exponent
            )
            T1, T2 = points[step.tracked[0]], points[step.tracked[1]]
            K, C = determine_kernel_back(curve, sol, T1, T2, step.ell, step.exponent)
            points.append(C)
            companions.append((len(points) - 1, step.ell, sol.degree))
            logger.debug(
                "backward step %d^%d: kernel level %d, companion #%d", step.ell,
                step.exponent, sol.degree, len(points) - 1,
            )
            curve, points = compute_isogeny(curve, K, step.ell, sol.degree, points)
        return WalkResult(curve, points, companions)

    @staticmethod
    def walk_kernels(
        curve: Curve,
        points: Sequence[CurvePoint],
        kernels: Sequence[tuple[int, int, int]],
    ) -> WalkResult:
        """Walk isogenies whose kernels are tracked points.

        Args:
            kernels: (index, ell, e) triples; points[index] has order ell^e
                on the curve reached when its step starts.
        """
        points = list(points)
        for index, ell, e in kernels:
            curve, points = compute_isogeny(curve, points[index], ell, e, points)
        return WalkResult(curve, points)
