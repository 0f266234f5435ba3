"""Full key recovery for one public key.

For a candidate psi = phi theta phi_hat + d of degree B1 * m^k * B2:

1. walk forward from the public curve EA along ker psi on E[B1] to E',
2. walk backward along ker psi_hat on E[B2] to E'', keeping companions,
3. find the m^k-isogeny E' -> E'' by meet-in-the-middle on j-invariants
   and push the basis (R1, R2) of EA[A] across it,
4. return to EA through the duals generated by the companions,
5. read ker(psi - d) on EA[A], which is ker phi_hat, and recover s from
   phi_hat(EA[A]) = <P + sQ>.

Sign and automorphism ambiguities are settled by trying every
isomorphism and both signs of d, verifying each secret against the
public key.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from isogeny_cracker.arith.curve import CurvePoint
from isogeny_cracker.attack.params import find_attack_parameters
from isogeny_cracker.attack.protocol import keygen
from isogeny_cracker.core.dlog import pairing_dlog
from isogeny_cracker.core.endomorphism import EndomorphismOracle
from isogeny_cracker.core.graph_search import iter_paths, iter_push_j_walk, path_degrees
from isogeny_cracker.core.kernel import action_matrix, determine_kernel, solve_kernel
from isogeny_cracker.core.torsion import scale_basis, torsion_basis
from isogeny_cracker.core.velu import compute_isogeny
from isogeny_cracker.core.walker import PathWalker
from isogeny_cracker.errors import DegenerateEndomorphism, PathNotFound, SearchExhausted
from isogeny_cracker.utils.types import (
    AttackConfig,
    AttackContext,
    AttackParameters,
    AttackResult,
    Endomorphism,
    PublicKey,
    TorsionBasis,
    WalkStep,
)

logger = logging.getLogger(__name__)

_IDENTITY_MATRIX = np.array([[1, 0], [0, 1]], dtype=object)


class AttackOrchestrator:
    """Recover a party's secret from its public key."""

    def __init__(self, ctx: AttackContext, config: AttackConfig | None = None) -> None:
        self.ctx = ctx
        self.config = config or AttackConfig()
        self.oracle = EndomorphismOracle(ctx.base_curve)
        self._parameters: list[AttackParameters] | None = None

    @property
    def parameters(self) -> list[AttackParameters]:
        """Usable attack endomorphisms, computed once per context."""
        if self._parameters is None:
            found = find_attack_parameters(
                self.ctx.p, self.ctx.exponents, self.ctx.secret_ell, self.config
            )
            self._parameters = [c for c in found if not self._scalar_on_secret(c.endomorphism)]
            if not self._parameters:
                raise SearchExhausted("params", "no usable attack endomorphism", p=self.ctx.p,
                                      secret_ell=self.ctx.secret_ell)
        return self._parameters

    def _scalar_on_secret(self, endo: Endomorphism) -> bool:
        """theta acting as a scalar on E0[l] fixes every kernel, for any secret."""
        E0 = self.ctx.base_curve
        basis = self.ctx.secret_basis
        ell = basis.ell
        P, Q = scale_basis(E0, basis.P, basis.Q, ell, basis.exponent, 1)
        M = action_matrix(self.oracle, P, Q, Endomorphism(endo.x, endo.y, endo.z), ell, 1)
        return M[0][1] == 0 and M[1][0] == 0 and M[0][0] == M[1][1]

    # -- Entry point --

    def attack(self, public_key: PublicKey) -> AttackResult:
        """Run every candidate until one yields a verified secret.

        Raises:
            SearchExhausted: no candidate recovers a secret that reproduces
                the public key.
        """
        failures: list[str] = []
        for n, params in enumerate(self.parameters):
            logger.info(
                "candidate %d: theta=(%d,%d,%d) d=%d deg=%d fwd=%s bwd=%s mid=%d^%d", n,
                params.endomorphism.x, params.endomorphism.y, params.endomorphism.z,
                params.endomorphism.shift, params.degree, params.forward, params.backward,
                params.middle_ell, params.middle_exponent,
            )
            try:
                result = self._attack_with(params, public_key)
            except (DegenerateEndomorphism, PathNotFound) as exc:
                logger.info("candidate %d failed: %s", n, exc)
                failures.append(str(exc))
                continue
            if result is not None:
                result.metadata["failures"] = failures
                return result
            failures.append(f"candidate {n}: no verified secret")
        raise SearchExhausted("orchestrator", "no candidate recovered the secret",
                              candidates=len(self.parameters), failures=len(failures))

    # -- Stages --

    def _steps(
        self,
        schedule: Sequence[tuple[int, int]],
        public_key: PublicKey,
        extra: Sequence[CurvePoint] = (),
    ) -> tuple[list[CurvePoint], list[WalkStep]]:
        """Tracked points on EA and walk steps for a (prime, exponent) schedule."""
        E0 = self.ctx.base_curve
        points: list[CurvePoint] = []
        steps: list[WalkStep] = []
        for ell, s in schedule:
            basis = self.ctx.bases[ell]
            P, Q = scale_basis(E0, basis.P, basis.Q, ell, basis.exponent, s)
            iP, iQ = public_key.images[ell]
            T1, T2 = scale_basis(public_key.curve, iP, iQ, ell, basis.exponent, s)
            steps.append(WalkStep(ell, s, TorsionBasis(ell, s, P, Q), (len(points), len(points) + 1)))
            points += [T1, T2]
        return points + list(extra), steps

    def _attack_with(self, params: AttackParameters, public_key: PublicKey) -> AttackResult | None:
        ctx, cfg = self.ctx, self.config
        EA = public_key.curve
        secret = ctx.secret_basis
        endo = params.endomorphism
        R1, R2 = torsion_basis(EA, secret.ell, secret.exponent, bound=cfg.basis_bound)
        walker = PathWalker(self.oracle, endo)

        points, steps = self._steps(params.forward, public_key, extra=(R1, R2))
        forward = walker.walk_forward(EA, points, steps)
        tracked = forward.points[-2:]

        points, steps = self._steps(params.backward, public_key)
        backward = walker.walk_backward(EA, points, steps)
        companions = [backward.points[idx] for idx, _, _ in backward.companions]
        reversal = [(i, ell, deg) for i, (_, ell, deg) in enumerate(backward.companions)]

        m = params.middle_ell
        k1, k2 = params.middle_split
        degrees = path_degrees([(m, k1)], [(m, k2)])
        j1, j2 = forward.curve.j_invariant(), backward.curve.j_invariant()

        paths_tried = 0
        candidates_tried = 0
        for path in iter_paths(j1, j2, [(m, k1)], [(m, k2)], cfg.root_bound):
            paths_tried += 1
            if paths_tried > cfg.max_paths:
                break
            for middle in iter_push_j_walk(forward.curve, tracked, path, degrees,
                                           backward.curve, cfg.basis_bound):
                back = PathWalker.walk_kernels(backward.curve, companions + middle, reversal)
                S1, S2 = back.points[-2:]
                for iso in back.curve.isomorphisms_to(EA):
                    candidates_tried += 1
                    recovered, curve_match = self._extract(public_key, endo, R1, R2, iso(S1), iso(S2))
                    if recovered is not None:
                        logger.info("secret recovered after %d paths, %d candidates",
                                    paths_tried, candidates_tried)
                        return AttackResult(
                            secret=recovered,
                            curve_match=curve_match,
                            parameters=params,
                            paths_tried=paths_tried,
                            candidates_tried=candidates_tried,
                        )
        logger.info("candidate exhausted: %d paths, %d candidates", paths_tried, candidates_tried)
        return None

    def _extract(
        self,
        public_key: PublicKey,
        endo: Endomorphism,
        R1: CurvePoint,
        R2: CurvePoint,
        S1: CurvePoint,
        S2: CurvePoint,
    ) -> tuple[int | None, bool]:
        """Secret from the images (S1, S2) of (R1, R2) under a reconstructed psi.

        Returns the secret (or None) and whether some candidate dual isogeny
        landed on a curve isomorphic to the base curve.
        """
        ctx = self.ctx
        EA = public_key.curve
        E0 = ctx.base_curve
        ell, e = ctx.secret_ell, ctx.secret_basis.exponent
        n = ell**e
        a1, b1 = pairing_dlog(EA, R1, R2, S1, ell, e)
        a2, b2 = pairing_dlog(EA, R1, R2, S2, ell, e)
        M = np.array([[a1, a2], [b1, b2]], dtype=object)
        curve_match = False
        for sign in (1, -1):
            shifted = (M - sign * endo.shift * _IDENTITY_MATRIX) % n
            try:
                sol = solve_kernel(shifted, ell, e)
            except DegenerateEndomorphism:
                continue
            if sol.degree != e:
                continue
            K = determine_kernel(EA, sol, R1, R2, ell, e)
            E0_prime, (U1, U2) = compute_isogeny(EA, K, ell, e, [R1, R2])
            if E0_prime.j_invariant() != E0.j_invariant():
                continue
            curve_match = True
            for iso in E0_prime.isomorphisms_to(E0):
                secret = self._secret_from_kernel(iso(U1), iso(U2))
                if secret is not None and keygen(ctx, secret) == public_key:
                    return secret, True
        return None, curve_match

    def _secret_from_kernel(self, V1: CurvePoint, V2: CurvePoint) -> int | None:
        """s with <P + sQ> generated by V1 or V2, when one of them has full order."""
        E0 = self.ctx.base_curve
        basis = self.ctx.secret_basis
        ell, e = basis.ell, basis.exponent
        n = basis.order
        for V in (V1, V2):
            if not E0.has_order(V, ell, e):
                continue
            a, b = pairing_dlog(E0, basis.P, basis.Q, V, ell, e)
            if a % ell == 0:
                continue
            return b * pow(a, -1, n) % n
        return None


def run_attack(ctx: AttackContext, public_key: PublicKey, config: AttackConfig | None = None) -> AttackResult:
    """Convenience wrapper: one orchestrator, one public key."""
    return AttackOrchestrator(ctx, config).attack(public_key)
