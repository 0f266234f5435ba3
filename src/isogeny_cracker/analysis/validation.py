"""Validation of recovered secrets against ground truth."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from scipy.stats import binom

from isogeny_cracker.attack.protocol import keygen

if TYPE_CHECKING:
    from isogeny_cracker.utils.types import AttackContext, AttackResult, PublicKey


class AttackValidator:
    """Compare one attack result with the secret that produced the public key."""

    def __init__(
        self,
        ctx: AttackContext,
        true_secret: int,
        public_key: PublicKey,
        result: AttackResult,
    ) -> None:
        self.ctx = ctx
        self.true_secret = true_secret
        self.public_key = public_key
        self.result = result

    def secret_match(self) -> bool:
        """Recovered secret equals the true one mod l^e."""
        n = self.ctx.secret_order
        return self.result.secret % n == self.true_secret % n

    def curve_match(self) -> bool:
        return bool(self.result.curve_match)

    def key_match(self) -> bool:
        """The recovered secret regenerates the public key exactly."""
        return keygen(self.ctx, self.result.secret) == self.public_key

    def summary(self) -> dict:
        return {
            "secret": self.result.secret,
            "true_secret": self.true_secret,
            "secret_match": self.secret_match(),
            "curve_match": self.curve_match(),
            "paths_tried": self.result.paths_tried,
            "candidates_tried": self.result.candidates_tried,
        }


class CampaignValidator:
    """Success statistics over several attack runs."""

    def __init__(self, matches: Sequence[bool]) -> None:
        self.matches = list(matches)

    def success_rate(self) -> float:
        """Fraction of runs that recovered the secret (0.0 to 1.0)."""
        if not self.matches:
            return 0.0
        return sum(self.matches) / len(self.matches)

    def confidence_interval(self, alpha: float = 0.95) -> tuple[float, float]:
        """Binomial confidence interval on the success rate.

        Returns (lower, upper) bounds as fractions in [0, 1].
        """
        n = len(self.matches)
        if n == 0:
            return (0.0, 0.0)
        lo, hi = binom.interval(alpha, n, self.success_rate())
        return (float(lo) / n, float(hi) / n)

    def summary(self) -> dict:
        return {
            "runs": len(self.matches),
            "success_rate": self.success_rate(),
            "confidence_interval": self.confidence_interval(),
        }
