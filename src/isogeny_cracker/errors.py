"""Failure kinds raised by the attack pipeline.

Every error records the stage that failed and the parameters it was
working on.
"""

from __future__ import annotations


class AttackError(RuntimeError):
    """Base class for all pipeline failures."""

    def __init__(self, stage: str, message: str, **params: object) -> None:
        self.stage = stage
        self.params = params
        detail = ", ".join(f"{k}={v}" for k, v in params.items())
        text = f"[{stage}] {message}"
        if detail:
            text += f" ({detail})"
        super().__init__(text)


class SearchExhausted(AttackError):
    """A bounded search (points, roots, primes, candidates) found nothing."""


class DegenerateEndomorphism(AttackError):
    """The action matrix vanishes mod l^s on the tested subgroup."""


class PathNotFound(AttackError):
    """The two leaf sets of the isogeny graph search never meet."""


class UndefinedEvaluation(AttackError, ZeroDivisionError):
    """A rational map or field inverse was evaluated at a pole."""


class OrderMismatch(AttackError, ValueError):
    """A point does not have the order its caller claimed."""
