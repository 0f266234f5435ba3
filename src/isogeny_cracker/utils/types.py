"""Dataclass definitions for the isogeny key-recovery pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from isogeny_cracker.arith.curve import Curve, CurvePoint
from isogeny_cracker.arith.field import Fp2Field
from isogeny_cracker.utils.constants import BASIS_SEARCH_BOUND, ROOT_SEARCH_BOUND


@dataclass
class AttackConfig:
    """Configuration for an attack run."""

    middle_ell: int | None = None  # None: 3 when the secret prime is 2, else 2
    min_middle_exponent: int = 0
    max_middle_exponent: int = 10
    max_yz: int = 2  # box for the Frobenius coefficients of theta
    max_candidates: int = 8
    max_paths: int = 64  # middle paths tried per candidate
    basis_bound: int = BASIS_SEARCH_BOUND
    root_bound: int = ROOT_SEARCH_BOUND


@dataclass(frozen=True)
class TorsionBasis:
    """Basis (P, Q) of E[ell^exponent] with a non-degenerate pairing."""

    ell: int
    exponent: int
    P: CurvePoint
    Q: CurvePoint

    @property
    def order(self) -> int:
        return self.ell**self.exponent


@dataclass(frozen=True)
class Endomorphism:
    """scale * theta + shift, theta = x*iota + y*pi + z*pi*iota.

    With ``dual`` set, theta is replaced by its conjugate -theta.
    """

    x: int
    y: int
    z: int
    scale: int = 1
    shift: int = 0
    dual: bool = False

    def theta_norm(self, p: int) -> int:
        return self.x * self.x + p * (self.y * self.y + self.z * self.z)

    def degree(self, p: int) -> int:
        return self.scale * self.scale * self.theta_norm(p) + self.shift * self.shift

    def dualized(self) -> Endomorphism:
        return replace(self, dual=not self.dual)


@dataclass(frozen=True)
class KernelSolution:
    """Kernel vector of an action matrix.

    The generator is T1 + coeff*T2, or T2 + coeff*T1 when ``swapped``,
    living at torsion level ``degree``.
    """

    coeff: int
    degree: int
    swapped: bool


@dataclass(frozen=True)
class WalkStep:
    """One prime-power stage of a walk.

    ``basis`` lives on the base curve at level ``exponent``; ``tracked``
    indexes the running point list holding its images on the current curve.
    """

    ell: int
    exponent: int
    basis: TorsionBasis
    tracked: tuple[int, int]


@dataclass
class WalkResult:
    """Curve and points at the end of a walk.

    ``companions`` lists (index, ell, degree) for every backward step.
    """

    curve: Curve
    points: list[CurvePoint]
    companions: list[tuple[int, int, int]] = field(default_factory=list)


@dataclass(frozen=True)
class PublicKey:
    """Public curve plus images of every non-secret torsion basis."""

    curve: Curve
    images: dict[int, tuple[CurvePoint, CurvePoint]]


@dataclass(frozen=True)
class AttackContext:
    """Immutable public setup shared by every stage."""

    field: Fp2Field
    base_curve: Curve
    bases: dict[int, TorsionBasis]
    secret_ell: int

    @property
    def p(self) -> int:
        return self.field.p

    @property
    def secret_basis(self) -> TorsionBasis:
        return self.bases[self.secret_ell]

    @property
    def secret_order(self) -> int:
        return self.secret_basis.order

    @property
    def exponents(self) -> dict[int, int]:
        return {ell: b.exponent for ell, b in self.bases.items()}


@dataclass(frozen=True)
class AttackParameters:
    """A usable attack endomorphism and its degree schedule."""

    endomorphism: Endomorphism
    degree: int
    forward: tuple[tuple[int, int], ...]
    backward: tuple[tuple[int, int], ...]
    middle_ell: int
    middle_exponent: int

    @property
    def middle_split(self) -> tuple[int, int]:
        k1 = (self.middle_exponent + 1) // 2
        return k1, self.middle_exponent - k1


@dataclass
class AttackResult:
    """Outcome of one attack run."""

    secret: int
    curve_match: bool
    parameters: AttackParameters | None = None
    paths_tried: int = 0
    candidates_tried: int = 0
    metadata: dict = field(default_factory=dict)  # type: ignore[type-arg]
