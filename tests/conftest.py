"""Shared fixtures: a small field for unit tests and the two attack presets."""

import pytest

from isogeny_cracker.arith.curve import base_curve
from isogeny_cracker.arith.field import Fp2Field
from isogeny_cracker.attack.protocol import find_prime, setup
from isogeny_cracker.core.torsion import torsion_basis
from isogeny_cracker.utils.constants import (
    REGRESSION_EXPONENTS,
    REGRESSION_SECRET_ELL,
    TOY_EXPONENTS,
    TOY_SECRET_ELL,
)

# p + 1 = 432 = 2^4 * 3^3
SMALL_P = 431


@pytest.fixture(scope="session")
def field():
    return Fp2Field(SMALL_P)


@pytest.fixture(scope="session")
def e0(field):
    return base_curve(field)


@pytest.fixture(scope="session")
def basis16(e0):
    return torsion_basis(e0, 2, 4)


@pytest.fixture(scope="session")
def basis27(e0):
    return torsion_basis(e0, 3, 3)


@pytest.fixture(scope="session")
def toy_ctx():
    p = find_prime(TOY_EXPONENTS)
    return setup(p, TOY_EXPONENTS, TOY_SECRET_ELL)


@pytest.fixture(scope="session")
def regression_ctx():
    p = find_prime(REGRESSION_EXPONENTS)
    return setup(p, REGRESSION_EXPONENTS, REGRESSION_SECRET_ELL)


def some_point(curve, start=1):
    """First point with x = k + i, k >= start."""
    k = start
    while True:
        pt = curve.lift_x(curve.field(k, 1))
        if pt is not None:
            return pt
        k += 1
