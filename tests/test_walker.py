"""Tests for walks along endomorphism kernels."""

import pytest

from conftest import some_point
from isogeny_cracker.core.endomorphism import EndomorphismOracle
from isogeny_cracker.core.walker import PathWalker
from isogeny_cracker.utils.types import Endomorphism, TorsionBasis, WalkStep

ONE_PLUS_PI = Endomorphism(0, 1, 0, shift=1)


@pytest.fixture(scope="module")
def walker(e0):
    return PathWalker(EndomorphismOracle(e0), ONE_PLUS_PI)


@pytest.fixture(scope="module")
def steps(basis16, basis27):
    return [
        WalkStep(2, 4, TorsionBasis(2, 4, *basis16), (0, 1)),
        WalkStep(3, 3, TorsionBasis(3, 3, *basis27), (2, 3)),
    ]


def _points(basis16, basis27, *extra):
    return [*basis16, *basis27, *extra]


class TestWalkForward:
    def test_full_kernel_returns_to_j_1728(self, e0, walker, steps, basis16, basis27):
        result = walker.walk_forward(e0, _points(basis16, basis27), steps)
        assert result.curve.j_invariant() == 1728
        assert result.companions == []

    def test_points_follow_the_walk(self, e0, walker, steps, basis16, basis27):
        R = some_point(e0)
        result = walker.walk_forward(e0, _points(basis16, basis27, R), steps[:1])
        assert len(result.points) == 5
        for pt in result.points:
            assert result.curve.contains(pt)


class TestWalkBackward:
    def test_companions_recorded(self, e0, walker, steps, basis16, basis27):
        result = walker.walk_backward(e0, _points(basis16, basis27), steps)
        assert [(ell, deg) for _, ell, deg in result.companions] == [(2, 4), (3, 3)]
        assert result.curve.j_invariant() == 1728
        for idx, ell, deg in result.companions:
            assert result.curve.has_order(result.points[idx], ell, deg)

    def test_companions_generate_the_dual(self, e0, walker, steps, basis16, basis27):
        """Walking the companion kernels back multiplies by the walk degree."""
        R = some_point(e0, 3)
        result = walker.walk_backward(e0, _points(basis16, basis27, R), steps[:1])
        back = PathWalker.walk_kernels(result.curve, result.points, result.companions)
        assert back.curve.j_invariant() == 1728
        expected = e0.multiply(R, 16)
        assert any(iso(back.points[4]) == expected for iso in back.curve.isomorphisms_to(e0))

    def test_walk_kernels_without_kernels(self, e0, basis16):
        back = PathWalker.walk_kernels(e0, list(basis16), [])
        assert back.curve == e0
        assert back.points == list(basis16)
