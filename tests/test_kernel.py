"""Tests for action matrices and kernel extraction."""

from itertools import product

import numpy as np
import pytest

from isogeny_cracker.arith.curve import IDENTITY
from isogeny_cracker.arith.pairing import weil_pairing
from isogeny_cracker.core.endomorphism import EndomorphismOracle
from isogeny_cracker.core.kernel import (
    action_matrix,
    determine_action,
    determine_b_action,
    determine_kernel,
    determine_kernel_back,
    find_ker,
    solve_kernel,
)
from isogeny_cracker.errors import DegenerateEndomorphism
from isogeny_cracker.utils.types import Endomorphism

# 1 + pi has degree p + 1 = 2^4 * 3^3 and is primitive
ONE_PLUS_PI = Endomorphism(0, 1, 0, shift=1)


def _kernel_vector(y, swapped):
    return (y, 1) if swapped else (1, y)


def _matrices(n):
    for a, b, c, d in product(range(n), repeat=4):
        yield np.array([[a, b], [c, d]], dtype=object)


class TestFindKer:
    @pytest.mark.parametrize("ell,e", [(2, 2), (3, 1), (3, 2)])
    def test_exhaustive(self, ell, e):
        n = ell**e
        checked = 0
        for M in _matrices(n):
            if (M[0][0] * M[1][1] - M[0][1] * M[1][0]) % n:
                continue
            if all(v % ell == 0 for v in M.flat):
                continue
            y, swapped = find_ker(M, ell, e)
            v = np.array(_kernel_vector(y, swapped), dtype=object)
            assert all(x % n == 0 for x in M.dot(v))
            checked += 1
        assert checked > 0

    def test_pivot_order(self):
        M = np.array([[1, 1], [1, 1]], dtype=object)
        assert find_ker(M, 2, 3) == (7, False)
        M = np.array([[1, 0], [0, 0]], dtype=object)
        assert find_ker(M, 2, 1) == (0, True)

    def test_no_unit_entry(self):
        M = np.array([[2, 4], [6, 2]], dtype=object)
        with pytest.raises(DegenerateEndomorphism):
            find_ker(M, 2, 3)


class TestSolveKernel:
    def test_strips_valuation(self):
        M = np.array([[2, 2], [2, 2]], dtype=object)
        sol = solve_kernel(M, 2, 3)
        assert sol.degree == 2
        assert sol.coeff == 3
        assert sol.swapped is False

    def test_full_precision(self):
        M = np.array([[3, 1], [6, 2]], dtype=object)
        sol = solve_kernel(M, 3, 2)
        assert sol.degree == 2
        assert (3 + sol.coeff) % 9 == 0

    def test_vanishing_matrix(self):
        M = np.array([[9, 0], [18, 27]], dtype=object)
        with pytest.raises(DegenerateEndomorphism):
            solve_kernel(M, 3, 2)


@pytest.fixture(scope="module")
def oracle(e0):
    return EndomorphismOracle(e0)


class TestDetermineKernel:
    def test_action_matrix_of_identity(self, oracle, basis27):
        P, Q = basis27
        M = action_matrix(oracle, P, Q, Endomorphism(0, 0, 0, shift=1), 3, 3)
        assert M.tolist() == [[1, 0], [0, 1]]

    @pytest.mark.parametrize("ell,e", [(2, 4), (3, 3)])
    def test_kernel_is_annihilated(self, e0, oracle, basis16, basis27, ell, e):
        P, Q = basis16 if ell == 2 else basis27
        sol = determine_action(oracle, P, Q, ONE_PLUS_PI, ell, e)
        assert sol.degree == e
        K = determine_kernel(e0, sol, P, Q, ell, e)
        assert e0.has_order(K, ell, e)
        assert oracle.evaluate(ONE_PLUS_PI, K) == IDENTITY

    def test_kernel_of_non_primitive(self, e0, oracle, basis16):
        P, Q = basis16
        endo = Endomorphism(0, 2, 0, shift=2)
        sol = determine_action(oracle, P, Q, endo, 2, 4)
        assert sol.degree == 3
        K = determine_kernel(e0, sol, P, Q, 2, 4)
        assert e0.has_order(K, 2, 3)
        assert oracle.evaluate(endo, K) == IDENTITY

    @pytest.mark.parametrize("ell,e", [(2, 4), (3, 3)])
    def test_dual_kernel_with_companion(self, e0, oracle, basis16, basis27, ell, e):
        P, Q = basis16 if ell == 2 else basis27
        sol = determine_b_action(oracle, P, Q, ONE_PLUS_PI, ell, e)
        K, C = determine_kernel_back(e0, sol, P, Q, ell, e)
        assert oracle.evaluate(ONE_PLUS_PI.dualized(), K) == IDENTITY
        assert e0.has_order(C, ell, e)
        top = ell ** (e - 1)
        assert weil_pairing(e0, e0.multiply(K, top), e0.multiply(C, top), ell, 1) != 1
