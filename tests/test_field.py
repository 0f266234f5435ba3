"""Tests for GF(p^2) arithmetic."""

import pytest

from isogeny_cracker.arith.field import Fp2Field
from isogeny_cracker.errors import UndefinedEvaluation


class TestConstruction:
    def test_rejects_p_1_mod_4(self):
        with pytest.raises(ValueError):
            Fp2Field(13)

    def test_rejects_composite(self):
        with pytest.raises(ValueError):
            Fp2Field(15)

    def test_coercion_reduces(self, field):
        x = field(431 + 5, -1)
        assert (x.a, x.b) == (5, 430)

    def test_sizes(self, field):
        assert field.characteristic == 431
        assert field.order == 431 * 431

    def test_int_equality(self, field):
        assert field(5) == 5
        assert field(430) == -1
        assert field(0) == 0
        assert field(0, 1) != 1


class TestArithmetic:
    def test_i_squared(self, field):
        assert field.i * field.i == -1

    def test_product(self, field):
        assert field(3, 4) * field(1, 2) == field(-5, 10)

    def test_mixed_int_operations(self, field):
        x = field(7, 9)
        assert 1 - x == field(-6, -9)
        assert 2 * x == x + x
        assert x - 7 == field(0, 9)

    def test_inverse(self, field):
        for a, b in [(1, 0), (3, 4), (0, 7), (430, 2)]:
            x = field(a, b)
            assert x * x.inverse() == 1
            assert x / x == 1

    def test_negative_power(self, field):
        x = field(3, 4)
        assert x**-2 * x**2 == 1

    def test_inverse_of_zero(self, field):
        with pytest.raises(UndefinedEvaluation):
            field.zero.inverse()

    def test_inverse_of_zero_is_zero_division(self, field):
        with pytest.raises(ZeroDivisionError):
            field.one / field.zero

    def test_frobenius_is_conjugation(self, field):
        x = field(5, 7)
        assert x**431 == x.conjugate()

    def test_norm(self, field):
        x = field(5, 7)
        assert x * x.conjugate() == x.norm()


class TestSquareRoots:
    def test_sqrt_of_squares(self, field):
        for a in range(1, 15):
            x = field(a, 2 * a + 1)
            y = (x * x).sqrt()
            assert y is not None
            assert y * y == x * x

    def test_base_field_elements_are_squares(self, field):
        for a in range(1, 20):
            assert field(a).is_square()

    def test_non_square(self, field):
        non_squares = [field(k, 1) for k in range(50) if not field(k, 1).is_square()]
        assert non_squares
        for x in non_squares:
            assert x.sqrt() is None

    def test_sqrt_zero(self, field):
        assert field.zero.sqrt() == 0
