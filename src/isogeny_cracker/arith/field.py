"""The quadratic extension GF(p^2) = F_p[i] / (i^2 + 1) for p = 3 mod 4.

Elements are immutable pairs (a, b) meaning a + b*i. Plain Python ints
mix freely with elements in arithmetic and comparisons.
"""

from __future__ import annotations

from isogeny_cracker.errors import UndefinedEvaluation
from isogeny_cracker.utils.math_helpers import is_prime


class Fp2Field:
    """Factory and context for elements of GF(p^2)."""

    def __init__(self, p: int) -> None:
        if p % 4 != 3 or not is_prime(p):
            raise ValueError(f"GF(p^2) with i^2 = -1 needs a prime p = 3 mod 4, got {p}")
        self.p = p

    def __call__(self, a: int | Fp2Element = 0, b: int = 0) -> Fp2Element:
        if isinstance(a, Fp2Element):
            return a
        return Fp2Element(a % self.p, b % self.p, self)

    @property
    def characteristic(self) -> int:
        return self.p

    @property
    def order(self) -> int:
        return self.p * self.p

    @property
    def zero(self) -> Fp2Element:
        return Fp2Element(0, 0, self)

    @property
    def one(self) -> Fp2Element:
        return Fp2Element(1, 0, self)

    @property
    def i(self) -> Fp2Element:
        """The fixed square root of -1."""
        return Fp2Element(0, 1, self)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Fp2Field) and other.p == self.p

    def __hash__(self) -> int:
        return hash(("GF", self.p))

    def __repr__(self) -> str:
        return f"GF({self.p}^2)"


class Fp2Element:
    __slots__ = ("a", "b", "field")

    def __init__(self, a: int, b: int, field: Fp2Field) -> None:
        self.a = a
        self.b = b
        self.field = field

    # -- Coercion --

    def _lift(self, other: object) -> Fp2Element | None:
        if isinstance(other, Fp2Element):
            return other
        if isinstance(other, int):
            return self.field(other)
        return None

    # -- Ring operations --

    def __add__(self, other: object) -> Fp2Element:
        o = self._lift(other)
        if o is None:
            return NotImplemented
        p = self.field.p
        return Fp2Element((self.a + o.a) % p, (self.b + o.b) % p, self.field)

    __radd__ = __add__

    def __sub__(self, other: object) -> Fp2Element:
        o = self._lift(other)
        if o is None:
            return NotImplemented
        p = self.field.p
        return Fp2Element((self.a - o.a) % p, (self.b - o.b) % p, self.field)

    def __rsub__(self, other: object) -> Fp2Element:
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return o - self

    def __neg__(self) -> Fp2Element:
        p = self.field.p
        return Fp2Element(-self.a % p, -self.b % p, self.field)

    def __mul__(self, other: object) -> Fp2Element:
        o = self._lift(other)
        if o is None:
            return NotImplemented
        p = self.field.p
        a, b, c, d = self.a, self.b, o.a, o.b
        return Fp2Element((a * c - b * d) % p, (a * d + b * c) % p, self.field)

    __rmul__ = __mul__

    def __truediv__(self, other: object) -> Fp2Element:
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return self * o.inverse()

    def __rtruediv__(self, other: object) -> Fp2Element:
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return o * self.inverse()

    def __pow__(self, k: int) -> Fp2Element:
        if k < 0:
            return self.inverse() ** (-k)
        result = self.field.one
        base = self
        while k:
            if k & 1:
                result = result * base
            base = base * base
            k >>= 1
        return result

    # -- Comparison --

    def __eq__(self, other: object) -> bool:
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return self.a == o.a and self.b == o.b and self.field.p == o.field.p

    def __hash__(self) -> int:
        return hash((self.a, self.b, self.field.p))

    def __bool__(self) -> bool:
        return bool(self.a or self.b)

    def is_zero(self) -> bool:
        return not (self.a or self.b)

    def __repr__(self) -> str:
        return f"{self.a} + {self.b}*i"

    # -- Field structure --

    def conjugate(self) -> Fp2Element:
        """a - b*i, which equals the p-power Frobenius since i^p = -i."""
        return Fp2Element(self.a, -self.b % self.field.p, self.field)

    def norm(self) -> int:
        p = self.field.p
        return (self.a * self.a + self.b * self.b) % p

    def inverse(self) -> Fp2Element:
        n = self.norm()
        if n == 0:
            raise UndefinedEvaluation("field", "inverse of zero", p=self.field.p)
        p = self.field.p
        n_inv = pow(n, -1, p)
        return Fp2Element(self.a * n_inv % p, -self.b * n_inv % p, self.field)

    def is_square(self) -> bool:
        """x is a square in GF(p^2) iff its norm is a square in F_p."""
        if self.is_zero():
            return True
        p = self.field.p
        return pow(self.norm(), (p - 1) // 2, p) == 1

    def sqrt(self) -> Fp2Element | None:
        """A square root, or None when self is not a square.

        Complex-method square root for q = p^2 with p = 3 mod 4
        (Adj and Rodriguez-Henriquez, Algorithm 9).
        """
        if self.is_zero():
            return self
        p = self.field.p
        a1 = self ** ((p - 3) // 4)
        x0 = a1 * self
        alpha = a1 * x0
        if alpha == -1:
            x = self.field.i * x0
        else:
            x = (alpha + 1) ** ((p - 1) // 2) * x0
        if x * x != self:
            return None
        return x
