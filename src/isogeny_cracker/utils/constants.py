"""Number-theoretic constants, presets and default search bounds."""

# -- Classical modular polynomials --
# Phi_l(X, Y) as {(i, j): c} meaning c * X^i * Y^j; both tables are symmetric.
MODULAR_POLYNOMIALS: dict[int, dict[tuple[int, int], int]] = {
    2: {
        (3, 0): 1,
        (0, 3): 1,
        (2, 2): -1,
        (2, 1): 1488,
        (1, 2): 1488,
        (2, 0): -162000,
        (0, 2): -162000,
        (1, 1): 40773375,
        (1, 0): 8748000000,
        (0, 1): 8748000000,
        (0, 0): -157464000000000,
    },
    3: {
        (4, 0): 1,
        (0, 4): 1,
        (3, 3): -1,
        (3, 2): 2232,
        (2, 3): 2232,
        (3, 1): -1069956,
        (1, 3): -1069956,
        (3, 0): 36864000,
        (0, 3): 36864000,
        (2, 2): 2587918086,
        (2, 1): 8900222976000,
        (1, 2): 8900222976000,
        (2, 0): 452984832000000,
        (0, 2): 452984832000000,
        (1, 1): -770845966336000000,
        (1, 0): 1855425871872000000000,
        (0, 1): 1855425871872000000000,
    },
}

# -- Base curve --
# y^2 = x^3 + x, the supersingular curve with j = 1728 when p = 3 mod 4
BASE_CURVE_A: int = 1
BASE_CURVE_B: int = 0
BASE_J_INVARIANT: int = 1728

# -- Presets --
# {prime: exponent} of p + 1 before the cofactor; secret prime listed separately
TOY_EXPONENTS: dict[int, int] = {2: 3, 3: 1, 5: 1, 7: 1, 11: 1, 13: 1}
TOY_SECRET_ELL: int = 2

REGRESSION_EXPONENTS: dict[int, int] = {2: 2, 3: 2, 5: 2, 7: 1, 11: 1, 13: 1}
REGRESSION_SECRET_ELL: int = 3

PRESETS: dict[str, tuple[dict[int, int], int]] = {
    "toy": (TOY_EXPONENTS, TOY_SECRET_ELL),
    "regression": (REGRESSION_EXPONENTS, REGRESSION_SECRET_ELL),
}

# -- Search bounds --
MAX_PRIME_COFACTOR: int = 10_000
BASIS_SEARCH_BOUND: int = 2_000
ROOT_SEARCH_BOUND: int = 64
TORSION_STRIDE: int = 1
