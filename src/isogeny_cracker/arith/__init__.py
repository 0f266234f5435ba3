"""Pure-Python arithmetic backend: GF(p^2), curves, pairings, polynomials."""
