"""Integer primitives used by the modular arithmetic core.

API
---
extended_gcd(a, b)    -> ExtendedGcd(gcd, x, y)  with a*x + b*y == gcd
gcd(a, b)             -> non-negative int
compensated_rem(n, m) -> n mod m shifted into [0, m)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExtendedGcd:
    """Result of the extended Euclidean algorithm.

    ``gcd`` is non-negative and ``a * x + b * y == gcd`` holds for the
    arguments the result was computed from.
    """

    gcd: int
    x: int
    y: int


def extended_gcd(a: int, b: int) -> ExtendedGcd:
    """Return the gcd of *a* and *b* together with a Bézout pair.

    Iterative form: the invariants ``a0*prev_x + b0*prev_y == a`` and
    ``a0*x + b0*y == b`` hold on every pass.
    """
    prev_x, x = 1, 0
    prev_y, y = 0, 1
    while b != 0:
        q = a // b
        a, b = b, a - q * b
        prev_x, x = x, prev_x - q * x
        prev_y, y = y, prev_y - q * y
    if a < 0:
        a, prev_x, prev_y = -a, -prev_x, -prev_y
    return ExtendedGcd(gcd=a, x=prev_x, y=prev_y)


def gcd(a: int, b: int) -> int:
    return extended_gcd(a, b).gcd


def compensated_rem(n: int, m: int) -> int:
    """Reduce *n* into ``[0, m)`` for a positive modulus *m*.

    A truncating remainder carries the sign of *n*; a negative one is
    corrected by adding *m* once, which always suffices since
    ``|n rem m| < m``.
    """
    if m <= 0:
        raise ValueError(f"modulus must be positive, got {m}")
    r = abs(n) % m
    if n < 0 and r:
        r = m - r
    return r
