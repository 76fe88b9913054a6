"""Falling / rising factorial products.

``falling_product`` and ``rising_product`` fold over any value that
supports ``*`` together with ``+``/``-`` by a plain int, so they serve
both plain ints and ``ModInt``.  ``Factoriable`` is the capability a
type advertises when it offers these products as methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, TypeVar

T = TypeVar("T")


class Factoriable(ABC):
    """Values offering falling/rising factorial products."""

    __slots__ = ()

    @abstractmethod
    def falling(self, take: int) -> Any:
        """``x * (x-1) * ... * (x-take+1)``."""

    @abstractmethod
    def rising(self, take: int) -> Any:
        """``x * (x+1) * ... * (x+take-1)``."""

    @abstractmethod
    def factorial(self) -> Any:
        """``x!``."""


def _check_take(take: int) -> None:
    if take < 0:
        raise ValueError(f"take must be non-negative, got {take}")


def falling_product(x: T, take: int, one: Any = 1) -> T:
    """Multiply *take* terms ``x, x-1, ...`` onto *one*."""
    _check_take(take)
    res = one
    c = x
    for _ in range(take):
        res = res * c
        c = c - 1
    return res


def rising_product(x: T, take: int, one: Any = 1) -> T:
    """Multiply *take* terms ``x, x+1, ...`` onto *one*."""
    _check_take(take)
    res = one
    c = x
    for _ in range(take):
        res = res * c
        c = c + 1
    return res


def factorial(n: int) -> int:
    if n < 0:
        raise ValueError(f"factorial of negative number {n}")
    return falling_product(n, n)
