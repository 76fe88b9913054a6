"""Modular integers with a per-value modulus tag.

A ``ModInt`` pairs a residue with a modulus tag:

  FixedModulo(m) – a concrete modulus ``m >= 1``; residue in ``[0, m)``
  UNSET          – no modulus committed yet; only carried by the
                   identity seeds ``ModInt.zero()`` / ``ModInt.one()``
                   and by ``ModInt.from_str_radix``

Before every binary operation and comparison the two tags are checked:
two fixed tags must agree, a fixed tag absorbs an unset one, and two
unset tags are rejected because no modulus can be derived.  Mixing
moduli is a programming error and raises ``ModuloMismatchError``; the
library never catches it.

Values are never mutated.  ``a += b`` rebinds ``a`` to ``a + b``.

There is deliberately no ``__int__``/``__index__``: use ``get()`` or
``to_usize()`` so the modulus context is never dropped by accident.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from functools import reduce
from typing import Iterable, Optional, Tuple, Union

from modint.arith.factorial import Factoriable, falling_product, rising_product
from modint.arith.integer import compensated_rem, extended_gcd, gcd
from modint.config import I64_MAX, I64_MIN, MAX_RADIX, MIN_RADIX, U32_MAX


class ModuloMismatchError(ArithmeticError):
    """Raised when two operands carry incompatible moduli."""


class UnsetModuloError(ModuloMismatchError):
    """Raised when an operation needs a concrete modulus but got UNSET."""


class ModularInverseError(ArithmeticError):
    """Raised by ``checked_inv`` when no inverse exists."""


# --------------------------------------------------------------------------
# Modulus tag
# --------------------------------------------------------------------------


@dataclass(frozen=True)
class FixedModulo:
    """A concrete modulus."""

    value: int

    def get(self) -> Optional[int]:
        return self.value

    def __repr__(self) -> str:
        return f"FixedModulo({self.value})"


class UnsetModulo:
    """The neutral tag of identity seeds.  Use the ``UNSET`` singleton."""

    _instance: Optional["UnsetModulo"] = None

    def __new__(cls) -> "UnsetModulo":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get(self) -> Optional[int]:
        return None

    def __repr__(self) -> str:
        return "UNSET"


UNSET = UnsetModulo()

Modulo = Union[FixedModulo, UnsetModulo]
IntLike = Union["ModInt", int]


def compatible_modulus(a: "ModInt", b: "ModInt") -> Tuple[int, bool]:
    """Return ``(shared_modulus, is_compatible)`` for two operands.

    The shared modulus is meaningless (``1``) when incompatible.
    """
    ma, mb = a.modulo, b.modulo
    if isinstance(ma, FixedModulo) and isinstance(mb, FixedModulo):
        if ma.value == mb.value:
            return ma.value, True
        return 1, False
    if isinstance(ma, FixedModulo):
        return ma.value, True
    if isinstance(mb, FixedModulo):
        return mb.value, True
    return 1, False


def _check_modulus(m) -> int:
    try:
        m = operator.index(m)
    except TypeError:
        raise TypeError(f"modulus must be an integer, got {type(m).__name__}") from None
    if m == 0:
        raise ValueError("modulus must be non-zero")
    if m < 0 or m > U32_MAX:
        raise ValueError(f"modulus {m} is outside the unsigned 32-bit range")
    return m


def _check_value(n) -> int:
    try:
        n = operator.index(n)
    except TypeError:
        raise TypeError(f"value must be an integer, got {type(n).__name__}") from None
    if n < I64_MIN or n > I64_MAX:
        raise OverflowError(f"value {n} is outside the signed 64-bit range")
    return n


# --------------------------------------------------------------------------
# ModInt
# --------------------------------------------------------------------------


class ModInt(Factoriable):
    """An integer modulo ``m``, or an unset identity seed."""

    __slots__ = ("_num", "_modulo")

    def __init__(self, n, m) -> None:
        """Construct ``n (mod m)``.

        *n* must fit a signed 64-bit integer and *m* a non-zero
        unsigned 32-bit one.
        """
        m = _check_modulus(m)
        n = _check_value(n)
        self._num = compensated_rem(n, m)
        self._modulo: Modulo = FixedModulo(m)

    @classmethod
    def _raw(cls, num: int, modulo: Modulo) -> "ModInt":
        obj = cls.__new__(cls)
        obj._num = num
        obj._modulo = modulo
        return obj

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get(self) -> int:
        """The residue."""
        return self._num

    def to_usize(self) -> int:
        return self._num

    @property
    def residue(self) -> int:
        return self._num

    @property
    def modulo(self) -> Modulo:
        return self._modulo

    def get_mod(self) -> int:
        """The concrete modulus; raises ``UnsetModuloError`` for UNSET values."""
        m = self._modulo.get()
        if m is None:
            raise UnsetModuloError(f"{self!r} has no modulus")
        return m

    @property
    def is_unset(self) -> bool:
        return self._modulo is UNSET

    # ------------------------------------------------------------------
    # Identities and parsing
    # ------------------------------------------------------------------

    @classmethod
    def zero(cls) -> "ModInt":
        return cls._raw(0, UNSET)

    @classmethod
    def one(cls) -> "ModInt":
        return cls._raw(1, UNSET)

    def is_zero(self) -> bool:
        return self._num == 0

    def is_one(self) -> bool:
        return self._num == 1

    @classmethod
    def from_str_radix(cls, digits: str, radix: int) -> "ModInt":
        """Parse unsigned *digits* in base *radix* into an UNSET value.

        The result must later be combined with a fixed-modulus value
        before it means anything modular.
        """
        if not MIN_RADIX <= radix <= MAX_RADIX:
            raise ValueError(f"radix must be in [{MIN_RADIX}, {MAX_RADIX}], got {radix}")
        if not digits:
            raise ValueError("cannot parse an empty string")
        num = 0
        for ch in digits:
            if not ch.isascii() or not ch.isalnum():
                raise ValueError(f"invalid digit {ch!r} for radix {radix}")
            num = num * radix + int(ch, radix)
            if num > I64_MAX:
                raise OverflowError(f"radix-{radix} value exceeds the signed 64-bit range")
        return cls._raw(num, UNSET)

    # ------------------------------------------------------------------
    # Operand handling
    # ------------------------------------------------------------------

    def _coerce(self, other) -> Optional["ModInt"]:
        """Lift a plain integer into this value's modulus."""
        if isinstance(other, ModInt):
            return other
        try:
            k = operator.index(other)
        except TypeError:
            return None
        return ModInt(k, self.get_mod())

    def _shared(self, other: "ModInt", symbol: str) -> Tuple[int, int, int]:
        """Check compatibility and return ``(m, lhs_residue, rhs_residue)``.

        An UNSET operand adopts the shared modulus, so both residues
        come back reduced into ``[0, m)``.
        """
        m, ok = compatible_modulus(self, other)
        if not ok:
            raise ModuloMismatchError(
                f"modulo mismatch: cannot apply '{symbol}' to {self!r} and {other!r}"
            )
        a, b = self._num, other._num
        if self._modulo is UNSET:
            a = compensated_rem(a, m)
        if other._modulo is UNSET:
            b = compensated_rem(b, m)
        return m, a, b

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _add(self, other: "ModInt") -> "ModInt":
        m, a, b = self._shared(other, "+")
        r = a + b
        if r >= m:
            r -= m
        return ModInt._raw(r, FixedModulo(m))

    def _sub(self, other: "ModInt") -> "ModInt":
        m, a, b = self._shared(other, "-")
        return ModInt._raw(compensated_rem(a - b, m), FixedModulo(m))

    def _mul(self, other: "ModInt") -> "ModInt":
        m, a, b = self._shared(other, "*")
        return ModInt._raw(compensated_rem(a * b, m), FixedModulo(m))

    def _div(self, other: "ModInt") -> "ModInt":
        # The divisor must be coprime to m; see inv().
        m, a, b = self._shared(other, "/")
        b_inv = ModInt._raw(b, FixedModulo(m)).inv()
        return ModInt._raw(a * b_inv % m, FixedModulo(m))

    def _rem(self, other: "ModInt") -> "ModInt":
        m, a, b = self._shared(other, "%")
        if b == 0:
            raise ZeroDivisionError("modular remainder by a zero residue")
        return ModInt._raw(compensated_rem(a % b, m), FixedModulo(m))

    def __add__(self, other):
        rhs = self._coerce(other)
        return NotImplemented if rhs is None else self._add(rhs)

    def __radd__(self, other):
        lhs = self._coerce(other)
        return NotImplemented if lhs is None else lhs._add(self)

    def __sub__(self, other):
        rhs = self._coerce(other)
        return NotImplemented if rhs is None else self._sub(rhs)

    def __rsub__(self, other):
        lhs = self._coerce(other)
        return NotImplemented if lhs is None else lhs._sub(self)

    def __mul__(self, other):
        rhs = self._coerce(other)
        return NotImplemented if rhs is None else self._mul(rhs)

    def __rmul__(self, other):
        lhs = self._coerce(other)
        return NotImplemented if lhs is None else lhs._mul(self)

    def __truediv__(self, other):
        rhs = self._coerce(other)
        return NotImplemented if rhs is None else self._div(rhs)

    def __rtruediv__(self, other):
        lhs = self._coerce(other)
        return NotImplemented if lhs is None else lhs._div(self)

    def __mod__(self, other):
        rhs = self._coerce(other)
        return NotImplemented if rhs is None else self._rem(rhs)

    def __rmod__(self, other):
        lhs = self._coerce(other)
        return NotImplemented if lhs is None else lhs._rem(self)

    def __neg__(self) -> "ModInt":
        m = self.get_mod()
        return ModInt._raw((m - self._num) % m, self._modulo)

    def __pos__(self) -> "ModInt":
        return self

    def __pow__(self, exp, mod=None):
        if mod is not None:
            return NotImplemented
        return self.pow(exp)

    # ------------------------------------------------------------------
    # Inverse and exponentiation
    # ------------------------------------------------------------------

    def inv(self) -> int:
        """Return ``x`` in ``[0, m)`` with ``x * self == 1 (mod m)``.

        Precondition: ``gcd(self.get(), m) == 1``.  This is not checked;
        for a non-invertible value the result is the Bézout coefficient
        reduced mod m, which does not invert anything.  Use
        ``checked_inv`` when the precondition is not known to hold.
        """
        m = self.get_mod()
        x = extended_gcd(self._num, m).x
        return compensated_rem(x, m)

    def checked_inv(self) -> int:
        """Like ``inv`` but raises ``ModularInverseError`` when gcd != 1."""
        m = self.get_mod()
        if gcd(self._num, m) != 1:
            raise ModularInverseError(f"{self._num} has no inverse modulo {m}")
        return self.inv()

    def pow(self, exp) -> "ModInt":
        """Raise to a non-negative integer power by square-and-multiply."""
        exp = operator.index(exp)
        if exp < 0:
            raise ValueError(f"exponent must be non-negative, got {exp}")
        m = self.get_mod()
        res = 1 % m
        base = self._num
        while exp > 0:
            if exp & 1:
                res = res * base % m
            base = base * base % m
            exp >>= 1
        return ModInt._raw(res, FixedModulo(m))

    # ------------------------------------------------------------------
    # Factorial-style products
    # ------------------------------------------------------------------

    def falling(self, take: int) -> "ModInt":
        """``self * (self-1) * ... * (self-take+1)`` mod m."""
        m = self.get_mod()
        # m consecutive integers always include a multiple of m.
        if take >= m:
            return ModInt(0, m)
        return falling_product(self, take, ModInt(1, m))

    def rising(self, take: int) -> "ModInt":
        """``self * (self+1) * ... * (self+take-1)`` mod m."""
        m = self.get_mod()
        if take >= m:
            return ModInt(0, m)
        return rising_product(self, take, ModInt(1, m))

    def factorial(self) -> "ModInt":
        """``residue! mod m``."""
        return self.falling(self._num)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def __eq__(self, other):
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        _, a, b = self._shared(rhs, "==")
        return a == b

    # Equality across the UNSET/fixed tags breaks any hash contract.
    __hash__ = None  # type: ignore[assignment]

    def partial_cmp(self, other: IntLike) -> Optional[int]:
        """Return -1, 0 or 1, or ``None`` when the moduli are incompatible.

        Unlike ``==`` this never raises for a mismatch.
        """
        if isinstance(other, ModInt):
            rhs = other
        elif self.is_unset:
            return None
        else:
            rhs = self._coerce(other)
            if rhs is None:
                return None
        if not compatible_modulus(self, rhs)[1]:
            return None
        _, a, b = self._shared(rhs, "cmp")
        return (a > b) - (a < b)

    def _ordering(self, other, symbol: str) -> Optional[int]:
        """``partial_cmp`` for the ordering operators.

        ``None`` means a foreign operand type; incompatible moduli raise
        ``ModuloMismatchError`` like ``==`` does.
        """
        if not isinstance(other, ModInt):
            try:
                operator.index(other)
            except TypeError:
                return None
        c = self.partial_cmp(other)
        if c is None:
            raise ModuloMismatchError(
                f"modulo mismatch: cannot apply '{symbol}' to {self!r} and {other!r}"
            )
        return c

    def __lt__(self, other):
        c = self._ordering(other, "<")
        return NotImplemented if c is None else c < 0

    def __le__(self, other):
        c = self._ordering(other, "<=")
        return NotImplemented if c is None else c <= 0

    def __gt__(self, other):
        c = self._ordering(other, ">")
        return NotImplemented if c is None else c > 0

    def __ge__(self, other):
        c = self._ordering(other, ">=")
        return NotImplemented if c is None else c >= 0

    def __bool__(self) -> bool:
        return self._num != 0

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return str(self._num)

    def __repr__(self) -> str:
        m = self._modulo.get()
        return f"ModInt({self._num}, {'UNSET' if m is None else m})"


# --------------------------------------------------------------------------
# Conversion and generic folds
# --------------------------------------------------------------------------


def to_mint(n, m) -> ModInt:
    """Lift a plain integer into ``Z/mZ``."""
    return ModInt(n, m)


def mint_sum(values: Iterable[ModInt]) -> ModInt:
    """Sum seeded with ``ModInt.zero()``; the first fixed value sets m."""
    return reduce(operator.add, values, ModInt.zero())


def mint_prod(values: Iterable[ModInt]) -> ModInt:
    """Product seeded with ``ModInt.one()``; the first fixed value sets m."""
    return reduce(operator.mul, values, ModInt.one())
