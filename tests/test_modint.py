"""Tests for the ModInt value type."""

import pytest

from modint.arith.modint import (
    UNSET,
    FixedModulo,
    ModInt,
    ModularInverseError,
    ModuloMismatchError,
    UnsetModuloError,
    compatible_modulus,
    mint_prod,
    mint_sum,
    to_mint,
)
from modint.config import I64_MAX, I64_MIN, U32_MAX


# ---------- construction ---------------------------------------------------


def test_new_positive():
    assert ModInt(10, 3).get() == 1


def test_new_negative():
    assert ModInt(-10, 3).get() == 2


def test_to_mint_matches_constructor():
    assert to_mint(4, 10) == ModInt(4, 10)


def test_residue_in_range():
    for m in (1, 2, 3, 7, 10, 97, U32_MAX):
        for n in (0, 1, -1, 5, -5, 123456789, -123456789, I64_MAX, I64_MIN):
            r = ModInt(n, m).get()
            assert 0 <= r < m
            assert (r - n) % m == 0


def test_modulus_one():
    assert ModInt(12345, 1).get() == 0


def test_zero_modulus_rejected():
    with pytest.raises(ValueError, match="non-zero"):
        ModInt(1, 0)


def test_modulus_out_of_range():
    with pytest.raises(ValueError):
        ModInt(1, U32_MAX + 1)
    with pytest.raises(ValueError):
        ModInt(1, -3)


def test_value_out_of_range():
    with pytest.raises(OverflowError):
        ModInt(I64_MAX + 1, 5)
    with pytest.raises(OverflowError):
        ModInt(I64_MIN - 1, 5)


def test_non_integer_rejected():
    with pytest.raises(TypeError):
        ModInt(1.5, 7)
    with pytest.raises(TypeError):
        ModInt(1, 7.0)


def test_tag_is_fixed():
    a = ModInt(3, 7)
    assert a.modulo == FixedModulo(7)
    assert a.get_mod() == 7
    assert not a.is_unset


# ---------- arithmetic -----------------------------------------------------


def test_add():
    a = ModInt(13, 8)  # 5
    b = ModInt(10, 8)  # 2
    assert (a + b).get() == 7
    c = ModInt(7, 8)
    assert (a + c).get() == 4  # (5 + 7) % 8


def test_sub():
    a = ModInt(2, 10)
    b = ModInt(3, 10)
    assert (b - a).get() == 1
    assert (a - b).get() == 9


def test_mul():
    assert (ModInt(7, 10) * ModInt(8, 10)).get() == 6


def test_mul_near_max_modulus():
    a = ModInt(U32_MAX - 1, U32_MAX)  # -1
    assert (a * a).get() == 1


def test_div():
    assert ModInt(2, 5) / ModInt(3, 5) == ModInt(4, 5)


@pytest.mark.parametrize(
    "x, expected",
    [(1, 10), (2, 7), (3, 4), (4, 1), (5, 11), (6, 8),
     (7, 5), (8, 2), (9, 12), (10, 9), (11, 6), (12, 3)],
)
def test_div_by_int(x, expected):
    assert (ModInt(x, 13) / 4).get() == expected


def test_div_matches_mul_by_inverse():
    for a in range(13):
        for b in range(1, 13):
            x, y = ModInt(a, 13), ModInt(b, 13)
            assert x / y == x * y.inv()


def test_rem():
    assert (ModInt(9, 13) % ModInt(4, 13)).get() == 1


def test_rem_by_zero_residue():
    with pytest.raises(ZeroDivisionError):
        ModInt(9, 13) % ModInt(13, 13)


def test_laws_against_plain_ints():
    m = 97
    values = [0, 1, 2, 50, 96]
    for x in values:
        for y in values:
            a, b = ModInt(x, m), ModInt(y, m)
            assert (a + b).get() == (x + y) % m
            assert (a - b).get() == (x - y) % m
            assert (a * b).get() == (x * y) % m
            if y:
                assert (a % b).get() == (x % y) % m


def test_neg():
    assert -ModInt(3, 7) == 4
    assert (-ModInt(0, 7)).get() == 0


def test_ops_with_plain_int():
    mint = ModInt(1, 10)
    mint += 1
    assert mint.get() == 2
    mint *= 2
    assert mint.get() == 4
    mint += 10001
    assert mint.get() == 5
    mint -= 13
    assert mint.get() == 2
    mint /= 3  # 3^-1 mod 10 == 7
    assert mint.get() == 4
    mint %= 3
    assert mint.get() == 1
    assert (ModInt(9, 10) % 4).get() == 1
    assert (ModInt(9, 10) % 4).get_mod() == 10


def test_reflected_ops():
    a = ModInt(4, 7)
    assert (3 + a).get() == 0
    assert (5 - a).get() == 1
    assert (2 * ModInt(2, 5)).get() == 4
    assert (1 / ModInt(2, 5)).get() == 3
    assert (10 % ModInt(4, 7)).get() == 3  # 10 -> 3, 3 % 4


def test_assignment_rebinds():
    a = ModInt(1, 10)
    b = a
    a += 1
    assert a.get() == 2
    assert b.get() == 1


def test_unsupported_operand():
    with pytest.raises(TypeError):
        ModInt(1, 7) + 1.5


# ---------- inverse --------------------------------------------------------


def test_inv():
    assert ModInt(6, 13).inv() == 11


@pytest.mark.parametrize("r, n, expected", [(2, 5, 3), (9, 17, 2), (5, 11, 9)])
def test_inv_known_values(r, n, expected):
    assert ModInt(r, n).inv() == expected
    assert ModInt(r, n).checked_inv() == expected


def test_inv_law():
    for m in (5, 13, 97, 1000003):
        for r in (1, 2, 3, m - 1):
            a = ModInt(r, m)
            assert (a * a.inv()).get() == 1 % m


def test_inv_unchecked_for_non_unit():
    x = ModInt(4, 10).inv()
    assert 0 <= x < 10
    assert (4 * x) % 10 != 1


def test_checked_inv_rejects_non_unit():
    with pytest.raises(ModularInverseError, match="no inverse"):
        ModInt(4, 10).checked_inv()
    with pytest.raises(ModularInverseError):
        ModInt(0, 13).checked_inv()


def test_inv_of_unset():
    with pytest.raises(UnsetModuloError):
        ModInt.one().inv()


# ---------- pow ------------------------------------------------------------


def test_pow():
    assert ModInt(3, 10).pow(3).get() == 7
    assert (ModInt(100, 9999) ** 2).get() == 1


def test_pow_zero():
    assert ModInt(5, 7).pow(0) == 1
    assert ModInt(0, 7).pow(0).get() == 1
    assert ModInt(0, 1).pow(0).get() == 0


def test_pow_law():
    for m in (2, 10, 13, 65537):
        for r in (0, 1, 2, 7, m - 1):
            a = ModInt(r, m)
            for e in range(20):
                assert a.pow(e).get() == pow(r, e, m)


def test_pow_large_exponent():
    # Fermat: a^(p-1) == 1 for prime p
    p = 998244353
    assert ModInt(12345, p).pow(p - 1).get() == 1


def test_pow_negative_exponent():
    with pytest.raises(ValueError):
        ModInt(3, 7).pow(-1)


def test_pow_of_unset():
    with pytest.raises(UnsetModuloError):
        ModInt.one().pow(2)


# ---------- modulus protocol -----------------------------------------------


def test_compatible_modulus():
    assert compatible_modulus(ModInt(1, 7), ModInt(2, 7)) == (7, True)
    assert compatible_modulus(ModInt(1, 7), ModInt(2, 5))[1] is False
    assert compatible_modulus(ModInt(1, 7), ModInt.zero()) == (7, True)
    assert compatible_modulus(ModInt.one(), ModInt(1, 7)) == (7, True)
    assert compatible_modulus(ModInt.zero(), ModInt.one())[1] is False


@pytest.mark.parametrize(
    "op",
    [
        lambda a, b: a + b,
        lambda a, b: a - b,
        lambda a, b: a * b,
        lambda a, b: a / b,
        lambda a, b: a % b,
        lambda a, b: a == b,
    ],
)
def test_cross_modulus_raises(op):
    with pytest.raises(ModuloMismatchError, match="modulo mismatch"):
        op(ModInt(3, 10), ModInt(3, 7))


def test_unset_with_unset_raises():
    with pytest.raises(ModuloMismatchError):
        ModInt.zero() + ModInt.one()
    with pytest.raises(ModuloMismatchError):
        ModInt.zero() == ModInt.zero()


def test_unset_left_with_plain_int_raises():
    with pytest.raises(UnsetModuloError):
        ModInt.zero() + 5


def test_get_mod_of_unset():
    with pytest.raises(UnsetModuloError):
        ModInt.zero().get_mod()


# ---------- comparison -----------------------------------------------------


def test_eq_with_int():
    a = ModInt(3, 11)
    assert a == 3
    assert 3 == a
    assert a == 14
    assert a != 4


def test_eq_with_foreign_type():
    assert ModInt(1, 2) != "1"
    assert ModInt(1, 2) != 1.0


def test_partial_cmp():
    a, b = ModInt(3, 7), ModInt(5, 7)
    assert a.partial_cmp(b) == -1
    assert b.partial_cmp(a) == 1
    assert a.partial_cmp(ModInt(10, 7)) == 0
    assert a.partial_cmp(ModInt(3, 5)) is None
    assert ModInt.zero().partial_cmp(ModInt.one()) is None
    assert ModInt.zero().partial_cmp(3) is None


def test_ordering_operators():
    a = ModInt(3, 7)
    assert a < ModInt(5, 7)
    assert a <= ModInt(3, 7)
    assert a > 2
    assert a >= 3
    assert ModInt.one() > ModInt(0, 7)


def test_ordering_across_moduli_raises():
    with pytest.raises(ModuloMismatchError, match="modulo mismatch"):
        ModInt(3, 7) < ModInt(3, 5)
    with pytest.raises(ModuloMismatchError, match="modulo mismatch"):
        ModInt(3, 7) >= ModInt(3, 5)


def test_ordering_against_foreign_type():
    with pytest.raises(TypeError):
        ModInt(3, 7) < "a"


def test_unhashable():
    with pytest.raises(TypeError):
        hash(ModInt(1, 2))


# ---------- identities and folds -------------------------------------------


def test_identity_seeds():
    zero, one = ModInt.zero(), ModInt.one()
    assert zero.is_unset and zero.modulo is UNSET
    assert zero.is_zero() and one.is_one()
    assert zero.modulo.get() is None


def test_identity_laws():
    a = ModInt(5, 9)
    assert a + ModInt.zero() == a
    assert ModInt.zero() + a == a
    assert a * ModInt.one() == a
    assert (ModInt.one() * a).get_mod() == 9


def test_is_zero_is_one_ignore_tag():
    assert ModInt(7, 7).is_zero()
    assert ModInt(8, 7).is_one()
    assert not ModInt(2, 7).is_one()


def test_folds():
    values = [ModInt(3, 7), ModInt(5, 7)]
    assert mint_sum(values).get() == 1
    assert mint_prod(values).get() == 1
    assert mint_sum(values).get_mod() == 7
    assert mint_sum([]).is_unset


# ---------- radix parsing --------------------------------------------------


def test_from_str_radix():
    x = ModInt.from_str_radix("ff", 16)
    assert x.get() == 255
    assert x.is_unset
    assert ModInt.from_str_radix("101", 2).get() == 5
    assert ModInt.from_str_radix("Z", 36).get() == 35


def test_from_str_radix_adopts_modulus():
    x = ModInt.from_str_radix("ff", 16)
    assert (ModInt(0, 100) + x).get() == 55
    assert (ModInt(99, 100) + x).get() == 54
    assert (x * ModInt(1, 7)).get() == 255 % 7


@pytest.mark.parametrize("digits, radix", [("12", 2), ("-1", 10), ("", 10), ("1_0", 10), ("1", 1), ("1", 37)])
def test_from_str_radix_invalid(digits, radix):
    with pytest.raises(ValueError):
        ModInt.from_str_radix(digits, radix)


def test_from_str_radix_overflow():
    with pytest.raises(OverflowError):
        ModInt.from_str_radix("9" * 20, 10)


def test_from_str_radix_overflow_long_input():
    with pytest.raises(OverflowError):
        ModInt.from_str_radix("1" * 100_000, 10)


# ---------- conversions ----------------------------------------------------


def test_no_implicit_int():
    with pytest.raises(TypeError):
        int(ModInt(3, 7))
    with pytest.raises(TypeError):
        [0, 1, 2][ModInt(1, 3)]


def test_explicit_accessors():
    a = ModInt(10, 7)
    assert a.to_usize() == 3
    assert a.residue == 3
    assert str(a) == "3"


def test_bool():
    assert not ModInt(7, 7)
    assert ModInt(1, 7)


def test_repr():
    assert repr(ModInt(3, 7)) == "ModInt(3, 7)"
    assert repr(ModInt.zero()) == "ModInt(0, UNSET)"
