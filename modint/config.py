"""Global configuration for modint."""

import os

# ---------- Integer ranges accepted by ModInt construction ----------
# Values are bounded to a signed 64-bit range before reduction and
# moduli to an unsigned 32-bit range, so any product of two residues
# stays below 2**64.
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1
U32_MAX = 2**32 - 1

# ---------- Radix parsing ----------
MIN_RADIX = 2
MAX_RADIX = 36

# ---------- Default modulus (used when /eval omits one) ----------
# 998244353 = 119 * 2**23 + 1, the usual NTT-friendly prime.
DEFAULT_MODULUS = int(os.environ.get("MODINT_DEFAULT_MODULUS", "998244353"))

# ---------- Service ----------
SERVICE_URL = os.environ.get("MODINT_SERVICE_URL", "http://localhost:8000")
LOG_LEVEL = os.environ.get("MODINT_LOG_LEVEL", "INFO")

# ---------- Factorial products ----------
# Upper bound on the number of terms a falling/rising product may take
# when requested over HTTP or in a program.
MAX_TAKE = int(os.environ.get("MODINT_MAX_TAKE", "1000000"))
