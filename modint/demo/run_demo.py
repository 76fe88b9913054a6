#!/usr/bin/env python3
"""ModInt service walk-through.

Usage (with the service running, e.g. ``uvicorn modint.service.app:app``):
    python -m modint.demo.run_demo

The script:
1. Reduces a few values into Z/mZ.
2. Runs each arithmetic operator.
3. Computes an inverse and a power.
4. Evaluates a small DSL program.
5. Shows that mixing moduli and inverting a non-unit are rejected.
"""

from __future__ import annotations

import sys

import httpx

from modint.config import SERVICE_URL

SAMPLE_PROGRAM = """\
# f(x) = (x + 7)^2 / 3   over Z/13Z
input x
const c = 7
const three = 3
add t = x c
pow sq = t 2
div y = sq three
output y
"""


def banner(msg: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {msg}")
    print(f"{'='*60}")


def main() -> int:
    with httpx.Client(base_url=SERVICE_URL, timeout=10.0) as client:
        try:
            client.get("/health").raise_for_status()
        except httpx.HTTPError as exc:
            print(f"Service not reachable at {SERVICE_URL}: {exc}")
            return 1

        banner("1. Construction")
        for value, modulus in [(10, 3), (-10, 3), (13, 8)]:
            resp = client.post("/construct", json={"value": value, "modulus": modulus})
            print(f"   {value} mod {modulus} = {resp.json()['residue']}")

        banner("2. Arithmetic mod 13")
        for op in ("add", "sub", "mul", "div", "rem"):
            resp = client.post("/arith", json={
                "op": op,
                "a": {"value": 9, "modulus": 13},
                "b": {"value": 4, "modulus": 13},
            })
            print(f"   9 {op} 4 = {resp.json()['residue']}")

        banner("3. Inverse and power")
        resp = client.post("/inverse", json={"value": 6, "modulus": 13})
        print(f"   6^-1 mod 13 = {resp.json()['inverse']}")
        resp = client.post("/pow", json={"value": 3, "modulus": 10, "exponent": 3})
        print(f"   3^3 mod 10 = {resp.json()['residue']}")

        banner("4. Program evaluation")
        for x_val in (0, 1, 5):
            resp = client.post("/eval", json={
                "source": SAMPLE_PROGRAM,
                "inputs": {"x": x_val},
                "modulus": 13,
            })
            print(f"   f({x_val}) = {resp.json()['outputs']['y']}")

        banner("5. Rejected misuse")
        resp = client.post("/arith", json={
            "op": "add",
            "a": {"value": 1, "modulus": 10},
            "b": {"value": 1, "modulus": 7},
        })
        print(f"   mod 10 + mod 7 → HTTP {resp.status_code}: {resp.json()['detail']}")
        resp = client.post("/inverse", json={"value": 4, "modulus": 10})
        print(f"   4^-1 mod 10 → HTTP {resp.status_code}: {resp.json()['detail']}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
