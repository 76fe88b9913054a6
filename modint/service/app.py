"""ModInt FastAPI application.

Exposes the modular arithmetic over HTTP.  Every request carries plain
integers and a modulus; every response carries the canonical residue.

Endpoints:
- GET  /health     – liveness + configured default modulus
- POST /construct  – reduce a value into [0, m)
- POST /arith      – add / sub / mul / div / rem of two values
- POST /inverse    – checked multiplicative inverse
- POST /pow        – binary exponentiation
- POST /falling    – falling factorial product
- POST /rising     – rising factorial product
- POST /parse      – radix parsing (optionally lifted into a modulus)
- POST /eval       – compile + evaluate a DSL program

Misuse of the arithmetic is reported, never recovered from: modulus
mismatches map to 409, impossible inverses / zero remainders to 422,
invalid construction arguments to 422 and DSL errors to 400.
"""

from __future__ import annotations

import logging
from typing import Dict, Literal, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from modint.arith.modint import ModInt, ModularInverseError, ModuloMismatchError
from modint.compiler.dsl_parser import DSLCompileError, compile_source
from modint.config import DEFAULT_MODULUS, LOG_LEVEL, MAX_TAKE
from modint.engine.evaluator import evaluate_ir

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class Operand(BaseModel):
    value: int
    modulus: int


class ArithRequest(BaseModel):
    op: Literal["add", "sub", "mul", "div", "rem"]
    a: Operand
    b: Operand


class PowRequest(Operand):
    exponent: int


class TakeRequest(Operand):
    take: int = Field(ge=0, le=MAX_TAKE)


class ParseRequest(BaseModel):
    digits: str
    radix: int = 10
    # None keeps the parsed value UNSET
    modulus: Optional[int] = None


class EvalRequest(BaseModel):
    source: str
    inputs: Dict[str, int] = {}
    modulus: Optional[int] = None


class ResidueResponse(BaseModel):
    residue: int
    modulus: Optional[int]


class InverseResponse(BaseModel):
    inverse: int
    modulus: int


class EvalResponse(BaseModel):
    outputs: Dict[str, int]
    modulus: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_OPS = {
    "add": lambda a, b: a + b,
    "sub": lambda a, b: a - b,
    "mul": lambda a, b: a * b,
    "div": lambda a, b: a / b,
    "rem": lambda a, b: a % b,
}


def _residue(x: ModInt) -> ResidueResponse:
    return ResidueResponse(residue=x.get(), modulus=x.modulo.get())


def _mint(operand: Operand) -> ModInt:
    try:
        return ModInt(operand.value, operand.modulus)
    except (ValueError, OverflowError, TypeError) as exc:
        raise HTTPException(422, str(exc))


def _run(fn):
    """Call *fn*, translating arithmetic misuse into HTTP errors."""
    try:
        return fn()
    except ModuloMismatchError as exc:
        logger.warning("rejected: %s", exc)
        raise HTTPException(409, str(exc))
    except (ModularInverseError, ZeroDivisionError) as exc:
        raise HTTPException(422, str(exc))
    except (ValueError, OverflowError, TypeError) as exc:
        raise HTTPException(422, str(exc))


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(default_modulus: int = DEFAULT_MODULUS) -> FastAPI:
    """Factory that creates a ModInt service app.

    *default_modulus* is used by ``/eval`` when the request omits one.
    """
    logging.getLogger("modint").setLevel(LOG_LEVEL)

    app = FastAPI(title="ModInt Service")

    @app.get("/health")
    async def health():
        return {"status": "ok", "default_modulus": default_modulus}

    @app.post("/construct", response_model=ResidueResponse)
    async def construct(req: Operand):
        return _residue(_mint(req))

    @app.post("/arith", response_model=ResidueResponse)
    async def arith(req: ArithRequest):
        a, b = _mint(req.a), _mint(req.b)
        return _residue(_run(lambda: _OPS[req.op](a, b)))

    @app.post("/inverse", response_model=InverseResponse)
    async def inverse(req: Operand):
        x = _mint(req)
        return InverseResponse(inverse=_run(x.checked_inv), modulus=x.get_mod())

    @app.post("/pow", response_model=ResidueResponse)
    async def power(req: PowRequest):
        x = _mint(req)
        return _residue(_run(lambda: x.pow(req.exponent)))

    @app.post("/falling", response_model=ResidueResponse)
    async def falling(req: TakeRequest):
        x = _mint(req)
        return _residue(_run(lambda: x.falling(req.take)))

    @app.post("/rising", response_model=ResidueResponse)
    async def rising(req: TakeRequest):
        x = _mint(req)
        return _residue(_run(lambda: x.rising(req.take)))

    @app.post("/parse", response_model=ResidueResponse)
    async def parse(req: ParseRequest):
        def _parse() -> ModInt:
            x = ModInt.from_str_radix(req.digits, req.radix)
            if req.modulus is None:
                return x
            # Folding into a fixed zero makes the UNSET value adopt m.
            return ModInt(0, req.modulus) + x

        return _residue(_run(_parse))

    @app.post("/eval", response_model=EvalResponse)
    async def evaluate(req: EvalRequest):
        modulus = req.modulus if req.modulus is not None else default_modulus
        try:
            ir = compile_source(req.source)
        except DSLCompileError as exc:
            raise HTTPException(400, str(exc))
        outputs = _run(lambda: evaluate_ir(ir, req.inputs, modulus))
        logger.info("eval: %d nodes, modulus %d", len(ir.nodes), modulus)
        return EvalResponse(
            outputs={name: v.get() for name, v in outputs.items()},
            modulus=modulus,
        )

    return app


app = create_app()
