"""Program evaluator.

Walks the IR node-by-node, holding one ``ModInt`` per wire.  Inputs and
constants are lifted into ``Z/mZ`` for the evaluation modulus ``m``;
every other node is a single ``ModInt`` operation, so the modulus
protocol of ``ModInt`` applies unchanged (all wires share ``m``).

``evaluate_ir`` accepts either an ``IR`` or its ``to_dict()`` form and
returns every output as ``{name: ModInt}``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Union

from modint.arith.modint import ModInt, mint_prod, mint_sum
from modint.compiler.ir import IR

logger = logging.getLogger(__name__)


def evaluate_ir(
    ir: Union[IR, Dict[str, Any]],
    inputs: Mapping[str, int],
    modulus: int,
) -> Dict[str, ModInt]:
    """Evaluate *ir* on plain integer *inputs* modulo *modulus*.

    Raises ``ValueError`` for a missing input or unknown node type;
    arithmetic errors from ``ModInt`` propagate unchanged.
    """
    if isinstance(ir, IR):
        ir = ir.to_dict()

    wires: Dict[str, ModInt] = {}

    for node in ir["nodes"]:
        nid = node["id"]
        ntype = node["type"]
        args = [wires[i] for i in node.get("inputs", [])]

        if ntype == "input":
            if nid not in inputs:
                raise ValueError(f"Missing input '{nid}'")
            wires[nid] = ModInt(inputs[nid], modulus)

        elif ntype == "const":
            wires[nid] = ModInt(node["value"], modulus)

        elif ntype == "add":
            wires[nid] = args[0] + args[1]
        elif ntype == "sub":
            wires[nid] = args[0] - args[1]
        elif ntype == "mul":
            wires[nid] = args[0] * args[1]
        elif ntype == "div":
            wires[nid] = args[0] / args[1]
        elif ntype == "rem":
            wires[nid] = args[0] % args[1]

        elif ntype == "neg":
            wires[nid] = -args[0]
        elif ntype == "inv":
            wires[nid] = ModInt(args[0].checked_inv(), modulus)

        elif ntype == "pow":
            wires[nid] = args[0] ** node["value"]
        elif ntype == "falling":
            wires[nid] = args[0].falling(node["value"])
        elif ntype == "rising":
            wires[nid] = args[0].rising(node["value"])

        elif ntype == "sum":
            wires[nid] = mint_sum(args)
        elif ntype == "prod":
            wires[nid] = mint_prod(args)

        else:
            raise ValueError(f"Unknown node type '{ntype}'")

    results: Dict[str, ModInt] = {}
    for oid in ir.get("output_node_ids", []):
        if oid not in wires:
            raise ValueError(f"Output node '{oid}' was not computed")
        results[oid] = wires[oid]

    logger.debug("evaluated %d nodes mod %d -> %s", len(wires), modulus, list(results))
    return results
