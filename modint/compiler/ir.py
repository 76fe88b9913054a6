"""Intermediate representation for modular straight-line programs.

Every program compiles to a list of ``Node`` objects plus designated
output node(s).  Node types:

  input    – external input wire
  const    – integer literal, reduced under the evaluation modulus
  add      – a + b
  sub      – a - b
  mul      – a * b
  div      – a * b^-1
  rem      – residue of a modulo residue of b
  neg      – additive inverse
  inv      – multiplicative inverse (checked)
  pow      – a ** value
  falling  – falling factorial product of a with ``value`` terms
  rising   – rising factorial product of a with ``value`` terms
  sum      – fold of all inputs seeded with ModInt.zero()
  prod     – fold of all inputs seeded with ModInt.one()
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

BINARY_OPS = ("add", "sub", "mul", "div", "rem")
UNARY_OPS = ("neg", "inv")
PARAM_OPS = ("pow", "falling", "rising")
FOLD_OPS = ("sum", "prod")


class Node(BaseModel):
    """A single node in the program."""

    id: str
    type: str
    inputs: List[str] = []  # ids of input nodes
    value: Optional[int] = None  # const literal, exponent or take

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class IR(BaseModel):
    """Complete intermediate representation."""

    nodes: List[Node]
    output_node_ids: List[str] = []

    @property
    def input_names(self) -> List[str]:
        return [n.id for n in self.nodes if n.type == "input"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "output_node_ids": list(self.output_node_ids),
        }
