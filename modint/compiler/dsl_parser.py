"""DSL parser – compiles the modular program language to IR.

Grammar (one statement per line, blank lines / ``#`` comments ignored):

    input    <name>
    const    <name> = <int_literal>
    add      <name> = <a> <b>          (also sub, mul, div, rem)
    neg      <name> = <a>              (also inv)
    pow      <name> = <a> <exponent>   (non-negative literal)
    falling  <name> = <a> <take>       (also rising)
    sum      <name> = <a1> [<a2> ...]  (also prod)
    output   <name> [<name2> ...]

Stdlib macro (expanded inline during compilation):

    polyeval <name> = <x> <c0> [<c1> ... <cN>]

The parser enforces:
- No duplicate identifiers
- All referenced identifiers must be defined before use
- At least one ``output`` statement, no output listed twice
- Non-negative exponent / take literals, take at most ``MAX_TAKE``
"""

from __future__ import annotations

from typing import Dict, List

from modint.config import MAX_TAKE
from modint.compiler.ir import BINARY_OPS, FOLD_OPS, IR, PARAM_OPS, UNARY_OPS, Node


class DSLCompileError(Exception):
    """Raised when the DSL source is invalid."""


def compile_source(source: str) -> IR:
    """Parse DSL *source* text and return an ``IR``."""
    nodes: List[Node] = []
    defined: Dict[str, Node] = {}
    output_names: List[str] = []
    synth_counter = 0

    def _synth_name(prefix: str) -> str:
        nonlocal synth_counter
        synth_counter += 1
        return f"__{prefix}_{synth_counter}"

    def _add_node(node: Node) -> None:
        nodes.append(node)
        defined[node.id] = node

    for lineno, raw_line in enumerate(source.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        tokens = line.split()
        keyword = tokens[0].lower()

        try:
            if keyword == "output":
                if len(tokens) < 2:
                    raise IndexError
                for oname in tokens[1:]:
                    _check_ref(oname, defined, lineno)
                    if oname in output_names:
                        raise DSLCompileError(f"Line {lineno}: duplicate output '{oname}'")
                    output_names.append(oname)
                continue

            name = tokens[1]
            _check_dup(name, defined, lineno)

            if keyword == "input":
                _add_node(Node(id=name, type="input"))
                continue

            _check_assign(tokens, lineno)
            args = tokens[3:]

            if keyword == "const":
                _add_node(Node(id=name, type="const", value=_literal(args[0], lineno)))

            elif keyword in BINARY_OPS:
                a, b = _refs(args, 2, defined, lineno, keyword)
                _add_node(Node(id=name, type=keyword, inputs=[a, b]))

            elif keyword in UNARY_OPS:
                (a,) = _refs(args, 1, defined, lineno, keyword)
                _add_node(Node(id=name, type=keyword, inputs=[a]))

            elif keyword in PARAM_OPS:
                if len(args) != 2:
                    raise DSLCompileError(
                        f"Line {lineno}: {keyword} takes an operand and a literal"
                    )
                _check_ref(args[0], defined, lineno)
                param = _literal(args[1], lineno)
                if param < 0:
                    raise DSLCompileError(
                        f"Line {lineno}: {keyword} literal must be non-negative"
                    )
                if keyword != "pow" and param > MAX_TAKE:
                    raise DSLCompileError(
                        f"Line {lineno}: {keyword} take exceeds {MAX_TAKE}"
                    )
                _add_node(Node(id=name, type=keyword, inputs=[args[0]], value=param))

            elif keyword in FOLD_OPS:
                if not args:
                    raise DSLCompileError(f"Line {lineno}: {keyword} needs at least one operand")
                for arg in args:
                    _check_ref(arg, defined, lineno)
                _add_node(Node(id=name, type=keyword, inputs=list(args)))

            elif keyword == "polyeval":
                # c0 + c1*x + ... + cN*x^N via Horner:
                # (...(cN * x + c_{N-1}) * x + ...) * x + c0
                if len(args) < 2:
                    raise DSLCompileError(
                        f"Line {lineno}: polyeval requires at least x and one coefficient"
                    )
                for arg in args:
                    _check_ref(arg, defined, lineno)
                x_var, coeffs = args[0], args[1:]

                if len(coeffs) == 1:
                    _add_node(Node(id=name, type="sum", inputs=[coeffs[0]]))
                else:
                    acc = coeffs[-1]
                    for i in range(len(coeffs) - 2, -1, -1):
                        mul_name = _synth_name(f"poly_{name}_m")
                        _add_node(Node(id=mul_name, type="mul", inputs=[acc, x_var]))
                        add_name = name if i == 0 else _synth_name(f"poly_{name}_a")
                        _add_node(Node(id=add_name, type="add", inputs=[mul_name, coeffs[i]]))
                        acc = add_name

            else:
                raise DSLCompileError(f"Line {lineno}: unknown keyword '{keyword}'")

        except IndexError:
            raise DSLCompileError(f"Line {lineno}: incomplete statement") from None

    if not output_names:
        raise DSLCompileError("No output statement found")

    return IR(nodes=nodes, output_node_ids=output_names)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _check_dup(name: str, defined: dict, lineno: int) -> None:
    if name in defined:
        raise DSLCompileError(f"Line {lineno}: duplicate identifier '{name}'")


def _check_ref(name: str, defined: dict, lineno: int) -> None:
    if name not in defined:
        raise DSLCompileError(f"Line {lineno}: undefined identifier '{name}'")


def _check_assign(tokens: List[str], lineno: int) -> None:
    if len(tokens) < 4 or tokens[2] != "=":
        raise DSLCompileError(f"Line {lineno}: expected '<keyword> <name> = ...'")


def _refs(args: List[str], count: int, defined: dict, lineno: int, keyword: str) -> List[str]:
    if len(args) != count:
        raise DSLCompileError(f"Line {lineno}: {keyword} takes {count} operand(s)")
    for arg in args:
        _check_ref(arg, defined, lineno)
    return args


def _literal(token: str, lineno: int) -> int:
    try:
        return int(token)
    except ValueError:
        raise DSLCompileError(f"Line {lineno}: invalid integer literal '{token}'") from None
