# aad/core/engine.py
from __future__ import annotations
import logging
import weakref
import numpy as np
from typing import Callable, Dict, List, Sequence

from .node import Node

logger = logging.getLogger(__name__)


# ---------------- Local derivative rules, one per op tag ---------------- #
# Each rule receives the live output node and its live parents and
# accumulates  p.gradient += (∂out/∂p) * out.gradient  for every parent p.

def _add_rule(out: Node, parents: Sequence[Node]):
    a, b = parents
    # ∂out/∂a = 1, ∂out/∂b = 1
    a.gradient += 1.0 * out.gradient
    b.gradient += 1.0 * out.gradient


def _sub_rule(out: Node, parents: Sequence[Node]):
    a, b = parents
    # ∂out/∂a = 1, ∂out/∂b = -1
    a.gradient += 1.0 * out.gradient
    b.gradient -= 1.0 * out.gradient


def _mul_rule(out: Node, parents: Sequence[Node]):
    a, b = parents
    # Product rule. When a is b (square) both lines hit the same node and sum.
    a.gradient += float(b.value) * out.gradient
    b.gradient += float(a.value) * out.gradient


def _tanh_rule(out: Node, parents: Sequence[Node]):
    (a,) = parents
    # d/dx tanh(x) = 1 - tanh(x)^2, evaluated at the parent's current value
    t = np.tanh(a.value)
    a.gradient += float(1.0 - t * t) * out.gradient


_LOCAL_RULES: Dict[str, Callable[[Node, Sequence[Node]], None]] = {
    "add": _add_rule,
    "sub": _sub_rule,
    "mul": _mul_rule,
    "tanh": _tanh_rule,
}

_ARITY = {"add": 2, "sub": 2, "mul": 2, "tanh": 1}


class BackwardRule:
    """
    Local backward rule stored on a non-leaf node.

    The rule lives inside `out`, so it only keeps weak references to `out`
    and to its parents; the strong edges are `out.parents`. If any referent
    has been collected by the time the rule fires, the call is a no-op.
    """

    __slots__ = ("op_tag", "_out_ref", "_parent_refs")

    def __init__(self, op_tag: str, out: Node, parents: Sequence[Node]):
        if op_tag not in _LOCAL_RULES:
            raise ValueError(f"Unknown op tag for backward rule: {op_tag!r}")
        if len(parents) != _ARITY[op_tag]:
            raise ValueError(
                f"Op {op_tag!r} expects {_ARITY[op_tag]} parent(s), got {len(parents)}"
            )
        self.op_tag = op_tag
        self._out_ref = weakref.ref(out)
        self._parent_refs = tuple(weakref.ref(p) for p in parents)

    def __repr__(self):
        return f"BackwardRule({self.op_tag!r}, arity={len(self._parent_refs)})"

    def __call__(self):
        out = self._out_ref()
        parents = [ref() for ref in self._parent_refs]
        if out is None or any(p is None for p in parents):
            logger.debug("Skipping %s backward rule: captured node no longer alive", self.op_tag)
            return
        _LOCAL_RULES[self.op_tag](out, parents)


def attach(op_tag: str, out: Node, parents: Sequence[Node]) -> Node:
    """Record `parents` on `out` and install the rule for `op_tag`."""
    out.parents = tuple(parents)
    out.op_tag = op_tag
    out.backward_rule = BackwardRule(op_tag, out, out.parents)
    return out


# ---------------- Graph traversal ---------------- #

def topological_order(output: Node) -> List[Node]:
    """
    Every node reachable from `output` through `parents`, each exactly once,
    with every parent placed before all of its children.

    Depth-first, post-order emission; the visited set is keyed on identity
    (two nodes holding equal values are distinct graph positions). An
    explicit stack replaces recursion so long chains (e.g. a loss summed over
    many samples) do not hit the interpreter recursion limit. The parent
    relation is assumed acyclic.
    """
    order: List[Node] = []
    visited = {id(output)}
    stack = [(output, iter(output.parents))]
    while stack:
        node, pending = stack[-1]
        for p in pending:
            if id(p) not in visited:
                visited.add(id(p))
                stack.append((p, iter(p.parents)))
                break
        else:
            # all parents emitted
            stack.pop()
            order.append(node)
    return order


def zero_gradients(nodes: Sequence[Node]):
    """Reset `gradient` to zero on every node in `nodes`."""
    for v in nodes:
        v.gradient = 0.0


def backward(output: Node):
    """
    Reverse-mode pass: store d(output)/d(v) in `v.gradient` for every node v
    reachable from `output`.

    Steps:
        1. topological order rooted at `output`
        2. zero every gradient in that order (no residue from earlier calls)
        3. seed output.gradient = 1
        4. walk the order in reverse and fire each node's backward rule

    Children come later in the forward order, so in the reversed walk every
    contribution to a node has arrived before that node's own rule reads its
    gradient.
    """
    order = topological_order(output)
    zero_gradients(order)
    output.gradient = 1.0

    for v in reversed(order):
        if v.backward_rule is not None:
            v.backward_rule()
