# aad/core/node.py
from __future__ import annotations
import numpy as np
from typing import Any, Optional, Tuple

_REAL_TYPES = (int, float, np.integer, np.floating)


def _is_real(x: Any) -> bool:
    return isinstance(x, _REAL_TYPES) and not isinstance(x, (bool, np.bool_))


class Node:
    """
    One scalar vertex of the computation graph.

    Attributes
    ----------
    value : np.float64
        Forward (primal) value. Fixed once the node is built by an op; leaves
        are trainable parameters and may be overwritten between passes.
    gradient : float
        Reverse-mode accumulator d(output)/d(this). Zeroed at the start of
        every `backward` call that reaches this node.
    parents : Tuple[Node, ...]
        Direct inputs, in the operand order the backward rule expects.
        Children own their parents through this tuple.
    op_tag : str
        "leaf" for inputs/parameters, otherwise the op that built the node.
    backward_rule : Optional[BackwardRule]
        Local derivative rule; None for leaves.
    name : Optional[str]
        Optional debug/pretty-print name.
    """

    __slots__ = ("value", "gradient", "parents", "op_tag", "backward_rule", "name", "__weakref__")

    def __init__(self, value: Any, *, name: Optional[str] = None):
        # Only real scalars: this engine has no tensor support
        if not _is_real(value):
            raise TypeError(
                f"Node only accepts real scalars (int, float, numpy real), "
                f"but got {type(value)}"
            )
        self.value = np.float64(value)
        self.gradient = 0.0
        self.parents: Tuple[Node, ...] = ()
        self.op_tag = "leaf"
        self.backward_rule = None
        self.name = name

    def __repr__(self):
        return (f"Node(value={float(self.value):.4f}, gradient={float(self.gradient):.4f}, "
                f"op={self.op_tag!r}, name={self.name!r})")

    @property
    def is_leaf(self) -> bool:
        return not self.parents

    # Operator overloading: thin sugar over the named constructors in ..ops
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def square(self):
        from ..ops.arithmetic import square
        return square(self)

    def tanh(self):
        from ..ops.transcendental import tanh
        return tanh(self)

    def backward(self):
        from .engine import backward
        backward(self)


def make_leaf(x: Any, name: Optional[str] = None) -> Node:
    """Create a leaf node (no parents): an input or a trainable parameter."""
    return Node(x, name=name)


def as_node(x: Any) -> Node:
    """Ensure x is a Node; otherwise wrap the scalar as a fresh leaf."""
    return x if isinstance(x, Node) else make_leaf(x)
