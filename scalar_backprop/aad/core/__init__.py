# aad/core/__init__.py

"""
Core public API for the AAD package.

Exports:
    Node              : Scalar vertex of the computation graph.
    make_leaf         : Build an input/parameter node.
    topological_order : Parents-before-children ordering of a reachable graph.
    backward          : Run one reverse pass and fill `.gradient` everywhere.
    grad, grads       : Convenience: gradients of a Python function.
    value             : Convenience: extract the primal value from a Node.
"""

from .node import Node, make_leaf
from .engine import BackwardRule, topological_order, backward, zero_gradients
from .seeds import grad, grads, grads_list, value

__all__ = [
    "Node", "make_leaf",
    "BackwardRule", "topological_order", "backward", "zero_gradients",
    "grad", "grads", "grads_list", "value",
]
