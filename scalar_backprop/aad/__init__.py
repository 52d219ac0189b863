# aad/__init__.py
# Reverse-mode automatic differentiation over scalar values

from .core.node import Node, make_leaf
from .core.engine import topological_order, backward, zero_gradients
from .core.seeds import grad, grads, grads_list, value
from .ops import add, sub, mul, square, tanh

__all__ = [
    # Core
    'Node',
    'make_leaf',
    # Engine
    'topological_order',
    'backward',
    'zero_gradients',
    # Helpers
    'grad',
    'grads',
    'grads_list',
    'value',
    # Ops
    'add',
    'sub',
    'mul',
    'square',
    'tanh',
]
