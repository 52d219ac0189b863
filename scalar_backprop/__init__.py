"""
scalar_backprop: a small reverse-mode autodiff engine over scalar values,
with a gradient-descent line fitter built on top of it.
"""

from .aad import (
    Node, make_leaf,
    topological_order, backward, zero_gradients,
    grad, grads, grads_list, value,
    add, sub, mul, square, tanh,
)
from .fit import FitConfig, FitResult, LineFitter, fit_line, squared_error_loss

__version__ = "0.1.0"

__all__ = [
    'Node', 'make_leaf',
    'topological_order', 'backward', 'zero_gradients',
    'grad', 'grads', 'grads_list', 'value',
    'add', 'sub', 'mul', 'square', 'tanh',
    'FitConfig', 'FitResult', 'LineFitter', 'fit_line', 'squared_error_loss',
]
