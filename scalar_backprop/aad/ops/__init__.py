# aad/ops/__init__.py

# Convenience re-exports so users can do: from scalar_backprop.aad.ops import mul, tanh, ...
from .arithmetic import add, sub, mul, square
from .transcendental import tanh

__all__ = [
    "add", "sub", "mul", "square",
    "tanh",
]
