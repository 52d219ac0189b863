# aad/ops/arithmetic.py
from ..core.node import Node, as_node
from ..core.engine import attach


def _binary(x, y, f, tag):
    """
    Generic binary primitive:
      - wraps plain scalars as leaves
      - computes out.value = f(x.value, y.value) eagerly
      - records (x, y) as parents and installs the local rule for `tag`
    """
    x = as_node(x)
    y = as_node(y)
    out = Node(f(x.value, y.value))
    return attach(tag, out, (x, y))


def add(x, y): return _binary(x, y, lambda a, b: a + b, "add")
def sub(x, y): return _binary(x, y, lambda a, b: a - b, "sub")
def mul(x, y): return _binary(x, y, lambda a, b: a * b, "mul")


def square(x):
    """
    x * x built from `mul`, so the single parent appears twice and its
    gradient receives both contributions: 2 * x.value * out.gradient.
    """
    x = as_node(x)
    return mul(x, x)
