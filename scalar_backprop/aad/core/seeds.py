# aad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at the scalar output and let gradients grow
# backwards through the graph.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List

from .node import Node
from .engine import backward


def value(x: Any) -> Any:
    """Return the numeric value of a Node; pass through plain numbers unchanged."""
    return x.value if isinstance(x, Node) else x


def _ensure_node(v: Any, *, name: str) -> Node:
    """Wrap a plain value as a named leaf if needed; otherwise return the Node itself."""
    return v if isinstance(v, Node) else Node(v, name=name)


def _as_output(y: Any) -> Node:
    # f returned a constant: differentiate a detached leaf, all input gradients are 0
    return y if isinstance(y, Node) else Node(y, name="y")


def _run(y: Any, inputs: Iterable[Node]):
    # Zero the inputs first: an output that does not reach them would
    # otherwise leave gradients from an earlier pass in place.
    for x in inputs:
        x.gradient = 0.0
    backward(_as_output(y))


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Node], Node], x0: float) -> float:
    """Derivative of a scalar function y=f(x) at x0, from one reverse pass."""
    x = _ensure_node(x0, name="x")
    _run(f(x), [x])
    return x.gradient


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Node]], Node],
          inputs: Dict[str, float]) -> Dict[str, float]:
    """
    Gradient of y=f(vars) w.r.t. ALL inputs (dict form), from ONE reverse pass.

    Parameters
    ----------
    f       : function taking a dict {name: Node} and returning a Node
    inputs  : dict {name: number or Node}

    Returns
    -------
    dict {name: float}  # gradients in the same key order as `inputs`
    """
    nodes: Dict[str, Node] = {k: _ensure_node(v, name=k) for k, v in inputs.items()}
    _run(f(nodes), nodes.values())
    return {k: nodes[k].gradient for k in inputs.keys()}


def grads_list(f: Callable[[List[Node]], Node],
               x0_list: Iterable[float]) -> List[float]:
    """
    Same as grads(), but the inputs are provided as a list and the result is a list
    of partials in the same order.

    Example
    -------
    f = lambda xs: xs[0]*xs[0] + 3*xs[1]
    grads_list(f, [2.0, 4.0]) -> [4.0, 3.0]
    """
    xs: List[Node] = [_ensure_node(v, name=f"x{i}") for i, v in enumerate(x0_list)]
    _run(f(xs), xs)
    return [x.gradient for x in xs]
