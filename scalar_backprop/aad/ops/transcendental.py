# aad/ops/transcendental.py
import numpy as np
from ..core.node import Node, as_node
from ..core.engine import attach


def tanh(x):
    x = as_node(x)
    out = Node(np.tanh(x.value))
    return attach("tanh", out, (x,))
