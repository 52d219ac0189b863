import gc
import math
import weakref

import pytest

from scalar_backprop.aad import make_leaf, add, sub, mul, square, tanh, backward, topological_order
from scalar_backprop.aad.core.engine import BackwardRule


def _position_check(order):
    pos = {id(v): i for i, v in enumerate(order)}
    for v in order:
        for p in v.parents:
            assert pos[id(p)] < pos[id(v)]
    return pos


def test_chain_rule_example():
    x = make_leaf(2.0)
    y = make_leaf(3.0)
    z = x * y + tanh(x)

    backward(z)

    assert z.value == pytest.approx(6.0 + math.tanh(2.0))
    assert z.value == pytest.approx(6.9640, abs=1e-4)
    assert y.gradient == pytest.approx(2.0)
    assert x.gradient == pytest.approx(3.0 + (1.0 - math.tanh(2.0) ** 2))
    assert x.gradient == pytest.approx(3.0707, abs=1e-4)
    assert z.gradient == 1.0


@pytest.mark.parametrize("a", [-2.0, 0.0, 0.5, 3.0])
def test_square_accumulates_both_branches(a):
    x = make_leaf(a)
    s = square(x)
    backward(s)
    assert x.gradient == pytest.approx(2.0 * a)


def test_local_rules():
    a, b = make_leaf(4.0), make_leaf(-1.5)

    backward(add(a, b))
    assert (a.gradient, b.gradient) == (1.0, 1.0)

    backward(sub(a, b))
    assert (a.gradient, b.gradient) == (1.0, -1.0)

    backward(mul(a, b))
    assert a.gradient == pytest.approx(-1.5)
    assert b.gradient == pytest.approx(4.0)

    backward(tanh(a))
    assert a.gradient == pytest.approx(1.0 - math.tanh(4.0) ** 2)


def test_sub_same_node_cancels():
    a = make_leaf(3.0)
    backward(sub(a, a))
    assert a.gradient == 0.0


def test_shared_subexpression_accumulates():
    # f = u*u + u, u = x*y  ->  df/du = 2u + 1
    x, y = make_leaf(1.5), make_leaf(2.0)
    u = x * y
    f = u * u + u
    backward(f)
    du = 2.0 * u.value + 1.0
    assert u.gradient == pytest.approx(du)
    assert x.gradient == pytest.approx(du * 2.0)
    assert y.gradient == pytest.approx(du * 1.5)


def test_repeated_backward_is_identical():
    x, y = make_leaf(0.3), make_leaf(-1.2)
    z = tanh(x * y + x) * y - square(x)

    backward(z)
    first = [v.gradient for v in topological_order(z)]
    backward(z)
    second = [v.gradient for v in topological_order(z)]

    assert first == second


def test_backward_resets_gradients_from_other_outputs():
    x = make_leaf(2.0)
    backward(mul(x, 5.0))
    assert x.gradient == 5.0

    backward(add(x, 1.0))
    assert x.gradient == 1.0


def test_backward_after_leaf_mutation_uses_new_value():
    w = make_leaf(1.0)
    s = square(w)
    backward(s)
    assert w.gradient == 2.0

    w.value = 3.0
    s = square(w)
    backward(s)
    assert s.value == 9.0
    assert w.gradient == 6.0


def test_isolated_leaf_gets_unit_gradient():
    x = make_leaf(7.0)
    x.gradient = 42.0
    backward(x)
    assert x.gradient == 1.0
    assert topological_order(x) == [x]


def test_node_backward_method():
    x, y = make_leaf(2.0), make_leaf(3.0)
    z = x * y
    z.backward()
    assert x.gradient == 3.0
    assert y.gradient == 2.0


def test_reads_have_no_side_effects():
    x = make_leaf(2.0)
    z = tanh(x) * x
    backward(z)
    reads = [(z.value, x.gradient) for _ in range(3)]
    assert reads[0] == reads[1] == reads[2]


def test_topological_order_diamond():
    a = make_leaf(1.0)
    b = tanh(a)
    c = mul(a, 2.0)
    d = add(b, c)
    e = mul(d, a)

    order = topological_order(e)
    _position_check(order)

    # each reachable node once, identity keyed
    assert len(order) == len({id(v) for v in order}) == 6
    assert order[-1] is e
    assert order[0] is a


def test_topological_order_distinguishes_equal_values():
    a, b = make_leaf(1.0), make_leaf(1.0)
    out = add(a, b)
    order = topological_order(out)
    assert len(order) == 3
    assert order == [a, b, out]


def test_topological_order_excludes_unreachable_nodes():
    a, b = make_leaf(1.0), make_leaf(2.0)
    unrelated = mul(b, b)
    out = tanh(a)
    order = topological_order(out)
    assert order == [a, out]
    assert unrelated not in order


def test_topological_order_on_loss_graph():
    w, b = make_leaf(0.5), make_leaf(-0.5)
    loss = None
    for x_i, y_i in [(-1.0, -1.0), (0.0, 1.0), (1.0, 3.0)]:
        sq = square(w * x_i + b - y_i)
        loss = sq if loss is None else loss + sq
    order = topological_order(loss)
    _position_check(order)
    assert order[-1] is loss
    assert sum(1 for v in order if v is w) == 1


def test_long_chain_does_not_recurse():
    x = make_leaf(1.0)
    s = x
    for _ in range(5000):
        s = s + 1.0
    backward(s)
    assert s.value == 5001.0
    assert x.gradient == 1.0


def test_backward_rule_does_not_keep_output_alive():
    a, b = make_leaf(1.0), make_leaf(2.0)
    out = add(a, b)
    ref = weakref.ref(out)
    del out
    assert ref() is None
    # parents survive while the caller holds them
    assert a.value == 1.0 and b.value == 2.0


def test_children_keep_parents_alive():
    out = mul(make_leaf(2.0), make_leaf(4.0))
    gc.collect()
    backward(out)
    p0, p1 = out.parents
    assert p0.gradient == 4.0
    assert p1.gradient == 2.0


def test_stale_reference_rule_is_noop():
    a, b = make_leaf(1.0), make_leaf(2.0)
    out = make_leaf(0.0)
    out.gradient = 1.0
    rule = BackwardRule("add", out, (a, b))

    del b
    gc.collect()

    rule()
    assert a.gradient == 0.0


def test_backward_rule_validation():
    a = make_leaf(1.0)
    with pytest.raises(ValueError):
        BackwardRule("div", a, (a, a))
    with pytest.raises(ValueError):
        BackwardRule("tanh", a, (a, a))
