from scalar_backprop.aad import make_leaf, tanh, square, backward
from scalar_backprop.aad.core.graph_utils import (
    get_graph_stats,
    print_graph_summary,
    print_computation_graph,
    analyze_graph_complexity,
)


def _example_graph():
    x = make_leaf(2.0, name="x")
    y = make_leaf(3.0, name="y")
    return x * y + tanh(x)


def test_stats_for_example_graph():
    z = _example_graph()
    stats = get_graph_stats(z)
    assert stats["nodes"] == 5
    assert stats["edges"] == 5
    assert stats["leaves"] == 2
    assert stats["max_fan_in"] == 2
    # x feeds both mul and tanh
    assert stats["max_fan_out"] == 2
    assert stats["operations"] == {"leaf": 2, "mul": 1, "tanh": 1, "add": 1}


def test_square_counts_two_edges_to_one_parent():
    a = make_leaf(1.0)
    stats = get_graph_stats(square(a))
    assert stats["nodes"] == 2
    assert stats["edges"] == 2
    assert stats["max_fan_out"] == 2


def test_single_leaf_stats():
    stats = get_graph_stats(make_leaf(1.0))
    assert stats["nodes"] == 1
    assert stats["edges"] == 0
    assert stats["avg_fan_in"] == 0.0


def test_print_summary(capsys):
    z = _example_graph()
    stats = print_graph_summary(z, detailed=True)
    out = capsys.readouterr().out
    assert "COMPUTATION GRAPH SUMMARY" in out
    assert "DETAILED NODE LIST" in out
    assert stats["nodes"] == 5


def test_print_computation_graph_truncates(capsys):
    z = _example_graph()
    backward(z)
    print_computation_graph(z, max_nodes=3)
    out = capsys.readouterr().out
    assert "[leaf/input] x" in out
    assert "(2 more nodes)" in out


def test_complexity_report():
    report = analyze_graph_complexity(_example_graph())
    assert "Total nodes: 5" in report
    assert "Complexity level: Low" in report
