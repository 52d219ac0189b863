"""
Computation graph utilities.
Print and analyse the structure of the graph reachable from an output node.
"""

import numpy as np
from typing import Dict, List
from collections import Counter

from .engine import topological_order
from .node import Node


def _fan_counts(order: List[Node]):
    index = {id(v): i for i, v in enumerate(order)}
    fan_ins = [len(v.parents) for v in order]
    fan_outs = [0] * len(order)
    for v in order:
        for p in v.parents:
            fan_outs[index[id(p)]] += 1
    return index, fan_ins, fan_outs


def get_graph_stats(output: Node) -> Dict:
    """
    Collect graph statistics without printing.

    Returns:
        dict with node/edge/leaf counts, fan-in and fan-out figures and a
        per-op-tag count under 'operations'
    """
    order = topological_order(output)
    _, fan_ins, fan_outs = _fan_counts(order)

    # a shared parent counts once per use (square has two edges to one node)
    return {
        'nodes': len(order),
        'edges': sum(fan_ins),
        'leaves': sum(1 for v in order if v.is_leaf),
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_outs),
        'avg_fan_out': float(np.mean(fan_outs)),
        'operations': dict(Counter(v.op_tag for v in order)),
    }


def print_graph_summary(output: Node, detailed: bool = False) -> Dict:
    """
    Print a summary of the graph.

    Args:
        output: graph output node
        detailed: also list every node (only for graphs of at most 100 nodes)

    Returns:
        the statistics dict from get_graph_stats
    """
    stats = get_graph_stats(output)

    print("\n" + "="*70)
    print("COMPUTATION GRAPH SUMMARY")
    print("="*70)
    print(f"Total nodes:        {stats['nodes']:,}")
    print(f"Total edges:        {stats['edges']:,}")
    print(f"Leaves:             {stats['leaves']:,}")
    print(f"Max fan-in:         {stats['max_fan_in']}")
    print(f"Avg fan-in:         {stats['avg_fan_in']:.2f}")
    print(f"Max fan-out:        {stats['max_fan_out']}")
    print(f"Avg fan-out:        {stats['avg_fan_out']:.2f}")
    print()
    print("Operation breakdown:")
    for op_tag, count in Counter(stats['operations']).most_common(10):
        pct = 100.0 * count / stats['nodes']
        print(f"  {op_tag:12s}: {count:6,} ({pct:5.1f}%)")

    if detailed and stats['nodes'] <= 100:
        print()
        print("="*70)
        print("DETAILED NODE LIST")
        print("="*70)
        order = topological_order(output)
        index, _, _ = _fan_counts(order)
        for i, v in enumerate(order):
            parent_info = ", ".join(f"Node{index[id(p)]}" for p in v.parents)
            print(f"Node {i:3d}: {v.op_tag:12s} <- [{parent_info}]")

    print("="*70 + "\n")

    return stats


def print_computation_graph(output: Node, max_nodes: int = 20) -> None:
    """
    Print the graph one node per line, in topological order.

    Args:
        output: graph output node
        max_nodes: maximum number of nodes to print
    """
    print("\n" + "="*70)
    print("COMPUTATION GRAPH STRUCTURE")
    print("="*70)

    order = topological_order(output)
    index, _, _ = _fan_counts(order)

    for i, v in enumerate(order[:max_nodes]):
        label = f" {v.name}" if v.name else ""
        if v.parents:
            parent_info = ", ".join(f"Node{index[id(p)]}" for p in v.parents)
            print(f"Node {i:4d}: {v.op_tag:12s} ({float(v.value):10.6f}) "
                  f"grad={float(v.gradient):10.6f} <- [{parent_info}]{label}")
        else:
            print(f"Node {i:4d}: {v.op_tag:12s} ({float(v.value):10.6f}) "
                  f"grad={float(v.gradient):10.6f} [leaf/input]{label}")

    if len(order) > max_nodes:
        print(f"... ({len(order) - max_nodes} more nodes)")

    print("="*70 + "\n")


def analyze_graph_complexity(output: Node) -> str:
    """
    Analyse graph complexity and return a text report.
    """
    stats = get_graph_stats(output)

    report = []
    report.append("Graph Complexity Analysis:")
    report.append(f"  Total nodes: {stats['nodes']:,}")
    report.append(f"  Total connections: {stats['edges']:,}")
    report.append(f"  Average branching: {stats['avg_fan_out']:.2f}")

    if stats['nodes'] < 1000:
        complexity = "Low"
    elif stats['nodes'] < 10000:
        complexity = "Medium"
    else:
        complexity = "High"

    report.append(f"  Complexity level: {complexity}")

    top_ops = sorted(stats['operations'].items(), key=lambda x: x[1], reverse=True)[:3]
    report.append("  Top operations:")
    for op, count in top_ops:
        pct = 100.0 * count / stats['nodes']
        report.append(f"    - {op}: {pct:.1f}%")

    return "\n".join(report)
