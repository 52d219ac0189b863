"""
Scalar AAD demo.

Demo 1: z = x * y + tanh(x), one reverse pass, print dz/dx and dz/dy.
Demo 2: fit y = 2x + 1 on five points by gradient descent.
"""

import argparse
import logging
from typing import List, Optional

from .aad.core.node import make_leaf
from .aad.core.engine import backward
from .aad.core.graph_utils import print_computation_graph, print_graph_summary
from .aad.ops import tanh
from .fit import FitConfig, FitResult, LineFitter

# Tiny dataset: exact y = 2x + 1
XS = [-1.0, 0.0, 1.0, 2.0, 3.0]
YS = [-1.0, 1.0, 3.0, 5.0, 7.0]
TARGET_W, TARGET_B = 2.0, 1.0


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Scalar reverse-mode autodiff demo',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--x', type=float, default=2.0,
                        help='Demo 1: value of x')
    parser.add_argument('--y', type=float, default=3.0,
                        help='Demo 1: value of y')
    parser.add_argument('--graph', action='store_true',
                        help='Demo 1: print the computation graph')
    parser.add_argument('--lr', type=float, default=0.1,
                        help='Demo 2: learning rate')
    parser.add_argument('--epochs', type=int, default=50,
                        help='Demo 2: number of gradient-descent steps')
    parser.add_argument('--reduction', choices=['mean', 'sum'], default='mean',
                        help='Demo 2: reduction of the squared errors')
    parser.add_argument('--plot', type=str, default=None, metavar='PATH',
                        help='Demo 2: save the loss curve to PATH (needs matplotlib)')
    parser.add_argument('--log-level', type=str, default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')
    return parser.parse_args(argv)


def run_simple_graph(x_val: float, y_val: float, show_graph: bool = False):
    """Build z = x*y + tanh(x), run backward, print the results."""
    print("=== Demo 1: Simple graph z = x * y + tanh(x) ===")

    x = make_leaf(x_val, name="x")
    y = make_leaf(y_val, name="y")

    xy = x * y
    t = tanh(x)
    z = xy + t

    backward(z)

    print(f"x.value = {float(x.value)}, y.value = {float(y.value)}")
    print(f"z.value = {float(z.value):.6f}")
    print(f"dz/dx (x.gradient) = {x.gradient:.6f}")
    print(f"dz/dy (y.gradient) = {y.gradient:.6f}\n")

    if show_graph:
        print_computation_graph(z)
        print_graph_summary(z)

    return z, x, y


def run_line_fit(lr: float, epochs: int, reduction: str) -> FitResult:
    """Fit y = 2x + 1 and print one line per epoch."""
    print("=== Demo 2: Fit y = 2x + 1 with gradient descent ===")

    config = FitConfig(learning_rate=lr, epochs=epochs, reduction=reduction, verbose=True)
    result = LineFitter(XS, YS, config).fit()

    print("\nFinal parameters:")
    print(f"w ≈ {result.w:.6f} (target {TARGET_W})")
    print(f"b ≈ {result.b:.6f} (target {TARGET_B})")
    print(f"final loss = {result.final_loss:.6e}")
    return result


def plot_loss_curve(result: FitResult, save_path: str):
    """Save the per-epoch loss and parameter trajectories."""
    import matplotlib
    matplotlib.use('Agg')  # Non-interactive backend
    import matplotlib.pyplot as plt

    epochs = range(len(result.loss_history))
    fig, axes = plt.subplots(1, 2, figsize=(12, 4))

    ax = axes[0]
    ax.semilogy(epochs, result.loss_history, 'b-', linewidth=2)
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Loss')
    ax.set_title('Training loss')
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(epochs, result.w_history, 'r-', label='w')
    ax.plot(epochs, result.b_history, 'g-', label='b')
    ax.axhline(TARGET_W, color='r', linestyle='--', alpha=0.5)
    ax.axhline(TARGET_B, color='g', linestyle='--', alpha=0.5)
    ax.set_xlabel('Epoch')
    ax.set_title('Parameters')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches='tight')
    print(f"\nFigure saved to: {save_path}")
    plt.close(fig)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    run_simple_graph(args.x, args.y, show_graph=args.graph)
    result = run_line_fit(args.lr, args.epochs, args.reduction)

    if args.plot:
        plot_loss_curve(result, args.plot)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
