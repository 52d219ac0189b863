"""
Configuration for gradient-descent line fitting.
"""

from dataclasses import dataclass

REDUCTIONS = ('mean', 'sum')


@dataclass
class FitConfig:
    """Configuration for fitting y = w*x + b by full-batch gradient descent."""
    # Optimization
    learning_rate: float = 0.1
    epochs: int = 50
    reduction: str = 'mean'  # 'mean' or 'sum' of squared errors

    # Initial guess
    init_w: float = 0.0
    init_b: float = 0.0

    # Convergence check against the previous parameters
    tolerance: float = 1e-2

    # Logging
    verbose: bool = False

    def __post_init__(self):
        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be > 0, got {self.learning_rate}")
        if self.epochs < 1:
            raise ValueError(f"epochs must be >= 1, got {self.epochs}")
        if self.reduction not in REDUCTIONS:
            raise ValueError(f"Unknown reduction: {self.reduction!r} (expected one of {REDUCTIONS})")
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be > 0, got {self.tolerance}")
