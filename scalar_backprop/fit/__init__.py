"""
Gradient-descent fitting on top of the scalar AAD engine.

- FitConfig: learning rate, epochs, loss reduction, initial guess
- LineFitter / fit_line: fit y = w*x + b by full-batch gradient descent
"""

from .config import FitConfig
from .line_fitter import FitResult, LineFitter, fit_line, squared_error_loss

__all__ = ['FitConfig', 'FitResult', 'LineFitter', 'fit_line', 'squared_error_loss']
