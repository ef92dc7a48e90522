"""
Models Module
=============
Linear regression và descriptive statistics.

Classes:
- LinearModel: y = slope * x + intercept
- SeriesSummary: Mean/std của một series

Functions:
- fit_linear_regression: OLS closed-form
- gradient_descent: Fit iterative (utility bổ sung)
- regression_diagnostics: SSE, SST, SSR, cost
- mean, std_dev, centroid, summarize
"""

from .regression import (
    LinearModel,
    check_regression_input,
    fit_linear_regression,
    compute_sse,
    compute_sst,
    compute_ssr,
    compute_cost,
    compute_gradient,
    gradient_descent,
    regression_diagnostics
)
from .statistics import SeriesSummary, mean, std_dev, centroid, summarize

__all__ = [
    'LinearModel',
    'check_regression_input',
    'fit_linear_regression',
    'compute_sse',
    'compute_sst',
    'compute_ssr',
    'compute_cost',
    'compute_gradient',
    'gradient_descent',
    'regression_diagnostics',
    'SeriesSummary',
    'mean',
    'std_dev',
    'centroid',
    'summarize'
]
