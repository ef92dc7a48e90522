"""
Regression Engine
=================
Module fit linear model một biến: y = slope * x + intercept.

Phương pháp:
    - Closed-form OLS (không weight, không ép qua gốc toạ độ)
    - Gradient descent (utility bổ sung, không dùng trong pipeline chính)

Diagnostics:
    - SSE: Σ(y - ŷ)²
    - SST: Σ(y - ȳ)²
    - SSR: Σ((y - ŷ) - (y - ȳ))²  (công thức giữ nguyên, KHÔNG phải
      regression sum of squares thông thường)
    - Cost: mean squared residual và gradient theo slope/intercept

Usage:
    >>> model = fit_linear_regression([0, 1, 2, 3], [1, 3, 5, 7])
    >>> model.slope, model.intercept
    (2.0, 1.0)
    >>> model.x_at(100)
    49.5
"""

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

import numpy as np
from sklearn.metrics import mean_squared_error

from ..errors import DegenerateRegression


@dataclass(frozen=True)
class LinearModel:
    """
    Linear model y = slope * x + intercept.

    Attributes:
        slope: Hệ số góc
        intercept: Giao điểm với trục y
    """
    slope: float
    intercept: float

    @property
    def is_degenerate(self) -> bool:
        """True nếu model không xác định (NaN/inf)."""
        return not (np.isfinite(self.slope) and np.isfinite(self.intercept))

    def predict(self, x):
        """Tính ŷ cho x (scalar hoặc array)."""
        return self.slope * np.asarray(x, dtype=float) + self.intercept

    def x_at(self, y: float) -> float:
        """
        Giá trị x tại đó đường thẳng đạt y.

        Returns:
            float, NaN nếu slope = 0 hoặc model degenerate
        """
        if self.is_degenerate or self.slope == 0:
            return float('nan')
        return (y - self.intercept) / self.slope


NAN_MODEL = LinearModel(float('nan'), float('nan'))


def _as_arrays(x: Sequence[float], y: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    x = np.asarray(x, dtype=float).ravel()
    y = np.asarray(y, dtype=float).ravel()
    if x.shape != y.shape:
        raise ValueError(f"x and y must have the same length ({len(x)} != {len(y)})")
    return x, y


def check_regression_input(x: Sequence[float], y: Sequence[float]):
    """
    Kiểm tra input có fit được không.

    Raises:
        DegenerateRegression: Ít hơn 2 điểm hoặc x không có variance
    """
    x, y = _as_arrays(x, y)
    if len(x) < 2:
        raise DegenerateRegression(len(x), "fewer than 2 points")
    if np.ptp(x) == 0:
        raise DegenerateRegression(len(x), "zero variance in x")


def fit_linear_regression(x: Sequence[float], y: Sequence[float]) -> LinearModel:
    """
    Fit OLS closed-form.

    slope = Σ(x - x̄)(y - ȳ) / Σ(x - x̄)²
    intercept = ȳ - slope * x̄

    Args:
        x: Biến độc lập
        y: Biến phụ thuộc

    Returns:
        LinearModel; model NaN nếu input degenerate
    """
    x, y = _as_arrays(x, y)

    if len(x) < 2 or np.ptp(x) == 0:
        return NAN_MODEL

    x_mean = x.mean()
    y_mean = y.mean()
    dx = x - x_mean

    slope = np.dot(dx, y - y_mean) / np.dot(dx, dx)
    intercept = y_mean - slope * x_mean

    return LinearModel(slope=float(slope), intercept=float(intercept))


# Sum Square Errors
def compute_sse(x: Sequence[float], y: Sequence[float], model: LinearModel) -> float:
    x, y = _as_arrays(x, y)
    residuals = y - model.predict(x)
    return float(np.dot(residuals, residuals))


# Sum Square of Total
def compute_sst(x: Sequence[float], y: Sequence[float]) -> float:
    _, y = _as_arrays(x, y)
    deviations = y - y.mean()
    return float(np.dot(deviations, deviations))


def compute_ssr(x: Sequence[float], y: Sequence[float], model: LinearModel) -> float:
    """Σ((y - ŷ) - (y - ȳ))², so sánh residual với độ lệch so với mean."""
    x, y = _as_arrays(x, y)
    d = (y - model.predict(x)) - (y - y.mean())
    return float(np.dot(d, d))


def compute_cost(x: Sequence[float], y: Sequence[float], model: LinearModel) -> float:
    """cost = 1/N * Σ(y - (slope*x + intercept))²"""
    x, y = _as_arrays(x, y)
    return float(mean_squared_error(y, model.predict(x)))


def compute_gradient(
    x: Sequence[float],
    y: Sequence[float],
    model: LinearModel
) -> Tuple[float, float]:
    """
    Gradient của cost theo (slope, intercept).

    ∂cost/∂slope = 2/N * Σ(-x * (y - ŷ))
    ∂cost/∂intercept = 2/N * Σ(-(y - ŷ))

    Returns:
        Tuple (d_slope, d_intercept)
    """
    x, y = _as_arrays(x, y)
    residuals = y - model.predict(x)
    n = len(x)
    return float(-2.0 / n * np.dot(x, residuals)), float(-2.0 / n * residuals.sum())


def gradient_descent(
    x: Sequence[float],
    y: Sequence[float],
    learning_rate: float = 0.01,
    iterations: int = 1000,
    initial: LinearModel = LinearModel(0.0, 0.0),
    tolerance: float = 0.0
) -> LinearModel:
    """
    Fit model bằng gradient descent trên mean squared residual.

    Args:
        x: Biến độc lập
        y: Biến phụ thuộc
        learning_rate: Bước cập nhật
        iterations: Số vòng lặp tối đa
        initial: Model khởi tạo
        tolerance: Dừng sớm khi |gradient| <= tolerance

    Returns:
        LinearModel sau khi hội tụ (hoặc hết iterations)
    """
    check_regression_input(x, y)
    model = initial

    for _ in range(iterations):
        d_slope, d_intercept = compute_gradient(x, y, model)
        if max(abs(d_slope), abs(d_intercept)) <= tolerance:
            break
        model = LinearModel(
            slope=model.slope - learning_rate * d_slope,
            intercept=model.intercept - learning_rate * d_intercept
        )

    return model


def regression_diagnostics(
    x: Sequence[float],
    y: Sequence[float],
    model: LinearModel
) -> Dict[str, float]:
    """
    Tính tất cả diagnostics cho một model đã fit.

    Returns:
        Dict với n_points, slope, intercept, SSE, SST, SSR, cost, R2
    """
    sse = compute_sse(x, y, model)
    sst = compute_sst(x, y)

    return {
        'n_points': len(x),
        'slope': model.slope,
        'intercept': model.intercept,
        'SSE': sse,
        'SST': sst,
        'SSR': compute_ssr(x, y, model),
        'cost': compute_cost(x, y, model),
        'R2': 1 - sse / sst if sst > 0 else float('nan')
    }
