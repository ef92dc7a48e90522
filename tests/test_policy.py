"""
Test Policy Module
==================
Unit tests cho capacity classifier.
"""

import math

import pytest

from fleet_capacity.autoscaling.policy import (
    CapacityClassifier,
    ClassificationResult,
    ScaleRecommendation,
    break_even_rate,
    recommend,
    recommendation_message
)
from fleet_capacity.config import CapacityThresholds
from fleet_capacity.models.regression import LinearModel, fit_linear_regression


class TestCapacityThresholds:
    """Test cases cho CapacityThresholds."""

    def test_default_thresholds(self):
        """Test default thresholds."""
        thresholds = CapacityThresholds()

        assert thresholds.upscale_threshold == 70.0
        assert thresholds.downscale_threshold == 30.0
        assert thresholds.saturation == 100.0


class TestRecommend:
    """Test cases cho decision rule."""

    @pytest.mark.parametrize("mean_utilization, expected", [
        (71.0, ScaleRecommendation.UPSCALE),
        (29.9, ScaleRecommendation.DOWNSCALE),
        (50.0, ScaleRecommendation.NONE),
        (70.0, ScaleRecommendation.NONE),
        (30.0, ScaleRecommendation.NONE),
    ])
    def test_thresholds(self, mean_utilization, expected):
        """Test ngưỡng với bất đẳng thức chặt."""
        assert recommend(mean_utilization) == expected

    def test_custom_thresholds(self):
        """Test ngưỡng tuỳ chỉnh."""
        thresholds = CapacityThresholds(upscale_threshold=60.0, downscale_threshold=10.0)

        assert recommend(65.0, thresholds) == ScaleRecommendation.UPSCALE
        assert recommend(20.0, thresholds) == ScaleRecommendation.NONE


class TestBreakEven:
    """Test cases cho break-even request rate."""

    def test_known_line(self):
        """Test slope=2, intercept=1 → (100 - 1) / 2."""
        assert break_even_rate(LinearModel(2.0, 1.0)) == 49.5

    def test_zero_slope(self):
        """Test slope = 0 → NaN (chỉ mang tính tham khảo)."""
        assert math.isnan(break_even_rate(LinearModel(0.0, 40.0)))

    def test_degenerate_model(self):
        """Test model NaN → NaN."""
        assert math.isnan(break_even_rate(fit_linear_regression([1.0], [1.0])))


class TestCapacityClassifier:
    """Test cases cho CapacityClassifier."""

    @pytest.fixture
    def classifier(self):
        return CapacityClassifier(CapacityThresholds())

    def test_classify_upscale(self, classifier):
        """Test mean cao → UPSCALE."""
        result = classifier.classify([70.0, 72.0, 74.0], LinearModel(0.5, 20.0), LinearModel(0.1, 5.0))

        assert result.recommendation == ScaleRecommendation.UPSCALE
        assert result.mean_utilization == pytest.approx(72.0)
        assert result.std_dev_utilization == pytest.approx(math.sqrt(8 / 3))
        assert result.break_even_request_rate == pytest.approx(160.0)
        assert result.rds_break_even_request_rate == pytest.approx(950.0)

    def test_classify_without_rds(self, classifier):
        """Test không có RDS model → RDS break-even NaN."""
        result = classifier.classify([10.0, 20.0], LinearModel(1.0, 0.0))

        assert result.recommendation == ScaleRecommendation.DOWNSCALE
        assert math.isnan(result.rds_break_even_request_rate)

    def test_classify_empty(self, classifier):
        """Test tập rỗng không được phép."""
        with pytest.raises(ValueError):
            classifier.classify([], LinearModel(1.0, 0.0))

    def test_idempotent(self, classifier):
        """Test cùng input → cùng kết quả."""
        values = [33.3, 41.7, 29.2, 55.1]
        model = LinearModel(0.3, 11.0)

        assert classifier.classify(values, model, model) == classifier.classify(values, model, model)


class TestRecommendationMessage:
    """Test cases cho message plain-text."""

    def _result(self, mean_utilization, recommendation):
        return ClassificationResult(
            mean_utilization=mean_utilization,
            std_dev_utilization=1.0,
            recommendation=recommendation,
            break_even_request_rate=100.0
        )

    def test_upscale_message(self):
        """Test message upscale."""
        message = recommendation_message('a.b.c.web', self._result(73.24, ScaleRecommendation.UPSCALE))

        assert message == "a.b.c.web is a candidate for upscaling, mean CPU: 73.2%"

    def test_downscale_message(self):
        """Test message downscale."""
        message = recommendation_message('a.b.c.web', self._result(12.0, ScaleRecommendation.DOWNSCALE))

        assert message == "a.b.c.web is a candidate for downscaling, mean CPU: 12.0%"

    def test_no_message(self):
        """Test NONE → không có message."""
        assert recommendation_message('a.b.c.web', self._result(50.0, ScaleRecommendation.NONE)) is None


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
