"""
Capacity Classifier
===================
Module phân loại capacity của một server group dựa trên
mean CPU utilization per core.

Decision rule (ngưỡng cố định, đơn vị %):
    - mean > 70 → UPSCALE
    - mean < 30 → DOWNSCALE
    - còn lại → NONE (bất đẳng thức chặt: 70.0 và 30.0 đều là NONE)

Break-even request rate:
    - Giá trị x tại đó regression line đạt y = 100 (saturation)
    - x = (100 - intercept) / slope
    - Chỉ mang tính tham khảo: NaN khi slope = 0, có thể âm hoặc
      không hợp lý → không dùng trong decision rule

Usage:
    >>> classifier = CapacityClassifier(CapacityThresholds())
    >>> result = classifier.classify(ec2_points['y'], ec2_model, rds_model)
    >>> result.recommendation
    <ScaleRecommendation.NONE: 'none'>
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence

from ..config import CapacityThresholds
from ..models.regression import LinearModel
from ..models.statistics import summarize


class ScaleRecommendation(Enum):
    """Các đề xuất scaling."""
    NONE = "none"
    UPSCALE = "upscale"
    DOWNSCALE = "downscale"


@dataclass(frozen=True)
class ClassificationResult:
    """
    Kết quả phân loại của một resource.

    Attributes:
        mean_utilization: Mean CPU utilization per core (%)
        std_dev_utilization: Population std của CPU per core
        recommendation: ScaleRecommendation
        break_even_request_rate: Request rate ước tính khi EC2 CPU đạt saturation
        rds_break_even_request_rate: Tương tự cho RDS CPU
    """
    mean_utilization: float
    std_dev_utilization: float
    recommendation: ScaleRecommendation
    break_even_request_rate: float
    rds_break_even_request_rate: float = float('nan')

    def to_dict(self) -> Dict:
        return {
            'mean_utilization': self.mean_utilization,
            'std_dev_utilization': self.std_dev_utilization,
            'recommendation': self.recommendation.value,
            'break_even_request_rate': self.break_even_request_rate,
            'rds_break_even_request_rate': self.rds_break_even_request_rate
        }


def recommend(
    mean_utilization: float,
    thresholds: CapacityThresholds = CapacityThresholds()
) -> ScaleRecommendation:
    """
    Áp dụng ngưỡng cho mean utilization.

    Args:
        mean_utilization: Mean CPU per core (%)
        thresholds: Ngưỡng upscale/downscale

    Returns:
        ScaleRecommendation
    """
    if mean_utilization > thresholds.upscale_threshold:
        return ScaleRecommendation.UPSCALE
    if mean_utilization < thresholds.downscale_threshold:
        return ScaleRecommendation.DOWNSCALE
    return ScaleRecommendation.NONE


def break_even_rate(model: LinearModel, saturation: float = 100.0) -> float:
    """Request rate tại đó model dự đoán utilization = saturation."""
    return model.x_at(saturation)


class CapacityClassifier:
    """
    Classifier thuần tuý (không side effects) cho một tập điểm đã align.

    Attributes:
        thresholds: CapacityThresholds
    """

    def __init__(self, thresholds: CapacityThresholds = CapacityThresholds()):
        self.thresholds = thresholds

    def classify(
        self,
        utilization: Sequence[float],
        ec2_model: LinearModel,
        rds_model: Optional[LinearModel] = None
    ) -> ClassificationResult:
        """
        Phân loại resource.

        Args:
            utilization: Các giá trị y của tập EC2 (CPU % per core), không rỗng
            ec2_model: Regression line của EC2 CPU theo requests
            rds_model: Regression line của RDS CPU theo requests

        Returns:
            ClassificationResult
        """
        summary = summarize(utilization)
        saturation = self.thresholds.saturation

        return ClassificationResult(
            mean_utilization=summary.mean,
            std_dev_utilization=summary.std,
            recommendation=recommend(summary.mean, self.thresholds),
            break_even_request_rate=break_even_rate(ec2_model, saturation),
            rds_break_even_request_rate=(
                break_even_rate(rds_model, saturation) if rds_model is not None else float('nan')
            )
        )


def recommendation_message(resource: str, result: ClassificationResult) -> Optional[str]:
    """
    Message plain-text cho notifier.

    Returns:
        Chuỗi message, hoặc None nếu recommendation là NONE
    """
    if result.recommendation == ScaleRecommendation.UPSCALE:
        direction = "upscaling"
    elif result.recommendation == ScaleRecommendation.DOWNSCALE:
        direction = "downscaling"
    else:
        return None

    return f"{resource} is a candidate for {direction}, mean CPU: {result.mean_utilization:.1f}%"
