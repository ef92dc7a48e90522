"""
Autoscaling Module
==================
Phân loại capacity và liệt kê fleet.

Classes:
- CapacityClassifier: Áp dụng ngưỡng lên mean CPU per core
- ClassificationResult: Kết quả phân loại
- ResourceTarget: Một server group cần phân tích
- AutoScalingGroupDiscovery: Liệt kê ASGs qua boto3

Enums:
- ScaleRecommendation: NONE, UPSCALE, DOWNSCALE
"""

from .policy import (
    CapacityClassifier,
    ClassificationResult,
    ScaleRecommendation,
    break_even_rate,
    recommend,
    recommendation_message
)
from .discovery import (
    AutoScalingGroupDiscovery,
    ResourceTarget,
    target_from_group_name,
    targets_from_group_names
)

__all__ = [
    'CapacityClassifier',
    'ClassificationResult',
    'ScaleRecommendation',
    'break_even_rate',
    'recommend',
    'recommendation_message',
    'AutoScalingGroupDiscovery',
    'ResourceTarget',
    'target_from_group_name',
    'targets_from_group_names'
]
