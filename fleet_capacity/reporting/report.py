"""
Report Assembler
================
Gom kết quả phân tích của một resource thành bundle cho renderer.

Bundle gồm:
    - Tập điểm EC2 và RDS
    - Hai regression lines
    - Centroid của tập EC2
    - Labels tóm tắt (time span, mean/stddev, break-even, số điểm)
    - ClassificationResult
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, List, Optional, Tuple

import pandas as pd

from ..autoscaling.policy import ClassificationResult, recommendation_message
from ..data.aligner import AlignedSeries
from ..models.regression import LinearModel
from ..models.statistics import centroid, summarize

TIMESPAN_FORMAT = '%Y-%m-%d %H:%M'

# requests/phút → requests/tháng (31 ngày)
MINUTES_PER_MONTH = 60 * 24 * 31


@dataclass
class ResourceReport:
    """
    Bundle kết quả của một resource.

    Attributes:
        resource: Tên resource (stack)
        observed_at: Thời điểm quan sát của lần chạy
        window: Độ dài window đã phân tích
        aligned: Tập điểm EC2/RDS
        ec2_model: Regression EC2 CPU per core theo requests
        rds_model: Regression RDS CPU theo requests
        centroid: (mean requests, mean EC2 CPU per core)
        labels: Các dòng tóm tắt cho renderer
        classification: ClassificationResult
        cpu_utilization: Series EC2 CPU utilization gốc (cho histogram)
    """
    resource: str
    observed_at: pd.Timestamp
    window: timedelta
    aligned: AlignedSeries
    ec2_model: LinearModel
    rds_model: LinearModel
    centroid: Tuple[float, float]
    labels: List[str]
    classification: ClassificationResult
    cpu_utilization: Optional[pd.Series] = None

    @property
    def message(self) -> Optional[str]:
        return recommendation_message(self.resource, self.classification)

    def to_dict(self) -> Dict:
        """Dạng dict (JSON-serializable) của report."""
        return {
            'resource': self.resource,
            'observed_at': self.observed_at.isoformat(),
            'window_days': self.window / timedelta(days=1),
            'data_points': len(self.aligned),
            'ec2_model': {'slope': self.ec2_model.slope, 'intercept': self.ec2_model.intercept},
            'rds_model': {'slope': self.rds_model.slope, 'intercept': self.rds_model.intercept},
            'centroid': {'x': self.centroid[0], 'y': self.centroid[1]},
            'labels': list(self.labels),
            'classification': self.classification.to_dict(),
            'message': self.message
        }


def timespan_label(observed_at: pd.Timestamp, window: timedelta) -> str:
    start = observed_at - window
    return f"{start.strftime(TIMESPAN_FORMAT)} - {observed_at.strftime(TIMESPAN_FORMAT)}"


def build_labels(
    observed_at: pd.Timestamp,
    window: timedelta,
    aligned: AlignedSeries,
    classification: ClassificationResult
) -> List[str]:
    """
    Tạo labels tóm tắt theo thứ tự hiển thị.

    Returns:
        List các chuỗi: time span, EC2 CPU, requests, cores, break-even, số điểm
    """
    requests = summarize(aligned.ec2['x'])
    cores = summarize(aligned.ec2['z'])

    return [
        timespan_label(observed_at, window),
        f"EC2 CPU mean: {classification.mean_utilization:.1f}%/min "
        f"(stddev: {classification.std_dev_utilization:.1f})",
        f"Mean request {requests.mean:.1f}/min (stddev: {requests.std:.1f}) "
        f"({requests.mean * MINUTES_PER_MONTH:.0f}/mnth)",
        f"CPU Cores mean: {cores.mean:.1f}",
        f"estimated max request per min: {classification.break_even_request_rate:.1f} "
        f"(RDS: {classification.rds_break_even_request_rate:.1f})",
        f"data points: {len(aligned)}"
    ]


def build_report(
    resource: str,
    observed_at: pd.Timestamp,
    window: timedelta,
    aligned: AlignedSeries,
    ec2_model: LinearModel,
    rds_model: LinearModel,
    classification: ClassificationResult,
    cpu_utilization: Optional[pd.Series] = None
) -> ResourceReport:
    """Assemble ResourceReport từ các kết quả trung gian."""
    return ResourceReport(
        resource=resource,
        observed_at=observed_at,
        window=window,
        aligned=aligned,
        ec2_model=ec2_model,
        rds_model=rds_model,
        centroid=centroid(aligned.ec2['x'], aligned.ec2['y']),
        labels=build_labels(observed_at, window, aligned, classification),
        classification=classification,
        cpu_utilization=cpu_utilization
    )
