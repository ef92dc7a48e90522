"""
Configuration
=============
Cấu hình cho một lần chạy phân tích capacity.

Mọi component nhận config qua tham số (không có global state):
    - MetricQuery: Định nghĩa một metric trên monitoring backend
    - MetricCatalog: Bốn metrics cần cho mỗi resource
    - CapacityThresholds: Ngưỡng upscale/downscale (%)
    - AnalysisConfig: Cấu hình tổng (region, window, output...)

Usage:
    >>> config = AnalysisConfig(region='us-east-1', window=timedelta(days=3))
    >>> config.window_days
    3.0
"""

from dataclasses import dataclass, field
from datetime import timedelta


@dataclass(frozen=True)
class MetricQuery:
    """
    Định nghĩa một metric cần lấy.

    Attributes:
        namespace: CloudWatch namespace (vd: 'AWS/EC2')
        metric_name: Tên metric (vd: 'CPUUtilization')
        dimension_name: Tên dimension dùng để chọn resource
        statistic: Statistic dùng khi aggregate (luôn là additive 'Sum')
    """
    namespace: str
    metric_name: str
    dimension_name: str
    statistic: str = "Sum"


@dataclass(frozen=True)
class MetricCatalog:
    """Bốn metrics của một server group."""
    requests: MetricQuery = MetricQuery("SS", "apache.requests", "Stack")
    cpu_cores: MetricQuery = MetricQuery("SS", "cpu.count", "Stack")
    cpu_utilization: MetricQuery = MetricQuery("AWS/EC2", "CPUUtilization", "AutoScalingGroupName")
    rds_utilization: MetricQuery = MetricQuery("AWS/RDS", "CPUUtilization", "DBInstanceIdentifier")


@dataclass(frozen=True)
class CapacityThresholds:
    """
    Ngưỡng phân loại (đơn vị %).

    Attributes:
        upscale_threshold: Mean CPU/core > ngưỡng này → UPSCALE
        downscale_threshold: Mean CPU/core < ngưỡng này → DOWNSCALE
        saturation: Mức utilization dùng để tính break-even request rate
    """
    upscale_threshold: float = 70.0
    downscale_threshold: float = 30.0
    saturation: float = 100.0


@dataclass
class AnalysisConfig:
    """
    Cấu hình cho một batch phân tích.

    Attributes:
        region: AWS region
        window: Khoảng thời gian lịch sử cần phân tích
        resolution_seconds: Độ phân giải khi query metric (giây)
        output_dir: Thư mục lưu biểu đồ
        image_format: 'html' hoặc định dạng ảnh (png, svg...)
        group_filter: Chỉ phân tích các groups có chuỗi này trong tên
        show_histogram: Render histogram CPU thay vì scatter
        show_progress: Hiển thị progress bar cho batch
        thresholds: CapacityThresholds
        metrics: MetricCatalog
    """
    region: str = "ap-southeast-2"
    window: timedelta = timedelta(days=7)
    resolution_seconds: int = 60
    output_dir: str = "."
    image_format: str = "html"
    group_filter: str = "WebServerGroup"
    show_histogram: bool = False
    show_progress: bool = False
    thresholds: CapacityThresholds = field(default_factory=CapacityThresholds)
    metrics: MetricCatalog = field(default_factory=MetricCatalog)

    @property
    def window_days(self) -> float:
        """Số ngày (có thể lẻ) của window."""
        return self.window / timedelta(days=1)
