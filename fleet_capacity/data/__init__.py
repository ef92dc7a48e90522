"""
Data Module
===========
Lấy metrics và chuẩn bị dữ liệu cho phân tích.

Classes:
- Period: Window thời gian, chia theo ngày
- CloudWatchMetricSource: Metric source dùng AWS CloudWatch
- InMemoryMetricSource: Metric source từ samples có sẵn
- TimeBucketAggregator: Aggregate samples thành series theo bucket key
- AlignedSeries: Kết quả join (tập EC2 và RDS)

Functions:
- aggregate_samples: Aggregate một lô samples
- align_series: Join bốn series theo bucket key
"""

from .metric_source import Period, CloudWatchMetricSource, InMemoryMetricSource
from .aggregator import TimeBucketAggregator, aggregate_samples, bucket_keys
from .aligner import AlignedSeries, align_series

__all__ = [
    'Period',
    'CloudWatchMetricSource',
    'InMemoryMetricSource',
    'TimeBucketAggregator',
    'aggregate_samples',
    'bucket_keys',
    'AlignedSeries',
    'align_series'
]
