"""
Time-Bucket Aggregator
======================
Module chuyển raw samples thành sparse series theo bucket key.

Bucket key:
    bucket_key = floor((observed_at - timestamp) / 1 phút)
    → số phút đã trôi qua tính đến thời điểm quan sát.

Accumulation:
    - Nhiều samples cùng bucket key được CỘNG lại (statistic 'Sum'),
      không ghi đè
    - Quy tắc này giữ nguyên khi merge kết quả của nhiều sub-requests

Edge cases xử lý:
    - Sample từ tương lai (key âm) → ValueError (vi phạm contract)
    - Toàn bộ window không có sample → NoDataPoints

Usage:
    >>> aggregator = TimeBucketAggregator(source, Period(timedelta(days=7)))
    >>> series = aggregator.collect(catalog.requests, 'my.stack.web', observed_at)
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from ..config import MetricQuery
from ..errors import NoDataPoints
from .metric_source import Period, Sample, to_utc

logger = logging.getLogger(__name__)

MINUTE = pd.Timedelta(minutes=1)


def empty_series() -> pd.Series:
    """Series rỗng với index bucket_key kiểu int64."""
    return pd.Series(
        [],
        index=pd.Index([], dtype='int64', name='bucket_key'),
        dtype=float
    )


def bucket_keys(timestamps: Iterable, observed_at: datetime) -> np.ndarray:
    """
    Tính bucket key cho từng timestamp.

    Args:
        timestamps: Các timestamp của samples
        observed_at: Thời điểm quan sát của lần chạy

    Returns:
        np.ndarray int64 các bucket keys

    Raises:
        ValueError: Nếu có sample sau thời điểm quan sát
    """
    ts = pd.to_datetime(pd.Index(list(timestamps)), utc=True)
    elapsed = to_utc(observed_at) - ts
    keys = np.asarray(elapsed // MINUTE, dtype=np.int64)

    if (keys < 0).any():
        raise ValueError(
            f"{int((keys < 0).sum())} samples are later than the observation instant {observed_at}"
        )

    return keys


def aggregate_samples(
    samples: Iterable[Sample],
    observed_at: datetime,
    into: Optional[pd.Series] = None
) -> pd.Series:
    """
    Aggregate samples thành series, cộng dồn các giá trị cùng bucket.

    Args:
        samples: Các (timestamp, value)
        observed_at: Thời điểm quan sát
        into: Series đã có (từ sub-request trước) để merge vào

    Returns:
        pd.Series index = bucket_key, values = tổng giá trị, sort theo key
    """
    samples = list(samples)
    base = into if into is not None else empty_series()

    if not samples:
        return base.copy()

    timestamps, values = zip(*samples)
    keys = bucket_keys(timestamps, observed_at)

    chunk = pd.Series(np.asarray(values, dtype=float), index=keys).groupby(level=0).sum()

    if len(base) > 0:
        chunk = base.add(chunk, fill_value=0.0)

    chunk.index = chunk.index.astype('int64')
    chunk.index.name = 'bucket_key'
    return chunk.sort_index()


class TimeBucketAggregator:
    """
    Lấy toàn bộ window của một metric và aggregate thành series.

    Dùng MỘT observation instant cho tất cả sub-requests, để các metrics
    của cùng resource có chung không gian bucket key.

    Attributes:
        source: Metric source (CloudWatch, in-memory, ...)
        period: Period mô tả window và resolution
    """

    def __init__(self, source, period: Period):
        self.source = source
        self.period = period

    def collect(
        self,
        query: MetricQuery,
        resource: str,
        observed_at: datetime
    ) -> pd.Series:
        """
        Lấy và aggregate một metric cho một resource.

        Args:
            query: Metric cần lấy
            resource: Giá trị dimension
            observed_at: Thời điểm quan sát chung của resource

        Returns:
            pd.Series theo bucket key

        Raises:
            NoDataPoints: Nếu toàn bộ window không có sample
        """
        series = empty_series()

        for start, end in self.period.windows(observed_at):
            samples = self.source.fetch(
                query, resource, start, end, self.period.resolution_seconds
            )
            series = aggregate_samples(samples, observed_at, into=series)

        if series.empty:
            raise NoDataPoints(query.metric_name, resource)

        logger.debug("%s for %s: %d buckets", query.metric_name, resource, len(series))
        return series
