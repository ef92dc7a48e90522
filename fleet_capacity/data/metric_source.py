"""
Metric Source
=============
Module lấy raw metric samples từ monitoring backend.

Mỗi sample là tuple (timestamp, value), dùng statistic additive 'Sum'.
Window dài hơn một ngày được chia thành nhiều sub-request, mỗi ngày
một request, để giới hạn số datapoints trả về mỗi lần gọi.

Sources:
    - CloudWatchMetricSource: Lấy từ AWS CloudWatch qua boto3
    - InMemoryMetricSource: Samples có sẵn (replay, API, tests)

Usage:
    >>> source = CloudWatchMetricSource(region='ap-southeast-2')
    >>> period = Period(timedelta(days=7))
    >>> for start, end in period.windows(now):
    ...     samples = source.fetch(query, 'my.stack.web', start, end, 60)
"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import boto3
import pandas as pd
from botocore.exceptions import BotoCoreError, ClientError

from ..config import MetricQuery
from ..errors import MetricFetchError

logger = logging.getLogger(__name__)

DAY = timedelta(days=1)

Sample = Tuple[datetime, float]


class Period:
    """
    Window thời gian cần query, chia theo từng ngày.

    Attributes:
        span: Độ dài window
        resolution_seconds: Period của mỗi datapoint (giây)

    Example:
        >>> period = Period(timedelta(days=2))
        >>> list(period.windows(now))  # 2 windows: [now-2d-1s, now-1d), [now-1d, now)
    """

    def __init__(self, span: timedelta, resolution_seconds: int = 60):
        self.span = span
        self.resolution_seconds = resolution_seconds

    @property
    def days(self) -> float:
        """Số ngày của window (có thể lẻ)."""
        return self.span / DAY

    def start(self, days_ago: float, now: datetime) -> datetime:
        """Thời điểm bắt đầu của sub-request cũ nhất (lùi thêm 1 giây)."""
        return now - DAY * days_ago - timedelta(seconds=1)

    def end(self, days_ago: float, now: datetime) -> datetime:
        """Thời điểm kết thúc của sub-request cách đây `days_ago` ngày."""
        return now - DAY * max(0.0, days_ago - 1)

    def windows(self, now: datetime) -> Iterator[Tuple[datetime, datetime]]:
        """
        Sinh các cặp (start, end), từ cũ nhất đến mới nhất.

        Các windows liên tiếp và half-open: start của mỗi window là end
        của window trước, nên không sample nào bị lấy hai lần.

        Args:
            now: Thời điểm quan sát (observation instant) của lần chạy

        Yields:
            Tuple (start, end) cho mỗi sub-request
        """
        days_ago = self.days
        start = self.start(days_ago, now)
        while days_ago > 0:
            end = self.end(days_ago, now)
            yield start, end
            start = end
            days_ago -= 1


class CloudWatchMetricSource:
    """
    Metric source dùng CloudWatch GetMetricStatistics.

    Attributes:
        region: AWS region
        client: boto3 CloudWatch client (inject được cho testing)
    """

    def __init__(self, region: str, client=None):
        self.region = region
        self.client = client or boto3.client('cloudwatch', region_name=region)

    def fetch(
        self,
        query: MetricQuery,
        resource: str,
        start: datetime,
        end: datetime,
        resolution_seconds: int
    ) -> List[Sample]:
        """
        Lấy samples của một metric trong [start, end).

        Args:
            query: Định nghĩa metric
            resource: Giá trị dimension (tên stack, ASG hoặc DB instance)
            start: Thời điểm bắt đầu
            end: Thời điểm kết thúc
            resolution_seconds: Period của datapoint

        Returns:
            List các (timestamp, value). List rỗng nếu không có dữ liệu.

        Raises:
            MetricFetchError: Nếu CloudWatch trả về lỗi
        """
        try:
            response = self.client.get_metric_statistics(
                Dimensions=[{'Name': query.dimension_name, 'Value': resource}],
                Namespace=query.namespace,
                MetricName=query.metric_name,
                StartTime=pd.Timestamp(start).to_pydatetime(),
                EndTime=pd.Timestamp(end).to_pydatetime(),
                Period=resolution_seconds,
                Statistics=[query.statistic]
            )
        except (BotoCoreError, ClientError) as e:
            raise MetricFetchError(query.metric_name, resource, e) from e

        datapoints = response.get('Datapoints', [])
        logger.debug(
            "%s/%s for %s: %d datapoints between %s and %s",
            query.namespace, query.metric_name, resource, len(datapoints), start, end
        )
        return [(dp['Timestamp'], float(dp[query.statistic])) for dp in datapoints]


class InMemoryMetricSource:
    """
    Metric source đọc từ samples đã load sẵn.

    Filter theo [start, end) giống CloudWatch (start inclusive, end exclusive).

    Example:
        >>> source = InMemoryMetricSource()
        >>> source.add(catalog.requests, 'my.stack.web', [(ts, 120.0)])
    """

    def __init__(self):
        self._samples: Dict[Tuple[str, str, str], List[Sample]] = defaultdict(list)

    @staticmethod
    def _key(query: MetricQuery, resource: str) -> Tuple[str, str, str]:
        return query.namespace, query.metric_name, resource

    def add(self, query: MetricQuery, resource: str, samples: Iterable[Sample]):
        """Thêm samples cho một metric/resource."""
        self._samples[self._key(query, resource)].extend(samples)

    def fetch(
        self,
        query: MetricQuery,
        resource: str,
        start: datetime,
        end: datetime,
        resolution_seconds: int
    ) -> List[Sample]:
        """Trả về các samples có timestamp trong [start, end)."""
        start_ts = to_utc(start)
        end_ts = to_utc(end)
        return [
            (ts, value)
            for ts, value in self._samples.get(self._key(query, resource), [])
            if start_ts <= to_utc(ts) < end_ts
        ]


def to_utc(ts) -> pd.Timestamp:
    """Chuẩn hoá timestamp về pd.Timestamp UTC (naive được coi là UTC)."""
    ts = pd.Timestamp(ts)
    if ts.tzinfo is None:
        return ts.tz_localize('UTC')
    return ts.tz_convert('UTC')
