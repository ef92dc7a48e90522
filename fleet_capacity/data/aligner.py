"""
Series Aligner
==============
Module join các series theo bucket key.

Join policy:
    - cpu_utilization ⋈ cpu_cores: INNER join (không có core count thì
      không normalize được CPU per core)
    - requests, rds_utilization: OUTER join, mặc định 0 khi thiếu

Output:
    - ec2: x = requests, y = cpu_utilization / cpu_cores, z = cpu_cores
    - rds: x = requests, y = rds_utilization

Usage:
    >>> aligned = align_series(requests, cpu_util, cpu_cores, rds_util)
    >>> aligned.require_points('my.stack.web')
    >>> aligned.ec2[['x', 'y']]
"""

from dataclasses import dataclass
from typing import Mapping, Union

import pandas as pd

from ..errors import JoinEmpty
from .aggregator import empty_series

SeriesLike = Union[pd.Series, Mapping[int, float]]


@dataclass
class AlignedSeries:
    """
    Kết quả align của một resource.

    Attributes:
        ec2: DataFrame index bucket_key, cột x, y, z
        rds: DataFrame index bucket_key, cột x, y
    """
    ec2: pd.DataFrame
    rds: pd.DataFrame

    def __len__(self) -> int:
        return len(self.ec2)

    @property
    def empty(self) -> bool:
        return self.ec2.empty

    def require_points(self, resource: str) -> 'AlignedSeries':
        """Raise JoinEmpty nếu không có điểm nào sau khi join."""
        if self.empty:
            raise JoinEmpty(resource)
        return self


def _as_series(values: SeriesLike) -> pd.Series:
    """Chuyển dict hoặc Series thành Series float theo bucket key."""
    if isinstance(values, pd.Series):
        series = values.astype(float)
    else:
        series = pd.Series(dict(values), dtype=float)

    if series.empty:
        return empty_series()

    series.index = series.index.astype('int64')
    series.index.name = 'bucket_key'
    return series


def align_series(
    requests: SeriesLike,
    cpu_utilization: SeriesLike,
    cpu_cores: SeriesLike,
    rds_utilization: SeriesLike
) -> AlignedSeries:
    """
    Join bốn series thành hai tập điểm EC2 và RDS.

    Args:
        requests: Request count theo bucket
        cpu_utilization: EC2 CPU utilization (%) theo bucket
        cpu_cores: Số CPU cores theo bucket
        rds_utilization: RDS CPU utilization (%) theo bucket

    Returns:
        AlignedSeries với keys sort tăng dần
    """
    requests = _as_series(requests)
    cpu_utilization = _as_series(cpu_utilization)
    cpu_cores = _as_series(cpu_cores)
    rds_utilization = _as_series(rds_utilization)

    # Core count = 0 không normalize được
    cpu_cores = cpu_cores[cpu_cores != 0]

    joined = pd.concat(
        {'cpu': cpu_utilization, 'cores': cpu_cores},
        axis=1,
        join='inner'
    ).sort_index()
    keys = joined.index

    x = requests.reindex(keys, fill_value=0.0)

    ec2 = pd.DataFrame({
        'x': x,
        'y': joined['cpu'] / joined['cores'],
        'z': joined['cores']
    }, index=keys)

    rds = pd.DataFrame({
        'x': x,
        'y': rds_utilization.reindex(keys, fill_value=0.0)
    }, index=keys)

    ec2.index.name = rds.index.name = 'bucket_key'
    return AlignedSeries(ec2=ec2.astype(float), rds=rds.astype(float))
