"""
Test Aligner Module
===================
Unit tests cho align_series.
"""

import pytest
import pandas as pd

from fleet_capacity.data.aligner import align_series
from fleet_capacity.errors import JoinEmpty


class TestAlignSeries:
    """Test cases cho join policy."""

    def test_inner_join_on_cores(self):
        """Test key thiếu core count bị loại, requests/RDS mặc định 0."""
        aligned = align_series(
            requests={0: 100.0},
            cpu_utilization={0: 50.0, 1: 60.0},
            cpu_cores={0: 2.0},
            rds_utilization={}
        )

        assert len(aligned) == 1
        assert list(aligned.ec2.index) == [0]
        assert aligned.ec2.loc[0, 'x'] == 100.0
        assert aligned.ec2.loc[0, 'y'] == 25.0
        assert aligned.ec2.loc[0, 'z'] == 2.0
        assert aligned.rds.loc[0, 'x'] == 100.0
        assert aligned.rds.loc[0, 'y'] == 0.0

    def test_missing_requests_default_zero(self):
        """Test requests là outer join với mặc định 0."""
        aligned = align_series(
            requests={5: 10.0},
            cpu_utilization={3: 80.0, 5: 40.0},
            cpu_cores={3: 4.0, 5: 4.0},
            rds_utilization={3: 12.0}
        )

        assert list(aligned.ec2['x']) == [0.0, 10.0]
        assert list(aligned.ec2['y']) == [20.0, 10.0]
        assert list(aligned.rds['y']) == [12.0, 0.0]

    def test_keys_sorted(self):
        """Test output sort theo bucket key."""
        cpu = pd.Series({9: 10.0, 2: 20.0, 5: 30.0})
        cores = pd.Series({5: 1.0, 9: 1.0, 2: 1.0})

        aligned = align_series(pd.Series({2: 1.0}), cpu, cores, pd.Series(dtype=float))

        assert list(aligned.ec2.index) == [2, 5, 9]
        assert list(aligned.rds.index) == [2, 5, 9]

    def test_requests_only_key_ignored(self):
        """Test key chỉ có trong requests không tạo điểm."""
        aligned = align_series(
            requests={0: 1.0, 1: 2.0},
            cpu_utilization={0: 10.0},
            cpu_cores={0: 1.0},
            rds_utilization={1: 50.0}
        )

        assert list(aligned.ec2.index) == [0]

    def test_zero_cores_dropped(self):
        """Test core count = 0 không normalize được → bị loại."""
        aligned = align_series(
            requests={},
            cpu_utilization={0: 10.0, 1: 20.0},
            cpu_cores={0: 0.0, 1: 2.0},
            rds_utilization={}
        )

        assert list(aligned.ec2.index) == [1]

    def test_join_empty(self):
        """Test không có key chung → JoinEmpty."""
        aligned = align_series(
            requests={0: 1.0},
            cpu_utilization={0: 10.0},
            cpu_cores={1: 2.0},
            rds_utilization={}
        )

        assert aligned.empty
        with pytest.raises(JoinEmpty):
            aligned.require_points('a.b.c.web')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
