"""
Test Discovery Module
=====================
Unit tests cho fleet discovery và naming convention.
"""

from unittest.mock import MagicMock

import pytest

from fleet_capacity.autoscaling.discovery import (
    AutoScalingGroupDiscovery,
    ResourceTarget,
    target_from_group_name,
    targets_from_group_names
)


class TestNamingConvention:
    """Test cases cho target_from_group_name."""

    def test_web_server_group(self):
        """Test tên ASG chuẩn."""
        target = target_from_group_name('sssites-ssorg-prod-WebServerGroup-M4B333CXXJQU')

        assert target == ResourceTarget(
            name='sssites.ssorg.prod.web',
            group_name='sssites-ssorg-prod-WebServerGroup-M4B333CXXJQU',
            database_name='sssites-ssorg-prod'
        )

    def test_filter_mismatch(self):
        """Test ASG không phải web server group bị bỏ qua."""
        assert target_from_group_name('sssites-ssorg-prod-WorkerGroup-ABC') is None

    def test_too_few_parts(self):
        """Test tên có <= 3 phần bị bỏ qua."""
        assert target_from_group_name('prod-WebServerGroup-ABC') is None

    def test_targets_from_group_names(self):
        """Test lọc danh sách tên."""
        targets = targets_from_group_names([
            'apollo-bcdgroup-prod-WebServerGroup-GAP7WJ4R2ZRT',
            'apollo-bcdgroup-prod-QueueGroup-X',
            'short-WebServerGroup'
        ])

        assert [t.name for t in targets] == ['apollo.bcdgroup.prod.web']


class TestAutoScalingGroupDiscovery:
    """Test cases cho discovery qua boto3 (mocked)."""

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.get_paginator.return_value.paginate.return_value = [
            {'AutoScalingGroups': [{'AutoScalingGroupName': 'a-b-c-WebServerGroup-1'}]},
            {'AutoScalingGroups': [
                {'AutoScalingGroupName': 'd-e-f-WebServerGroup-2'},
                {'AutoScalingGroupName': 'd-e-f-Batch-3'}
            ]}
        ]
        return client

    def test_group_names_across_pages(self, client):
        """Test đọc tất cả các pages."""
        discovery = AutoScalingGroupDiscovery('ap-southeast-2', client=client)

        assert discovery.group_names() == [
            'a-b-c-WebServerGroup-1', 'd-e-f-WebServerGroup-2', 'd-e-f-Batch-3'
        ]
        client.get_paginator.assert_called_with('describe_auto_scaling_groups')

    def test_discover(self, client):
        """Test discover áp dụng filter."""
        targets = AutoScalingGroupDiscovery('ap-southeast-2', client=client).discover()

        assert [t.database_name for t in targets] == ['a-b-c', 'd-e-f']


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
