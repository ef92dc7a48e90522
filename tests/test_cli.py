"""
Test CLI Module
===============
Tests cho analyze_fleet.py (AWS clients mocked).
"""

from datetime import timedelta
from unittest.mock import patch

import pytest

import analyze_fleet
from fleet_capacity.pipeline import BatchResult


class TestArgs:
    """Test cases cho argument parsing."""

    def test_defaults(self):
        config = analyze_fleet.build_config(analyze_fleet.parse_args([]))

        assert config.region == 'ap-southeast-2'
        assert config.window == timedelta(days=7)
        assert config.image_format == 'html'
        assert config.show_histogram is False

    def test_overrides(self):
        args = analyze_fleet.parse_args([
            '--region', 'us-east-1', '--days', '3', '--format', 'png', '--histogram', '--progress'
        ])
        config = analyze_fleet.build_config(args)

        assert config.region == 'us-east-1'
        assert config.window_days == 3.0
        assert config.image_format == 'png'
        assert config.show_histogram is True
        assert config.show_progress is True

    def test_invalid_format(self):
        with pytest.raises(SystemExit):
            analyze_fleet.parse_args(['--format', 'gif'])


class TestMain:
    """Test cases cho main()."""

    @patch('analyze_fleet.CloudWatchMetricSource')
    @patch('analyze_fleet.CapacityPipeline')
    def test_explicit_groups(self, pipeline_cls, source_cls, tmp_path, capsys):
        """Test --groups bỏ qua discovery và in summary."""
        pipeline_cls.return_value.run_batch.return_value = BatchResult(
            skipped={'a.b.c.web': "no datapoints were found for 'apache.requests' (a.b.c.web)"}
        )

        exit_code = analyze_fleet.main([
            '--groups', 'a-b-c-WebServerGroup-1', 'misc-group',
            '--output-dir', str(tmp_path)
        ])

        assert exit_code == 0
        targets = pipeline_cls.return_value.run_batch.call_args.args[0]
        assert [t.name for t in targets] == ['a.b.c.web']
        out = capsys.readouterr().out
        assert 'Analyzed: 0' in out
        assert 'Skipped:  1' in out

    @patch('analyze_fleet.CloudWatchMetricSource')
    @patch('analyze_fleet.CapacityPipeline')
    @patch('analyze_fleet.AutoScalingGroupDiscovery')
    def test_discovery(self, discovery_cls, pipeline_cls, source_cls):
        """Test không có --groups → discovery."""
        discovery_cls.return_value.discover.return_value = []
        pipeline_cls.return_value.run_batch.return_value = BatchResult()

        assert analyze_fleet.main([]) == 0
        discovery_cls.return_value.discover.assert_called_once_with('WebServerGroup')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
