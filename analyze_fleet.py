"""
Fleet capacity analysis script.

Lấy metrics của các web server groups, fit regression CPU theo request
rate, render biểu đồ và in các đề xuất upscale/downscale.

Run:
    python analyze_fleet.py --region ap-southeast-2 --days 7 --output-dir graphs
"""
import argparse
import logging
import sys
from datetime import timedelta

from fleet_capacity.autoscaling.discovery import AutoScalingGroupDiscovery, targets_from_group_names
from fleet_capacity.config import AnalysisConfig
from fleet_capacity.data.metric_source import CloudWatchMetricSource
from fleet_capacity.pipeline import CapacityPipeline
from fleet_capacity.reporting.delivery import ConsoleNotifier, LocalFileUploader, S3Uploader
from fleet_capacity.reporting.renderer import HistogramRenderer, ScatterRenderer


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Capacity analysis for auto scaling web server groups")
    parser.add_argument('-d', '--debug', action='store_true', help="debug logging")
    parser.add_argument('--histogram', action='store_true', help="show cpu histogram")
    parser.add_argument('--region', default='ap-southeast-2', help="AWS region")
    parser.add_argument('--days', type=float, default=7.0, help="days of history to analyze")
    parser.add_argument('--output-dir', default='.', help="directory for rendered graphs")
    parser.add_argument('--format', dest='image_format', default='html',
                        choices=['html', 'png', 'svg'], help="graph output format")
    parser.add_argument('--s3-bucket', default=None,
                        help="upload graphs to this S3 bucket instead of the output directory")
    parser.add_argument('--groups', nargs='*', default=None,
                        help="auto scaling group names (skip discovery)")
    parser.add_argument('--progress', action='store_true', help="show progress bar")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AnalysisConfig:
    return AnalysisConfig(
        region=args.region,
        window=timedelta(days=args.days),
        output_dir=args.output_dir,
        image_format=args.image_format,
        show_histogram=args.histogram,
        show_progress=args.progress
    )


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    config = build_config(args)

    if args.groups:
        targets = targets_from_group_names(args.groups, config.group_filter)
    else:
        targets = AutoScalingGroupDiscovery(config.region).discover(config.group_filter)

    if config.show_histogram:
        renderer = HistogramRenderer(image_format=config.image_format)
    else:
        renderer = ScatterRenderer(image_format=config.image_format,
                                   saturation=config.thresholds.saturation)

    if args.s3_bucket:
        uploader = S3Uploader(config.region, args.s3_bucket)
    else:
        uploader = LocalFileUploader(config.output_dir)

    pipeline = CapacityPipeline(
        config,
        CloudWatchMetricSource(config.region),
        renderer=renderer,
        uploader=uploader,
        notifier=ConsoleNotifier()
    )

    print("=" * 60)
    print(f"  Capacity analysis: {len(targets)} server groups ({config.region})")
    print("=" * 60)

    result = pipeline.run_batch(targets)

    print("=" * 60)
    print(f"Analyzed: {len(result.reports)}")
    print(f"Skipped:  {len(result.skipped)}")
    for resource, reason in sorted(result.skipped.items()):
        print(f"  {resource}: {reason}")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
