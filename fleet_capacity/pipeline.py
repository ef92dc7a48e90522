"""
Capacity Pipeline
=================
Pipeline phân tích cho từng resource và cho cả fleet.

Luồng xử lý mỗi resource:
    Metric Source → Aggregator → Aligner → Regression + Statistics
        → Classifier → Report → (Renderer → Uploader) → Notifier

Concurrency:
    - Mỗi resource là một task độc lập (không share state)
    - Batch kết thúc khi tất cả tasks xong (barrier)
    - Lỗi của một resource (kể cả lỗi ngoài CapacityAnalysisError) chỉ làm bỏ qua
      resource đó, không ảnh hưởng các resources khác
    - Không retry, không timeout, không giới hạn số tasks đồng thời

Usage:
    >>> pipeline = CapacityPipeline(config, CloudWatchMetricSource(config.region),
    ...                             renderer=ScatterRenderer(),
    ...                             uploader=LocalFileUploader('graphs'),
    ...                             notifier=ConsoleNotifier())
    >>> result = pipeline.run_batch(targets)
    >>> print(f"{len(result.reports)} analyzed, {len(result.skipped)} skipped")
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional

import pandas as pd
from tqdm import tqdm

from .autoscaling.discovery import ResourceTarget
from .autoscaling.policy import CapacityClassifier
from .config import AnalysisConfig, CapacityThresholds
from .data.aggregator import TimeBucketAggregator, aggregate_samples
from .data.aligner import SeriesLike, align_series
from .data.metric_source import Period, Sample, to_utc
from .errors import CapacityAnalysisError, DeliveryError, NoDataPoints
from .models.regression import check_regression_input, fit_linear_regression
from .reporting.report import ResourceReport, build_report

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """
    Kết quả của một batch.

    Attributes:
        reports: Reports của các resources phân tích thành công
        skipped: resource → lý do bị bỏ qua
    """
    reports: List[ResourceReport] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)


def analyze_series(
    resource: str,
    observed_at: pd.Timestamp,
    window: timedelta,
    requests: SeriesLike,
    cpu_utilization: SeriesLike,
    cpu_cores: SeriesLike,
    rds_utilization: SeriesLike,
    thresholds: CapacityThresholds = CapacityThresholds()
) -> ResourceReport:
    """
    Phân tích bốn series đã aggregate của một resource.

    Raises:
        JoinEmpty: Không có bucket nào có cả CPU utilization và core count
        DegenerateRegression: Ít hơn 2 điểm hoặc request rate không đổi
    """
    aligned = align_series(requests, cpu_utilization, cpu_cores, rds_utilization)
    aligned.require_points(resource)

    ec2 = aligned.ec2
    check_regression_input(ec2['x'], ec2['y'])

    ec2_model = fit_linear_regression(ec2['x'], ec2['y'])
    rds_model = fit_linear_regression(aligned.rds['x'], aligned.rds['y'])

    classification = CapacityClassifier(thresholds).classify(ec2['y'], ec2_model, rds_model)

    cpu_series = cpu_utilization if isinstance(cpu_utilization, pd.Series) else None
    return build_report(
        resource, observed_at, window, aligned, ec2_model, rds_model, classification, cpu_series
    )


def analyze_samples(
    resource: str,
    observed_at: datetime,
    window: timedelta,
    requests: Iterable[Sample],
    cpu_utilization: Iterable[Sample],
    cpu_cores: Iterable[Sample],
    rds_utilization: Iterable[Sample],
    thresholds: CapacityThresholds = CapacityThresholds()
) -> ResourceReport:
    """
    Phân tích raw samples đã có sẵn (không gọi metric source).

    Raises:
        NoDataPoints: Nếu một metric không có sample nào
    """
    observed_at = to_utc(observed_at)
    named = {
        'requests': requests,
        'cpu_utilization': cpu_utilization,
        'cpu_cores': cpu_cores,
        'rds_utilization': rds_utilization
    }

    series = {}
    for name, samples in named.items():
        series[name] = aggregate_samples(samples, observed_at)
        if series[name].empty:
            raise NoDataPoints(name, resource)

    return analyze_series(resource, observed_at, window, thresholds=thresholds, **series)


class CapacityPipeline:
    """
    Pipeline phân tích capacity cho fleet.

    Renderer, uploader và notifier là các capabilities được inject;
    None nghĩa là bỏ qua bước tương ứng.

    Attributes:
        config: AnalysisConfig
        source: Metric source
        renderer: Object có render(report) -> bytes và image_format
        uploader: Object có upload(resource, body, extension)
        notifier: Object có notify(resource, message)
        clock: Hàm trả về observation instant (mặc định: now UTC)
    """

    def __init__(
        self,
        config: AnalysisConfig,
        source,
        renderer=None,
        uploader=None,
        notifier=None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.config = config
        self.source = source
        self.renderer = renderer
        self.uploader = uploader
        self.notifier = notifier
        self.clock = clock or (lambda: pd.Timestamp.now(tz='UTC'))

        self.period = Period(config.window, config.resolution_seconds)
        self.aggregator = TimeBucketAggregator(source, self.period)

    def analyze(self, target: ResourceTarget, observed_at: Optional[datetime] = None) -> ResourceReport:
        """
        Lấy bốn metrics và phân tích một resource.

        Cả bốn metrics dùng chung một observation instant.

        Args:
            target: ResourceTarget
            observed_at: Observation instant (mặc định: clock())

        Returns:
            ResourceReport
        """
        observed_at = to_utc(observed_at if observed_at is not None else self.clock())
        metrics = self.config.metrics

        requests = self.aggregator.collect(metrics.requests, target.name, observed_at)
        cpu_cores = self.aggregator.collect(metrics.cpu_cores, target.name, observed_at)
        cpu_utilization = self.aggregator.collect(metrics.cpu_utilization, target.group_name, observed_at)
        rds_utilization = self.aggregator.collect(metrics.rds_utilization, target.database_name, observed_at)

        return analyze_series(
            target.name,
            observed_at,
            self.config.window,
            requests,
            cpu_utilization,
            cpu_cores,
            rds_utilization,
            thresholds=self.config.thresholds
        )

    def process(self, target: ResourceTarget) -> ResourceReport:
        """Phân tích, render/upload và notify cho một resource."""
        report = self.analyze(target)

        if self.renderer is not None and self.uploader is not None:
            try:
                body = self.renderer.render(report)
            except (ValueError, OSError) as e:
                # plotly static export cần kaleido
                raise DeliveryError(target.name, e) from e
            self.uploader.upload(target.name, body, self.renderer.image_format)

        message = report.message
        if message and self.notifier is not None:
            self.notifier.notify(target.name, message)

        return report

    def run_batch(self, targets: Iterable[ResourceTarget]) -> BatchResult:
        """
        Chạy pipeline song song cho tất cả targets.

        Args:
            targets: Các resources cần phân tích

        Returns:
            BatchResult (thứ tự reports không xác định)
        """
        targets = list(targets)
        result = BatchResult()

        if not targets:
            return result

        with ThreadPoolExecutor(max_workers=len(targets)) as executor:
            futures = {executor.submit(self.process, target): target for target in targets}

            completed = as_completed(futures)
            if self.config.show_progress:
                completed = tqdm(completed, total=len(futures), desc="Analyzing resources")

            for future in completed:
                target = futures[future]
                try:
                    result.reports.append(future.result())
                except CapacityAnalysisError as e:
                    logger.warning("Skipping %s: %s", target.name, e)
                    result.skipped[target.name] = str(e)
                except Exception as e:
                    logger.exception("Unexpected error while analyzing %s", target.name)
                    result.skipped[target.name] = f"{type(e).__name__}: {e}"

        logger.info(
            "Batch finished: %d analyzed, %d skipped",
            len(result.reports), len(result.skipped)
        )
        return result
