"""
Errors
======
Các exception cho pipeline phân tích capacity.

Tất cả đều là lỗi cục bộ của một resource: pipeline bắt chúng ở
ranh giới batch, ghi log và bỏ qua resource đó trong lần chạy hiện tại.
"""


class CapacityAnalysisError(Exception):
    """Base class cho mọi lỗi phân tích của một resource."""


class NoDataPoints(CapacityAnalysisError):
    """Metric source không trả về sample nào trong toàn bộ window."""

    def __init__(self, metric_name: str, resource: str):
        self.metric_name = metric_name
        self.resource = resource
        super().__init__(f"no datapoints were found for '{metric_name}' ({resource})")


class JoinEmpty(CapacityAnalysisError):
    """Series aligner không tạo ra điểm nào (inner join rỗng)."""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"no aligned datapoints for '{resource}'")


class DegenerateRegression(CapacityAnalysisError):
    """Input của regression không đủ để fit (ít hơn 2 điểm hoặc x không đổi)."""

    def __init__(self, n_points: int, reason: str):
        self.n_points = n_points
        self.reason = reason
        super().__init__(f"degenerate regression input ({n_points} points): {reason}")


class MetricFetchError(CapacityAnalysisError):
    """Lỗi từ monitoring backend khi lấy metric."""

    def __init__(self, metric_name: str, resource: str, cause: Exception):
        self.metric_name = metric_name
        self.resource = resource
        self.cause = cause
        super().__init__(f"failed to fetch '{metric_name}' for '{resource}': {cause}")


class DeliveryError(CapacityAnalysisError):
    """Lỗi khi upload artifact của một resource."""

    def __init__(self, resource: str, cause: Exception):
        self.resource = resource
        self.cause = cause
        super().__init__(f"failed to deliver report for '{resource}': {cause}")
