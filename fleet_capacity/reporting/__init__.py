"""
Reporting Module
================
Assemble, render và deliver kết quả phân tích.

Classes:
- ResourceReport: Bundle kết quả của một resource
- ScatterRenderer, HistogramRenderer: Plotly renderers
- LocalFileUploader, S3Uploader: Lưu artifact
- ConsoleNotifier: In recommendation
"""

from .report import ResourceReport, build_report, build_labels
from .renderer import ScatterRenderer, HistogramRenderer
from .delivery import LocalFileUploader, S3Uploader, ConsoleNotifier

__all__ = [
    'ResourceReport',
    'build_report',
    'build_labels',
    'ScatterRenderer',
    'HistogramRenderer',
    'LocalFileUploader',
    'S3Uploader',
    'ConsoleNotifier'
]
