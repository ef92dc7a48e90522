"""
Renderers
=========
Render ResourceReport thành biểu đồ bằng Plotly.

Renderers:
    - ScatterRenderer: Scatter EC2/RDS CPU theo requests, regression lines,
      centroid, đường saturation 100%
    - HistogramRenderer: Phân bố EC2 CPU utilization

Output:
    - 'html': Plotly HTML (plotly.js từ CDN)
    - 'png', 'svg', ...: Static image (cần kaleido)
"""

import numpy as np
import plotly.graph_objects as go

from .report import ResourceReport

# A4 (1:1.414)
DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = int(DEFAULT_WIDTH / 1.414)

EC2_COLOR = 'rgb(90, 180, 234)'
EC2_LINE_COLOR = 'rgb(20, 100, 240)'
RDS_COLOR = 'rgb(0, 240, 108)'
RDS_LINE_COLOR = 'rgb(20, 240, 80)'
SATURATION_COLOR = 'rgb(255, 0, 0)'


def figure_bytes(
    fig: go.Figure,
    image_format: str = 'html',
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT
) -> bytes:
    """Xuất figure thành bytes theo định dạng."""
    if image_format == 'html':
        return fig.to_html(include_plotlyjs='cdn', full_html=True).encode('utf-8')
    return fig.to_image(format=image_format, width=width, height=height)


class ScatterRenderer:
    """
    Scatter plot của CPU utilization theo request rate.

    Attributes:
        image_format: Định dạng output
        width: Chiều rộng (px)
        height: Chiều cao (px)
    """

    def __init__(
        self,
        image_format: str = 'html',
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        saturation: float = 100.0
    ):
        self.image_format = image_format
        self.width = width
        self.height = height
        self.saturation = saturation

    def _regression_trace(self, x: np.ndarray, model, name: str, color: str) -> go.Scatter:
        x_range = np.array([x.min(), x.max()])
        return go.Scatter(
            x=x_range,
            y=model.predict(x_range),
            mode='lines',
            name=name,
            line=dict(color=color)
        )

    def build_figure(self, report: ResourceReport) -> go.Figure:
        """Tạo Plotly figure cho report."""
        ec2 = report.aligned.ec2
        rds = report.aligned.rds
        x = ec2['x'].to_numpy()

        fig = go.Figure()

        fig.add_trace(go.Scatter(
            x=rds['x'], y=rds['y'], mode='markers', name='RDS CPU',
            marker=dict(symbol='cross-thin', color=RDS_COLOR, line=dict(color=RDS_COLOR, width=1))
        ))
        fig.add_trace(go.Scatter(
            x=ec2['x'], y=ec2['y'], mode='markers', name='EC2 CPU',
            marker=dict(symbol='x-thin', color=EC2_COLOR, line=dict(color=EC2_COLOR, width=1))
        ))

        if not report.rds_model.is_degenerate:
            fig.add_trace(self._regression_trace(x, report.rds_model, 'RDS regression', RDS_LINE_COLOR))
        if not report.ec2_model.is_degenerate:
            fig.add_trace(self._regression_trace(x, report.ec2_model, 'EC2 regression', EC2_LINE_COLOR))

        # Centroid luôn nằm trên regression line
        fig.add_trace(go.Scatter(
            x=[report.centroid[0]], y=[report.centroid[1]], mode='markers', name='centroid',
            marker=dict(symbol='circle-open', size=8, color='black')
        ))

        fig.add_trace(go.Scatter(
            x=[x.min(), x.max()], y=[self.saturation, self.saturation], mode='lines',
            name=f'{self.saturation:.0f}%', line=dict(color=SATURATION_COLOR, dash='dash')
        ))

        # Labels hiển thị như các legend entries không có dữ liệu
        for label in report.labels:
            fig.add_trace(go.Scatter(x=[None], y=[None], mode='markers', name=label,
                                     marker=dict(opacity=0)))

        fig.update_layout(
            title=report.resource,
            xaxis_title='reqs / min',
            yaxis_title='t2 usage %',
            yaxis=dict(range=[0, 101]),
            legend=dict(x=0, y=1, xanchor='left', yanchor='top'),
            width=self.width,
            height=self.height
        )
        return fig

    def render(self, report: ResourceReport) -> bytes:
        return figure_bytes(self.build_figure(report), self.image_format, self.width, self.height)


class HistogramRenderer:
    """Histogram của EC2 CPU utilization (làm tròn xuống số nguyên)."""

    def __init__(
        self,
        image_format: str = 'html',
        bins: int = 6,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT
    ):
        self.image_format = image_format
        self.bins = bins
        self.width = width
        self.height = height

    def build_figure(self, report: ResourceReport) -> go.Figure:
        values = report.cpu_utilization
        if values is None:
            values = report.aligned.ec2['y']

        fig = go.Figure(go.Histogram(
            x=np.trunc(values.to_numpy()).astype(int),
            nbinsx=self.bins,
            name='cpu utilisation'
        ))
        fig.update_layout(
            title=report.resource,
            xaxis_title='cpu utilisation',
            yaxis_title='freq',
            width=self.width,
            height=self.height
        )
        return fig

    def render(self, report: ResourceReport) -> bytes:
        return figure_bytes(self.build_figure(report), self.image_format, self.width, self.height)
