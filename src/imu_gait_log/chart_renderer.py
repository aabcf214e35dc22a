"""Chart rendering utilities for sensor log recordings."""

from typing import List, Optional, Sequence, Tuple

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .config import UIConfig
from .models import AXES, AxisSeries, MultiSensorData

Y_TITLES = {
    'acceleration': "Acceleration (g)",
    'gyroscope': "Ang. velocity (deg/s)",
}


class ChartRenderer:
    """Handles creation and styling of Plotly charts for IMU series."""

    def __init__(self, ui_config: UIConfig):
        """
        Initialize the chart renderer.

        Args:
            ui_config: UI configuration object
        """
        self.config = ui_config

    def _axis_traces(
        self,
        timestamps: Sequence[float],
        series: AxisSeries,
        show_legend: bool = True,
    ) -> List[go.Scatter]:
        factor = self.config.DOWNSAMPLE_FACTOR
        traces = []
        for axis in AXES:
            values = series.axis(axis)
            if not values:
                continue
            times, values = self.downsample_data(list(timestamps), list(values), factor)
            traces.append(go.Scatter(
                x=times,
                y=values,
                mode='lines',
                line=dict(color=self.config.AXIS_COLORS[axis], width=self.config.CHART_LINE_WIDTH),
                name=axis.upper(),
                legendgroup=axis,
                showlegend=show_legend,
            ))
        return traces

    def _step_trace(
        self,
        timestamps: Sequence[float],
        values: Sequence[float],
        steps: Sequence[int],
        show_legend: bool = True,
    ) -> Optional[go.Scatter]:
        points = [i for i in steps if i < len(timestamps) and i < len(values)]
        if not points:
            return None
        return go.Scatter(
            x=[timestamps[i] for i in points],
            y=[values[i] for i in points],
            mode='markers',
            marker=dict(symbol='circle', size=7, color=self.config.STEP_MARKER_COLOR, line=dict(width=0)),
            name='Step',
            legendgroup='step',
            showlegend=show_legend,
            hoverinfo='skip',
        )

    def _style(self, fig: go.Figure, title: str = "") -> go.Figure:
        fig.update_layout(
            title=title or None,
            height=self.config.CHART_HEIGHT,
            margin=self.config.CHART_MARGIN,
            legend=dict(
                orientation="h",
                yanchor="bottom",
                y=1.02,
                xanchor="left",
                x=0,
                bgcolor="rgba(255, 255, 255, 0.8)",
            ),
            hovermode='x unified',
            plot_bgcolor='white',
            paper_bgcolor='white',
        )
        fig.update_xaxes(showgrid=True, gridcolor='rgba(220, 220, 220, 0.3)', zeroline=False)
        fig.update_yaxes(
            showgrid=True,
            gridcolor='rgba(220, 220, 220, 0.3)',
            zeroline=True,
            zerolinecolor='rgba(200, 200, 200, 0.5)',
        )
        return fig

    def create_axis_chart(
        self,
        timestamps: Sequence[float],
        series: AxisSeries,
        sensor_type: str = 'acceleration',
        title: str = "",
        steps: Optional[Sequence[int]] = None,
    ) -> go.Figure:
        """
        Create a chart of the x, y and z series of one sensor.

        Args:
            timestamps: Time values (x-axis)
            series: Per-axis values; empty axes are skipped
            sensor_type: 'acceleration' or 'gyroscope', selects the y-axis title
            title: Optional chart title
            steps: Optional step indices, marked on the vertical (y) series

        Returns:
            Plotly Figure object
        """
        fig = go.Figure()
        for trace in self._axis_traces(timestamps, series):
            fig.add_trace(trace)

        if steps:
            marker = self._step_trace(timestamps, series.y, steps)
            if marker is not None:
                fig.add_trace(marker)

        self._style(fig, title)
        fig.update_xaxes(title_text="Time (s)")
        fig.update_yaxes(title_text=Y_TITLES.get(sensor_type, sensor_type))
        return fig

    def create_imu_chart(
        self,
        data: MultiSensorData,
        imu_key: str,
        steps: Optional[Sequence[int]] = None,
    ) -> go.Figure:
        """
        Create stacked acceleration and gyroscope subplots for one IMU.

        Args:
            data: Extracted recording
            imu_key: IMU to plot, e.g. ``IMU0``
            steps: Optional step indices, marked on vertical acceleration

        Returns:
            Plotly Figure with subplots

        Raises:
            KeyError: If the IMU is not in the recording
        """
        imu = data.imus[imu_key]
        fig = make_subplots(
            rows=2, cols=1,
            shared_xaxes=True,
            subplot_titles=("Acceleration", "Gyroscope"),
            vertical_spacing=0.12,
        )

        for trace in self._axis_traces(data.timestamps, imu.acceleration):
            fig.add_trace(trace, row=1, col=1)
        for trace in self._axis_traces(data.timestamps, imu.gyroscope, show_legend=False):
            fig.add_trace(trace, row=2, col=1)

        if steps:
            marker = self._step_trace(data.timestamps, imu.acceleration.y, steps)
            if marker is not None:
                fig.add_trace(marker, row=1, col=1)

        self._style(fig, imu_key)
        fig.update_xaxes(title_text="Time (s)", row=2, col=1)
        fig.update_yaxes(title_text=Y_TITLES['acceleration'], row=1, col=1)
        fig.update_yaxes(title_text=Y_TITLES['gyroscope'], row=2, col=1)
        return fig

    def create_comparison_chart(self, data: MultiSensorData, sensor_type: str, axis: str) -> go.Figure:
        """
        Create one subplot per IMU for a single sensor axis.

        Args:
            data: Extracted recording
            sensor_type: 'acceleration' or 'gyroscope'
            axis: 'x', 'y' or 'z'

        Returns:
            Plotly Figure with one row per IMU
        """
        keys = list(data.imus)
        fig = make_subplots(
            rows=max(1, len(keys)), cols=1,
            shared_xaxes=True,
            subplot_titles=tuple(keys) or ("No data",),
            vertical_spacing=0.08,
        )
        for row, key in enumerate(keys, start=1):
            values = data.imus[key].sensor(sensor_type).axis(axis)
            times, values = self.downsample_data(list(data.timestamps), list(values), self.config.DOWNSAMPLE_FACTOR)
            fig.add_trace(
                go.Scatter(
                    x=times,
                    y=values,
                    mode='lines',
                    line=dict(color=self.config.AXIS_COLORS[axis], width=self.config.CHART_LINE_WIDTH),
                    name=key,
                    showlegend=False,
                ),
                row=row, col=1
            )

        self._style(fig, f"{sensor_type.capitalize()} {axis.upper()}")
        fig.update_yaxes(title_text=Y_TITLES.get(sensor_type, sensor_type))
        return fig

    def downsample_data(
        self,
        times: List[float],
        values: List[float],
        factor: int
    ) -> Tuple[List[float], List[float]]:
        """
        Downsample data for display performance.

        Args:
            times: List of time values
            values: List of sensor values
            factor: Downsampling factor (keep every Nth point)

        Returns:
            Tuple of (downsampled_times, downsampled_values)
        """
        factor = max(1, factor)
        return times[::factor], values[::factor]
