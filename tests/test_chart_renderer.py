import pytest

from imu_gait_log.chart_renderer import ChartRenderer
from imu_gait_log.config import UIConfig
from imu_gait_log.engine import SensorLogEngine
from imu_gait_log.diagnostics import null_sink
from imu_gait_log.models import AxisSeries


@pytest.fixture
def renderer():
    return ChartRenderer(UIConfig())


@pytest.fixture
def sample_data(sample_content):
    return SensorLogEngine(sink=null_sink).extract_all_sensors(sample_content)


def test_imu_chart_has_axis_and_step_traces(renderer, sample_data):
    fig = renderer.create_imu_chart(sample_data, 'IMU1', steps=[2, 6])

    assert len(fig.data) == 7
    # Lines are downsampled, step markers are not
    assert len(fig.data[0].x) == 5
    assert list(fig.data[-1].x) == [0.02, 0.06]
    assert list(fig.data[-1].y) == [0.8, 0.9]


def test_imu_chart_unknown_imu(renderer, sample_data):
    with pytest.raises(KeyError):
        renderer.create_imu_chart(sample_data, 'IMU7')


def test_axis_chart_skips_empty_axes(renderer):
    fig = renderer.create_axis_chart([0.0, 0.01], AxisSeries(x=[1.0, 2.0], y=[], z=[]), 'gyroscope')

    assert len(fig.data) == 1
    assert fig.layout.yaxis.title.text == "Ang. velocity (deg/s)"


def test_comparison_chart_one_row_per_imu(renderer, sample_data):
    fig = renderer.create_comparison_chart(sample_data, 'acceleration', 'y')
    assert [trace.name for trace in fig.data] == ['IMU1', 'IMU0']


def test_downsample_data(renderer):
    assert renderer.downsample_data([0, 1, 2, 3], [4, 5, 6, 7], 2) == ([0, 2], [4, 6])
    assert renderer.downsample_data([0, 1], [4, 5], 0) == ([0, 1], [4, 5])
