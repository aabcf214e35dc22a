from pathlib import Path

import pytest

from imu_gait_log.diagnostics import CollectingSink
from imu_gait_log.engine import SensorLogEngine
from imu_gait_log.models import AxisSeries, SensorSeries

DATA_DIR = Path(__file__).resolve().parent / "data"

FILE_HEADER = (
    "#5 Software_1.35.0_Firmware_V4.0.16_0804101CAAC4F4A0586C4FDAF5001902"
    "_(1,2)_UTC_2024-03-12T09:41:27.000Z"
)
ONE_IMU_COLUMNS = "# 7 1xClk[s]_3xAccelerationId0[g]_3xGyroscopeId0[°/s] 7 100"
TWO_IMU_COLUMNS = (
    "# 13 1xClk[s]_3xAccelerationId1[g]_3xGyroscopeId1[°/s]"
    "_3xAccelerationId0[g]_3xGyroscopeId0[°/s] 13 14033"
)


def build_content(rows, columns=ONE_IMU_COLUMNS, header=FILE_HEADER, trailer=("#16 Clk AccX AccY AccZ",)):
    return "\n".join([header, columns, *rows, *trailer]) + "\n"


def series_from(acc_y, gyro=None):
    """SensorSeries with only vertical acceleration (and optionally gyro) populated."""
    n = len(acc_y)
    gyro = gyro or AxisSeries([0.0] * n, [0.0] * n, [0.0] * n)
    return SensorSeries(
        acceleration=AxisSeries([0.0] * n, list(acc_y), [0.0] * n),
        gyroscope=gyro,
    )


@pytest.fixture
def make_content():
    return build_content


@pytest.fixture
def one_imu_content():
    return build_content([
        "0.0 0.1 0.2 0.3 1.0 2.0 3.0",
        "0.01 0.1 0.2 0.3 1.0 2.0 3.0",
        "0.02 0.1 0.2 0.3 1.0 2.0 3.0",
    ])


@pytest.fixture
def sample_path():
    return DATA_DIR / "P01_S01.txt"


@pytest.fixture
def sample_content(sample_path):
    return sample_path.read_text(encoding="utf-8")


@pytest.fixture
def sink():
    return CollectingSink()


@pytest.fixture
def engine(sink):
    return SensorLogEngine(sink=sink)
