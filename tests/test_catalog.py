import pytest

from conftest import TWO_IMU_COLUMNS
from imu_gait_log.catalog import build_catalog, list_channels, parse_selection_key, selection_key
from imu_gait_log.header_parser import parse_column_header

TWO_IMU = parse_column_header(TWO_IMU_COLUMNS).value


def test_catalog_groups_by_type_and_id_in_first_seen_order():
    catalog = build_catalog(TWO_IMU)

    assert [(s.type, s.id) for s in catalog] == [
        ('acceleration', '1'),
        ('gyroscope', '1'),
        ('acceleration', '0'),
        ('gyroscope', '0'),
    ]
    assert all(s.available_axes == ('x', 'y', 'z') for s in catalog)


def test_catalog_accepts_plain_column_list():
    schema = parse_column_header("# 3 1xClk[s]_2xAccelerationId0[g] 3 1").value
    catalog = build_catalog(list(schema.columns))

    assert len(catalog) == 1
    assert catalog[0].available_axes == ('x', 'y')


def test_list_channels_one_per_column():
    channels = list_channels(TWO_IMU)

    assert len(channels) == 12
    assert channels[0].key == 'acceleration_1_x'
    assert channels[-1].key == 'gyroscope_0_z'


def test_selection_keys():
    assert selection_key('gyroscope', '0', 'y') == 'gyroscope_0_y'

    channel = parse_selection_key('gyroscope_0_y')
    assert (channel.type, channel.id, channel.axis) == ('gyroscope', '0', 'y')


@pytest.mark.parametrize("key", ["magnetometer_0_x", "acceleration_0", "acceleration_0_w"])
def test_invalid_selection_key(key):
    with pytest.raises(ValueError):
        parse_selection_key(key)
