from datetime import datetime, timezone

from conftest import FILE_HEADER, TWO_IMU_COLUMNS
from imu_gait_log.diagnostics import CollectingSink
from imu_gait_log.header_parser import (
    extract_sensor_types,
    fallback_schema,
    parse_column_header,
    parse_file_header,
)


def test_sensor_descriptor_expands_to_three_axes():
    result = parse_column_header("# 4 1xClk[s]_3xAccelerationId2[g] 4 1")
    columns = result.value.columns

    assert not result.is_default
    assert len(columns) == 3
    assert [c.axis for c in columns] == ['x', 'y', 'z']
    assert all(c.type == 'acceleration' and c.sensor_id == '2' and c.unit == 'g' for c in columns)
    assert [c.index for c in columns] == [1, 2, 3]


def test_axis_count_is_capped_at_three():
    columns = parse_column_header("# 7 1xClk[s]_6xGyroscopeId0[°/s] 7 1").value.columns
    assert [c.axis for c in columns] == ['x', 'y', 'z']


def test_two_axis_descriptor():
    columns = parse_column_header("# 3 1xClk[s]_2xAccelerationId0[g] 3 1").value.columns
    assert [c.axis for c in columns] == ['x', 'y']


def test_two_imu_schema():
    schema = parse_column_header(TWO_IMU_COLUMNS).value

    assert schema.total_columns == 13
    assert schema.sensor_ids == ('1', '0')
    assert len(schema.columns) == 12
    assert schema.timestamp_column is not None and schema.timestamp_column.index == 0
    assert schema.columns[0].name == 'acceleration_1_x'
    assert schema.columns[3].name == 'gyroscope_1_x'
    assert schema.columns[6].name == 'acceleration_0_x'
    # Trailing integers after the last descriptor do not break the unit
    assert schema.columns[-1].unit == '°/s'


def test_adc_values_are_counted_without_columns():
    schema = parse_column_header(
        "# 9 1xClk[s]_3xAccelerationId0[g]_2xADCValueId0_3xGyroscopeId0[°/s] 9 1"
    ).value

    assert schema.has_adc_values
    assert schema.adc_value_count == 2
    assert len(schema.columns) == 6
    assert [c.index for c in schema.columns if c.type == 'gyroscope'] == [4, 5, 6]


def test_gait_parameters_set_flag_only():
    schema = parse_column_header(
        "# 6 1xClk[s]_3xAccelerationId0[g]_1xStepTime[s]_1xSymmetry[%] 6 1"
    ).value

    assert schema.has_gait_parameters
    assert schema.gait_parameter_names == ('1xStepTime[s]', '1xSymmetry[%]')
    assert len(schema.columns) == 3


def test_unmatched_column_header_returns_empty_default():
    sink = CollectingSink()
    result = parse_column_header("not a header", sink)

    assert result.is_default
    assert result.value.is_empty
    assert result.value.total_columns == 0
    assert result.value.columns == ()
    assert sink.for_stage("header")


def test_file_header_fields():
    result = parse_file_header(FILE_HEADER)
    header = result.value

    assert not result.is_default
    assert result.defaulted == ()
    assert header.software_version == '1.35.0'
    assert header.firmware_version == 'V4.0.16'
    assert header.device_id == '0804101CAAC4F4A0586C4FDAF5001902'
    assert header.sensor_types == ('Acceleration', 'Gyroscope')
    assert header.timestamp == datetime(2024, 3, 12, 9, 41, 27, tzinfo=timezone.utc)
    assert header.original_header == FILE_HEADER


def test_file_header_defaults_everything():
    result = parse_file_header("#5")

    assert result.is_default
    assert set(result.defaulted) == {
        'software_version', 'firmware_version', 'device_id', 'sensor_types', 'timestamp'
    }
    assert result.value.software_version == 'Unknown'
    assert result.value.timestamp.tzinfo is not None


def test_sensor_type_codes():
    assert extract_sensor_types("x_(0,1,2)_y") == ['Acceleration', 'Gyroscope']
    assert extract_sensor_types("x_(1,9)_y") == ['Acceleration', 'Unknown9']
    assert extract_sensor_types("plain Gyroscope text") == ['Gyroscope']


def test_fallback_schema_layout():
    schema = fallback_schema()

    assert schema.total_columns == 13
    assert schema.sensor_ids == ('1', '0')
    assert [c.name for c in schema.columns[:3]] == ['acceleration_1_x', 'acceleration_1_y', 'acceleration_1_z']
    assert schema.columns[9].name == 'gyroscope_0_x'
