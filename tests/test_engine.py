import logging

import pytest

from conftest import TWO_IMU_COLUMNS
from imu_gait_log import engine as engine_module
from imu_gait_log.catalog import list_channels
from imu_gait_log.config import ParserConfig
from imu_gait_log.diagnostics import CollectingSink
from imu_gait_log.engine import SensorLogEngine, ensure_sensor_content
from imu_gait_log.exceptions import InsufficientLinesError, InvalidContentError

FALLBACK_ROWS = [
    "0.0 " + " ".join(str(float(v)) for v in range(1, 13)),
    "0.01 " + " ".join(str(float(v)) for v in range(13, 25)),
]


def test_end_to_end_single_imu(one_imu_content):
    data = engine_module.extract_all_sensors(one_imu_content)

    assert data.timestamps == [0.0, 0.01, 0.02]
    assert list(data.imus) == ['IMU0']
    assert len(data.imus['IMU0'].acceleration.x) == 3
    assert data.imus['IMU0'].gyroscope.z == [3.0, 3.0, 3.0]
    assert engine_module.preview(one_imu_content).columns == 7


def test_array_length_parity(engine, sample_content):
    data = engine.extract_all_sensors(sample_content)

    assert data.row_count == 10
    for imu in data.imus.values():
        assert imu.lengths() == [len(data.timestamps)] * 6


def test_rows_after_sentinel_are_ignored(engine, sample_content):
    data = engine.extract_all_sensors(sample_content)

    assert data.timestamps[-1] == 0.09
    assert 0.10 not in data.timestamps
    assert 9.9 not in data.imus['IMU1'].acceleration.x
    assert data.metadata.region.end_line == 12


def test_extraction_is_idempotent(engine, sample_content):
    assert engine.extract_all_sensors(sample_content) == engine.extract_all_sensors(sample_content)


@pytest.mark.parametrize("content", ["", "#5 header\n# 7 columns\n", "#5 header\n\n\n# 7 x\n\n"])
def test_too_few_lines_is_structural_failure(engine, content):
    with pytest.raises(InsufficientLinesError, match="Invalid file format: insufficient lines"):
        engine.extract_all_sensors(content)


def test_header_without_data_rows(engine, make_content):
    data = engine.extract_all_sensors(make_content([]))

    assert data.timestamps == []
    assert data.imus['IMU0'].lengths() == [0] * 6


def test_analyze_structure(engine, sample_content):
    structure = engine.analyze_structure(sample_content)

    assert structure.header.device_id == '0804101CAAC4F4A0586C4FDAF5001902'
    assert len(structure.columns) == 12
    assert structure.sample_data[:2] == [0.0, 0.10]
    assert len(structure.sample_data) == 13
    assert structure.data_start_line == 2
    assert structure.schema.sensor_ids == ('1', '0')


def test_fallback_layout_for_unreadable_column_header(engine, sink, make_content):
    data = engine.extract_all_sensors(make_content(FALLBACK_ROWS, columns="#2 Garbage"))

    assert data.metadata.fallback_layout
    assert list(data.imus) == ['IMU1', 'IMU0']
    assert data.imus['IMU1'].acceleration.x == [1.0, 13.0]
    assert data.imus['IMU0'].gyroscope.z == [12.0, 24.0]
    assert any(e.level == logging.WARNING for e in sink.for_stage("schema"))


def test_structure_reports_fallback_layout(engine, make_content):
    structure = engine.analyze_structure(make_content(FALLBACK_ROWS, columns="#2 Garbage"))
    channels = list_channels(structure.schema)

    assert structure.fallback_layout
    assert len(structure.columns) == 12
    assert structure.sample_data[:2] == [0.0, 1.0]
    assert len(channels) == 12
    assert channels[0].key == 'acceleration_1_x'
    assert {c.id for c in channels} == {'1', '0'}


def test_structure_without_fallback(engine, sample_content):
    assert not engine.analyze_structure(sample_content).fallback_layout


def test_no_fallback_for_narrow_rows(engine, make_content):
    data = engine.extract_all_sensors(make_content(["0.0 1 2 3 4 5 6"], columns="#2 Garbage"))

    assert data.imus == {}
    assert data.timestamps == [0.0]
    assert not data.metadata.fallback_layout


def test_fallback_can_be_disabled(make_content):
    engine = SensorLogEngine(parser_config=ParserConfig(FALLBACK_LAYOUT=False), sink=CollectingSink())
    data = engine.extract_all_sensors(make_content(FALLBACK_ROWS, columns="#2 Garbage"))

    assert data.imus == {}


def test_filtered_extraction_picks_selected_channels(engine, sample_content):
    full = engine.extract_all_sensors(sample_content)
    filtered = engine.extract_filtered_sensors(sample_content, ['gyroscope_0_y', 'acceleration_1_x'])

    assert filtered.gyroscope.y == full.imus['IMU0'].gyroscope.y
    assert filtered.acceleration.x == full.imus['IMU1'].acceleration.x
    assert filtered.acceleration.y == []
    assert filtered.gyroscope.x == []
    assert filtered.timestamps == full.timestamps
    assert len(filtered.available_sensors) == 12


def test_filtered_extraction_first_selection_wins(engine, sample_content):
    full = engine.extract_all_sensors(sample_content)
    filtered = engine.extract_filtered_sensors(sample_content, ['acceleration_0_y', 'acceleration_1_y'])

    assert filtered.acceleration.y == full.imus['IMU0'].acceleration.y


def test_filtered_extraction_defaults_to_first_imu(engine, sample_content):
    full = engine.extract_all_sensors(sample_content)
    filtered = engine.extract_filtered_sensors(sample_content, [])

    assert filtered.acceleration == full.imus['IMU1'].acceleration
    assert filtered.gyroscope == full.imus['IMU1'].gyroscope


def test_filtered_extraction_ignores_bad_keys(engine, sink, sample_content):
    filtered = engine.extract_filtered_sensors(sample_content, ['bogus', 'acceleration_7_x'])

    assert filtered.acceleration.x == []
    assert filtered.gyroscope.z == []
    messages = [e.message for e in sink.for_stage("filter")]
    assert "ignoring selection" in messages
    assert "selected channel not in file" in messages


def test_available_sensors(engine, sample_content):
    sensors = engine.available_sensors(sample_content)
    assert [(s.type, s.id) for s in sensors] == [
        ('acceleration', '1'), ('gyroscope', '1'), ('acceleration', '0'), ('gyroscope', '0')
    ]


def test_gait_analysis_from_recording(engine, sample_content):
    data = engine.extract_all_sensors(sample_content)
    analysis = engine.compute_gait_analysis(data.imus['IMU1'], data.timestamps, 'P01', 'S01')

    assert analysis.step_metrics.step_time == pytest.approx(0.04)
    assert analysis.symmetry_index == 100
    assert analysis.range_of_motion.hip_flexion == pytest.approx(0.5)
    assert analysis.range_of_motion.knee_extension == pytest.approx(-1.0)
    assert engine.detect_abnormalities(data.imus['IMU1'], data.timestamps) == [
        "Low number of steps detected"
    ]


def test_preview_never_raises(engine):
    preview = engine.preview("only one line")
    assert (preview.columns, preview.sample, preview.header) == (0, [], "")


def test_preview_sample_is_truncated(engine, sample_content):
    preview = engine.preview(sample_content)

    assert preview.columns == 13
    assert len(preview.sample) == 10
    assert preview.header.startswith("#5 Software")


def test_declared_columns_match_first_row(engine, sample_content):
    # Declared and observed counts agree for a well-formed file
    assert engine.analyze_structure(sample_content).schema.total_columns == engine.preview(sample_content).columns


def test_html_is_rejected():
    with pytest.raises(InvalidContentError):
        ensure_sensor_content("<!DOCTYPE html><html><body>404</body></html>")
    with pytest.raises(InvalidContentError):
        ensure_sensor_content("<html>")
    assert ensure_sensor_content("#5 header\n" + TWO_IMU_COLUMNS).startswith("#5")


def test_stages_report_to_sink(engine, sink, sample_content):
    engine.extract_all_sensors(sample_content)
    stages = {e.stage for e in sink.events}
    assert {"header", "region", "demux", "extract"} <= stages
