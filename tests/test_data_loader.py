from datetime import datetime, timezone

import pytest

from imu_gait_log.data_loader import SensorLogLoader, split_recording_name, time_to_sample_index
from imu_gait_log.diagnostics import null_sink
from imu_gait_log.engine import SensorLogEngine
from imu_gait_log.exceptions import InvalidContentError


@pytest.fixture
def loader(tmp_path, sample_content):
    (tmp_path / "P01_S02.txt").write_text(sample_content, encoding="utf-8")
    (tmp_path / "broken.txt").write_text("<!DOCTYPE html>\n<html>Not found</html>\n", encoding="utf-8")
    (tmp_path / "notes.md").write_text("ignored", encoding="utf-8")
    return SensorLogLoader(tmp_path, engine=SensorLogEngine(sink=null_sink))


def test_list_recordings(loader):
    assert loader.list_recordings() == ["P01_S02", "broken"]


def test_load_recording(loader):
    recording = loader.load_recording("P01_S02")

    assert recording.patient_id == "P01"
    assert recording.session_id == "S02"
    assert recording.recording_date == datetime(2024, 3, 12, 9, 41, 27, tzinfo=timezone.utc)
    assert recording.data.row_count == 10
    assert len(recording.structure.columns) == 12
    assert recording.path.name == "P01_S02.txt"


def test_load_recording_with_explicit_ids(loader):
    recording = loader.load_recording("P01_S02", patient_id="X", session_id="Y")
    assert (recording.patient_id, recording.session_id) == ("X", "Y")


def test_missing_recording(loader):
    with pytest.raises(FileNotFoundError):
        loader.load_recording("P99_S01")


def test_html_recording_rejected(loader):
    with pytest.raises(InvalidContentError):
        loader.load_recording("broken")


def test_inventory(loader):
    frame = loader.recording_inventory()

    assert frame.height == 2
    assert frame['patient_id'].to_list() == ["P01", "broken"]
    assert frame['session_id'].to_list() == ["S02", "1"]


def test_split_recording_name():
    assert split_recording_name("P01_S02") == ("P01", "S02")
    assert split_recording_name("P01_S02_extra") == ("P01", "S02_extra")
    assert split_recording_name("walk") == ("walk", "1")


def test_time_to_sample_index():
    timestamps = [0.0, 0.1, 0.2]
    assert time_to_sample_index(timestamps, 0.15) == 2
    assert time_to_sample_index(timestamps, 0.0) == 0
    assert time_to_sample_index(timestamps, 5.0) == 3
