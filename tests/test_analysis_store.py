import pytest

from imu_gait_log.analysis_store import GaitAnalysisStore
from imu_gait_log.models import GaitAnalysis, GaitPhases, RangeOfMotion, StepMetrics


def make_analysis(patient_id, session_id, cadence=110.0, symmetry=90.0, deviation=2.0, step_length=0.7):
    return GaitAnalysis(
        patient_id=patient_id,
        session_id=session_id,
        gait_phases=GaitPhases(60.0, 40.0, 10.0),
        step_metrics=StepMetrics(step_length, 0.55, 0.1, cadence, step_length * cadence / 60),
        range_of_motion=RangeOfMotion(),
        symmetry_index=symmetry,
        gait_deviation_index=deviation,
    )


def test_record_replaces_same_key():
    store = GaitAnalysisStore()
    store.record(make_analysis("P01", "S01", cadence=100.0))
    store.record(make_analysis("P01", "S01", cadence=120.0))

    assert len(store) == 1
    assert store.get("P01", "S01").step_metrics.cadence == 120.0
    assert store.current.step_metrics.cadence == 120.0


def test_for_patient():
    store = GaitAnalysisStore()
    store.record(make_analysis("P01", "S01"))
    store.record(make_analysis("P01", "S02"))
    store.record(make_analysis("P02", "S01"))

    assert [a.session_id for a in store.for_patient("P01")] == ["S01", "S02"]
    assert ("P02", "S01") in store
    assert store.get("P03", "S01") is None


def test_compare():
    store = GaitAnalysisStore()
    store.record(make_analysis("P01", "S01", cadence=100.0, symmetry=80.0, deviation=1.0))
    store.record(make_analysis("P01", "S02", cadence=120.0, symmetry=100.0, deviation=3.0, step_length=0.8))

    summary = store.compare([("P01", "S01"), ("P01", "S02"), ("P09", "S09")])

    assert summary['avg_symmetry'] == pytest.approx(90.0)
    assert summary['avg_deviation'] == pytest.approx(2.0)
    assert summary['cadence_range'] == {'min': 100.0, 'max': 120.0}
    assert summary['step_length_range'] == {'min': 0.7, 'max': 0.8}
    assert len(summary['analyses']) == 2


def test_compare_nothing_selected():
    summary = GaitAnalysisStore().compare([("P01", "S01")])

    assert summary['avg_symmetry'] is None
    assert summary['analyses'] == []


def test_to_frame_and_clear():
    store = GaitAnalysisStore()
    store.record(make_analysis("P01", "S01"))
    store.record(make_analysis("P02", "S01"))

    frame = store.to_frame()
    assert frame.height == 2
    assert frame['patient_id'].to_list() == ["P01", "P02"]

    store.clear()
    assert len(store) == 0
    assert store.current is None
    assert store.to_frame().height == 0
