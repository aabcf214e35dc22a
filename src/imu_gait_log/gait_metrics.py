"""Heuristic gait metrics derived from one IMU's series.

All functions are pure. Steps are local maxima of vertical acceleration
(``acceleration.y``); left and right are assigned by detection order, not by
foot. The formulas are simple approximations and are kept that way.
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .config import GaitConfig
from .models import AXES, SENSOR_TYPES, AxisSeries, GaitAnalysis, GaitPhases, RangeOfMotion, SensorSeries, StepMetrics
from .signal_filters import SeriesFilter

# Gyroscope axis used as a proxy for each joint
JOINT_AXES = {'hip': 'x', 'knee': 'y', 'ankle': 'z'}

HIGH_VARIABILITY = "High variability in gait pattern"
LOW_STEP_COUNT = "Low number of steps detected"


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round halves away from zero for positive values (``2.5 -> 3``)."""
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


def detect_steps(values: Sequence[float], threshold: float = 0.3) -> List[int]:
    """
    Find step peaks with a 3-point local maximum test.

    Args:
        values: Vertical acceleration series
        threshold: Minimum peak value

    Returns:
        Ascending indices ``i`` with ``v[i-1] < v[i] > v[i+1]`` and ``v[i] > threshold``
    """
    v = np.asarray(values, dtype=float)
    if v.size < 3:
        return []
    mid = v[1:-1]
    is_peak = (mid > v[:-2]) & (mid > v[2:]) & (mid > threshold)
    return (np.flatnonzero(is_peak) + 1).tolist()


def step_intervals(steps: Sequence[int], timestamps: Sequence[float]) -> List[float]:
    """Time between consecutive steps in milliseconds."""
    if len(steps) < 2:
        return []
    times = np.asarray(timestamps, dtype=float)[list(steps)]
    return (np.diff(times) * 1000).tolist()


def calculate_cadence(steps: Sequence[int], timestamps: Sequence[float]) -> float:
    """
    Steps per minute between the first and last detected step.

    Returns:
        ``(n - 1) / span * 60``, or 0 with fewer than two steps or a
        non-positive span
    """
    if len(steps) < 2:
        return 0.0
    span = timestamps[steps[-1]] - timestamps[steps[0]]
    if span <= 0:
        return 0.0
    return (len(steps) - 1) / span * 60


def calculate_velocity(step_length: float, cadence: float) -> float:
    """Walking speed in m/s from step length (m) and cadence (steps/min)."""
    return step_length * cadence / 60


def split_left_right(steps: Sequence[int]) -> Tuple[List[int], List[int]]:
    """Alternate steps by detection order: even positions left, odd right."""
    return list(steps[0::2]), list(steps[1::2])


def _mean_step_time(steps: Sequence[int], timestamps: Sequence[float]) -> float:
    # A single step has no interval and counts as 0
    if len(steps) < 2:
        return 0.0
    times = np.asarray(timestamps, dtype=float)[list(steps)]
    return float(np.mean(np.diff(times)))


def calculate_symmetry(
    left_steps: Sequence[int],
    right_steps: Sequence[int],
    timestamps: Sequence[float],
) -> float:
    """
    Timing symmetry between left and right steps.

    Args:
        left_steps: Step indices assigned to the left side
        right_steps: Step indices assigned to the right side
        timestamps: Timestamps of the series the indices point into

    Returns:
        ``round(min(avg) / max(avg) * 100)`` over the mean inter-step time of
        each side. 100 when either side has no steps or neither side has an
        interval to measure; a one-step side against a measured side is 0.
    """
    if not left_steps or not right_steps:
        return 100.0

    left_avg = _mean_step_time(left_steps, timestamps)
    right_avg = _mean_step_time(right_steps, timestamps)
    longest = max(left_avg, right_avg)
    if longest <= 0:
        return 100.0
    return round_half_up(min(left_avg, right_avg) / longest * 100)


def gait_deviation_index(values: Sequence[float]) -> float:
    """Population standard deviation of vertical acceleration times 10, 2 decimals."""
    v = np.asarray(values, dtype=float)
    if v.size == 0:
        return 0.0
    return round_half_up(math.sqrt(float(np.var(v))) * 10, 2)


def range_of_motion(gyroscope: AxisSeries, scale: float = 0.1) -> RangeOfMotion:
    """
    Joint angle extrema approximated from raw gyroscope values.

    Args:
        gyroscope: Gyroscope series of one IMU
        scale: Factor converting raw units to approximate degrees

    Returns:
        RangeOfMotion with ``max * scale`` as flexion/dorsiflexion and
        ``min * scale`` as extension/plantarflexion; zeros for empty series
    """
    extrema = {}
    for joint, axis in JOINT_AXES.items():
        values = gyroscope.axis(axis)
        if values:
            extrema[joint] = (max(values) * scale, min(values) * scale)
        else:
            extrema[joint] = (0.0, 0.0)

    return RangeOfMotion(
        hip_flexion=extrema['hip'][0],
        hip_extension=extrema['hip'][1],
        knee_flexion=extrema['knee'][0],
        knee_extension=extrema['knee'][1],
        ankle_dorsiflexion=extrema['ankle'][0],
        ankle_plantarflexion=extrema['ankle'][1],
    )


def joint_range(gyroscope: AxisSeries, joint: str) -> Dict[str, float]:
    """Raw min, max and range of the gyroscope axis mapped to ``joint``."""
    axis = JOINT_AXES.get(joint)
    values = gyroscope.axis(axis) if axis else []
    if not values:
        return {'min': 0.0, 'max': 0.0, 'range': 0.0}
    low, high = min(values), max(values)
    return {'min': low, 'max': high, 'range': high - low}


def describe_series(series: SensorSeries) -> Dict[str, Dict[str, Dict[str, float]]]:
    """Mean, std, min, max and variance of every axis, keyed by sensor type then axis."""
    stats = {}
    for sensor_type in SENSOR_TYPES:
        stats[sensor_type] = {}
        for axis in AXES:
            v = np.asarray(series.sensor(sensor_type).axis(axis), dtype=float)
            if v.size == 0:
                stats[sensor_type][axis] = dict.fromkeys(('mean', 'std', 'min', 'max', 'variance'), 0.0)
                continue
            stats[sensor_type][axis] = {
                'mean': float(np.mean(v)),
                'std': float(np.std(v)),
                'min': float(np.min(v)),
                'max': float(np.max(v)),
                'variance': float(np.var(v)),
            }
    return stats


def gait_phases(config: Optional[GaitConfig] = None) -> GaitPhases:
    """Typical phase split; not measured from the signal."""
    config = config or GaitConfig()
    return GaitPhases(
        stance_phase=config.STANCE_PHASE,
        swing_phase=config.SWING_PHASE,
        double_support=config.DOUBLE_SUPPORT,
    )


def step_metrics(
    steps: Sequence[int],
    timestamps: Sequence[float],
    config: Optional[GaitConfig] = None,
) -> StepMetrics:
    """
    Step timing metrics with nominal step length and width.

    Args:
        steps: Detected step indices
        timestamps: Series timestamps in seconds
        config: Gait configuration

    Returns:
        StepMetrics; timing fields are 0 with fewer than two steps
    """
    config = config or GaitConfig()
    cadence = calculate_cadence(steps, timestamps)
    step_time = 0.0
    if len(steps) >= 2:
        step_time = (timestamps[steps[-1]] - timestamps[steps[0]]) / (len(steps) - 1)

    return StepMetrics(
        step_length=config.STEP_LENGTH,
        step_time=step_time,
        step_width=config.STEP_WIDTH,
        cadence=cadence,
        velocity=calculate_velocity(config.STEP_LENGTH, cadence),
    )


def vertical_signal(series: SensorSeries, config: Optional[GaitConfig] = None) -> np.ndarray:
    """Vertical acceleration used for step detection, smoothed if configured."""
    config = config or GaitConfig()
    values = np.asarray(series.acceleration.y, dtype=float)
    if config.SMOOTHING is None or values.size == 0:
        return values
    return SeriesFilter(config.SMOOTHING).filter_batch(values)


def detect_abnormalities(
    series: SensorSeries,
    timestamps: Sequence[float],
    config: Optional[GaitConfig] = None,
) -> List[str]:
    """
    Flag recordings that look unusual.

    Args:
        series: Series of one IMU
        timestamps: Series timestamps
        config: Gait configuration with the flag thresholds

    Returns:
        Human-readable flags, possibly empty
    """
    config = config or GaitConfig()
    flags = []

    acc_y = np.asarray(series.acceleration.y, dtype=float)
    variance = float(np.var(acc_y)) if acc_y.size else 0.0
    if variance > config.VARIANCE_THRESHOLD:
        flags.append(HIGH_VARIABILITY)

    steps = detect_steps(vertical_signal(series, config), config.STEP_THRESHOLD)
    if len(steps) < config.MIN_STEP_COUNT:
        flags.append(LOW_STEP_COUNT)

    symmetry = calculate_symmetry(*split_left_right(steps), timestamps)
    if symmetry < config.SYMMETRY_THRESHOLD:
        flags.append(f"Significant asymmetry detected ({symmetry:.0f}%)")

    return flags


def compute_gait_analysis(
    series: SensorSeries,
    timestamps: Sequence[float],
    patient_id: str,
    session_id: str,
    config: Optional[GaitConfig] = None,
) -> GaitAnalysis:
    """
    Assemble the full gait summary of one recording.

    Args:
        series: Series of one IMU
        timestamps: Series timestamps in seconds
        patient_id: Patient identifier
        session_id: Session identifier
        config: Gait configuration

    Returns:
        GaitAnalysis keyed by ``(patient_id, session_id)``
    """
    config = config or GaitConfig()
    steps = detect_steps(vertical_signal(series, config), config.STEP_THRESHOLD)

    return GaitAnalysis(
        patient_id=patient_id,
        session_id=session_id,
        gait_phases=gait_phases(config),
        step_metrics=step_metrics(steps, timestamps, config),
        range_of_motion=range_of_motion(series.gyroscope, config.ROM_SCALE),
        symmetry_index=calculate_symmetry(*split_left_right(steps), timestamps),
        gait_deviation_index=gait_deviation_index(series.acceleration.y),
    )
