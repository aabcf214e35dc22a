"""Metrics display helpers for the gait analysis viewer."""

from typing import Any, Dict, List, Optional, Tuple

from .models import GaitAnalysis

GREEN, YELLOW, RED = "🟢", "🟡", "🔴"

TOOLTIPS = {
    'cadence': "Steps per minute between the first and last detected step",
    'step_time': "Mean time between detected steps",
    'velocity': "Nominal step length times cadence",
    'symmetry_index': "Timing similarity of alternating steps (100 = identical)",
    'gait_deviation_index': "Standard deviation of vertical acceleration x10 (lower is steadier)",
    'step_count': "Peaks of vertical acceleration above the step threshold",
}


def get_metric_status(value: Optional[float], metric_type: str) -> Tuple[str, str]:
    """
    Determine status (good/acceptable/poor) based on metric value and type.

    Args:
        value: The metric value to evaluate
        metric_type: The type of metric being evaluated

    Returns:
        Tuple of (emoji, status_text)
    """
    if value is None:
        return "", ""

    status_ranges = {
        'symmetry_index': [
            (lambda v: v >= 95, GREEN, "Excellent"),
            (lambda v: v >= 85, YELLOW, "Good"),
            (lambda v: True, RED, "Asymmetric")
        ],
        'cadence': [
            (lambda v: 100 <= v <= 120, GREEN, "Walking"),
            (lambda v: 160 <= v <= 180, GREEN, "Running"),
            (lambda v: 90 <= v <= 130 or 150 <= v <= 190, YELLOW, "Moderate"),
            (lambda v: True, YELLOW, "Variable")
        ],
        'gait_deviation_index': [
            (lambda v: v < 2, GREEN, "Steady"),
            (lambda v: v < 5, YELLOW, "Acceptable"),
            (lambda v: True, RED, "High")
        ],
        'velocity': [
            (lambda v: 1.0 <= v <= 1.6, GREEN, "Typical"),
            (lambda v: 0.6 <= v <= 2.0, YELLOW, "Acceptable"),
            (lambda v: True, RED, "Atypical")
        ],
    }

    ranges = status_ranges.get(metric_type, [])
    for condition, emoji, status in ranges:
        if condition(value):
            return emoji, status

    return "", ""


def format_metric_value(
    value: Optional[float],
    unit: str = "",
    precision: int = 1,
    emoji: str = "",
) -> str:
    """
    Format metric value with optional emoji.

    Args:
        value: The metric value to format
        unit: The unit string to append
        precision: Decimal places
        emoji: Optional emoji indicator

    Returns:
        Formatted metric string, "--" for missing values
    """
    if value is None:
        return "--"

    formatted = f"{value:.{precision}f}{unit}"
    if emoji:
        return f"{emoji} {formatted}"
    return formatted


def summarize_analysis(analysis: GaitAnalysis, step_count: Optional[int] = None) -> Dict[str, str]:
    """Display strings for the headline metrics of an analysis."""
    metrics = analysis.step_metrics
    cadence_emoji, _ = get_metric_status(metrics.cadence, 'cadence')
    symmetry_emoji, _ = get_metric_status(analysis.symmetry_index, 'symmetry_index')
    deviation_emoji, _ = get_metric_status(analysis.gait_deviation_index, 'gait_deviation_index')
    velocity_emoji, _ = get_metric_status(metrics.velocity, 'velocity')

    return {
        'step_count': str(step_count) if step_count is not None else "--",
        'cadence': format_metric_value(metrics.cadence, "", 1, cadence_emoji),
        'step_time': format_metric_value(metrics.step_time, " s", 3),
        'velocity': format_metric_value(metrics.velocity, " m/s", 2, velocity_emoji),
        'symmetry_index': format_metric_value(analysis.symmetry_index, "%", 0, symmetry_emoji),
        'gait_deviation_index': format_metric_value(analysis.gait_deviation_index, "", 2, deviation_emoji),
    }


def display_gait_analysis(
    placeholders: Dict[str, Any],
    analysis: GaitAnalysis,
    step_count: Optional[int] = None,
    tooltips: Dict[str, str] = TOOLTIPS,
):
    """
    Display headline gait metrics with color-coded status indicators.

    Args:
        placeholders: Dictionary of Streamlit placeholder objects
        analysis: Gait analysis to show
        step_count: Number of detected steps, if known
        tooltips: Tooltip text dictionary
    """
    summary = summarize_analysis(analysis, step_count)
    placeholders['step_count'].metric("Steps", value=summary['step_count'], help=tooltips['step_count'])
    placeholders['cadence'].metric("Cadence (steps/min)", value=summary['cadence'], help=tooltips['cadence'])
    placeholders['step_time'].metric("Step Time", value=summary['step_time'], help=tooltips['step_time'])
    placeholders['velocity'].metric("Velocity", value=summary['velocity'], help=tooltips['velocity'])
    placeholders['symmetry_index'].metric(
        "Symmetry Index", value=summary['symmetry_index'], help=tooltips['symmetry_index']
    )
    placeholders['gait_deviation_index'].metric(
        "Gait Deviation", value=summary['gait_deviation_index'], help=tooltips['gait_deviation_index']
    )


def display_empty_metrics(placeholders: Dict[str, Any], tooltips: Dict[str, str] = TOOLTIPS):
    """Display empty metric placeholders before a recording is analysed."""
    placeholders['step_count'].metric("Steps", value="--", help=tooltips['step_count'])
    placeholders['cadence'].metric("Cadence (steps/min)", value="--", help=tooltips['cadence'])
    placeholders['step_time'].metric("Step Time", value="--", help=tooltips['step_time'])
    placeholders['velocity'].metric("Velocity", value="--", help=tooltips['velocity'])
    placeholders['symmetry_index'].metric("Symmetry Index", value="--", help=tooltips['symmetry_index'])
    placeholders['gait_deviation_index'].metric("Gait Deviation", value="--", help=tooltips['gait_deviation_index'])


def range_of_motion_rows(analysis: GaitAnalysis) -> List[Dict[str, Any]]:
    """Joint extrema as table rows (joint, flexion, extension) in approximate degrees."""
    rom = analysis.range_of_motion
    return [
        {'Joint': 'Hip', 'Flexion': rom.hip_flexion, 'Extension': rom.hip_extension},
        {'Joint': 'Knee', 'Flexion': rom.knee_flexion, 'Extension': rom.knee_extension},
        {'Joint': 'Ankle', 'Flexion': rom.ankle_dorsiflexion, 'Extension': rom.ankle_plantarflexion},
    ]


def display_abnormalities(container: Any, flags: List[str]):
    """
    Show abnormality flags, or a success note when there are none.

    Args:
        container: Streamlit container (or the ``st`` module)
        flags: Flags from abnormality detection
    """
    if not flags:
        container.success("No abnormalities detected")
        return
    for flag in flags:
        container.warning(flag)
