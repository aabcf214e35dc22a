"""Configuration settings for IMU gait log parsing and analysis."""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .signal_filters import FilterConfig


@dataclass
class ParserConfig:
    """Configuration for header parsing and data extraction."""

    SENTINEL_MARKER: str = "#16"  # End of data block, labels follow
    HEADER_LINE_COUNT: int = 2  # Metadata line + column schema line
    MIN_LINES: int = 3  # Fewer non-empty lines is a structural failure
    PREVIEW_SAMPLE_SIZE: int = 10
    IMU_KEY_PREFIX: str = "IMU"
    HTML_MARKERS: Tuple[str, ...] = ("<!DOCTYPE html>", "<html")

    # Last-resort layout for files whose column header cannot be parsed
    FALLBACK_LAYOUT: bool = True
    FALLBACK_MIN_VALUES: int = 13  # timestamp + 2 IMUs x (3 accel + 3 gyro)


@dataclass
class GaitConfig:
    """Configuration for heuristic gait metrics."""

    STEP_THRESHOLD: float = 0.3  # Minimum vertical acceleration peak (g)
    STEP_LENGTH: float = 0.7  # Nominal step length (m), not measured
    STEP_WIDTH: float = 0.1  # Nominal step width (m), not measured
    ROM_SCALE: float = 0.1  # Raw gyro units to approximate degrees

    # Typical gait phase split (% of cycle)
    STANCE_PHASE: float = 60.0
    SWING_PHASE: float = 40.0
    DOUBLE_SUPPORT: float = 10.0

    # Abnormality flags
    VARIANCE_THRESHOLD: float = 0.5
    MIN_STEP_COUNT: int = 5
    SYMMETRY_THRESHOLD: float = 85.0

    # Optional smoothing of vertical acceleration before step detection
    SMOOTHING: Optional[FilterConfig] = None


@dataclass
class UIConfig:
    """Configuration for the recording viewer."""

    DATA_DIR: Path = Path("data/raw")
    FILE_PATTERN: str = "*.txt"
    CHART_HEIGHT: int = 500
    CHART_LINE_WIDTH: float = 1.5
    CHART_MARGIN: dict = field(default_factory=lambda: dict(l=50, r=20, t=60, b=50))
    AXIS_COLORS: dict = field(default_factory=lambda: {
        'x': '#d68032',  # Orange
        'y': '#2a9d8f',  # Teal
        'z': '#264653',  # Charcoal
    })
    STEP_MARKER_COLOR: str = 'rgba(0, 0, 0, 0.5)'
    DOWNSAMPLE_FACTOR: int = 2  # Display every Nth point
    SAMPLING_RATE: int = 100  # Hz, nominal rate of the logger
