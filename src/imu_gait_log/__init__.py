"""Parsing and gait analysis of multi-IMU sensor log recordings."""

from .config import ParserConfig, GaitConfig, UIConfig
from .exceptions import SensorLogError, InsufficientLinesError, InvalidContentError
from .diagnostics import DiagnosticEvent, LoggingSink, CollectingSink, null_sink
from .models import (
    ParseResult,
    ColumnDescriptor,
    ColumnSchema,
    FileHeader,
    DataRegion,
    AxisSeries,
    SensorSeries,
    MultiSensorData,
    SensorDescriptor,
    SensorChannel,
    FilteredSensorData,
    FormatPreview,
    FileStructure,
    GaitPhases,
    StepMetrics,
    RangeOfMotion,
    GaitAnalysis,
)
from .header_parser import parse_column_header, parse_file_header
from .data_region import locate_data_region
from .demux import demux_rows
from .catalog import build_catalog, list_channels
from .engine import (
    SensorLogEngine,
    ensure_sensor_content,
    analyze_structure,
    extract_all_sensors,
    extract_filtered_sensors,
    available_sensors,
    preview,
    compute_gait_analysis,
    detect_abnormalities,
)
from .gait_metrics import detect_steps, calculate_symmetry, describe_series
from .signal_filters import FilterConfig, SeriesFilter, normalize_series, filter_noise
from .analysis_store import GaitAnalysisStore
from .data_loader import SensorLogLoader, SensorRecording
from .chart_renderer import ChartRenderer
from .metrics_display import (
    get_metric_status,
    format_metric_value,
    display_gait_analysis,
    display_empty_metrics,
    display_abnormalities,
    range_of_motion_rows,
)


__all__ = [
    'ParserConfig',
    'GaitConfig',
    'UIConfig',
    'SensorLogError',
    'InsufficientLinesError',
    'InvalidContentError',
    'DiagnosticEvent',
    'LoggingSink',
    'CollectingSink',
    'null_sink',
    'ParseResult',
    'ColumnDescriptor',
    'ColumnSchema',
    'FileHeader',
    'DataRegion',
    'AxisSeries',
    'SensorSeries',
    'MultiSensorData',
    'SensorDescriptor',
    'SensorChannel',
    'FilteredSensorData',
    'FormatPreview',
    'FileStructure',
    'GaitPhases',
    'StepMetrics',
    'RangeOfMotion',
    'GaitAnalysis',
    'parse_column_header',
    'parse_file_header',
    'locate_data_region',
    'demux_rows',
    'build_catalog',
    'list_channels',
    'SensorLogEngine',
    'ensure_sensor_content',
    'analyze_structure',
    'extract_all_sensors',
    'extract_filtered_sensors',
    'available_sensors',
    'preview',
    'compute_gait_analysis',
    'detect_abnormalities',
    'detect_steps',
    'calculate_symmetry',
    'describe_series',
    'FilterConfig',
    'SeriesFilter',
    'normalize_series',
    'filter_noise',
    'GaitAnalysisStore',
    'SensorLogLoader',
    'SensorRecording',
    'ChartRenderer',
    'get_metric_status',
    'format_metric_value',
    'display_gait_analysis',
    'display_empty_metrics',
    'display_abnormalities',
    'range_of_motion_rows',
]
