"""Data model for parsed sensor logs and derived gait analyses."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Generic, List, Literal, Optional, Tuple, TypeVar

import polars as pl


ColumnType = Literal['timestamp', 'acceleration', 'gyroscope', 'gait_parameter']
SensorType = Literal['acceleration', 'gyroscope']
Axis = Literal['x', 'y', 'z']

AXES: Tuple[Axis, ...] = ('x', 'y', 'z')
SENSOR_TYPES: Tuple[SensorType, ...] = ('acceleration', 'gyroscope')

# Column names used when a series is exported as a DataFrame
FRAME_PREFIXES = {'acceleration': 'Accel', 'gyroscope': 'Gyro'}

T = TypeVar("T")


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """
    A parsed value together with whether it is real data or a fallback.

    Attributes:
        value: The parsed (or default) value
        is_default: True if the whole value is a documented default
        defaulted: Names of individual fields that fell back to defaults
        reason: Why the default was used, if it was
    """
    value: T
    is_default: bool = False
    defaulted: Tuple[str, ...] = ()
    reason: Optional[str] = None


@dataclass(frozen=True)
class ColumnDescriptor:
    """One logical column of a data row."""
    type: ColumnType
    index: int
    sensor_id: Optional[str] = None
    axis: Optional[Axis] = None
    unit: Optional[str] = None

    @property
    def name(self) -> str:
        """Selection key such as ``acceleration_1_x``."""
        if self.sensor_id is not None and self.axis is not None:
            return f"{self.type}_{self.sensor_id}_{self.axis}"
        return self.type


@dataclass(frozen=True)
class ColumnSchema:
    """Column layout decoded from the second header line."""
    total_columns: int = 0
    columns: Tuple[ColumnDescriptor, ...] = ()
    sensor_ids: Tuple[str, ...] = ()
    has_gait_parameters: bool = False
    has_adc_values: bool = False
    adc_value_count: int = 0
    timestamp_column: Optional[ColumnDescriptor] = None
    gait_parameter_names: Tuple[str, ...] = ()

    @property
    def sensor_definitions(self) -> Tuple[ColumnDescriptor, ...]:
        return self.columns

    @property
    def is_empty(self) -> bool:
        return not self.sensor_ids


@dataclass(frozen=True)
class FileHeader:
    """Recording metadata from the first header line."""
    software_version: str
    firmware_version: str
    device_id: str
    sensor_types: Tuple[str, ...]
    timestamp: datetime
    original_header: str = ""


@dataclass(frozen=True)
class DataRegion:
    """Line bounds of the numeric data block, ``end_line`` exclusive."""
    start_line: int
    end_line: int

    @property
    def is_empty(self) -> bool:
        return self.start_line >= self.end_line

    @property
    def line_count(self) -> int:
        return max(0, self.end_line - self.start_line)


@dataclass(frozen=True)
class AxisSeries:
    """Three parallel per-axis series."""
    x: List[float] = field(default_factory=list)
    y: List[float] = field(default_factory=list)
    z: List[float] = field(default_factory=list)

    def axis(self, name: Axis) -> List[float]:
        return getattr(self, name)

    def __len__(self) -> int:
        return len(self.x)


@dataclass(frozen=True)
class SensorSeries:
    """Acceleration and gyroscope series of one IMU."""
    acceleration: AxisSeries = field(default_factory=AxisSeries)
    gyroscope: AxisSeries = field(default_factory=AxisSeries)

    def sensor(self, sensor_type: SensorType) -> AxisSeries:
        return getattr(self, sensor_type)

    def lengths(self) -> List[int]:
        """Length of each of the six arrays, acceleration first."""
        return [len(self.sensor(t).axis(a)) for t in SENSOR_TYPES for a in AXES]


@dataclass(frozen=True)
class ExtractionMetadata:
    """Bookkeeping produced alongside a full extraction."""
    declared_columns: int = 0
    total_rows: int = 0
    skipped_rows: int = 0
    sensor_ids: Tuple[str, ...] = ()
    has_gait_parameters: bool = False
    region: DataRegion = field(default_factory=lambda: DataRegion(0, 0))
    fallback_layout: bool = False


@dataclass(frozen=True)
class MultiSensorData:
    """Timestamp-aligned series for every IMU in a recording."""
    timestamps: List[float] = field(default_factory=list)
    imus: Dict[str, SensorSeries] = field(default_factory=dict)
    metadata: ExtractionMetadata = field(default_factory=ExtractionMetadata)

    @property
    def row_count(self) -> int:
        return len(self.timestamps)

    def to_frame(self, imu_key: str) -> pl.DataFrame:
        """
        Export one IMU as a DataFrame.

        Args:
            imu_key: IMU key, e.g. ``IMU0``

        Returns:
            DataFrame with columns Time, Accel X..Z and Gyro X..Z

        Raises:
            KeyError: If the IMU is not present in the recording
        """
        series = self.imus[imu_key]
        columns = {'Time': self.timestamps}
        for sensor_type in SENSOR_TYPES:
            for axis in AXES:
                label = f"{FRAME_PREFIXES[sensor_type]} {axis.upper()}"
                columns[label] = series.sensor(sensor_type).axis(axis)
        return pl.DataFrame(columns, schema={name: pl.Float64 for name in columns})


@dataclass(frozen=True)
class SensorDescriptor:
    """A distinct sensor (type + id) and the axes the schema provides for it."""
    type: SensorType
    id: str
    available_axes: Tuple[Axis, ...]


@dataclass(frozen=True)
class SensorChannel:
    """A single selectable sensor axis."""
    type: SensorType
    id: str
    axis: Axis

    @property
    def key(self) -> str:
        return f"{self.type}_{self.id}_{self.axis}"


@dataclass(frozen=True)
class FilteredSensorData:
    """Series for a user selection of sensor channels."""
    acceleration: AxisSeries
    gyroscope: AxisSeries
    timestamps: List[float]
    available_sensors: List[SensorChannel]


@dataclass(frozen=True)
class FormatPreview:
    """Quick characterisation of an unknown file."""
    columns: int = 0
    sample: List[float] = field(default_factory=list)
    header: str = ""


@dataclass(frozen=True)
class FileStructure:
    """Header, schema and first data row of a recording."""
    header: FileHeader
    columns: Tuple[ColumnDescriptor, ...]
    sample_data: List[float]
    data_start_line: int
    schema: ColumnSchema = field(default_factory=ColumnSchema)
    fallback_layout: bool = False  # Columns assumed, header unreadable


@dataclass(frozen=True)
class GaitPhases:
    stance_phase: float
    swing_phase: float
    double_support: float


@dataclass(frozen=True)
class StepMetrics:
    step_length: float
    step_time: float
    step_width: float
    cadence: float
    velocity: float


@dataclass(frozen=True)
class RangeOfMotion:
    hip_flexion: float = 0.0
    hip_extension: float = 0.0
    knee_flexion: float = 0.0
    knee_extension: float = 0.0
    ankle_dorsiflexion: float = 0.0
    ankle_plantarflexion: float = 0.0


@dataclass(frozen=True)
class GaitAnalysis:
    """Heuristic gait summary for one recording."""
    patient_id: str
    session_id: str
    gait_phases: GaitPhases
    step_metrics: StepMetrics
    range_of_motion: RangeOfMotion
    symmetry_index: float
    gait_deviation_index: float

    @property
    def key(self) -> Tuple[str, str]:
        return (self.patient_id, self.session_id)
