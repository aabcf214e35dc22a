"""Sensor log engine: the call surface used by loaders and the viewer.

Typical use::

    engine = SensorLogEngine()
    ensure_sensor_content(content)
    data = engine.extract_all_sensors(content)
    analysis = engine.compute_gait_analysis(data.imus['IMU0'], data.timestamps, 'P01', 'S01')
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from . import gait_metrics
from .catalog import build_catalog, list_channels, parse_selection_key
from .config import GaitConfig, ParserConfig
from .data_region import locate_data_region, parse_row, split_lines
from .demux import demux_rows, imu_key
from .diagnostics import DiagnosticSink, LoggingSink, emit
from .exceptions import InsufficientLinesError, InvalidContentError
from .header_parser import fallback_schema, parse_column_header, parse_file_header
from .models import (
    AXES,
    SENSOR_TYPES,
    AxisSeries,
    ColumnSchema,
    DataRegion,
    FileStructure,
    FilteredSensorData,
    FormatPreview,
    GaitAnalysis,
    MultiSensorData,
    SensorChannel,
    SensorDescriptor,
    SensorSeries,
)
from .format_preview import preview as format_preview

logger = logging.getLogger(__name__)


def ensure_sensor_content(content: str, markers: Sequence[str] = ParserConfig.HTML_MARKERS) -> str:
    """
    Reject content that is an HTML page rather than a sensor log.

    Args:
        content: Raw file content
        markers: Substrings that identify HTML

    Returns:
        The content, unchanged

    Raises:
        InvalidContentError: If any marker is present
    """
    for marker in markers:
        if marker in content:
            raise InvalidContentError(
                "Received HTML instead of sensor data; check that the file exists"
            )
    return content


class SensorLogEngine:
    """
    Parses sensor log content and derives gait metrics.

    Instances hold only configuration and a diagnostic sink, so one engine
    can be shared between calls.
    """

    def __init__(
        self,
        parser_config: Optional[ParserConfig] = None,
        gait_config: Optional[GaitConfig] = None,
        sink: Optional[DiagnosticSink] = None,
    ):
        """
        Initialize the engine.

        Args:
            parser_config: Parsing configuration
            gait_config: Gait metric configuration
            sink: Diagnostic sink, defaults to a LoggingSink on this module's logger
        """
        self.parser_config = parser_config or ParserConfig()
        self.gait_config = gait_config or GaitConfig()
        self.sink = sink if sink is not None else LoggingSink(logger)

    def _lines(self, content: str) -> List[str]:
        lines = split_lines(content)
        if len(lines) < self.parser_config.MIN_LINES:
            emit(self.sink, "structure", "insufficient lines", level=logging.WARNING, line_count=len(lines))
            raise InsufficientLinesError(len(lines), self.parser_config.MIN_LINES)
        return lines

    def _schema_and_region(self, lines: List[str]) -> Tuple[ColumnSchema, DataRegion, bool]:
        """Column schema, data region and whether the fallback layout was used."""
        schema = parse_column_header(lines[1], self.sink).value
        region = locate_data_region(
            lines,
            header_lines=self.parser_config.HEADER_LINE_COUNT,
            sentinel=self.parser_config.SENTINEL_MARKER,
            sink=self.sink,
        )

        if schema.is_empty and self.parser_config.FALLBACK_LAYOUT and not region.is_empty:
            first_row = parse_row(lines[region.start_line])
            if len(first_row) >= self.parser_config.FALLBACK_MIN_VALUES:
                emit(
                    self.sink, "schema", "column header unusable, assuming default two-IMU layout",
                    level=logging.WARNING,
                    row_values=len(first_row),
                )
                return fallback_schema(), region, True
            emit(self.sink, "schema", "column header unusable, series will be empty", row_values=len(first_row))

        return schema, region, False

    def analyze_structure(self, content: str) -> FileStructure:
        """
        Parse the header lines and the first data row.

        Args:
            content: Full file content

        Returns:
            FileStructure with header metadata, column descriptors, the first
            data row and the index of the first data line

        Raises:
            InsufficientLinesError: If the file has fewer than three non-empty lines
        """
        lines = self._lines(content)
        header = parse_file_header(lines[0], self.sink).value
        schema, region, fallback = self._schema_and_region(lines)
        sample = [] if region.is_empty else parse_row(lines[region.start_line])

        return FileStructure(
            header=header,
            columns=schema.columns,
            sample_data=sample,
            data_start_line=region.start_line,
            schema=schema,
            fallback_layout=fallback,
        )

    def extract_all_sensors(self, content: str) -> MultiSensorData:
        """
        Extract timestamp-aligned series for every IMU in the file.

        Args:
            content: Full file content

        Returns:
            MultiSensorData; all six arrays of every IMU have the length of
            ``timestamps``

        Raises:
            InsufficientLinesError: If the file has fewer than three non-empty lines
        """
        lines = self._lines(content)
        schema, region, fallback = self._schema_and_region(lines)
        data = demux_rows(
            lines[region.start_line:region.end_line],
            schema,
            prefix=self.parser_config.IMU_KEY_PREFIX,
            region=region,
            fallback_layout=fallback,
            sink=self.sink,
        )
        emit(
            self.sink, "extract", "extraction complete",
            level=logging.INFO,
            rows=data.row_count,
            skipped_rows=data.metadata.skipped_rows,
            imus=list(data.imus),
        )
        return data

    def available_sensors(self, content: str) -> List[SensorDescriptor]:
        """Distinct sensors declared by the file's column header."""
        lines = self._lines(content)
        schema, _, _ = self._schema_and_region(lines)
        return build_catalog(schema)

    def extract_filtered_sensors(self, content: str, selected_sensor_ids: Sequence[str]) -> FilteredSensorData:
        """
        Extract the series of a user selection of sensor channels.

        For every (sensor type, axis) the series comes from the first selected
        channel that provides it. With no selection the first IMU supplies
        every axis. Axes nobody selected are empty lists.

        Args:
            content: Full file content
            selected_sensor_ids: Channel keys such as ``acceleration_0_x``

        Returns:
            FilteredSensorData with the selected series, the accepted-row
            timestamps and every channel the file offers
        """
        lines = self._lines(content)
        schema, region, fallback = self._schema_and_region(lines)
        data = demux_rows(
            lines[region.start_line:region.end_line],
            schema,
            prefix=self.parser_config.IMU_KEY_PREFIX,
            region=region,
            fallback_layout=fallback,
            sink=self.sink,
        )
        channels = list_channels(schema)
        offered = {channel.key for channel in channels}

        chosen: Dict[Tuple[str, str], SensorChannel] = {}
        if selected_sensor_ids:
            for key in selected_sensor_ids:
                try:
                    channel = parse_selection_key(key)
                except ValueError as e:
                    emit(self.sink, "filter", "ignoring selection", level=logging.WARNING, key=key, error=str(e))
                    continue
                if channel.key not in offered:
                    emit(self.sink, "filter", "selected channel not in file", key=key)
                    continue
                chosen.setdefault((channel.type, channel.axis), channel)
        elif schema.sensor_ids:
            first_id = schema.sensor_ids[0]
            for channel in channels:
                if channel.id == first_id:
                    chosen.setdefault((channel.type, channel.axis), channel)

        selected = {}
        for sensor_type in SENSOR_TYPES:
            axes = {}
            for axis in AXES:
                channel = chosen.get((sensor_type, axis))
                if channel is None:
                    axes[axis] = []
                    continue
                imu = data.imus[imu_key(channel.id, self.parser_config.IMU_KEY_PREFIX)]
                axes[axis] = list(imu.sensor(sensor_type).axis(axis))
            selected[sensor_type] = AxisSeries(**axes)

        emit(
            self.sink, "filter", "filtered extraction complete",
            selected=[channel.key for channel in chosen.values()],
            available=len(channels),
        )
        return FilteredSensorData(
            acceleration=selected['acceleration'],
            gyroscope=selected['gyroscope'],
            timestamps=list(data.timestamps),
            available_sensors=channels,
        )

    def preview(self, content: str) -> FormatPreview:
        """Characterise a file without full parsing; never raises."""
        return format_preview(content, self.parser_config.PREVIEW_SAMPLE_SIZE, self.sink)

    def compute_gait_analysis(
        self,
        series: SensorSeries,
        timestamps: Sequence[float],
        patient_id: str,
        session_id: str,
    ) -> GaitAnalysis:
        """
        Derive the gait summary of one IMU.

        Args:
            series: Series of one IMU
            timestamps: Accepted-row timestamps of the recording
            patient_id: Patient identifier
            session_id: Session identifier

        Returns:
            GaitAnalysis for the recording
        """
        analysis = gait_metrics.compute_gait_analysis(
            series, timestamps, patient_id, session_id, self.gait_config
        )
        emit(
            self.sink, "metrics", "gait analysis computed",
            patient_id=patient_id,
            session_id=session_id,
            cadence=analysis.step_metrics.cadence,
            symmetry_index=analysis.symmetry_index,
        )
        return analysis

    def detect_abnormalities(self, series: SensorSeries, timestamps: Sequence[float]) -> List[str]:
        flags = gait_metrics.detect_abnormalities(series, timestamps, self.gait_config)
        emit(self.sink, "metrics", "abnormality check", flags=flags)
        return flags


_default_engine = SensorLogEngine()


def analyze_structure(content: str) -> FileStructure:
    return _default_engine.analyze_structure(content)


def extract_all_sensors(content: str) -> MultiSensorData:
    return _default_engine.extract_all_sensors(content)


def extract_filtered_sensors(content: str, selected_sensor_ids: Sequence[str]) -> FilteredSensorData:
    return _default_engine.extract_filtered_sensors(content, selected_sensor_ids)


def available_sensors(content: str) -> List[SensorDescriptor]:
    return _default_engine.available_sensors(content)


def preview(content: str) -> FormatPreview:
    return _default_engine.preview(content)


def compute_gait_analysis(
    series: SensorSeries,
    timestamps: Sequence[float],
    patient_id: str,
    session_id: str,
) -> GaitAnalysis:
    return _default_engine.compute_gait_analysis(series, timestamps, patient_id, session_id)


def detect_abnormalities(series: SensorSeries, timestamps: Sequence[float]) -> List[str]:
    return _default_engine.detect_abnormalities(series, timestamps)
