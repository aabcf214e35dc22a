"""Parsing of the two-line sensor log header.

Line 1 carries recording metadata in an underscore-delimited, positionally
fragile layout::

    #5 Software_1.35.0_Firmware_V4.0.16_0804101CAAC4F4A0586C4FDAF5001902_(1,2)_UTC_2024-03-12T09:41:27.000Z

Line 2 is the column schema, a run-length encoded list of descriptors::

    # 13 1xClk[s]_3xAccelerationId1[g]_3xGyroscopeId1[°/s]_3xAccelerationId0[g]_3xGyroscopeId0[°/s] 13 14033

Both parsers are permissive: they never raise on malformed content and report
fallbacks through ``ParseResult`` instead.
"""

import re
from datetime import datetime, timezone
from typing import List, Optional

from .diagnostics import DiagnosticSink, emit
from .models import AXES, ColumnDescriptor, ColumnSchema, FileHeader, ParseResult

UNKNOWN = "Unknown"

COLUMN_HEADER_RE = re.compile(r"#\s+(\d+)\s+(.+)")
SENSOR_DESCRIPTOR_RE = re.compile(r"(\d+)x(Acceleration|Gyroscope)Id(\d+)(?:\[([^\]]+)\])?")
ADC_DESCRIPTOR_RE = re.compile(r"(\d+)xADCValueId")
SENSOR_CODES_RE = re.compile(r"\(([\d,]+)\)")
UTC_TIMESTAMP_RE = re.compile(r"UTC_([^_]+)$")
ISO_TIMESTAMP_RE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?Z?")

TIMESTAMP_TOKEN = "Clk[s]"
GAIT_PARAMETER_KEYWORDS = (
    'StepTime', 'DeltaYaw', 'DeltaPitch', 'DeltaRoll',
    'PrevStanceTime', 'PrevSwingTime', 'Symmetry',
)

SENSOR_TYPE_CODES = {
    0: 'Acceleration',
    1: 'Acceleration',
    2: 'Gyroscope',
    3: 'Magnetometer',
    4: 'Temperature',
    5: 'Pressure',
}


def parse_column_header(line: str, sink: Optional[DiagnosticSink] = None) -> ParseResult[ColumnSchema]:
    """
    Decode the column schema line into typed column descriptors.

    Args:
        line: Second header line of the file
        sink: Optional diagnostic sink

    Returns:
        ParseResult wrapping the schema. An unparseable line yields an empty
        schema with ``is_default`` set.
    """
    match = COLUMN_HEADER_RE.search(line)
    if not match:
        emit(sink, "header", "column header does not match grammar", line=line[:100])
        return ParseResult(ColumnSchema(), is_default=True, reason="column header does not match grammar")

    total_columns = int(match.group(1))
    columns: List[ColumnDescriptor] = []
    sensor_ids: List[str] = []
    gait_parameters: List[str] = []
    timestamp_column = None
    adc_value_count = 0
    has_adc_values = False

    for token in match.group(2).split('_'):
        token = token.strip()
        if not token:
            continue

        if TIMESTAMP_TOKEN in token:
            timestamp_column = ColumnDescriptor(type='timestamp', index=0, unit='s')
            continue

        if 'ADCValueId' in token:
            # ADC columns are counted but get no schema slot
            has_adc_values = True
            adc = ADC_DESCRIPTOR_RE.search(token)
            if adc:
                adc_value_count += int(adc.group(1))
            continue

        sensor = SENSOR_DESCRIPTOR_RE.search(token)
        if sensor:
            count = int(sensor.group(1))
            sensor_type = sensor.group(2).lower()
            sensor_id = sensor.group(3)
            unit = sensor.group(4)
            if sensor_id not in sensor_ids:
                sensor_ids.append(sensor_id)
            for axis in AXES[:min(count, 3)]:
                columns.append(ColumnDescriptor(
                    type=sensor_type,
                    index=len(columns) + 1,
                    sensor_id=sensor_id,
                    axis=axis,
                    unit=unit,
                ))
            continue

        if any(keyword in token for keyword in GAIT_PARAMETER_KEYWORDS):
            gait_parameters.append(token.split()[0])
            continue

        emit(sink, "header", "ignoring unrecognised descriptor", token=token)

    schema = ColumnSchema(
        total_columns=total_columns,
        columns=tuple(columns),
        sensor_ids=tuple(sensor_ids),
        has_gait_parameters=bool(gait_parameters),
        has_adc_values=has_adc_values,
        adc_value_count=adc_value_count,
        timestamp_column=timestamp_column,
        gait_parameter_names=tuple(gait_parameters),
    )
    emit(
        sink, "header", "column header parsed",
        total_columns=total_columns,
        sensor_columns=len(columns),
        sensor_ids=list(sensor_ids),
        has_gait_parameters=schema.has_gait_parameters,
        adc_value_count=adc_value_count,
    )
    return ParseResult(schema)


def parse_file_header(line: str, sink: Optional[DiagnosticSink] = None) -> ParseResult[FileHeader]:
    """
    Decode recording metadata from the first header line.

    Args:
        line: First header line of the file
        sink: Optional diagnostic sink

    Returns:
        ParseResult wrapping the header; ``defaulted`` names every field that
        fell back to "Unknown" or the current time.
    """
    parts = line.split('_')
    defaulted = []

    def positional(idx: int, name: str) -> str:
        value = parts[idx].strip() if idx < len(parts) else ""
        if not value:
            defaulted.append(name)
            return UNKNOWN
        return value

    software_version = positional(1, 'software_version')
    firmware_version = positional(3, 'firmware_version')
    device_id = positional(4, 'device_id')

    sensor_types = extract_sensor_types(line)
    if not sensor_types:
        defaulted.append('sensor_types')

    timestamp = extract_timestamp(line)
    if timestamp is None:
        defaulted.append('timestamp')
        timestamp = datetime.now(timezone.utc)

    header = FileHeader(
        software_version=software_version,
        firmware_version=firmware_version,
        device_id=device_id,
        sensor_types=tuple(sensor_types),
        timestamp=timestamp,
        original_header=line,
    )
    if defaulted:
        emit(sink, "header", "file header fields defaulted", fields=list(defaulted))
    return ParseResult(
        header,
        is_default=len(defaulted) == 5,
        defaulted=tuple(defaulted),
        reason="metadata fields missing" if defaulted else None,
    )


def extract_sensor_types(line: str) -> List[str]:
    """Sensor type names from ``(a,b,...)`` code groups, or from plain mentions."""
    sensor_types: List[str] = []
    for group in SENSOR_CODES_RE.findall(line):
        for code in group.split(','):
            if not code:
                continue
            name = SENSOR_TYPE_CODES.get(int(code), f"Unknown{code}")
            if name not in sensor_types:
                sensor_types.append(name)

    if not sensor_types:
        for name in ('Acceleration', 'Gyroscope'):
            if name in line:
                sensor_types.append(name)
    return sensor_types


def extract_timestamp(line: str) -> Optional[datetime]:
    """Recording time from a trailing ``UTC_<iso>`` field or any ISO-8601 stamp."""
    candidates = []
    utc = UTC_TIMESTAMP_RE.search(line.strip())
    if utc:
        candidates.append(utc.group(1))
    iso = ISO_TIMESTAMP_RE.search(line)
    if iso:
        candidates.append(iso.group(0))

    for text in candidates:
        parsed = _parse_iso(text)
        if parsed is not None:
            return parsed
    return None


def _parse_iso(text: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(text.strip().replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# Two-IMU layout written by the logger's default configuration:
# timestamp, IMU1 accel xyz, IMU1 gyro xyz, IMU0 accel xyz, IMU0 gyro xyz
FALLBACK_LAYOUT = (
    ('acceleration', '1', 'g'),
    ('gyroscope', '1', '°/s'),
    ('acceleration', '0', 'g'),
    ('gyroscope', '0', '°/s'),
)


def fallback_schema() -> ColumnSchema:
    """Last-resort schema for files whose column header cannot be decoded."""
    columns = []
    sensor_ids = []
    for sensor_type, sensor_id, unit in FALLBACK_LAYOUT:
        if sensor_id not in sensor_ids:
            sensor_ids.append(sensor_id)
        for axis in AXES:
            columns.append(ColumnDescriptor(
                type=sensor_type,
                index=len(columns) + 1,
                sensor_id=sensor_id,
                axis=axis,
                unit=unit,
            ))
    return ColumnSchema(
        total_columns=len(columns) + 1,
        columns=tuple(columns),
        sensor_ids=tuple(sensor_ids),
        timestamp_column=ColumnDescriptor(type='timestamp', index=0, unit='s'),
    )
