"""Row demultiplexing: routing flat data rows into per-IMU, per-axis series."""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional

from .data_region import parse_row
from .diagnostics import DiagnosticSink, emit
from .models import (
    AXES,
    SENSOR_TYPES,
    AxisSeries,
    ColumnSchema,
    DataRegion,
    ExtractionMetadata,
    MultiSensorData,
    SensorSeries,
)


@dataclass(frozen=True)
class Route:
    """Destination of one row value."""
    value_index: int
    imu_key: str
    sensor_type: str
    axis: str


def imu_key(sensor_id: str, prefix: str = "IMU") -> str:
    return f"{prefix}{sensor_id}"


def build_routing_table(schema: ColumnSchema, prefix: str = "IMU") -> List[Route]:
    """
    Map each sensor column of the schema to its destination array.

    Row value ``j`` (``j >= 1``, value 0 is the timestamp) belongs to
    ``schema.columns[j - 1]``.

    Args:
        schema: Column schema of the file
        prefix: IMU key prefix

    Returns:
        One Route per sensor column, in row order
    """
    routes = []
    for position, column in enumerate(schema.columns):
        if column.type not in SENSOR_TYPES or column.axis is None:
            continue
        routes.append(Route(
            value_index=position + 1,
            imu_key=imu_key(column.sensor_id or '0', prefix),
            sensor_type=column.type,
            axis=column.axis,
        ))
    return routes


def accept_row(values: List[float]) -> bool:
    """A row needs a timestamp plus at least one payload value."""
    return len(values) >= 2 and not math.isnan(values[0])


def demux_rows(
    lines: List[str],
    schema: ColumnSchema,
    prefix: str = "IMU",
    region: Optional[DataRegion] = None,
    fallback_layout: bool = False,
    sink: Optional[DiagnosticSink] = None,
) -> MultiSensorData:
    """
    Demultiplex data lines into timestamp-aligned per-IMU series.

    Every accepted row appends exactly one value to each of the six arrays of
    every IMU, so all arrays stay as long as ``timestamps``. Values missing
    from a short row (or that are not numbers) are stored as 0.0.

    Args:
        lines: Lines of the data region
        schema: Column schema used to route values
        prefix: IMU key prefix
        region: Region the lines were taken from, recorded in the metadata
        fallback_layout: Whether ``schema`` is the last-resort default layout
        sink: Optional diagnostic sink

    Returns:
        MultiSensorData with timestamps, IMU series and extraction metadata
    """
    routes = build_routing_table(schema, prefix)

    buffers: Dict[str, Dict[str, Dict[str, List[float]]]] = {}
    for sensor_id in schema.sensor_ids:
        buffers[imu_key(sensor_id, prefix)] = _empty_buffers()
    for route in routes:
        buffers.setdefault(route.imu_key, _empty_buffers())

    timestamps: List[float] = []
    skipped = 0

    for line in lines:
        if not line.strip() or line.startswith('#'):
            continue

        values = parse_row(line)
        if not accept_row(values):
            skipped += 1
            continue

        timestamps.append(values[0])
        for imu in buffers.values():
            for sensor_type in SENSOR_TYPES:
                for axis in AXES:
                    imu[sensor_type][axis].append(0.0)

        for route in routes:
            if route.value_index >= len(values):
                break
            value = values[route.value_index]
            if math.isfinite(value):
                buffers[route.imu_key][route.sensor_type][route.axis][-1] = value

    if skipped:
        emit(sink, "demux", "rows skipped", skipped_rows=skipped)
    emit(
        sink, "demux", "rows demultiplexed",
        accepted_rows=len(timestamps),
        imus=list(buffers),
    )

    imus = {
        key: SensorSeries(
            acceleration=AxisSeries(**imu['acceleration']),
            gyroscope=AxisSeries(**imu['gyroscope']),
        )
        for key, imu in buffers.items()
    }
    metadata = ExtractionMetadata(
        declared_columns=schema.total_columns,
        total_rows=len(timestamps),
        skipped_rows=skipped,
        sensor_ids=schema.sensor_ids,
        has_gait_parameters=schema.has_gait_parameters,
        region=region or DataRegion(0, len(lines)),
        fallback_layout=fallback_layout,
    )
    return MultiSensorData(timestamps=timestamps, imus=imus, metadata=metadata)


def _empty_buffers() -> Dict[str, Dict[str, List[float]]]:
    return {sensor_type: {axis: [] for axis in AXES} for sensor_type in SENSOR_TYPES}
