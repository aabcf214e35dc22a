"""Sensor catalog derived from a column schema."""

from typing import Dict, Iterable, List, Tuple, Union

from .models import AXES, ColumnDescriptor, ColumnSchema, SensorChannel, SensorDescriptor, SENSOR_TYPES


def _sensor_columns(schema: Union[ColumnSchema, Iterable[ColumnDescriptor]]) -> List[ColumnDescriptor]:
    columns = schema.columns if isinstance(schema, ColumnSchema) else schema
    return [c for c in columns if c.type in SENSOR_TYPES and c.axis is not None]


def build_catalog(schema: Union[ColumnSchema, Iterable[ColumnDescriptor]]) -> List[SensorDescriptor]:
    """
    Group sensor columns into distinct sensors.

    Args:
        schema: Column schema, or its column descriptors

    Returns:
        One SensorDescriptor per (type, sensor id), in first-seen order, with
        its distinct axes sorted x, y, z
    """
    groups: Dict[Tuple[str, str], set] = {}
    for column in _sensor_columns(schema):
        groups.setdefault((column.type, column.sensor_id or '0'), set()).add(column.axis)

    return [
        SensorDescriptor(
            type=sensor_type,
            id=sensor_id,
            available_axes=tuple(a for a in AXES if a in axes),
        )
        for (sensor_type, sensor_id), axes in groups.items()
    ]


def list_channels(schema: Union[ColumnSchema, Iterable[ColumnDescriptor]]) -> List[SensorChannel]:
    """One selectable channel per sensor column, in column order."""
    return [
        SensorChannel(type=c.type, id=c.sensor_id or '0', axis=c.axis)
        for c in _sensor_columns(schema)
    ]


def selection_key(sensor_type: str, sensor_id: str, axis: str) -> str:
    """Build a channel key such as ``gyroscope_0_y``."""
    return f"{sensor_type}_{sensor_id}_{axis}"


def parse_selection_key(key: str) -> SensorChannel:
    """
    Parse a channel key produced by ``selection_key``.

    Raises:
        ValueError: If the key does not name a known sensor type and axis
    """
    parts = key.split('_')
    if len(parts) != 3 or parts[0] not in SENSOR_TYPES or parts[2] not in AXES:
        raise ValueError(f"Invalid sensor selection key: {key!r}")
    return SensorChannel(type=parts[0], id=parts[1], axis=parts[2])
