"""Loading sensor log recordings from a directory."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
import polars as pl

from .engine import SensorLogEngine, ensure_sensor_content
from .models import FileStructure, MultiSensorData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SensorRecording:
    """A parsed recording together with who and when it belongs to."""
    name: str
    patient_id: str
    session_id: str
    structure: FileStructure
    data: MultiSensorData
    recording_date: datetime
    path: Optional[Path] = None


def split_recording_name(name: str) -> Tuple[str, str]:
    """
    Derive patient and session ids from a file stem.

    ``P01_S02`` gives ``('P01', 'S02')``; a stem without an underscore is
    used as the patient id with session ``'1'``.
    """
    patient_id, _, session_id = name.partition('_')
    return patient_id, session_id or '1'


class SensorLogLoader:
    """Handles finding, reading and parsing sensor log files."""

    def __init__(self, data_dir: Path, pattern: str = "*.txt", engine: Optional[SensorLogEngine] = None):
        """
        Initialize the data loader.

        Args:
            data_dir: Directory containing sensor log text files
            pattern: Glob pattern selecting recording files
            engine: Engine used for parsing, a default one if omitted
        """
        self.data_dir = Path(data_dir)
        self.pattern = pattern
        self.engine = engine or SensorLogEngine()

    def list_recordings(self) -> List[str]:
        """
        List recording names (file stems) in the data directory.

        Returns:
            Sorted list of recording names
        """
        return [f.stem for f in sorted(self.data_dir.glob(self.pattern))]

    def recording_inventory(self) -> pl.DataFrame:
        """One row per recording file with its ids and size."""
        rows = []
        for path in sorted(self.data_dir.glob(self.pattern)):
            patient_id, session_id = split_recording_name(path.stem)
            rows.append({
                'name': path.stem,
                'patient_id': patient_id,
                'session_id': session_id,
                'size_bytes': path.stat().st_size,
            })
        schema = {'name': pl.Utf8, 'patient_id': pl.Utf8, 'session_id': pl.Utf8, 'size_bytes': pl.Int64}
        return pl.DataFrame(rows, schema=schema)

    def get_file_path(self, name: str) -> Path:
        return self.data_dir / f"{name}{Path(self.pattern).suffix}"

    def read_content(self, name: str) -> str:
        """
        Read a recording's text and reject HTML payloads.

        Raises:
            FileNotFoundError: If the recording file doesn't exist
            InvalidContentError: If the file holds an HTML page
        """
        path = self.get_file_path(name)
        if not path.exists():
            raise FileNotFoundError(f"Recording not found: {name}")
        content = path.read_text(encoding='utf-8', errors='replace')
        return ensure_sensor_content(content, self.engine.parser_config.HTML_MARKERS)

    def load_recording(
        self,
        name: str,
        patient_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> SensorRecording:
        """
        Load and parse one recording.

        Args:
            name: Recording name as returned by ``list_recordings``
            patient_id: Overrides the id derived from the name
            session_id: Overrides the id derived from the name

        Returns:
            SensorRecording with structure and all IMU series

        Raises:
            FileNotFoundError: If the recording file doesn't exist
            InvalidContentError: If the file holds an HTML page
            InsufficientLinesError: If the file is too short to parse
        """
        content = self.read_content(name)
        default_patient, default_session = split_recording_name(name)
        structure = self.engine.analyze_structure(content)
        data = self.engine.extract_all_sensors(content)
        logger.info("Loaded %s: %d rows, IMUs %s", name, data.row_count, list(data.imus))

        return SensorRecording(
            name=name,
            patient_id=patient_id or default_patient,
            session_id=session_id or default_session,
            structure=structure,
            data=data,
            recording_date=structure.header.timestamp,
            path=self.get_file_path(name),
        )


def time_to_sample_index(timestamps: Sequence[float], start_time: float) -> int:
    """
    Convert a time in seconds to the first sample index at or after it.

    Args:
        timestamps: Ascending timestamps in seconds
        start_time: Time in seconds

    Returns:
        Sample index, ``len(timestamps)`` if the time exceeds the data
    """
    return int(np.searchsorted(np.asarray(timestamps, dtype=float), start_time, side='left'))
