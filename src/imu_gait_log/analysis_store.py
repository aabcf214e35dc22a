"""In-memory history of gait analyses keyed by patient and session."""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

import polars as pl

from .models import GaitAnalysis

logger = logging.getLogger(__name__)

AnalysisKey = Tuple[str, str]


class GaitAnalysisStore:
    """
    Keeps one analysis per (patient_id, session_id).

    Recording an analysis for a key that is already present replaces the old
    entry in place, so reloading a recording never duplicates it.
    """

    def __init__(self):
        self._analyses: Dict[AnalysisKey, GaitAnalysis] = {}
        self.current: Optional[GaitAnalysis] = None

    def __len__(self) -> int:
        return len(self._analyses)

    def __contains__(self, key: AnalysisKey) -> bool:
        return key in self._analyses

    def record(self, analysis: GaitAnalysis) -> GaitAnalysis:
        """Store ``analysis`` (replacing any entry with the same key) and make it current."""
        if analysis.key in self._analyses:
            logger.debug("Replacing analysis for %s/%s", *analysis.key)
        self._analyses[analysis.key] = analysis
        self.current = analysis
        return analysis

    def get(self, patient_id: str, session_id: str) -> Optional[GaitAnalysis]:
        return self._analyses.get((patient_id, session_id))

    def all(self) -> List[GaitAnalysis]:
        return list(self._analyses.values())

    def for_patient(self, patient_id: str) -> List[GaitAnalysis]:
        return [a for a in self._analyses.values() if a.patient_id == patient_id]

    def compare(self, keys: Iterable[AnalysisKey]) -> Dict:
        """
        Summarise several analyses side by side.

        Args:
            keys: (patient_id, session_id) pairs; unknown keys are ignored

        Returns:
            Dictionary with average symmetry and deviation, step length and
            cadence ranges, and the analyses compared. Averages and ranges are
            None when nothing matched.
        """
        wanted = set(keys)
        selected = [a for key, a in self._analyses.items() if key in wanted]
        if not selected:
            return {
                'avg_symmetry': None,
                'avg_deviation': None,
                'step_length_range': None,
                'cadence_range': None,
                'analyses': [],
            }

        step_lengths = [a.step_metrics.step_length for a in selected]
        cadences = [a.step_metrics.cadence for a in selected]
        return {
            'avg_symmetry': sum(a.symmetry_index for a in selected) / len(selected),
            'avg_deviation': sum(a.gait_deviation_index for a in selected) / len(selected),
            'step_length_range': {'min': min(step_lengths), 'max': max(step_lengths)},
            'cadence_range': {'min': min(cadences), 'max': max(cadences)},
            'analyses': selected,
        }

    def to_frame(self) -> pl.DataFrame:
        """One row per stored analysis with the headline metrics."""
        rows = [
            {
                'patient_id': a.patient_id,
                'session_id': a.session_id,
                'cadence': a.step_metrics.cadence,
                'step_time': a.step_metrics.step_time,
                'velocity': a.step_metrics.velocity,
                'symmetry_index': a.symmetry_index,
                'gait_deviation_index': a.gait_deviation_index,
            }
            for a in self._analyses.values()
        ]
        schema = {
            'patient_id': pl.Utf8,
            'session_id': pl.Utf8,
            'cadence': pl.Float64,
            'step_time': pl.Float64,
            'velocity': pl.Float64,
            'symmetry_index': pl.Float64,
            'gait_deviation_index': pl.Float64,
        }
        return pl.DataFrame(rows, schema=schema)

    def clear(self):
        self._analyses.clear()
        self.current = None
