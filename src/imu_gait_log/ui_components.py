"""UI components for the Streamlit recording viewer."""

from typing import Dict, List, Optional

import streamlit as st

from .config import UIConfig
from .models import FileStructure, FormatPreview, SensorChannel
from .signal_filters import FilterConfig


class SensorLogUI:
    """Handles rendering of UI components for the recording viewer."""

    def __init__(self, ui_config: UIConfig):
        """
        Initialize the UI component manager.

        Args:
            ui_config: UI configuration object
        """
        self.config = ui_config

    def render_header(self):
        st.title("IMU gait log viewer")

    def render_recording_selector(self, recordings: List[str]) -> Optional[str]:
        """
        Render recording selection dropdown.

        Args:
            recordings: List of available recording names

        Returns:
            Selected recording name or None
        """
        return st.selectbox(
            "Select Recording",
            recordings,
            index=0 if recordings else None
        )

    def render_imu_selector(self, imu_keys: List[str]) -> Optional[str]:
        """Dropdown of the IMUs found in the recording."""
        if not imu_keys:
            return None
        return st.selectbox("IMU", imu_keys, index=0)

    def render_channel_selector(self, channels: List[SensorChannel]) -> List[str]:
        """
        Render a multiselect of sensor channels.

        Args:
            channels: Channels offered by the recording

        Returns:
            Selected channel keys; empty means the first IMU
        """
        return st.multiselect(
            "Sensor channels",
            [channel.key for channel in channels],
            help="Leave empty to use every axis of the first IMU"
        )

    def render_filter_controls(self) -> Optional[FilterConfig]:
        """
        Render smoothing controls for step detection.

        Returns:
            FilterConfig, or None when smoothing is off
        """
        enable_filter = st.checkbox(
            "Smooth vertical acceleration before step detection",
            value=False,
            help="4th order low-pass Butterworth filter"
        )
        if not enable_filter:
            return None

        cutoff = st.slider("Cutoff (Hz)", min_value=1.0, max_value=20.0, value=6.0, step=0.5)
        return FilterConfig(
            filter_type='butterworth',
            cutoff_freq=cutoff,
            filter_order=4,
            sampling_rate=self.config.SAMPLING_RATE
        )

    def render_structure(self, structure: FileStructure, preview: FormatPreview):
        """Show header metadata and the declared vs. observed column counts."""
        header = structure.header
        with st.expander("File structure", expanded=False):
            col1, col2 = st.columns(2)
            with col1:
                st.markdown(f"**Software:** {header.software_version}")
                st.markdown(f"**Firmware:** {header.firmware_version}")
                st.markdown(f"**Device:** {header.device_id}")
            with col2:
                st.markdown(f"**Recorded:** {header.timestamp:%Y-%m-%d %H:%M:%S}")
                st.markdown(f"**Sensors:** {', '.join(header.sensor_types) or '--'}")
                st.markdown(f"**Data starts at line:** {structure.data_start_line + 1}")

            if structure.fallback_layout:
                st.warning("Column header unreadable, showing the default two-IMU layout")
            declared = structure.schema.total_columns
            if declared and preview.columns and declared != preview.columns:
                st.warning(f"Header declares {declared} columns, first data row has {preview.columns}")
            st.caption(f"First row: {preview.sample}")

    def create_metric_placeholders(self) -> Dict[str, st.delta_generator.DeltaGenerator]:
        """Two rows of three metric placeholders."""
        placeholders = {}
        for row in (('step_count', 'cadence', 'step_time'), ('velocity', 'symmetry_index', 'gait_deviation_index')):
            for col, key in zip(st.columns(3), row):
                with col:
                    placeholders[key] = st.empty()
        return placeholders

    def create_status_placeholder(self) -> st.delta_generator.DeltaGenerator:
        """
        Create a placeholder for status messages.

        Returns:
            Streamlit empty placeholder
        """
        return st.empty()
