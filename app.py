"""
Streamlit viewer for IMU gait sensor logs.

Pick a recording from the data directory, inspect its structure, plot an IMU
with detected steps and review the derived gait metrics. A recording that
fails to load leaves the last good one on screen.
"""
import logging

import streamlit as st

from imu_gait_log import (
    ChartRenderer,
    CollectingSink,
    GaitAnalysisStore,
    GaitConfig,
    SensorLogEngine,
    SensorLogError,
    SensorLogLoader,
    UIConfig,
    display_abnormalities,
    display_empty_metrics,
    display_gait_analysis,
    list_channels,
    range_of_motion_rows,
)
from imu_gait_log.gait_metrics import detect_steps, vertical_signal
from imu_gait_log.ui_components import SensorLogUI

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)

# Session state keys
SESSION_KEYS = {
    'recording': 'last_recording',
    'store': 'analysis_store',
    'error': 'last_error',
}


ui_config = UIConfig()

st.set_page_config(page_title="IMU gait log viewer")
ui = SensorLogUI(ui_config)
renderer = ChartRenderer(ui_config)

for key, default in [(SESSION_KEYS['recording'], None), (SESSION_KEYS['error'], None)]:
    if key not in st.session_state:
        st.session_state[key] = default
if SESSION_KEYS['store'] not in st.session_state:
    st.session_state[SESSION_KEYS['store']] = GaitAnalysisStore()
store: GaitAnalysisStore = st.session_state[SESSION_KEYS['store']]

# === UI Setup ===
ui.render_header()

with st.sidebar:
    smoothing = ui.render_filter_controls()
    show_debug = st.checkbox("Show parser diagnostics", value=False)

sink = CollectingSink()
engine = SensorLogEngine(gait_config=GaitConfig(SMOOTHING=smoothing), sink=sink)
data_loader = SensorLogLoader(ui_config.DATA_DIR, ui_config.FILE_PATTERN, engine=engine)

recordings = data_loader.list_recordings() if ui_config.DATA_DIR.exists() else []
selected = ui.render_recording_selector(recordings)
status = ui.create_status_placeholder()

# === Load ===
if selected:
    try:
        content = data_loader.read_content(selected)
        recording = data_loader.load_recording(selected)
    except (FileNotFoundError, SensorLogError) as e:
        logger.warning("Failed to load %s: %s", selected, e)
        st.session_state[SESSION_KEYS['error']] = str(e)
    else:
        st.session_state[SESSION_KEYS['recording']] = (recording, content)
        st.session_state[SESSION_KEYS['error']] = None

recording, content = st.session_state[SESSION_KEYS['recording']] or (None, None)
if st.session_state[SESSION_KEYS['error']]:
    status.error(st.session_state[SESSION_KEYS['error']])
elif recording is None:
    status.info(f"No recordings found in {ui_config.DATA_DIR}")

if recording is not None:
    ui.render_structure(recording.structure, engine.preview(content))

    imu_key = ui.render_imu_selector(list(recording.data.imus))
    if imu_key is None:
        st.warning("No sensor data could be extracted from this recording")
    else:
        series = recording.data.imus[imu_key]
        timestamps = recording.data.timestamps
        steps = detect_steps(vertical_signal(series, engine.gait_config), engine.gait_config.STEP_THRESHOLD)

        st.subheader(f"{recording.patient_id} / {recording.session_id}")
        st.plotly_chart(renderer.create_imu_chart(recording.data, imu_key, steps), use_container_width=True)

        analysis = store.record(engine.compute_gait_analysis(
            series, timestamps, recording.patient_id, recording.session_id
        ))

        st.markdown("---")
        st.subheader("Metrics")
        placeholders = ui.create_metric_placeholders()
        if timestamps:
            display_gait_analysis(placeholders, analysis, step_count=len(steps))
        else:
            display_empty_metrics(placeholders)
        display_abnormalities(st, engine.detect_abnormalities(series, timestamps))

        with st.expander("Range of motion (approx. degrees)"):
            st.table(range_of_motion_rows(analysis))

        if len(recording.data.imus) > 1:
            st.plotly_chart(
                renderer.create_comparison_chart(recording.data, 'acceleration', 'y'),
                use_container_width=True
            )

        selection = ui.render_channel_selector(list_channels(recording.structure.schema))
        filtered = engine.extract_filtered_sensors(content, selection)
        st.plotly_chart(
            renderer.create_axis_chart(filtered.timestamps, filtered.acceleration, 'acceleration', "Selected acceleration"),
            use_container_width=True
        )
        st.plotly_chart(
            renderer.create_axis_chart(filtered.timestamps, filtered.gyroscope, 'gyroscope', "Selected gyroscope"),
            use_container_width=True
        )

    if len(store) > 1:
        with st.expander("Session history"):
            st.dataframe(store.to_frame())

if show_debug:
    with st.expander("Parser diagnostics", expanded=True):
        for event in sink.events:
            st.text(f"[{event.stage}] {event.message} {event.data}")
