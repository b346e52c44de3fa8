"""
Recorder component: start/stop control, processing spinner and history.

The ``Recorder`` lives in ``st.session_state`` so the microphone keeps
capturing between reruns; each button click drives one state transition.
"""

import asyncio
import logging

import streamlit as st

from voicerelay.core.config import RecorderSettings, get_recorder_settings
from voicerelay.core.exceptions import RecorderError
from voicerelay.services.audio import AudioProcessor, MicrophoneSource, Recorder
from voicerelay.ui.api_client import RelayClient

logger = logging.getLogger(__name__)


def build_recorder(settings: RecorderSettings) -> Recorder:
    """Wire a microphone-backed Recorder from client settings."""
    return Recorder(
        source=MicrophoneSource(
            sample_rate=settings.sample_rate,
            channels=settings.channels,
            chunk_interval=settings.chunk_interval,
        ),
        client=RelayClient(settings.api_url, timeout=settings.request_timeout),
        processor=AudioProcessor(sample_rate=settings.sample_rate, channels=settings.channels),
        audio_format=settings.audio_format,
    )


def get_recorder() -> Recorder:
    if "recorder" not in st.session_state:
        st.session_state.recorder = build_recorder(get_recorder_settings())
    return st.session_state.recorder


def _toggle_recording(recorder: Recorder) -> None:
    if recorder.is_recording:
        with st.spinner("Processing recording..."):
            try:
                asyncio.run(recorder.stop())
            except RecorderError as exc:
                logger.warning("Transcription failed: %s", exc.message)
    else:
        try:
            recorder.start()
        except RecorderError as exc:
            logger.warning("Could not start recording: %s", exc.message)


def render_recorder() -> None:
    """Render the controls, the error banner and the transcript history."""
    recorder = get_recorder()

    col_record, col_clear = st.columns(2)
    with col_record:
        label = "⏹ Stop Recording" if recorder.is_recording else "\U0001f3a4 Start Recording"
        if st.button(label, disabled=recorder.is_processing, use_container_width=True):
            _toggle_recording(recorder)
            st.rerun()
    with col_clear:
        if st.button("Clear All", disabled=len(recorder.history) == 0, use_container_width=True):
            recorder.clear()
            st.rerun()

    if recorder.error:
        st.error(recorder.error)

    if recorder.is_recording:
        st.info("Recording... click Stop Recording when you are done.")

    st.subheader("Recording History")
    entries = recorder.history.entries
    if not entries:
        st.caption("No recordings yet. Click the Record button to start.")
        return

    for entry in entries:
        with st.container(border=True):
            col_text, col_delete = st.columns([9, 1])
            with col_text:
                st.caption(entry.timestamp)
                st.write(entry.text)
            with col_delete:
                if st.button("\U0001f5d1", key=f"delete-{entry.id}", help="Delete"):
                    recorder.delete(entry.id)
                    st.rerun()
