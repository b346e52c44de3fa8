"""
VoiceRelay Streamlit UI: main entry point.

Run with: ``streamlit run voicerelay/ui/app.py``
"""

import asyncio

import streamlit as st

from voicerelay.core.config import get_recorder_settings
from voicerelay.ui.api_client import RelayClient
from voicerelay.ui.components.recorder import render_recorder

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Voice To Text",
    page_icon="\U0001f399️",
    layout="centered",
)

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
_settings = get_recorder_settings()

with st.sidebar:
    st.title("\U0001f399️ VoiceRelay")
    st.caption(f"Relay: {_settings.api_url}")
    _conn_ok, _conn_msg = asyncio.run(
        RelayClient(_settings.api_url, timeout=5.0).check_connection()
    )
    if _conn_ok:
        st.success(f"Backend: {_conn_msg}")
    else:
        st.error(f"Backend: {_conn_msg}")

st.title("Voice To Text")
render_recorder()
