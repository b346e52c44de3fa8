"""Recorder client: HTTP client and Streamlit UI."""
