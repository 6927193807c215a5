from __future__ import annotations

import streamlit as st

_FLASH_KEY = "_flash"


def flash(message: str) -> None:
    """Queue a success message for the next script run (survives ``st.rerun``)."""
    st.session_state[_FLASH_KEY] = message


def show_flash() -> None:
    message = st.session_state.pop(_FLASH_KEY, None)
    if message:
        st.success(message)
