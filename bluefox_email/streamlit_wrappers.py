"""
Streamlit integration wrapper for the Bluefox client.

The wrapper shows retries and rate limit rejections as st.warning()
messages in the running Streamlit app.
"""

import streamlit as st

from .client import BluefoxClient
from .config import BluefoxConfig
from .errors import BluefoxError, ErrorCode


class StreamlitBluefoxClient(BluefoxClient):
    """Bluefox client with Streamlit UI integration.

    Extends BluefoxClient to show st.warning() messages for retries and
    client-side rate limits.
    """

    def __init__(self, config: BluefoxConfig):
        """Initialize Streamlit-integrated Bluefox client.

        Args:
            config: BluefoxConfig with API key and settings
        """
        super().__init__(config)
        self.set_progress_callback(self._on_progress)

    def _on_progress(self, event: str, **info):
        if event == 'retry':
            self._notify_retry(info['error'], info['wait_time'], info['attempt'], info['max_retries'])
        elif event == 'rate_limited':
            self._notify_rate_limit(info['error'])

    def _notify_retry(self, error: BluefoxError, wait_time: float, attempt: int, max_retries: int):
        """Show Streamlit warning about a retried request."""
        if error.code == ErrorCode.NETWORK_ERROR:
            label = "Netzwerkfehler"
        else:
            label = f"Serverfehler ({error.status})"
        st.warning(f"⏳ Bluefox {label}. Retry in {wait_time}s... (Versuch {attempt + 1}/{max_retries})")

    def _notify_rate_limit(self, error: BluefoxError):
        """Show Streamlit warning about the exhausted rate limit."""
        st.warning(f"⏳ Bluefox Rate Limit erreicht. {error.message}")
