"""
Streamlit app entrypoint - logging setup and page navigation.

Profiles live in the session's ``ProfileDirectory`` (see ``src.app_logic``);
nothing is persisted, so reloading the page starts an empty directory.
"""

from __future__ import annotations

import logging

import streamlit as st

st.set_page_config(page_title="Profile Map", page_icon="🗺️", layout="wide")

from src.utils.config import get_app_config, validate_configuration  # noqa: E402 - must import after set_page_config

logger = logging.getLogger(__name__)

_nav_items = [
    ("pages/1_🗺️_Profiles.py", "Profiles", "🗺️"),
    ("pages/2_🛠️_Admin_Panel.py", "Admin Panel", "🛠️"),
    ("pages/10_📖_How_It_Works.py", "How It Works", "📖"),
]


def configure_logging() -> None:
    """Configure root logging once per process from ``app.log_level``."""
    level = getattr(logging, get_app_config()["log_level"], logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _build_and_run_app():
    """Build navigation and report configuration problems once per session."""
    configure_logging()

    if not st.session_state.get("_config_checked"):
        for component, issue in validate_configuration().items():
            logger.warning(f"Configuration issue ({component}): {issue}")
        st.session_state["_config_checked"] = True

    nav_pages = [st.Page(path, title=title, icon=icon) for path, title, icon in _nav_items]
    pg = st.navigation(nav_pages)
    pg.run()


if __name__ == "__main__":
    _build_and_run_app()
