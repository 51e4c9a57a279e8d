"""
Multi-page Streamlit application for the eCourts API Tester.

This is the main entry point that sets up st.navigation between pages:
- Case Search: step-by-step run of the district -> complex -> location ->
  captcha -> party search workflow
- Debug: raw request log and session state
"""

import streamlit as st

from config import configure_structlog
from frontend.services.state_service import StateService
from frontend.utils.constants import DEFAULT_VALUES, UI_CONFIG

# Configure structured logging for the entire application
configure_structlog()

# Configure page
st.set_page_config(
    page_title=UI_CONFIG.PAGE_TITLE,
    page_icon=UI_CONFIG.PAGE_ICON,
    layout="wide",
    initial_sidebar_state="expanded",
)


def main() -> None:
    """Main application with 2-page navigation."""
    StateService.initialize_page_state(DEFAULT_VALUES)

    st.title(f"{UI_CONFIG.PAGE_ICON} {UI_CONFIG.PAGE_TITLE}")

    pages = [
        st.Page("frontend/pages/1_⚖️_Case_Search.py", title="Case Search", icon="⚖️"),
        st.Page("frontend/pages/2_🔧_Debug.py", title="Debug", icon="🔧"),
    ]

    navigation = st.navigation(pages)
    navigation.run()


if __name__ == "__main__":
    main()
