"""Application constants and configuration values (Streamlit-only)."""

from typing import Any

# Session State Keys
class STATE_KEYS:
    WORKFLOW_STATE = "workflow_state"
    RUNNING_STEP = "running_step"
    API_CLIENT = "api_client"
    BOOTSTRAPPED = "bootstrapped"
    LAST_ERROR = "last_error"

# Default Values
DEFAULT_VALUES: dict[str, Any] = {
    STATE_KEYS.RUNNING_STEP: None,
    STATE_KEYS.BOOTSTRAPPED: False,
    STATE_KEYS.LAST_ERROR: None,
}

# UI Configuration
class UI_CONFIG:
    PAGE_TITLE = "eCourts API Tester"
    PAGE_ICON = "⚖️"
    RESULTS_HEIGHT = 400

# Step display names
STEP_TITLES = {
    "bootstrap": "Initial Data",
    "list_districts": "Get Districts",
    "list_complexes": "Get Complexes",
    "set_location": "Set Location",
    "fetch_captcha": "Fetch Captcha",
    "search_party": "Search Party",
}

# Case status filter: label -> value sent to the backend
CASE_STATUS_OPTIONS = {
    "Pending": "Pending",
    "Disposed": "Disposed",
    "Any": "",
}

# Error Messages
ERROR_MESSAGES = {
    "precondition": "Complete the earlier steps first.",
    "transport": "The backend could not be reached or returned an error.",
    "malformed": "The backend returned an unexpected response.",
    "domain": "The eCourts service reported an error.",
    "invalid_captcha": "Invalid captcha.",
    "setup": "Could not start a backend session.",
    "busy": "Another request is still running.",
}
