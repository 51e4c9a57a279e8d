"""Components package for reusable UI components."""

from .error_display import (
    display_error,
    display_step_error,
    display_warning,
)
from .exchange_log import latest_exchange, render_exchange_log, render_raw_response
from .export_handlers import ExportHandler
from .status_panel import render_selection_summary, render_status_panel

__all__ = [
    "display_error",
    "display_warning",
    "display_step_error",
    "latest_exchange",
    "render_exchange_log",
    "render_raw_response",
    "ExportHandler",
    "render_status_panel",
    "render_selection_summary",
]
