"""
Settings and logging for the eCourts API tester.

Values come from the environment (prefix ``ECOURTS_``) or a local ``.env`` file.
"""

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

load_dotenv()


class Settings(BaseSettings):
    """Runtime settings for the workflow driver and the Streamlit UI."""

    model_config = SettingsConfigDict(env_prefix="ECOURTS_", extra="ignore")

    # Remote API
    api_base_url: str = "https://lawyerverifyandcases.onrender.com/api/ecourts"
    request_timeout_seconds: float = 30.0
    captcha_endpoint: str = "/fetch-user-captcha"

    # Workflow defaults
    default_case_status: str = "Pending"

    # Inspection + logging
    exchange_log_size: int = 25
    log_level: str = "INFO"


settings = Settings()


def configure_structlog() -> None:
    """Initialize structlog with clean, readable logging."""
    import logging
    import sys

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        stream=sys.stdout,
        force=True,
        format="%(message)s",  # structlog renders the full line
    )
    logging.root.setLevel(level)

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.stdlib.add_log_level,
            structlog.dev.ConsoleRenderer(
                colors=True,
                pad_event=20,
                level_styles={
                    "debug": "\033[36m",
                    "info": "\033[32m",
                    "warning": "\033[33m",
                    "error": "\033[31m",
                },
            ),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
