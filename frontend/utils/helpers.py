"""Common utility functions."""

from collections.abc import Iterable
from datetime import datetime
import re

from workflow.models import CourtComplex, Credential, District


def district_options(districts: Iterable[District]) -> dict[str, str]:
    """Map district codes to display labels, preserving backend order."""
    return {
        d.dist_code: f"{d.dist_name} ({d.dist_code})" if d.dist_name else d.dist_code
        for d in districts
    }


def complex_options(complexes: Iterable[CourtComplex]) -> dict[str, str]:
    """Map complex codes to display labels, preserving backend order."""
    return {
        c.complex_code: f"{c.complex_name} ({c.complex_code})" if c.complex_name else c.complex_code
        for c in complexes
    }


def format_credential(credential: Credential | None, max_length: int = 48) -> str:
    """Display form of the credential for the status panel."""
    if credential is None:
        return "N/A"
    text = credential.describe()
    if len(text) > max_length:
        return f"{text[: max_length - 1]}…"
    return text


def format_elapsed(elapsed_ms: float) -> str:
    """Format request duration for display.

    Logic:
    1. Sub-second values stay in milliseconds
    2. Longer values switch to seconds
    """
    if elapsed_ms < 1000:
        return f"{elapsed_ms:.0f} ms"
    return f"{elapsed_ms / 1000:.1f} s"


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for downloads.

    Logic:
    1. Remove invalid characters
    2. Replace spaces with underscores
    3. Ensure reasonable length
    """
    # Remove invalid characters
    sanitized = re.sub(r'[<>:"/\\|?*]', "", filename)
    sanitized = sanitized.replace(" ", "_")
    # Limit length
    if len(sanitized) > 64:
        name, ext = sanitized.rsplit(".", 1) if "." in sanitized else (sanitized, "")
        name = name[:60]
        sanitized = f"{name}.{ext}" if ext else name

    return sanitized


def generate_download_filename(base_name: str, suffix: str, extension: str) -> str:
    """Generate download filename with timestamp."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return sanitize_filename(f"{base_name}_{suffix}_{timestamp}.{extension}")
