from datetime import datetime
import json
from typing import Any

import streamlit as st

from frontend.utils.helpers import generate_download_filename


class ExportHandler:
    """Centralized export functionality for search results."""

    @staticmethod
    def render_export_section(
        results: dict[str, Any], context: dict[str, Any], export_prefix: str = "party_search"
    ) -> None:
        """Render direct download buttons for JSON, MD and TXT.

        Args:
            results: Raw ``results`` object returned by the search
            context: Search parameters to include as metadata
            export_prefix: File name prefix
        """
        if not results:
            st.warning("No data available for export")
            return

        st.subheader("📥 Export Results")

        formats = [("json", "🧾 JSON"), ("md", "📝 MD"), ("txt", "📄 TXT")]
        columns = st.columns(len(formats))

        for column, (fmt, label) in zip(columns, formats):
            content, mime_type = ExportHandler._generate_export_content(results, context, fmt)
            filename = generate_download_filename(export_prefix, "results", fmt)

            with column:
                st.download_button(
                    label=label,
                    data=content,
                    file_name=filename,
                    mime=mime_type,
                    use_container_width=True,
                )

    @staticmethod
    def _generate_export_content(
        results: dict[str, Any], context: dict[str, Any], format_type: str
    ) -> tuple[str, str]:
        """Generate export content for specific format.

        Returns content and the matching MIME type.
        """
        if format_type == "json":
            payload = {"search": context, "results": results}
            return json.dumps(payload, indent=2, ensure_ascii=False, default=str), "application/json"
        elif format_type == "md":
            return ExportHandler._format_as_markdown(results, context), "text/markdown"
        elif format_type == "txt":
            return ExportHandler._format_as_text(results, context), "text/plain"
        else:
            return str(results), "text/plain"

    @staticmethod
    def _records(results: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in results.items() if k not in ("status", "errormsg")}

    @staticmethod
    def _format_as_markdown(results: dict[str, Any], context: dict[str, Any]) -> str:
        """Format results as Markdown.

        Logic:
        1. Search parameters as a bullet list
        2. One section per record field, value as a JSON block
        """
        lines = ["# Party Search Results\n"]

        if context:
            lines.append("## Search\n")
            for key, value in context.items():
                formatted_key = key.replace("_", " ").title()
                lines.append(f"- **{formatted_key}:** {value if value not in (None, '') else '—'}")
            lines.append("")

        lines.append(f"**Status:** {results.get('status', '—')}\n")

        records = ExportHandler._records(results)
        if not records:
            lines.append("_No records returned._")
        for key, value in records.items():
            lines.append(f"## {key}\n")
            if isinstance(value, str):
                lines.append(f"```\n{value}\n```\n")
            else:
                lines.append(f"```json\n{json.dumps(value, indent=2, ensure_ascii=False, default=str)}\n```\n")

        return "\n".join(lines)

    @staticmethod
    def _format_as_text(results: dict[str, Any], context: dict[str, Any]) -> str:
        """Format results as plain text."""
        lines = ["PARTY SEARCH RESULTS", "=" * 50, ""]
        lines.append(f"Generated on: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append("")

        if context:
            lines.append("SEARCH:")
            lines.append("-" * 20)
            for key, value in context.items():
                formatted_key = key.replace("_", " ").title()
                lines.append(f"{formatted_key}: {value if value not in (None, '') else '-'}")
            lines.append("")

        lines.append(f"STATUS: {results.get('status', '-')}")
        lines.append("")

        for key, value in ExportHandler._records(results).items():
            lines.append(f"{key.upper()}:")
            lines.append("-" * 20)
            if isinstance(value, str):
                lines.append(value)
            else:
                lines.append(json.dumps(value, indent=2, ensure_ascii=False, default=str))
            lines.append("")

        return "\n".join(lines)
