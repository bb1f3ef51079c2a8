"""Exporters package — convert summaries to output formats."""
from taxcentre.exporters.markdown import format_money, render_markdown

__all__ = ["format_money", "render_markdown"]
