"""Exporters package — convert summaries to various output formats."""
from bizledger.exporters.csv_export import render_csv, write_csv
from bizledger.exporters.markdown import render_markdown

__all__ = ["render_csv", "render_markdown", "write_csv"]
