"""Report emitters for the app map."""

from appnav.report.writer import (
    build_quick_map,
    load_app_map,
    render_markdown_report,
    write_reports,
)

__all__ = ["build_quick_map", "load_app_map", "render_markdown_report", "write_reports"]
