from flickercheck.report.renderers import render_json, render_markdown, write_reports

__all__ = ["render_json", "render_markdown", "write_reports"]
