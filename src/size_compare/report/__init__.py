"""Markdown change reports."""

from .markdown import collapsible, markdown_table, pretty_bytes, signed_percent
from .render import (
    REPORT_HEADING,
    REPORT_TITLE,
    compare_link,
    format_changes,
    render_commit_comment,
    render_notice,
    render_pull_request_comment,
    split_significant,
)

__all__ = [
    "REPORT_HEADING",
    "REPORT_TITLE",
    "collapsible",
    "compare_link",
    "format_changes",
    "markdown_table",
    "pretty_bytes",
    "render_commit_comment",
    "render_notice",
    "render_pull_request_comment",
    "signed_percent",
    "split_significant",
]
