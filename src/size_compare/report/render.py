"""Change report composition for pull request, commit and notice bodies."""

from __future__ import annotations

from size_compare.diff.models import Change
from size_compare.report.markdown import (
    collapsible,
    markdown_table,
    optional_cell,
    pretty_bytes,
    signed_percent,
)

REPORT_HEADING = "## 🚛 [size-compare](https://github.com/effector/size-compare) report"
REPORT_TITLE = "🚛 size-compare report"
TABLE_HEADER = ["File", "+/-", "Base", "Current", "+/- gzip", "Base gzip", "Current gzip"]
UNCHANGED_SUMMARY = "Files without changes"
NO_BASELINE_NOTE = "No baseline history yet, every file is reported as added."
NO_CHANGES_NOTE = "No size changes detected."
SECTION_SEPARATOR = "\r\n"
SHORT_SHA_LENGTH = 8


def format_changes(changes: list[Change]) -> str:
    """Render changes as a markdown table."""
    rows = [list(TABLE_HEADER)]
    for change in changes:
        rows.append(
            [
                change.path,
                optional_cell(change.raw.percent_diff, signed_percent),
                optional_cell(change.raw.before, pretty_bytes),
                optional_cell(change.raw.after, pretty_bytes),
                optional_cell(change.gzip.percent_diff, signed_percent),
                optional_cell(change.gzip.before, pretty_bytes),
                optional_cell(change.gzip.after, pretty_bytes),
            ]
        )
    return markdown_table(rows)


def split_significant(changes: list[Change]) -> tuple[list[Change], list[Change]]:
    """Partition changes into (significant, unchanged), preserving order."""
    significant: list[Change] = []
    rest: list[Change] = []
    for change in changes:
        if change.significant:
            significant.append(change)
        else:
            rest.append(change)
    return significant, rest


def compare_link(
    server_url: str, owner: str, repo: str, baseline_sha: str, current_sha: str
) -> str:
    """Return a markdown link to the GitHub compare view of two commits."""
    target = f"{server_url.rstrip('/')}/{owner}/{repo}/compare/{baseline_sha}...{current_sha}"
    label = f"{baseline_sha[:SHORT_SHA_LENGTH]}...{current_sha[:SHORT_SHA_LENGTH]}"
    return f"Comparing [{label}]({target})"


def render_pull_request_comment(
    changes: list[Change],
    *,
    server_url: str,
    owner: str,
    repo: str,
    baseline_sha: str | None,
    current_sha: str,
) -> str:
    """Compose the PR comment: significant table plus folded unchanged files."""
    significant, rest = split_significant(changes)
    sections = [
        REPORT_HEADING,
        _comparison_line(server_url, owner, repo, baseline_sha, current_sha),
        format_changes(significant) if significant else NO_CHANGES_NOTE,
    ]
    if rest:
        sections.append(collapsible(UNCHANGED_SUMMARY, format_changes(rest)))
    return SECTION_SEPARATOR.join(sections)


def render_commit_comment(
    changes: list[Change],
    *,
    server_url: str,
    owner: str,
    repo: str,
    baseline_sha: str | None,
    current_sha: str,
) -> str:
    """Compose the permanent commit comment with the full table."""
    return SECTION_SEPARATOR.join(
        [
            REPORT_HEADING,
            _comparison_line(server_url, owner, repo, baseline_sha, current_sha),
            format_changes(changes),
        ]
    )


def render_notice(changes: list[Change]) -> str | None:
    """Return the notice body for significant changes, or None when there are none."""
    significant, _ = split_significant(changes)
    if not significant:
        return None
    return f"This commit changes bundle size:{SECTION_SEPARATOR}{format_changes(significant)}"


def _comparison_line(
    server_url: str, owner: str, repo: str, baseline_sha: str | None, current_sha: str
) -> str:
    if baseline_sha is None:
        return NO_BASELINE_NOTE
    return compare_link(server_url, owner, repo, baseline_sha, current_sha)
