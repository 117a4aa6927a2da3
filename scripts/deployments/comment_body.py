"""Markdown rendering and parsing for the deployment comment.

The first line of every comment we post is a hidden HTML marker carrying the
full CommentState as JSON. The table below it is for humans; the marker is
what the next run reads back.
"""

from __future__ import annotations

import json
from typing import Mapping

from .model import CommentState, StateParseError

MARKER_PREFIX = "<!-- util-deployments:"
MARKER_SUFFIX = " -->"

DEFAULT_TITLE = "### Deployment Preview 🚀"
PENDING_CELL = "⏳"

TABLE_HEADER = "| Subdomain | Status | Preview URL | Alias URL |"
TABLE_SEPARATOR = "|-----------|--------|-------------|-----------|"

_KNOWN_SUBDOMAINS = {
    "21-dev": "21.dev",
    "docs-21-dev": "docs.21.dev",
    "md-21-dev": "md.21.dev",
}


def project_to_subdomain(project: str, overrides: Mapping[str, str] | None = None) -> str:
    """Display name for a project key, e.g. docs-21-dev -> docs.21.dev."""
    if overrides and project in overrides:
        return overrides[project]
    known = _KNOWN_SUBDOMAINS.get(project)
    if known is not None:
        return known
    return project.replace("-", ".")


def link(url: str) -> str:
    """Markdown link whose label is the URL itself."""
    return f"[{url}]({url})"


def preview_cell(url: str) -> str:
    """Preview cell; an empty URL means the build has not produced one yet."""
    if not url:
        return PENDING_CELL
    return link(url)


def encode_state_marker(state: CommentState) -> str:
    payload = json.dumps(
        state.to_dict(),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    # "<" and ">" never appear raw, so "-->" inside a value cannot close the marker.
    payload = payload.replace("<", "\\u003c").replace(">", "\\u003e")
    return f"{MARKER_PREFIX}{payload}{MARKER_SUFFIX}"


def render_comment_body(
    state: CommentState,
    *,
    title: str = DEFAULT_TITLE,
    subdomains: Mapping[str, str] | None = None,
) -> str:
    """Render the full comment body, marker line first."""
    short_commit = state.commit[:7]
    lines = [
        encode_state_marker(state),
        title,
        f"**Commit**: {short_commit} | **Run**: [View Logs]({state.run_url})",
        "",
        TABLE_HEADER,
        TABLE_SEPARATOR,
    ]
    for key in sorted(state.deployments):
        entry = state.deployments[key]
        subdomain = project_to_subdomain(entry.project, subdomains)
        lines.append(
            f"| {subdomain} | {entry.status.icon} | {preview_cell(entry.preview_url)} | {link(entry.alias_url)} |"
        )
    return "\n".join(lines)


def extract_state_payload(body: str) -> str | None:
    """Raw JSON between the marker prefix and the first suffix after it."""
    start = body.find(MARKER_PREFIX)
    if start < 0:
        return None
    start += len(MARKER_PREFIX)
    end = body.find(MARKER_SUFFIX, start)
    if end < 0:
        # Truncated marker: same as no marker.
        return None
    return body[start:end]


def parse_comment_state(body: str) -> CommentState | None:
    """Decode the state embedded in a comment body.

    Returns None when the body carries no (complete) marker. Raises
    StateParseError when a marker is present but its payload is invalid.
    """
    payload = extract_state_payload(body)
    if payload is None:
        return None
    try:
        raw = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise StateParseError(f"invalid JSON in deployment marker: {exc}") from exc
    return CommentState.from_dict(raw)


encode = render_comment_body
decode = parse_comment_state
