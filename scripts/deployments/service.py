"""Fetch -> decode -> merge -> render -> publish for one CI job.

Each CI job reports one project. The PR comment holds the accumulated state
for all of them, so every run reads it back, merges its own row and posts the
whole table again. There is no locking: two jobs publishing at the same time
can drop one row until the next run re-adds it.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field

from . import github as gh
from .comment_body import MARKER_PREFIX, parse_comment_state, render_comment_body
from .config import CommentConfig
from .merge import merge_deployment
from .model import CommentError, CommentState, DeploymentEntry, DeploymentStatus

EDITED = "edited"
CREATED = "created"


def warn(message: str) -> None:
    """Warn."""
    print(f"::warning::{message}", file=sys.stderr)


def notice(message: str) -> None:
    """Notice."""
    print(f"::notice::{message}", file=sys.stderr)


@dataclass(frozen=True)
class DeploymentUpdate:
    """Inputs for one invocation."""
    pr: int
    project: str
    status: DeploymentStatus
    preview_url: str
    alias_url: str
    commit: str
    run_url: str
    repo: str | None = None

    def entry(self) -> DeploymentEntry:
        return DeploymentEntry(
            project=self.project,
            status=self.status,
            preview_url=self.preview_url,
            alias_url=self.alias_url,
        )


@dataclass(frozen=True)
class FetchResult:
    """Comment bodies, or the error that prevented reading them."""
    bodies: list[str] = field(default_factory=list)
    error: CommentError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class UpdateResult:
    state: CommentState
    body: str
    action: str


def fetch_existing_comments(pr: int, *, repo: str | None = None) -> FetchResult:
    try:
        return FetchResult(bodies=gh.list_comment_bodies(pr, repo=repo))
    except CommentError as exc:
        return FetchResult(error=exc)


def find_deployment_comment(bodies: list[str]) -> str | None:
    """First comment body carrying our marker."""
    for body in bodies:
        if MARKER_PREFIX in body:
            return body
    return None


def load_or_init_state(fetched: FetchResult, commit: str, run_url: str) -> CommentState:
    """State to merge into for this run.

    Read failures start from an empty state; a located marker with a corrupt
    payload raises StateParseError.
    """
    if not fetched.ok:
        warn(f"Unable to read existing PR comments, starting from empty state: {fetched.error}")
        return CommentState.empty(commit, run_url)

    existing = find_deployment_comment(fetched.bodies)
    if existing is None:
        return CommentState.empty(commit, run_url)

    state = parse_comment_state(existing)
    if state is None:
        # Prefix without a closing suffix.
        warn("Deployment marker is truncated, starting from empty state.")
        return CommentState.empty(commit, run_url)
    return state


def publish_comment(pr: int, body: str, *, repo: str | None = None) -> str:
    """Edit the PR's last comment, falling back to a new comment.

    Note that the edit targets the last comment on the PR, not necessarily the
    one carrying the marker.
    """
    try:
        gh.edit_last_comment(pr, body, repo=repo)
        return EDITED
    except CommentError as exc:
        notice(f"Editing last comment failed ({exc}); creating a new comment.")

    gh.create_comment(pr, body, repo=repo)
    return CREATED


def build_updated_state(update: DeploymentUpdate, state: CommentState) -> CommentState:
    merged = merge_deployment(update.entry(), state, update.commit)
    return merged.with_stamp(update.commit, update.run_url)


def update_deployment_comment(
    update: DeploymentUpdate,
    *,
    config: CommentConfig | None = None,
    dry_run: bool = False,
) -> UpdateResult:
    """Run the full update for one deployment result.

    Raises:
        StateParseError: existing comment has a corrupt marker
        CommentError: publishing failed after the create fallback
    """
    config = config or CommentConfig()

    fetched = fetch_existing_comments(update.pr, repo=update.repo)
    state = load_or_init_state(fetched, update.commit, update.run_url)
    state = build_updated_state(update, state)
    body = render_comment_body(state, title=config.title, subdomains=config.subdomains)

    if dry_run:
        return UpdateResult(state=state, body=body, action="dry-run")

    action = publish_comment(update.pr, body, repo=update.repo)
    return UpdateResult(state=state, body=body, action=action)
