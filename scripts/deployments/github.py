"""GitHub PR comment access through the gh CLI.

Three operations only: list comment bodies, edit the last comment, create a
comment. Failures are raised as CommentError subclasses; nothing is retried
here.
"""
from __future__ import annotations

import json
import subprocess

from .model import CommentError


class CliNotFoundError(CommentError):
    """gh CLI is not installed or not on PATH."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        message = "gh CLI not found. Ensure GitHub CLI is installed and in PATH."
        if detail:
            message = f"{message} (gh: {detail})"
        super().__init__(message)


class NotAuthenticatedError(CommentError):
    """gh CLI is not authenticated (GITHUB_TOKEN missing or invalid)."""

    def __init__(self) -> None:
        super().__init__("Not authenticated. Run 'gh auth login' or set GITHUB_TOKEN.")


class CommentApiError(CommentError):
    """GitHub rejected the request."""

    def __init__(self, message: str) -> None:
        self.detail = message
        super().__init__(f"GitHub API error: {message}")


class ResponseParseError(CommentError):
    """gh output could not be parsed."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Failed to parse response: {message}")


def classify_gh_error(stderr: str) -> CommentError:
    """Map gh stderr to the matching error kind."""
    text = (stderr or "").strip()
    lower = text.lower()
    if "not logged" in lower or "authentication" in lower:
        return NotAuthenticatedError()
    if "command not found" in lower or "not found" in lower:
        # Also matches API 404s; keep gh's text so those are recognisable.
        return CliNotFoundError(text)
    return CommentApiError(text or "Unknown error")


def _with_repo(args: list[str], repo: str | None) -> list[str]:
    if repo:
        return [*args, "--repo", repo]
    return args


def build_fetch_comments_args(pr: int, repo: str | None = None) -> list[str]:
    return _with_repo(["issue", "view", str(pr), "--json", "comments"], repo)


def build_edit_last_args(pr: int, body: str, repo: str | None = None) -> list[str]:
    return _with_repo(["issue", "comment", str(pr), "--edit-last", "--body", body], repo)


def build_create_args(pr: int, body: str, repo: str | None = None) -> list[str]:
    return _with_repo(["issue", "comment", str(pr), "--body", body], repo)


def _run_gh(args: list[str]) -> subprocess.CompletedProcess[str]:
    """Run a gh CLI command.

    Raises:
        CliNotFoundError: gh binary is missing
        NotAuthenticatedError: gh reports missing or invalid credentials
        CommentApiError: any other non-zero exit, or gh could not be started
        ResponseParseError: gh output could not be decoded
    """
    try:
        result = subprocess.run(
            ["gh", *args], capture_output=True, text=True, errors="replace", check=False
        )
    except FileNotFoundError:
        raise CliNotFoundError() from None
    except OSError as exc:
        raise CommentApiError(f"unable to run gh: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ResponseParseError(f"gh output is not valid UTF-8: {exc}") from exc

    if result.returncode != 0:
        raise classify_gh_error(result.stderr or "")
    return result


def parse_comments_response(text: str) -> list[str]:
    """Comment bodies from `gh issue view --json comments` output."""
    try:
        payload = json.loads(text or "")
    except json.JSONDecodeError as exc:
        raise ResponseParseError(f"invalid JSON from gh: {exc}") from exc
    if not isinstance(payload, dict) or not isinstance(payload.get("comments"), list):
        raise ResponseParseError("expected an object with a 'comments' list")

    bodies: list[str] = []
    for idx, comment in enumerate(payload["comments"]):
        body = comment.get("body") if isinstance(comment, dict) else None
        if not isinstance(body, str):
            raise ResponseParseError(f"comments[{idx}].body: expected string")
        bodies.append(body)
    return bodies


def list_comment_bodies(pr: int, *, repo: str | None = None) -> list[str]:
    """Bodies of every comment on the PR, oldest first."""
    result = _run_gh(build_fetch_comments_args(pr, repo))
    return parse_comments_response(result.stdout)


def edit_last_comment(pr: int, body: str, *, repo: str | None = None) -> None:
    """Replace the body of the PR's most recent comment by the current user."""
    _run_gh(build_edit_last_args(pr, body, repo))


def create_comment(pr: int, body: str, *, repo: str | None = None) -> None:
    _run_gh(build_create_args(pr, body, repo))
