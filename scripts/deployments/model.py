"""Deployment comment data model.

The comment body is the only storage: these types round-trip through the
JSON marker embedded in it (see comment_body).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class CommentError(Exception):
    """Base class for deployment comment failures."""


class StateParseError(CommentError):
    """Marker was present but its payload is not a valid CommentState."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Failed to parse response: {message}")


class DeploymentStatus(str, Enum):
    """Outcome of one subdomain's deployment."""

    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"

    @property
    def icon(self) -> str:
        """Status icon."""
        return _STATUS_ICON[self]

    @classmethod
    def parse(cls, value: str) -> "DeploymentStatus":
        """Parse a wire string; only the exact lowercase names are accepted."""
        for status in cls:
            if status.value == value:
                return status
        valid = ", ".join(s.value for s in cls)
        raise ValueError(f"Invalid status: {value}. Valid values: {valid}")


_STATUS_ICON = {
    DeploymentStatus.SUCCESS: "✅",
    DeploymentStatus.FAILURE: "❌",
    DeploymentStatus.PENDING: "⏳",
}


def _require_str(raw: dict[str, Any], key: str, ctx: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise StateParseError(f"{ctx}.{key}: expected string")
    return value


def _require_mapping(value: Any, ctx: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise StateParseError(f"{ctx}: expected object")
    return value


@dataclass(frozen=True)
class DeploymentEntry:
    """Latest known result for one project."""

    project: str
    status: DeploymentStatus
    preview_url: str
    alias_url: str

    def reset_to_pending(self) -> "DeploymentEntry":
        # Alias URLs are stable across builds; only the preview goes stale.
        return replace(self, status=DeploymentStatus.PENDING, preview_url="")

    def to_dict(self) -> dict[str, str]:
        return {
            "project": self.project,
            "status": self.status.value,
            "previewUrl": self.preview_url,
            "aliasUrl": self.alias_url,
        }

    @classmethod
    def from_dict(cls, raw: Any, ctx: str = "entry") -> "DeploymentEntry":
        """From dict."""
        data = _require_mapping(raw, ctx)
        status_raw = _require_str(data, "status", ctx)
        try:
            status = DeploymentStatus.parse(status_raw)
        except ValueError as exc:
            raise StateParseError(f"{ctx}.status: {exc}") from exc
        return cls(
            project=_require_str(data, "project", ctx),
            status=status,
            preview_url=_require_str(data, "previewUrl", ctx),
            alias_url=_require_str(data, "aliasUrl", ctx),
        )


@dataclass(frozen=True)
class CommentState:
    """Snapshot stored in the PR comment.

    ``commit`` and ``run_url`` stamp the whole snapshot with the invocation
    that last touched it; entries are keyed by project.
    """

    deployments: dict[str, DeploymentEntry] = field(default_factory=dict)
    commit: str = ""
    run_url: str = ""

    # Holds a dict, so instances compare by value but are not hashable.
    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def empty(cls, commit: str, run_url: str) -> "CommentState":
        return cls(deployments={}, commit=commit, run_url=run_url)

    def with_stamp(self, commit: str, run_url: str) -> "CommentState":
        """Return a copy stamped with the given commit and run."""
        return replace(self, commit=commit, run_url=run_url)

    def to_dict(self) -> dict[str, Any]:
        return {
            "deployments": {key: entry.to_dict() for key, entry in self.deployments.items()},
            "commit": self.commit,
            "runUrl": self.run_url,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "CommentState":
        """From dict."""
        data = _require_mapping(raw, "state")
        deployments_raw = _require_mapping(data.get("deployments"), "state.deployments")

        deployments: dict[str, DeploymentEntry] = {}
        for key, item in deployments_raw.items():
            entry = DeploymentEntry.from_dict(item, f"state.deployments[{key}]")
            if entry.project != key:
                raise StateParseError(
                    f"state.deployments[{key}]: project '{entry.project}' does not match its key"
                )
            deployments[key] = entry

        return cls(
            deployments=deployments,
            commit=_require_str(data, "commit", "state"),
            run_url=_require_str(data, "runUrl", "state"),
        )
