"""Merge one deployment result into the accumulated comment state."""

from __future__ import annotations

from dataclasses import replace

from .model import CommentState, DeploymentEntry


def reset_other_deployments(state: CommentState, except_project: str) -> CommentState:
    """Return state with every entry except ``except_project`` back to pending."""
    deployments = {
        key: entry if key == except_project else entry.reset_to_pending()
        for key, entry in state.deployments.items()
    }
    return replace(state, deployments=deployments)


def merge_deployment(entry: DeploymentEntry, state: CommentState, new_commit: str) -> CommentState:
    """Upsert ``entry`` into ``state``.

    A different commit means the stored previews belong to an older push, so
    every sibling entry is reset to pending before the upsert. The snapshot's
    commit/run stamp is left alone; the caller re-stamps after merging.
    """
    if state.commit != new_commit:
        state = reset_other_deployments(state, entry.project)
    deployments = dict(state.deployments)
    deployments[entry.project] = entry
    return replace(state, deployments=deployments)
