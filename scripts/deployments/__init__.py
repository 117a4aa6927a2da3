"""Unified PR deployment comment: state model, codec, merge and publishing."""

from .comment_body import MARKER_PREFIX, MARKER_SUFFIX, parse_comment_state, project_to_subdomain, render_comment_body
from .merge import merge_deployment, reset_other_deployments
from .model import CommentError, CommentState, DeploymentEntry, DeploymentStatus, StateParseError

__all__ = [
    "CommentError",
    "CommentState",
    "DeploymentEntry",
    "DeploymentStatus",
    "MARKER_PREFIX",
    "MARKER_SUFFIX",
    "StateParseError",
    "merge_deployment",
    "parse_comment_state",
    "project_to_subdomain",
    "render_comment_body",
    "reset_other_deployments",
]
