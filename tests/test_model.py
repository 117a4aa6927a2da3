"""Tests for deployments.model — status, entries and state (de)serialization."""

from collections.abc import Hashable

import pytest

from deployments.model import (
    CommentError,
    CommentState,
    DeploymentEntry,
    DeploymentStatus,
    StateParseError,
)


def _entry(project="21-dev", status=DeploymentStatus.SUCCESS, preview="https://a.pages.dev", alias="https://preview.21.dev"):
    return DeploymentEntry(project=project, status=status, preview_url=preview, alias_url=alias)


class TestDeploymentStatus:
    def test_icons(self):
        assert DeploymentStatus.SUCCESS.icon == "✅"
        assert DeploymentStatus.FAILURE.icon == "❌"
        assert DeploymentStatus.PENDING.icon == "⏳"

    def test_every_status_has_an_icon(self):
        for status in DeploymentStatus:
            assert status.icon

    def test_parse_wire_values(self):
        assert DeploymentStatus.parse("success") is DeploymentStatus.SUCCESS
        assert DeploymentStatus.parse("failure") is DeploymentStatus.FAILURE
        assert DeploymentStatus.parse("pending") is DeploymentStatus.PENDING

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match="Valid values: success, failure, pending"):
            DeploymentStatus.parse("skipped")

    def test_parse_is_case_sensitive(self):
        with pytest.raises(ValueError):
            DeploymentStatus.parse("SUCCESS")


class TestDeploymentEntry:
    def test_to_dict_uses_wire_keys(self):
        assert _entry().to_dict() == {
            "project": "21-dev",
            "status": "success",
            "previewUrl": "https://a.pages.dev",
            "aliasUrl": "https://preview.21.dev",
        }

    def test_from_dict_round_trip(self):
        entry = _entry(status=DeploymentStatus.FAILURE)
        assert DeploymentEntry.from_dict(entry.to_dict()) == entry

    def test_reset_to_pending_keeps_project_and_alias(self):
        reset = _entry().reset_to_pending()
        assert reset.project == "21-dev"
        assert reset.status is DeploymentStatus.PENDING
        assert reset.preview_url == ""
        assert reset.alias_url == "https://preview.21.dev"

    def test_from_dict_missing_key(self):
        raw = _entry().to_dict()
        del raw["aliasUrl"]
        with pytest.raises(StateParseError, match="aliasUrl"):
            DeploymentEntry.from_dict(raw)

    def test_from_dict_unknown_status(self):
        raw = {**_entry().to_dict(), "status": "cancelled"}
        with pytest.raises(StateParseError, match="status"):
            DeploymentEntry.from_dict(raw)

    def test_from_dict_non_mapping(self):
        with pytest.raises(StateParseError):
            DeploymentEntry.from_dict(["21-dev"])


class TestCommentState:
    def test_empty(self):
        state = CommentState.empty("abc", "https://run")
        assert state.deployments == {}
        assert state.commit == "abc"
        assert state.run_url == "https://run"

    def test_with_stamp_returns_copy(self):
        state = CommentState(deployments={"21-dev": _entry()}, commit="old", run_url="r1")
        stamped = state.with_stamp("new", "r2")
        assert stamped.commit == "new"
        assert stamped.run_url == "r2"
        assert stamped.deployments == state.deployments
        assert state.commit == "old"

    def test_dict_round_trip(self):
        state = CommentState(
            deployments={"21-dev": _entry(), "md-21-dev": _entry(project="md-21-dev", preview="")},
            commit="abc1234567890",
            run_url="https://github.com/o/r/actions/runs/1",
        )
        assert CommentState.from_dict(state.to_dict()) == state

    def test_from_dict_rejects_key_mismatch(self):
        raw = {
            "deployments": {"docs-21-dev": _entry().to_dict()},
            "commit": "abc",
            "runUrl": "https://run",
        }
        with pytest.raises(StateParseError, match="does not match"):
            CommentState.from_dict(raw)

    def test_from_dict_requires_deployments_object(self):
        with pytest.raises(StateParseError, match="state.deployments"):
            CommentState.from_dict({"deployments": [], "commit": "a", "runUrl": "b"})

    def test_from_dict_requires_commit(self):
        with pytest.raises(StateParseError, match="commit"):
            CommentState.from_dict({"deployments": {}, "runUrl": "b"})

    def test_state_parse_error_is_comment_error(self):
        assert issubclass(StateParseError, CommentError)

    def test_not_hashable(self):
        state = CommentState.empty("abc", "https://run")
        assert not isinstance(state, Hashable)
        with pytest.raises(TypeError):
            hash(state)
