"""Unit tests for the library entry points."""

from pathlib import Path

import pytest
from conftest import Recorder
from treesift.search import api
from treesift.search.errors import InvalidSessionState
from treesift.search.models import SessionState


class TestStartSearch:
    """Tests for start_search function."""

    def test_returns_running_session(self, proj_tree: Path, recorder: Recorder) -> None:
        """A valid request returns a handle and streams matches."""
        handle = api.start_search(
            str(proj_tree),
            "a",
            recorder.on_progress,
            recorder.on_match,
            10,
            on_state_change=recorder.on_state_change,
        )

        assert handle is not None
        assert recorder.wait()
        handle.wait(5)
        assert recorder.names == ["a.txt", "a2.txt", "a3.txt"]
        assert handle.state == SessionState.COMPLETED

    @pytest.mark.parametrize("query", ["", "   "])
    def test_empty_query_not_started(
        self, proj_tree: Path, recorder: Recorder, query: str
    ) -> None:
        """An empty query returns None and fires nothing."""
        handle = api.start_search(
            str(proj_tree),
            query,
            recorder.on_progress,
            recorder.on_match,
            on_state_change=recorder.on_state_change,
        )
        assert handle is None
        assert recorder.states == []
        assert recorder.progress == []

    def test_root_sentinel_not_started(self, recorder: Recorder) -> None:
        """The all-volumes root cannot be deep-searched."""
        assert api.start_search("", "a", recorder.on_progress, recorder.on_match) is None

    def test_missing_root_not_started(self, tmp_path: Path, recorder: Recorder) -> None:
        """A root that doesn't exist is not searched."""
        handle = api.start_search(str(tmp_path / "gone"), "a", None, recorder.on_match)
        assert handle is None
        assert recorder.matches == []


class TestCancelAndResume:
    """Tests for cancel_search and resume_search."""

    def test_cancel_none_is_noop(self) -> None:
        """Cancelling nothing is allowed."""
        api.cancel_search(None)

    def test_cancel_and_resume(self, wide_tree: Path, recorder: Recorder) -> None:
        """A paused search resumes, and cancelling twice is harmless."""
        handle = api.start_search(
            str(wide_tree),
            "match",
            None,
            recorder.on_match,
            2,
            on_state_change=recorder.on_state_change,
        )
        assert handle is not None
        recorder.wait()
        handle.wait(5)

        api.resume_search(handle)
        recorder.wait()
        handle.wait(5)
        assert len(recorder.matches) == 4

        api.cancel_search(handle)
        api.cancel_search(handle)
        assert handle.state == SessionState.CANCELLED
        with pytest.raises(InvalidSessionState):
            api.resume_search(handle)

    def test_list_directory_exported(self, proj_tree: Path) -> None:
        """The listing entry point is part of the public API."""
        assert [e.name for e in api.list_directory(str(proj_tree))] == ["sub", "a.txt"]
