"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import threading
from pathlib import Path

import pytest
from treesift.search.models import Entry, SessionState


class Recorder:
    """Collects search callbacks for assertions.

    Callbacks may arrive on a worker thread; ``done`` is set when a
    terminal or paused state is seen.
    """

    def __init__(self) -> None:
        self.matches: list[Entry] = []
        self.progress: list[tuple[int, int]] = []
        self.states: list[SessionState] = []
        self.done = threading.Event()

    def on_match(self, entry: Entry) -> None:
        self.matches.append(entry)

    def on_progress(self, folders_checked: int, files_checked: int) -> None:
        self.progress.append((folders_checked, files_checked))

    def on_state_change(self, state: SessionState) -> None:
        self.states.append(state)
        if state == SessionState.PAUSED or state.is_terminal:
            self.done.set()

    @property
    def names(self) -> list[str]:
        return [entry.name for entry in self.matches]

    def wait(self, timeout: float = 5.0) -> bool:
        """Wait for the next pause or terminal state, then re-arm."""
        seen = self.done.wait(timeout)
        self.done.clear()
        return seen


@pytest.fixture
def recorder() -> Recorder:
    """Fresh callback recorder."""
    return Recorder()


def _touch(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def proj_tree(tmp_path: Path) -> Path:
    """Small project tree.

    proj/
        a.txt
        sub/
            a2.txt
            deep/
                a3.txt
    """
    root = tmp_path / "proj"
    _touch(root / "a.txt", "alpha")
    _touch(root / "sub" / "a2.txt", "alpha two")
    _touch(root / "sub" / "deep" / "a3.txt", "alpha three")
    return root


@pytest.fixture
def wide_tree(tmp_path: Path) -> Path:
    """Tree with matches at several depths and in several siblings.

    root/
        Match_dir/
            inner_match.txt
        other/
            match.log
            nested/
                deep_match.md
        b_match.txt
        a_match.txt
        unrelated.txt
    """
    root = tmp_path / "root"
    _touch(root / "Match_dir" / "inner_match.txt")
    _touch(root / "other" / "match.log")
    _touch(root / "other" / "nested" / "deep_match.md")
    _touch(root / "b_match.txt")
    _touch(root / "a_match.txt")
    _touch(root / "unrelated.txt")
    return root
