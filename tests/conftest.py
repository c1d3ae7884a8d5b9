"""Shared test fixtures for frecenfile tests."""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

HAS_GIT = shutil.which("git") is not None


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class GitRepo:
    """Tiny scripted git repository with deterministic commit times."""

    def __init__(self, root: Path):
        self.root = root
        self._clock = 1_700_000_000
        self.root.mkdir(parents=True, exist_ok=True)
        self.git("init", "-q", "-b", "main")
        self.git("config", "user.email", "test@example.com")
        self.git("config", "user.name", "Test")
        self.git("config", "commit.gpgsign", "false")

    def git(self, *args: str) -> str:
        self._clock += 60
        env = dict(os.environ)
        env["GIT_AUTHOR_DATE"] = f"{self._clock} +0000"
        env["GIT_COMMITTER_DATE"] = f"{self._clock} +0000"
        result = subprocess.run(
            ["git", *args],
            cwd=self.root,
            capture_output=True,
            text=True,
            env=env,
            check=True,
        )
        return result.stdout

    def write(self, relpath: str, content: str) -> None:
        target = self.root / relpath
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)

    def commit(self, message: str, files: dict[str, str] | None = None) -> str:
        """Write ``files`` (path -> content), stage everything, commit."""
        for relpath, content in (files or {}).items():
            self.write(relpath, content)
        self.git("add", "-A")
        self.git("commit", "-q", "--allow-empty", "-m", message)
        return self.git("rev-parse", "HEAD").strip()

    def touch(self, *relpaths: str, message: str | None = None) -> str:
        """Commit a fresh change to each of ``relpaths``."""
        files = {p: f"{p} @ {self._clock}\n" for p in relpaths}
        return self.commit(message or f"touch {' '.join(relpaths)}", files)

    def rename(self, old: str, new: str) -> str:
        (self.root / new).parent.mkdir(parents=True, exist_ok=True)
        self.git("mv", old, new)
        self.git("commit", "-q", "-m", f"rename {old} -> {new}")
        return self.git("rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(tmp_path):
    """Factory for scripted repositories under tmp_path."""
    if not HAS_GIT:
        pytest.skip("git not found")

    def _make(name: str = "repo") -> GitRepo:
        return GitRepo(tmp_path / name)

    return _make
