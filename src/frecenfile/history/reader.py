"""Stream commit records out of ``git log``.

The reader walks the first-parent chain newest-first and yields one
``CommitRecord`` per commit. Merge commits are diffed against their first
parent only, so a merged branch shows up as a single touch at the merge's
rank and no change is counted twice. Renames are credited according to
``RenamePolicy``.

Requires git >= 2.31 for ``--diff-merges``.
"""

from __future__ import annotations

import subprocess
import tempfile
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Optional, Union

from ..exceptions import RepositoryUnavailableError
from ..logging_config import get_logger
from .models import CommitRecord, RenamePolicy

logger = get_logger(__name__)

# ASCII record separator. git C-quotes control characters inside paths, so a
# line starting with it can only be a commit header.
COMMIT_MARKER = "\x1e"

_C_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    '"': 0x22,
    "\\": 0x5C,
}
_OCTAL_DIGITS = set("01234567")


def unquote_path(raw: str) -> str:
    """Undo git's C-style quoting of unusual paths (``"a\\tb.txt"``)."""
    if len(raw) < 2 or raw[0] != '"' or raw[-1] != '"':
        return raw

    body = raw[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\":
            out += ch.encode("utf-8")
            i += 1
            continue
        nxt = body[i + 1 : i + 2]
        octal = body[i + 1 : i + 4]
        if len(octal) == 3 and set(octal) <= _OCTAL_DIGITS:
            out.append(int(octal, 8) & 0xFF)
            i += 4
        elif nxt in _C_ESCAPES:
            out.append(_C_ESCAPES[nxt])
            i += 2
        else:
            out += b"\\"
            i += 1
    return out.decode("utf-8", errors="replace")


def touched_by_status_line(
    line: str, rename_policy: RenamePolicy = RenamePolicy.BOTH
) -> tuple[str, ...]:
    """Paths touched by one ``--name-status`` line.

    ``M\\tpath`` touches ``path``. ``R087\\told\\tnew`` touches both names
    under ``RenamePolicy.BOTH`` and only ``new`` otherwise. ``C075\\tsrc\\tdst``
    touches ``dst`` only, since the copy source is left unchanged.
    """
    status, _, rest = line.partition("\t")
    if not status or not rest:
        return ()

    parts = rest.split("\t")
    code = status[0]
    if code in ("R", "C") and len(parts) >= 2:
        old_path, new_path = unquote_path(parts[0]), unquote_path(parts[1])
        if code == "R" and rename_policy is RenamePolicy.BOTH and old_path != new_path:
            return (old_path, new_path)
        return (new_path,)
    return (unquote_path(parts[0]),)


def parse_log_lines(
    lines: Iterable[str],
    max_commits: int = 0,
    rename_policy: RenamePolicy = RenamePolicy.BOTH,
) -> Iterator[CommitRecord]:
    """Lazily turn ``git log --name-status`` output into ranked records.

    Each commit starts with a ``COMMIT_MARKER`` header line. Rank is the
    0-based position of the header in the stream. A record is only emitted
    once the next header (or end of input) is seen. Parsing stops as soon as
    ``max_commits`` records have been produced; 0 means no cap.
    """
    rank = 0
    current: Optional[list[str]] = None
    seen: set[str] = set()

    for raw_line in lines:
        line = raw_line.rstrip("\r\n")
        if not line:
            continue

        if line.startswith(COMMIT_MARKER):
            if current is not None:
                yield CommitRecord(rank=rank, touched_paths=tuple(current))
                rank += 1
                if max_commits and rank >= max_commits:
                    return
            current = []
            seen = set()
            continue

        if current is None:
            # Output before the first header (e.g. a warning on stdout)
            continue

        for path in touched_by_status_line(line, rename_policy):
            if path not in seen:
                seen.add(path)
                current.append(path)

    if current is not None and not (max_commits and rank >= max_commits):
        yield CommitRecord(rank=rank, touched_paths=tuple(current))


class CommitStreamReader:
    """Single-pass, lazy, bounded sequence of commits from a git repository.

    Iterating starts ``git log`` and yields ``CommitRecord`` objects
    newest-first. At most ``max_commits`` records are produced (0 = whole
    history); the git process is stopped as soon as the cap is reached or
    the consumer stops iterating.

    Raises:
        RepositoryUnavailableError: The location is missing or not inside a
            git work tree, git cannot be run, or ``git log`` fails.
    """

    def __init__(
        self,
        repo_path: Union[str, Path] = ".",
        max_commits: int = 3000,
        rename_policy: Union[RenamePolicy, str] = RenamePolicy.BOTH,
        git_timeout: int = 10,
    ):
        if max_commits < 0:
            raise ValueError("max_commits must be non-negative (0 = unlimited)")
        self.repo_path = Path(repo_path)
        self.max_commits = max_commits
        self.rename_policy = RenamePolicy(rename_policy)
        self.git_timeout = git_timeout
        self.commits_read = 0
        self._toplevel: Optional[Path] = None
        self._started = False

    def __iter__(self) -> Iterator[CommitRecord]:
        if self._started:
            raise RuntimeError("CommitStreamReader can only be iterated once")
        self._started = True
        return self._stream()

    @property
    def truncated(self) -> bool:
        """True when reading stopped because the commit cap was reached."""
        return bool(self.max_commits) and self.commits_read >= self.max_commits

    def resolve_toplevel(self) -> Path:
        """Locate the work tree root containing ``repo_path``."""
        if self._toplevel is not None:
            return self._toplevel

        if not self.repo_path.is_dir():
            raise RepositoryUnavailableError(self.repo_path, "not a directory")

        result = self._run_git(
            ["-C", str(self.repo_path), "rev-parse", "--show-toplevel"], cwd=None
        )
        if result.returncode != 0:
            reason = result.stderr.strip() or "not inside a git work tree"
            raise RepositoryUnavailableError(self.repo_path, reason)

        self._toplevel = Path(result.stdout.strip())
        logger.debug("Resolved repository root %s", self._toplevel)
        return self._toplevel

    def _is_unborn(self, toplevel: Path) -> bool:
        """True only when HEAD names a branch that has no commit yet.

        A detached HEAD, or a branch whose commit object is missing or
        corrupt, is not unborn: ``git log`` runs and reports the damage.
        """
        symref = self._run_git(["symbolic-ref", "-q", "HEAD"], cwd=toplevel)
        if symref.returncode != 0:
            return False
        ref = symref.stdout.strip()
        # Resolves the ref only; the object it points at is not read.
        resolved = self._run_git(["rev-parse", "--verify", "--quiet", ref], cwd=toplevel)
        return resolved.returncode != 0

    def _run_git(self, args: list[str], cwd: Optional[Path]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                ["git", *args],
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
                timeout=self.git_timeout,
            )
        except FileNotFoundError:
            raise RepositoryUnavailableError(self.repo_path, "git executable not found")
        except subprocess.TimeoutExpired:
            raise RepositoryUnavailableError(
                self.repo_path, f"git timed out after {self.git_timeout}s"
            )

    def log_command(self) -> list[str]:
        cmd = [
            "git",
            "-c",
            "core.quotePath=false",
            "-c",
            "log.showSignature=false",
            "log",
            "--first-parent",
            "--diff-merges=first-parent",
            "--name-status",
            "-M",
            "--no-color",
            f"--format={COMMIT_MARKER}%H",
        ]
        if self.max_commits:
            cmd.append(f"-n{self.max_commits}")
        return cmd

    def _stream(self) -> Iterator[CommitRecord]:
        toplevel = self.resolve_toplevel()
        if self._is_unborn(toplevel):
            logger.info("Repository %s has no commits yet", toplevel)
            return

        cmd = self.log_command()
        logger.debug("Running %s in %s", " ".join(cmd), toplevel)
        # stderr goes to a file so a chatty git cannot block on a full pipe
        # while stdout is still being read.
        errfile = tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace")
        try:
            proc = subprocess.Popen(
                cmd,
                cwd=str(toplevel),
                stdout=subprocess.PIPE,
                stderr=errfile,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            errfile.close()
            raise RepositoryUnavailableError(self.repo_path, f"cannot run git: {e}")

        try:
            stdout = proc.stdout
            if stdout is None:
                raise RepositoryUnavailableError(self.repo_path, "git log produced no output stream")

            for record in parse_log_lines(stdout, self.max_commits, self.rename_policy):
                self.commits_read += 1
                yield record

            if self.truncated:
                logger.info("Stopped reading history at the %d-commit cap", self.max_commits)
            else:
                returncode = proc.wait()
                if returncode != 0:
                    errfile.seek(0)
                    stderr = errfile.read()
                    reason = stderr.strip() or f"git log exited with status {returncode}"
                    raise RepositoryUnavailableError(self.repo_path, reason)

            logger.debug("Read %d commit(s) from %s", self.commits_read, toplevel)
        finally:
            if proc.poll() is None:
                proc.kill()
                proc.wait()
            if proc.stdout:
                proc.stdout.close()
            errfile.close()
