"""Package version and the git commit it runs from."""

import subprocess
from pathlib import Path

from structlog import get_logger

logger = get_logger(__name__)

__version__ = "0.3.0"

REPO_ROOT = Path(__file__).resolve().parents[2]


def commit_from_git_dir(git_dir: Path) -> str | None:
    """Resolve HEAD inside a ``.git`` directory without running git."""
    head = (git_dir / "HEAD").read_text().strip()
    if not head.startswith("ref: "):
        return head or None

    ref = head.removeprefix("ref: ")
    loose = git_dir / ref
    if loose.is_file():
        return loose.read_text().strip()

    # Refs moved into packed-refs by git gc
    packed = git_dir / "packed-refs"
    if packed.is_file():
        for line in packed.read_text().splitlines():
            sha, _, name = line.partition(" ")
            if name == ref:
                return sha
    return None


def _commit_from_command() -> str | None:
    result = subprocess.run(
        ["git", "rev-parse", "HEAD"],
        cwd=REPO_ROOT,
        capture_output=True,
        text=True,
        timeout=1,
    )
    if result.returncode != 0:
        logger.debug("git_command_failed", stderr=result.stderr.strip())
        return None
    return result.stdout.strip()


def _commit_from_build() -> str | None:
    try:
        from civicscore._build_metadata import GIT_COMMIT  # type: ignore
    except ImportError:
        return None
    return GIT_COMMIT


def get_git_commit() -> str | None:
    """Commit of the running code, or None if it cannot be determined.

    A checkout wins over the commit recorded at build time. Resolved on each
    call, so long-running processes see a fresh value.
    """
    git_dir = REPO_ROOT / ".git"
    try:
        if git_dir.is_dir():
            commit = commit_from_git_dir(git_dir)
            if commit:
                return commit
    except OSError as e:
        logger.debug("git_dir_read_failed", error=str(e))

    try:
        commit = _commit_from_command()
        if commit:
            return commit
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("git_command_unavailable", error=str(e))

    return _commit_from_build()
