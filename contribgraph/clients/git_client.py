import logging
import subprocess
from collections.abc import Sequence

from contribgraph.core.errors import HistoryReadError


logger = logging.getLogger(__name__)


def split_log_lines(raw_output: str) -> list[str]:
    """Split git log output into trimmed, non-empty lines."""

    normalized = raw_output.replace("\r\n", "\n").replace("\r", "\n")
    return [line.strip() for line in normalized.split("\n") if line.strip()]


def build_log_command(
    repo_path: str, since: str, until: str, git_binary: str = "git"
) -> Sequence[str]:
    return [
        git_binary,
        "-C",
        repo_path,
        "log",
        "--no-merges",
        "--date=short",
        "--pretty=format:%ad",
        "--since",
        since,
        "--until",
        until,
    ]


def read_commit_dates(
    repo_path: str,
    since: str,
    until: str,
    git_binary: str = "git",
) -> list[str]:
    """Return one short date string per non-merge commit in the range.

    Raises:
        HistoryReadError: If git is missing or exits with a non-zero status.
    """

    command = build_log_command(repo_path, since, until, git_binary=git_binary)
    logger.debug("Running %s", " ".join(command))

    try:
        completed = subprocess.run(
            command,
            capture_output=True,
            check=False,
        )
    except OSError as exc:
        raise HistoryReadError(f"could not run {git_binary}: {exc}") from exc

    if completed.returncode != 0:
        stderr = completed.stderr.decode("utf-8", errors="replace").strip()
        raise HistoryReadError(
            f"git log failed for {repo_path} (exit {completed.returncode}): {stderr}"
        )

    dates = split_log_lines(completed.stdout.decode("utf-8"))
    logger.info("Read %d commit dates from %s", len(dates), repo_path)
    return dates
