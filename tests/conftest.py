import io
import os
import shutil
import subprocess
from pathlib import Path

import pytest
from lxml import etree
from PIL import Image


class FakeEncoder:
    """Produces a blank PNG with the SVG's declared size instead of rasterizing."""

    def __init__(self, background: str | None = None) -> None:
        self.background = background
        self.calls: list[str] = []

    def encode(self, svg_markup: str) -> bytes:
        self.calls.append(svg_markup)
        root = etree.fromstring(svg_markup.encode("utf-8"))
        size = (int(root.get("width")), int(root.get("height")))
        image = Image.new("RGB", size, self.background or "#000000")
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()


@pytest.fixture
def fake_encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture
def requires_cairo() -> None:
    try:
        import cairosvg  # noqa: F401
    except (ImportError, OSError):
        pytest.skip("cairosvg or the cairo library is not installed")


@pytest.fixture
def requires_git() -> None:
    if shutil.which("git") is None:
        pytest.skip("git is not installed")


def commit_on(
    repo: Path, day: str, message: str, at: str = "12:00:00"
) -> None:
    env = {
        **os.environ,
        "GIT_AUTHOR_NAME": "Test",
        "GIT_AUTHOR_EMAIL": "test@example.com",
        "GIT_COMMITTER_NAME": "Test",
        "GIT_COMMITTER_EMAIL": "test@example.com",
        "GIT_AUTHOR_DATE": f"{day}T{at}",
        "GIT_COMMITTER_DATE": f"{day}T{at}",
    }
    subprocess.run(
        [
            "git",
            "-C",
            str(repo),
            "-c",
            "commit.gpgsign=false",
            "commit",
            "--allow-empty",
            "-q",
            "-m",
            message,
        ],
        check=True,
        env=env,
    )


@pytest.fixture
def sample_repo(requires_git: None, tmp_path: Path) -> Path:
    """Repository with two commits on 2024-01-01 and one on 2024-01-07."""

    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init", "-q", str(repo)], check=True)
    # Oldest first: git log stops walking at a commit older than --since.
    commit_on(repo, "2023-06-15", "last year")
    commit_on(repo, "2024-01-01", "first")
    commit_on(repo, "2024-01-01", "second")
    commit_on(repo, "2024-01-07", "third")
    return repo


@pytest.fixture
def edge_repo(requires_git: None, tmp_path: Path) -> Path:
    """Repository with commits in the first and last seconds around 2024."""

    repo = tmp_path / "edges"
    repo.mkdir()
    subprocess.run(["git", "init", "-q", str(repo)], check=True)
    commit_on(repo, "2023-12-31", "old year", at="23:59:59")
    commit_on(repo, "2024-01-01", "new year", at="00:00:01")
    commit_on(repo, "2024-01-01", "morning", at="06:30:00")
    commit_on(repo, "2024-12-31", "evening", at="23:59:00")
    commit_on(repo, "2025-01-01", "next year", at="00:00:30")
    return repo
