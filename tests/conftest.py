"""Shared pytest fixtures and configuration."""

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from git import Git, Repo

from baredot.core import BootstrapConfig, resolve_config
from baredot.output import Reporter

REMOTE_URL = "https://example.com/dots.git"


@pytest.fixture
def temp_home(monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Create a temporary home directory and point HOME at it."""
    with tempfile.TemporaryDirectory() as tmpdir:
        home = Path(tmpdir)
        monkeypatch.setenv("HOME", str(home))
        monkeypatch.delenv("NO_COLOR", raising=False)
        yield home


@pytest.fixture
def reporter() -> Reporter:
    """A colorless reporter so captured output is plain text."""
    return Reporter(color=False)


@pytest.fixture
def config(temp_home: Path) -> BootstrapConfig:
    """Default configuration rooted at the temporary home directory."""
    return resolve_config(remote=REMOTE_URL, home_dir=temp_home)


@pytest.fixture
def bare_repo(temp_home: Path) -> Repo:
    """A bare repository at the default location with no remotes."""
    return Repo.init(str(temp_home / ".dotfiles.git"), bare=True)


def git_config(git_dir: Path, key: str) -> str:
    """Read a config value the way git itself resolves it."""
    return Repo(str(git_dir)).git.config("--get", key)


def tracked_files(git_dir: Path, home: Path) -> list:
    """List paths in the index of the bare repository at ``git_dir``."""
    git = Git(str(home))(git_dir=str(git_dir), work_tree=str(home))
    return git.ls_files().splitlines()
