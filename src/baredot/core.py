"""Core functionality for baredot - a bare-repository dotfiles bootstrapper."""

import os
import shlex
import shutil
import stat
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from git import Git, GitCommandError, GitError, Repo

from .exceptions import (
    BaredotFileOperationError,
    BaredotGitError,
    BootstrapResultDict,
    ExclusionStateDict,
    MissingCapabilityError,
    MissingRemoteError,
    PathConflictError,
    RemoteConflictError,
    RepositoryStateDict,
)
from .output import Reporter

# Constants
GIT_DIR_NAME = ".dotfiles.git"
DOTFILES_DIR_NAME = ".dotfiles"
EXCLUDES_FILENAME = ".gitignore"
STARTUP_FILENAMES = (".bashrc", ".zshrc")
REQUIRED_COMMANDS = ("git",)
REMOTE_NAME = "origin"
MATCH_EVERYTHING = "*"
ALIAS_NAME = "dotfiles"
ALIAS_PREFIX = f"alias {ALIAS_NAME}="


# ============================================================================
# PATH MANAGEMENT
# ============================================================================


def get_home_dir() -> Path:
    """Get the home directory, respecting environment variables for testing."""
    if os.environ.get("HOME"):
        return Path(os.environ["HOME"])
    return Path.home()


def get_baredot_paths(home_dir: Optional[Path] = None) -> Dict[str, Path]:
    """Get the default baredot paths based on home directory."""
    if home_dir is None:
        home_dir = get_home_dir()

    return {
        "home": home_dir,
        "git_dir": home_dir / GIT_DIR_NAME,
        "dotfiles_dir": home_dir / DOTFILES_DIR_NAME,
        "bashrc": home_dir / STARTUP_FILENAMES[0],
        "zshrc": home_dir / STARTUP_FILENAMES[1],
    }


def absolute_path(value: Union[str, Path]) -> Path:
    """Expand ``~`` and anchor relative paths at the current directory.

    Symlinks are left alone so that the alias keeps the operator's spelling.
    """
    return Path(value).expanduser().absolute()


@dataclass(frozen=True)
class BootstrapConfig:
    """Resolved inputs for one bootstrap run."""

    home: Path
    git_dir: Path
    dotfiles_dir: Path
    remote: str = ""
    startup_files: Tuple[Path, ...] = field(default_factory=tuple)

    @property
    def excludes_file(self) -> Path:
        return self.dotfiles_dir / EXCLUDES_FILENAME

    def with_remote(self, remote: str) -> "BootstrapConfig":
        return replace(self, remote=remote.strip())


def resolve_config(
    remote: str = "",
    git_dir: Optional[str] = None,
    dotfiles_dir: Optional[str] = None,
    home_dir: Optional[Path] = None,
) -> BootstrapConfig:
    """Fill unset values with the defaults under the home directory."""
    paths = get_baredot_paths(absolute_path(home_dir or get_home_dir()))

    return BootstrapConfig(
        home=paths["home"],
        git_dir=absolute_path(git_dir) if git_dir else paths["git_dir"],
        dotfiles_dir=(
            absolute_path(dotfiles_dir) if dotfiles_dir else paths["dotfiles_dir"]
        ),
        remote=(remote or "").strip(),
        startup_files=(paths["bashrc"], paths["zshrc"]),
    )


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================


def describe_path(path: Path) -> str:
    """Return an ``ls -l`` style line describing ``path``."""
    try:
        st = path.lstat()
    except OSError as e:
        return f"{path}: {e.strerror}"
    modified = datetime.fromtimestamp(st.st_mtime).strftime("%b %d %H:%M")
    mode = stat.filemode(st.st_mode)
    line = f"{mode} {st.st_nlink} {st.st_size} {modified} {path}"
    if path.is_symlink():
        line += f" -> {os.readlink(path)}"
    return line


def read_lines(path: Path) -> List[str]:
    """Split ``path`` on newlines only, dropping a trailing carriage return."""
    with open(path, encoding="utf-8", errors="replace", newline="") as f:
        text = f.read()
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def file_has_line(path: Path, expected: str) -> bool:
    """Return True if any full line of ``path`` equals ``expected``."""
    return any(line == expected for line in read_lines(path))


def file_has_line_prefix(path: Path, prefix: str) -> bool:
    """Return True if any line of ``path`` starts with ``prefix``."""
    return any(line.startswith(prefix) for line in read_lines(path))


def append_line(path: Path, line: str) -> None:
    """Append ``line`` to ``path`` as its own line, never rewriting content."""
    data = path.read_bytes() if path.exists() else b""
    prefix = "\n" if data and not data.endswith(b"\n") else ""
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{prefix}{line}\n")


# ============================================================================
# CAPABILITY PROBE
# ============================================================================


def find_missing_commands(
    commands: Iterable[str], reporter: Optional[Reporter] = None
) -> List[str]:
    """Return the commands that cannot be found on PATH, logging each one."""
    reporter = reporter or Reporter.from_env()
    missing = []
    for cmd in commands:
        if shutil.which(cmd) is None:
            reporter.error(f"missing `{cmd}`")
            missing.append(cmd)
    return missing


def require_commands(
    commands: Iterable[str] = REQUIRED_COMMANDS, reporter: Optional[Reporter] = None
) -> None:
    """Raise MissingCapabilityError if any of ``commands`` is unavailable."""
    missing = find_missing_commands(commands, reporter)
    if missing:
        raise MissingCapabilityError(missing)


# ============================================================================
# REPOSITORY INITIALIZATION
# ============================================================================


def is_git_dir(path: Path) -> bool:
    """Return True if git recognizes ``path`` as a repository directory."""
    try:
        Git()(git_dir=str(path)).rev_parse()
    except GitCommandError:
        return False
    return True


def get_remote_url(repo: Repo, name: str = REMOTE_NAME) -> str:
    """Return the URL of remote ``name``, or "" when there is no such remote."""
    try:
        return repo.git.remote("get-url", name).strip()
    except GitCommandError:
        return ""


def ensure_directory(path: Path) -> None:
    """Create ``path`` if needed; raise PathConflictError if it is not a dir."""
    if not path.exists() and not path.is_symlink():
        try:
            path.mkdir(parents=True)
        except OSError as e:
            raise BaredotFileOperationError(f"Could not create {path}: {e}") from e
    if not path.is_dir():
        raise PathConflictError(path, describe_path(path))


def reconcile_repository(
    git_dir: Path, remote: str, reporter: Optional[Reporter] = None
) -> RepositoryStateDict:
    """
    Ensure a bare repository exists at ``git_dir`` with ``origin`` = ``remote``.

    An existing ``origin`` pointing at a different URL is never rewritten;
    RemoteConflictError is raised instead and the repository is left as is.
    """
    reporter = reporter or Reporter.from_env()
    if not remote:
        raise MissingRemoteError("missing a git remote")

    reporter.info(f"ensuring a git repo is present at {git_dir}")
    ensure_directory(git_dir)

    initialized = False
    try:
        if is_git_dir(git_dir):
            repo = Repo(str(git_dir))
        else:
            reporter.info(f"initializing a new bare git directory at {git_dir}")
            repo = Repo.init(str(git_dir), bare=True)
            initialized = True

        current = get_remote_url(repo)
        if not current:
            reporter.info(
                f"setting '{remote}' as '{git_dir}'s remote '{REMOTE_NAME}'"
            )
            repo.git.remote("add", "--", REMOTE_NAME, remote)
            remote_added = True
        elif current == remote:
            reporter.info(f"'{git_dir}' has the correct remote {remote}")
            remote_added = False
        else:
            raise RemoteConflictError(desired=remote, existing=current)
    except GitError as e:
        raise BaredotGitError(f"Could not set up {git_dir}: {e}") from e

    return {
        "git_dir": str(git_dir),
        "remote": remote,
        "initialized": initialized,
        "remote_added": remote_added,
    }


# ============================================================================
# EXCLUSION POLICY
# ============================================================================


def write_exclusion_policy(dotfiles_dir: Path) -> Tuple[Path, bool, bool]:
    """
    Make sure ``dotfiles_dir/.gitignore`` holds a line that is exactly ``*``.

    Returns:
        Tuple of (excludes_file, created, appended)
    """
    excludes_file = dotfiles_dir / EXCLUDES_FILENAME
    try:
        dotfiles_dir.mkdir(parents=True, exist_ok=True)
        if not excludes_file.exists():
            excludes_file.write_text(f"{MATCH_EVERYTHING}\n", encoding="utf-8")
            return excludes_file, True, False
        if not file_has_line(excludes_file, MATCH_EVERYTHING):
            append_line(excludes_file, MATCH_EVERYTHING)
            return excludes_file, False, True
    except OSError as e:
        raise BaredotFileOperationError(
            f"Could not write {excludes_file}: {e}"
        ) from e
    return excludes_file, False, False


def configure_exclusion(git_dir: Path, excludes_file: Path) -> None:
    """Point core.excludesFile at ``excludes_file`` and hide untracked files."""
    try:
        repo = Repo(str(git_dir))
        with repo.config_writer() as writer:
            writer.set_value("core", "excludesFile", str(excludes_file))
            writer.set_value("status", "showUntrackedFiles", "no")
    except (GitError, OSError) as e:
        raise BaredotGitError(f"Could not configure {git_dir}: {e}") from e


def track_exclusion_file(git_dir: Path, home: Path, excludes_file: Path) -> None:
    """Force-add ``excludes_file`` to the index with ``home`` as work tree."""
    try:
        Git(str(home))(git_dir=str(git_dir), work_tree=str(home)).add(
            "--force", "--", str(excludes_file)
        )
    except GitError as e:
        raise BaredotGitError(f"Could not add {excludes_file}: {e}") from e


def reconcile_exclusion_policy(
    git_dir: Path,
    dotfiles_dir: Path,
    home: Path,
    reporter: Optional[Reporter] = None,
) -> ExclusionStateDict:
    """Ignore everything in ``home`` except the tracked policy file itself."""
    reporter = reporter or Reporter.from_env()
    excludes_file = dotfiles_dir / EXCLUDES_FILENAME

    reporter.info(f"ensuring '{excludes_file}' ignores everything")
    excludes_file, created, appended = write_exclusion_policy(dotfiles_dir)

    reporter.info(f"ensuring '{git_dir}' uses '{excludes_file}'")
    configure_exclusion(git_dir, excludes_file)
    track_exclusion_file(git_dir, home, excludes_file)

    return {
        "excludes_file": str(excludes_file),
        "created": created,
        "appended": appended,
    }


# ============================================================================
# SHELL ALIAS
# ============================================================================


def render_alias(git_dir: Path, home: Path) -> str:
    """Return the alias line that runs git against the bare repo and ``home``."""
    command = (
        f"git --git-dir={shlex.quote(str(git_dir))} "
        f"--work-tree={shlex.quote(str(home))}"
    )
    return f"{ALIAS_PREFIX}{shlex.quote(command)}"


def reconcile_alias(
    git_dir: Path,
    home: Path,
    startup_files: Iterable[Path],
    reporter: Optional[Reporter] = None,
) -> List[Path]:
    """
    Append the alias to each existing startup file that lacks one.

    A file already containing a line that starts with ``alias dotfiles=`` is
    left alone even if that alias targets another repository. Missing files
    are skipped, never created.

    Returns:
        The startup files that were appended to.
    """
    reporter = reporter or Reporter.from_env()
    alias = render_alias(git_dir, home)
    updated = []

    for startup_file in startup_files:
        if not startup_file.is_file():
            continue
        try:
            if file_has_line_prefix(startup_file, ALIAS_PREFIX):
                reporter.warning(f"'{startup_file}' already defines `{ALIAS_NAME}`")
                continue
            append_line(startup_file, alias)
        except OSError as e:
            raise BaredotFileOperationError(
                f"Could not update {startup_file}: {e}"
            ) from e
        reporter.info(f"added `{ALIAS_NAME}` alias to '{startup_file}'")
        updated.append(startup_file)

    return updated


# ============================================================================
# BOOTSTRAP
# ============================================================================


def bootstrap(
    config: BootstrapConfig, reporter: Optional[Reporter] = None
) -> BootstrapResultDict:
    """Run every reconciliation step in order, stopping at the first failure."""
    reporter = reporter or Reporter.from_env()

    require_commands(REQUIRED_COMMANDS, reporter)

    reporter.info(f"git_dir={config.git_dir}")
    if not config.remote:
        raise MissingRemoteError("missing a git remote")
    reporter.info(f"git_remote={config.remote}")

    repository = reconcile_repository(config.git_dir, config.remote, reporter)
    exclusion = reconcile_exclusion_policy(
        config.git_dir, config.dotfiles_dir, config.home, reporter
    )
    alias_files = reconcile_alias(
        config.git_dir, config.home, config.startup_files, reporter
    )

    return {
        "repository": repository,
        "exclusion": exclusion,
        "alias_files": [str(p) for p in alias_files],
        "alias": render_alias(config.git_dir, config.home),
    }
