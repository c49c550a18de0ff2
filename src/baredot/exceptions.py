"""Exception classes for baredot - a bare-repository dotfiles bootstrapper."""

from pathlib import Path
from typing import List, TypedDict


# Type definitions for structured data
class RepositoryStateDict(TypedDict):
    """Type definition for the repository reconciliation outcome."""

    git_dir: str
    remote: str
    initialized: bool
    remote_added: bool


class ExclusionStateDict(TypedDict):
    """Type definition for the exclusion policy reconciliation outcome."""

    excludes_file: str
    created: bool
    appended: bool


class BootstrapResultDict(TypedDict):
    """Type definition for a complete bootstrap run."""

    repository: RepositoryStateDict
    exclusion: ExclusionStateDict
    alias_files: List[str]
    alias: str


class BaredotError(Exception):
    """Base exception for all baredot-related errors."""

    pass


class MissingCapabilityError(BaredotError):
    """Raised when required external commands are not on the search path."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        names = ", ".join(f"`{name}`" for name in self.missing)
        super().__init__(f"missing required command(s): {names}")


class PathConflictError(BaredotError):
    """Raised when the repository path exists but is not a directory."""

    def __init__(self, path: Path, listing: str):
        self.path = path
        self.listing = listing
        super().__init__(f"'{path}' is not a directory: {listing}")


class RemoteConflictError(BaredotError):
    """Raised when 'origin' already points somewhere other than requested."""

    def __init__(self, desired: str, existing: str):
        self.desired = desired
        self.existing = existing
        super().__init__(
            f"desired remote '{desired}' does not match "
            f"pre-existing remote '{existing}'"
        )


class MissingRemoteError(BaredotError):
    """Raised when no remote URL was supplied or entered."""

    pass


class BaredotFileOperationError(BaredotError):
    """Errors related to writing files on disk."""

    pass


class BaredotGitError(BaredotError):
    """Errors related to Git operations."""

    pass
