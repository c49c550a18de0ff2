"""
baredot - manage your home directory as a bare Git repository.

baredot sets up a bare repository for your dotfiles, points it at a remote,
ignores everything in $HOME by default, and installs a `dotfiles` shell alias
so that configuration files can be tracked in place.
"""

import os

# Let the capability probe report a missing `git` instead of failing on import.
os.environ.setdefault("GIT_PYTHON_REFRESH", "quiet")

__version__ = "0.1.0"
__license__ = "GPL-3.0-or-later"

from .core import (  # noqa: E402
    BootstrapConfig,
    bootstrap,
    find_missing_commands,
    reconcile_alias,
    reconcile_exclusion_policy,
    reconcile_repository,
    resolve_config,
)
from .exceptions import (  # noqa: E402
    BaredotError,
    MissingCapabilityError,
    MissingRemoteError,
    PathConflictError,
    RemoteConflictError,
)

__all__ = [
    "BootstrapConfig",
    "bootstrap",
    "resolve_config",
    "find_missing_commands",
    "reconcile_repository",
    "reconcile_exclusion_policy",
    "reconcile_alias",
    # Errors
    "BaredotError",
    "MissingCapabilityError",
    "MissingRemoteError",
    "PathConflictError",
    "RemoteConflictError",
]
