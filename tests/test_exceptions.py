"""Tests for baredot exception classes."""

from pathlib import Path

import pytest

from baredot.exceptions import (
    BaredotError,
    BaredotFileOperationError,
    BaredotGitError,
    MissingCapabilityError,
    MissingRemoteError,
    PathConflictError,
    RemoteConflictError,
)


class TestExceptionHierarchy:
    """Test exception class hierarchy and behavior."""

    def test_base_exception(self):
        """Test base BaredotError exception."""
        error = BaredotError("Test error")
        assert str(error) == "Test error"
        assert isinstance(error, Exception)

    def test_missing_capability_lists_commands(self):
        """Test MissingCapabilityError names every missing command."""
        error = MissingCapabilityError(["git", "zsh"])
        assert error.missing == ["git", "zsh"]
        assert "`git`" in str(error)
        assert "`zsh`" in str(error)
        assert isinstance(error, BaredotError)

    def test_path_conflict_includes_listing(self):
        """Test PathConflictError carries the path and its listing."""
        error = PathConflictError(Path("/home/u/.dotfiles.git"), "-rw-r--r-- 1 0")
        assert error.path == Path("/home/u/.dotfiles.git")
        assert "is not a directory" in str(error)
        assert "-rw-r--r-- 1 0" in str(error)

    def test_remote_conflict_shows_both_values(self):
        """Test RemoteConflictError mentions desired and existing remotes."""
        error = RemoteConflictError(desired="https://b", existing="https://a")
        assert error.desired == "https://b"
        assert error.existing == "https://a"
        assert "https://b" in str(error)
        assert "https://a" in str(error)

    @pytest.mark.parametrize(
        "error_class",
        [MissingRemoteError, BaredotFileOperationError, BaredotGitError],
    )
    def test_simple_errors_are_baredot_errors(self, error_class):
        """Test that message-only errors derive from BaredotError."""
        error = error_class("boom")
        assert str(error) == "boom"
        assert isinstance(error, BaredotError)


class TestExceptionUsage:
    """Test exception usage patterns."""

    def test_exception_inheritance_catching(self):
        """Test that specific exceptions can be caught as base BaredotError."""
        with pytest.raises(BaredotError):
            raise RemoteConflictError(desired="b", existing="a")

        with pytest.raises(BaredotError):
            raise PathConflictError(Path("/tmp/x"), "listing")
