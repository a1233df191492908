"""Core exception types for pkgfetch."""
from typing import Optional


class PkgFetchError(Exception):
    """Base exception for all pkgfetch errors."""
    pass


class SpecifierParseError(PkgFetchError):
    """Raised when a version specifier is not a usable git URL."""
    pass


class ConfigError(PkgFetchError):
    """Raised when settings from the environment are invalid."""
    pass


class WorkspaceError(PkgFetchError):
    """Raised when the temporary checkout workspace cannot be created."""
    pass


class GitOperationError(PkgFetchError):
    """Raised when a git operation fails.

    ``returncode`` holds the exit status of the git process, or None when
    the process never finished (not found, timed out).
    """

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode


class CloneError(GitOperationError):
    """Raised when ``git clone`` exits with a non-zero status."""
    pass


class CheckoutNotFoundError(GitOperationError):
    """Raised when a clone leaves no checkout directory behind."""
    pass


class InvalidRefError(GitOperationError):
    """Raised when a git reference cannot be resolved."""
    pass


class CheckoutError(GitOperationError):
    """Raised when ``git checkout`` exits with a non-zero status."""
    pass


class ManifestReadError(PkgFetchError):
    """Raised when the dependency's package.json is missing or unparseable."""
    pass


class SanitizationError(PkgFetchError):
    """Raised when VCS bookkeeping cannot be removed from a checkout."""
    pass


class HashError(PkgFetchError):
    """Raised when the content hash of a checkout cannot be computed."""

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode
