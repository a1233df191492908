"""Git operations: clone, locate checkout, resolve revision, checkout."""
import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from pkgfetch.config import FetchSettings
from pkgfetch.core.errors import (
    CheckoutError,
    CheckoutNotFoundError,
    CloneError,
    GitOperationError,
    InvalidRefError,
)

logger = logging.getLogger(__name__)

# Console output of git goes to the parent's stderr, never its stdout
STDERR_FD = 2


def _run_git(
    settings: FetchSettings,
    argv: List[str],
    cwd: Path,
    timeout: float,
    capture_stdout: bool = False,
) -> subprocess.CompletedProcess:
    """Run git with the parent's stderr; stdout is captured or sent to stderr.

    Raises GitOperationError only when git could not run to completion;
    a non-zero exit status is left for the caller to interpret.
    """
    command = [*settings.git_command, *argv]
    try:
        return subprocess.run(
            command,
            cwd=cwd,
            stdout=subprocess.PIPE if capture_stdout else STDERR_FD,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        raise GitOperationError(
            f"git {argv[0]} timed out after {timeout:g} seconds"
        )
    except OSError as e:
        raise GitOperationError(f"Cannot run {command[0]}: {e}") from e


def clone_repository(url: str, workspace_dir: Path, settings: FetchSettings) -> Path:
    """Clone url into workspace_dir and return the checkout directory.

    Raises:
        CloneError: If git clone fails
        CheckoutNotFoundError: If the clone produced no directory
    """
    logger.info(f"Cloning git repository: {url}")
    try:
        result = _run_git(settings, ["clone", url], cwd=workspace_dir, timeout=settings.clone_timeout)
    except GitOperationError as e:
        raise CloneError(str(e)) from e

    if result.returncode != 0:
        raise CloneError(
            f"git clone exited with status: {result.returncode}",
            returncode=result.returncode,
        )

    return find_checkout_dir(workspace_dir)


def find_checkout_dir(workspace_dir: Path) -> Path:
    """Return the first directory inside workspace_dir.

    Raises:
        CheckoutNotFoundError: If workspace_dir holds no directory
    """
    workspace_dir = Path(workspace_dir)
    for entry in sorted(workspace_dir.iterdir()):
        if entry.is_dir() and entry != workspace_dir:
            return entry

    raise CheckoutNotFoundError(
        f"Cannot find a checkout directory in {workspace_dir}"
    )


def _rev_parse(checkout: Path, ref: str, settings: FetchSettings) -> Optional[str]:
    logger.info(f"Parsing the revision of commitish: {ref}")
    result = _run_git(
        settings,
        ["rev-parse", "--verify", f"{ref}^{{commit}}"],
        cwd=checkout,
        timeout=settings.git_timeout,
        capture_stdout=True,
    )
    if result.returncode != 0:
        return None
    return result.stdout.rstrip()


def resolve_revision(
    checkout: Path,
    commit_ish: Optional[str],
    settings: FetchSettings,
) -> str:
    """Resolve a commit-ish to a full commit hash inside a fresh clone.

    A local ref (tag, default branch, hash) is tried first. Other branches
    only exist as origin/<name> right after cloning, so a requested
    commit-ish that fails locally is retried against the remote-tracking
    ref. Tags are peeled to the commit they point at. A commit-ish
    starting with "-" would be read by git as an option and is refused.

    Returns:
        The commit hash, or "" when no commit-ish was requested and HEAD
        does not resolve (e.g. an empty repository)

    Raises:
        InvalidRefError: If a requested commit-ish resolves neither way
    """
    if commit_ish is not None and commit_ish.startswith("-"):
        raise InvalidRefError(
            f"Cannot find the corresponding revision of: {commit_ish}"
        )

    branch = commit_ish if commit_ish is not None else "HEAD"
    rev = _rev_parse(checkout, branch, settings)
    if rev is not None:
        return rev

    if commit_ish is None:
        return ""

    rev = _rev_parse(checkout, f"origin/{commit_ish}", settings)
    if rev is None:
        raise InvalidRefError(
            f"Cannot find the corresponding revision of: {commit_ish}"
        )
    return rev


def checkout_revision(checkout: Path, revision: str, settings: FetchSettings) -> None:
    """Check out an exact commit; an empty revision keeps the clone as is.

    Raises:
        CheckoutError: If git checkout fails
    """
    if not revision:
        return

    logger.info(f"Checking out revision: {revision}")
    try:
        result = _run_git(settings, ["checkout", revision], cwd=checkout, timeout=settings.git_timeout)
    except GitOperationError as e:
        raise CheckoutError(str(e)) from e

    if result.returncode != 0:
        raise CheckoutError(
            f"git checkout exited with status: {result.returncode}",
            returncode=result.returncode,
        )
