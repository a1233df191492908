"""Content hash of a sanitized checkout via nix-hash."""
import logging
import subprocess
from pathlib import Path

from pkgfetch.config import FetchSettings
from pkgfetch.core.errors import HashError

logger = logging.getLogger(__name__)


def compute_content_hash(path: Path, settings: FetchSettings) -> str:
    """Compute the recursive sha256 of a directory tree.

    Runs ``<hash_command> --type sha256 <path>``; stderr goes to the
    parent's stderr, stdout is the digest.

    Raises:
        HashError: If the hash tool fails or prints nothing
    """
    command = [*settings.hash_command, "--type", "sha256", str(path)]
    logger.info(f"Computing sha256 of {path}")
    try:
        result = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            text=True,
            timeout=settings.hash_timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        raise HashError(
            f"{command[0]} timed out after {settings.hash_timeout:g} seconds"
        )
    except OSError as e:
        raise HashError(f"Cannot run {command[0]}: {e}") from e

    if result.returncode != 0:
        raise HashError(
            f"{Path(settings.hash_command[0]).name} exited with status: {result.returncode}",
            returncode=result.returncode,
        )

    digest = result.stdout.rstrip("\n")
    if not digest:
        raise HashError(f"{command[0]} produced no digest for {path}")
    return digest
