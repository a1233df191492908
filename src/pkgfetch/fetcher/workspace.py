"""Temporary checkout workspaces that never outlive a fetch."""
import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from pkgfetch.core.errors import WorkspaceError

logger = logging.getLogger(__name__)


def _safe_prefix(prefix: str) -> str:
    # Scoped package names (@scope/name) must stay a single path component
    return prefix.replace("/", "-").replace("\\", "-")


@contextmanager
def workspace(prefix: str, temp_root: Optional[Path] = None) -> Iterator[Path]:
    """Create a private temporary directory and always remove it afterwards.

    The directory tree is deleted when the block exits, whether it returns,
    raises, or is interrupted. Deletion is best-effort: problems are logged
    and never replace an exception raised by the block.

    Raises:
        WorkspaceError: If the directory cannot be created
    """
    try:
        if temp_root is not None:
            Path(temp_root).mkdir(parents=True, exist_ok=True)
        path = Path(tempfile.mkdtemp(
            prefix=_safe_prefix(prefix),
            dir=str(temp_root) if temp_root is not None else None,
        ))
    except OSError as e:
        raise WorkspaceError(f"Cannot create temporary workspace: {e}") from e

    logger.debug(f"Created workspace {path}")
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        if path.exists():
            logger.warning(f"Could not fully remove workspace {path}")
        else:
            logger.debug(f"Removed workspace {path}")
