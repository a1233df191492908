"""Strip VCS bookkeeping from a checkout so its content hash is reproducible."""
import logging
import os
import shutil
from pathlib import Path
from typing import List, NamedTuple

from pkgfetch.core.errors import SanitizationError

logger = logging.getLogger(__name__)

BOOKKEEPING_NAME = ".git"


class BookkeepingEntries(NamedTuple):
    """Bookkeeping paths found in a tree, split by kind."""

    dirs: List[Path]
    files: List[Path]

    def __len__(self) -> int:
        return len(self.dirs) + len(self.files)


def find_bookkeeping(root: Path, name: str = BOOKKEEPING_NAME) -> BookkeepingEntries:
    """Walk root and collect every entry named ``name``.

    Directories are not descended into once collected; their contents go
    with them. Files with that name are submodule gitlinks.
    """
    dirs: List[Path] = []
    files: List[Path] = []

    def _raise(err: OSError) -> None:
        raise SanitizationError(f"Cannot scan {err.filename}: {err}") from err

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        if name in dirnames:
            dirs.append(Path(dirpath) / name)
            dirnames.remove(name)
        if name in filenames:
            files.append(Path(dirpath) / name)
        # Deterministic visiting order
        dirnames.sort()

    return BookkeepingEntries(dirs=dirs, files=files)


def remove_bookkeeping(entries: BookkeepingEntries) -> None:
    """Delete collected bookkeeping; entries already gone are skipped.

    Raises:
        SanitizationError: If an entry cannot be removed
    """
    for path in entries.files:
        try:
            path.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            raise SanitizationError(f"Cannot remove {path}: {e}") from e

    for path in entries.dirs:
        if not path.exists():
            continue
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise SanitizationError(f"Cannot remove {path}: {e}") from e


def sanitize_checkout(root: Path, name: str = BOOKKEEPING_NAME) -> BookkeepingEntries:
    """Find and remove all bookkeeping entries below root."""
    entries = find_bookkeeping(root, name)
    logger.info(f"Pruning {len(entries)} {name} entries from {root}")
    remove_bookkeeping(entries)
    return entries
