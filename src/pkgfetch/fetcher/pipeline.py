"""Fetch pipeline: specifier -> clone -> revision -> manifest -> hash."""
import logging
from pathlib import Path
from typing import Optional

from pkgfetch.config import FetchSettings, get_settings
from pkgfetch.fetcher.descriptor import FetchDescriptor, compose_descriptor
from pkgfetch.fetcher.git import checkout_revision, clone_repository, resolve_revision
from pkgfetch.fetcher.hasher import compute_content_hash
from pkgfetch.fetcher.manifest import read_manifest
from pkgfetch.fetcher.sanitizer import sanitize_checkout
from pkgfetch.fetcher.specifier import parse_specifier
from pkgfetch.fetcher.workspace import workspace

logger = logging.getLogger(__name__)


def fetch_metadata_from_git(
    base_dir: Path,
    dependency_name: str,
    version_spec: str,
    settings: Optional[FetchSettings] = None,
) -> FetchDescriptor:
    """Fetch a package's metadata and source reference from a git repository.

    Clones the repository into a temporary workspace, pins the requested
    commit-ish to a commit, reads the package.json, strips .git entries
    and hashes the remaining tree. The workspace is removed before this
    returns or raises.

    Args:
        base_dir: Directory holding the referrer's package.json
        dependency_name: Name of the package to fetch
        version_spec: Git URL, optionally with a #commit-ish suffix
        settings: Tool and timeout settings (defaults from environment)

    Returns:
        FetchDescriptor for the dependency

    Raises:
        PkgFetchError: The first failure of any stage
    """
    settings = settings or get_settings()
    url, commit_ish = parse_specifier(version_spec)

    with workspace(settings.workspace_prefix + dependency_name, settings.temp_root) as tmp_dir:
        checkout = clone_repository(url, tmp_dir, settings)
        rev = resolve_revision(checkout, commit_ish, settings)

        # Without a commit-ish the clone already sits at the resolved HEAD
        if commit_ish is not None:
            checkout_revision(checkout, rev, settings)

        manifest = read_manifest(checkout, settings.manifest_filename)
        sanitize_checkout(checkout, settings.bookkeeping_name)
        sha256 = compute_content_hash(checkout, settings)

        descriptor = compose_descriptor(
            manifest=manifest,
            base_dir=base_dir,
            dependency_name=dependency_name,
            version_spec=version_spec,
            url=url,
            rev=rev,
            sha256=sha256,
        )

    logger.info(f"Fetched {descriptor.identifier} at {rev or 'default branch'}")
    return descriptor
