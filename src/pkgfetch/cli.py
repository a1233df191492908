"""pkgfetch CLI - Command line interface for pkgfetch."""
import json
import logging
import sys
from pathlib import Path

import click

from pkgfetch.config import FetchSettings
from pkgfetch.core.errors import InvalidRefError, PkgFetchError
from pkgfetch.fetcher import fetch_metadata_from_git

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(name)s: %(message)s",
)
logger = logging.getLogger("pkgfetch")


@click.group()
def main():
    """pkgfetch - Pin git dependencies to a commit and content hash."""
    pass


@main.command()
@click.argument("dependency_name")
@click.argument("version_spec")
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory of the referring package.json",
)
@click.option(
    "--temp-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Parent directory for the temporary checkout",
)
@click.option(
    "--nix",
    "as_nix",
    is_flag=True,
    help="Print the fetchgit expression instead of JSON",
)
def git(dependency_name: str, version_spec: str, base_dir: Path, temp_dir: Path, as_nix: bool):
    """Fetch a git dependency and print its descriptor.

    Examples:
        pkgfetch git mylib git+https://example.com/mylib.git#v1.2.0
        pkgfetch git mylib git+ssh://git@example.com/mylib.git --nix

    Exit codes:
        0: Success
        1: Generic runtime failure
        2: Invalid CLI usage
        3: Requested revision not found
    """
    try:
        settings = FetchSettings.from_env()
        if temp_dir is not None:
            settings = settings.model_copy(update={"temp_root": temp_dir})

        descriptor = fetch_metadata_from_git(
            base_dir=base_dir,
            dependency_name=dependency_name,
            version_spec=version_spec,
            settings=settings,
        )
    except InvalidRefError as e:
        logger.error(f"Invalid reference: {str(e)}")
        sys.exit(3)
    except PkgFetchError as e:
        logger.error(f"Fetch failed: {str(e)}")
        sys.exit(1)

    if as_nix:
        click.echo(descriptor.source.to_nix())
    else:
        click.echo(json.dumps(descriptor.to_dict(), indent=2))
    sys.exit(0)


if __name__ == "__main__":
    main()
