"""Version specifier parsing: git URL plus optional commit-ish."""
import logging
from typing import NamedTuple, Optional
from urllib.parse import urlsplit, urlunsplit

from pkgfetch.core.errors import SpecifierParseError

logger = logging.getLogger(__name__)

# npm-style git+<transport> schemes and the bare transport git understands
SCHEME_REWRITES = {
    "git+ssh": "ssh",
    "git+http": "http",
    "git+https": "https",
}

DEFAULT_SCHEME = "git"


class GitSpecifier(NamedTuple):
    """A version specifier split into a fetchable URL and a commit-ish."""

    url: str
    commit_ish: Optional[str]


def parse_specifier(version_spec: str) -> GitSpecifier:
    """Rewrite a git version specifier into a URL git can clone.

    Examples:
        git+https://example.com/repo.git#v1.2.0 -> (https://example.com/repo.git, "v1.2.0")
        git://example.com/repo.git -> (git://example.com/repo.git, None)

    Raises:
        SpecifierParseError: If the specifier cannot be parsed as a URL
    """
    if not version_spec or not version_spec.strip():
        raise SpecifierParseError("Empty version specifier")

    try:
        parsed = urlsplit(version_spec.strip())
    except ValueError as e:
        raise SpecifierParseError(
            f"Cannot parse version specifier '{version_spec}': {e}"
        ) from e

    if not parsed.netloc and not parsed.path:
        raise SpecifierParseError(
            f"Version specifier '{version_spec}' has no repository location"
        )

    scheme = SCHEME_REWRITES.get(parsed.scheme, DEFAULT_SCHEME)

    # "#" alone carries no commit-ish
    commit_ish = parsed.fragment or None

    url = urlunsplit((scheme, parsed.netloc, parsed.path, parsed.query, ""))
    logger.debug(f"Parsed {version_spec} -> url={url} commit_ish={commit_ish}")
    return GitSpecifier(url=url, commit_ish=commit_ish)
