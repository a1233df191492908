"""Git package fetcher: resolve, sanitize and hash a git dependency."""
from pkgfetch.fetcher.descriptor import FetchDescriptor, GitSource
from pkgfetch.fetcher.pipeline import fetch_metadata_from_git
from pkgfetch.fetcher.specifier import GitSpecifier, parse_specifier

__all__ = [
    "FetchDescriptor",
    "GitSource",
    "GitSpecifier",
    "fetch_metadata_from_git",
    "parse_specifier",
]
