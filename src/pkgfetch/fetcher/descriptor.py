"""Fetch descriptor model handed to the build-expression generator."""
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _nix_string(value: str) -> str:
    """Quote a value as a Nix string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("${", "\\${")
    )
    return f'"{escaped}"'


class GitSource(BaseModel):
    """A fetchgit directive: where to clone, which commit, expected hash."""

    url: str = Field(..., description="Normalized git URL (no fragment)")
    rev: str = Field(default="", description="Resolved commit hash, empty for the default branch head")
    sha256: str = Field(..., description="sha256 of the checkout without .git")

    model_config = ConfigDict(frozen=True)

    @field_validator("rev")
    @classmethod
    def validate_rev(cls, v: str) -> str:
        """Ensure rev is empty or looks like a git object hash."""
        if v and not all(c in "0123456789abcdef" for c in v.lower()):
            raise ValueError(f"rev must be hexadecimal; got '{v}'")
        return v

    @field_validator("sha256")
    @classmethod
    def validate_sha256(cls, v: str) -> str:
        if not v or any(c.isspace() for c in v):
            raise ValueError(f"sha256 must be a non-empty digest; got '{v}'")
        return v

    def to_nix(self) -> str:
        """Render as a ``fetchgit { ... }`` Nix expression."""
        return (
            "fetchgit {\n"
            f"  url = {_nix_string(self.url)};\n"
            f"  rev = {_nix_string(self.rev)};\n"
            f"  sha256 = {_nix_string(self.sha256)};\n"
            "}"
        )


class FetchDescriptor(BaseModel):
    """Everything known about a git dependency after fetching it once."""

    manifest: Dict[str, Any] = Field(..., description="Parsed package.json of the dependency")
    identifier: str = Field(..., description="<name>-<version specifier>")
    source: GitSource
    destination_path: Path = Field(..., description="Install location relative to the referrer")

    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> dict:
        """Convert to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")


def compose_descriptor(
    manifest: Dict[str, Any],
    base_dir: Path,
    dependency_name: str,
    version_spec: str,
    url: str,
    rev: str,
    sha256: str,
) -> FetchDescriptor:
    """Assemble the descriptor from the pipeline's results."""
    return FetchDescriptor(
        manifest=manifest,
        identifier=f"{dependency_name}-{version_spec}",
        source=GitSource(url=url, rev=rev, sha256=sha256),
        destination_path=Path(base_dir) / dependency_name,
    )
