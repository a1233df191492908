"""Runtime settings for the git fetch pipeline."""
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from pkgfetch.core.errors import ConfigError


class FetchSettings(BaseModel):
    """External tools, file names and timeouts used by the pipeline."""

    git_command: List[str] = Field(default_factory=lambda: ["git"], description="git executable (and leading args)")
    hash_command: List[str] = Field(
        default_factory=lambda: ["nix-hash"],
        description="Directory hashing tool, invoked as <cmd> --type sha256 <path>",
    )
    manifest_filename: str = Field(default="package.json", description="Manifest read from the checkout root")
    bookkeeping_name: str = Field(default=".git", description="VCS metadata entry pruned before hashing")
    temp_root: Optional[Path] = Field(default=None, description="Parent of checkout workspaces (system tmp if unset)")
    workspace_prefix: str = Field(default="pkgfetch-git-checkout-", description="Workspace directory name prefix")
    clone_timeout: float = Field(default=600, description="Seconds allowed for git clone")
    git_timeout: float = Field(default=60, description="Seconds allowed for rev-parse / checkout")
    hash_timeout: float = Field(default=300, description="Seconds allowed for the hash tool")

    @field_validator("git_command", "hash_command")
    @classmethod
    def validate_command(cls, v: List[str]) -> List[str]:
        """Ensure a command has at least an executable."""
        if not v or not v[0]:
            raise ValueError("command must name an executable")
        return v

    @field_validator("clone_timeout", "git_timeout", "hash_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout must be positive; got {v}")
        return v

    @classmethod
    def from_env(cls) -> "FetchSettings":
        """Build settings from PKGFETCH_* environment variables.

        Raises:
            ConfigError: If a variable holds an unusable value
        """
        overrides = {}
        if os.environ.get("PKGFETCH_GIT"):
            overrides["git_command"] = [os.environ["PKGFETCH_GIT"]]
        if os.environ.get("PKGFETCH_NIX_HASH"):
            overrides["hash_command"] = [os.environ["PKGFETCH_NIX_HASH"]]
        if os.environ.get("PKGFETCH_TMPDIR"):
            overrides["temp_root"] = Path(os.environ["PKGFETCH_TMPDIR"])
        if os.environ.get("PKGFETCH_CLONE_TIMEOUT"):
            raw = os.environ["PKGFETCH_CLONE_TIMEOUT"]
            try:
                overrides["clone_timeout"] = float(raw)
            except ValueError:
                raise ConfigError(
                    f"PKGFETCH_CLONE_TIMEOUT must be a number of seconds; got '{raw}'"
                )
        try:
            return cls(**overrides)
        except ValidationError as e:
            raise ConfigError(f"Invalid PKGFETCH_* settings: {e}") from e


# Global default settings
_settings: Optional[FetchSettings] = None


def get_settings() -> FetchSettings:
    """Get the process-wide settings, read from the environment once."""
    global _settings
    if _settings is None:
        _settings = FetchSettings.from_env()
    return _settings
