"""Pytest fixtures for pkgfetch tests."""
import json
import stat
import subprocess
import sys
from pathlib import Path
from typing import Dict

import pytest

from pkgfetch.config import FetchSettings

# Stands in for nix-hash: sha256 over relative paths and file contents.
# FAKE_NIX_HASH_EXIT makes it fail with that status.
FAKE_NIX_HASH = '''#!{python}
import hashlib
import os
import sys

code = int(os.environ.get("FAKE_NIX_HASH_EXIT", "0"))
if code:
    sys.stderr.write("fake-nix-hash: failing on request\\n")
    sys.exit(code)

root = sys.argv[-1]
digest = hashlib.sha256()
for dirpath, dirnames, filenames in os.walk(root):
    dirnames.sort()
    for name in sorted(filenames):
        path = os.path.join(dirpath, name)
        digest.update(os.path.relpath(path, root).encode())
        with open(path, "rb") as f:
            digest.update(f.read())
print(digest.hexdigest())
'''


def _git(args, cwd: Path) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def _write_package_json(repo_path: Path, version: str) -> None:
    (repo_path / "package.json").write_text(
        json.dumps({"name": "repo", "version": version, "dependencies": {}}) + "\n",
        encoding="utf-8",
    )


@pytest.fixture
def git_repo_fixture(tmp_path: Path) -> Dict[str, any]:
    """Create a git repository with a tag, a main branch and a dev branch.

    The repository lives at <tmp>/remotes/repo.git (a working tree, not a
    bare repo) and is left checked out on main.

    Returns dict with:
        - path: Path to repo
        - tag_sha: SHA of the v1.2.0 tag (first commit on main)
        - annotated_tag_object: SHA of the release-1.2.0 tag object (same commit)
        - main_sha: SHA of main
        - dev_sha: SHA of dev (only a remote-tracking ref after cloning)
    """
    repo_path = tmp_path / "remotes" / "repo.git"
    repo_path.mkdir(parents=True)

    _git(["init", "-b", "main"], repo_path)
    _git(["config", "user.email", "test@example.com"], repo_path)
    _git(["config", "user.name", "Test User"], repo_path)
    _git(["config", "commit.gpgsign", "false"], repo_path)
    _git(["config", "tag.gpgsign", "false"], repo_path)

    # v1.2.0
    _write_package_json(repo_path, "1.2.0")
    (repo_path / "index.js").write_text("module.exports = 1;\n", encoding="utf-8")
    _git(["add", "package.json", "index.js"], repo_path)
    _git(["commit", "-m", "Release 1.2.0"], repo_path)
    _git(["tag", "v1.2.0"], repo_path)
    tag_sha = _git(["rev-parse", "HEAD"], repo_path)
    # annotated tags point at a tag object, not straight at the commit
    _git(["tag", "-a", "release-1.2.0", "-m", "Release 1.2.0"], repo_path)
    annotated_tag_object = _git(["rev-parse", "release-1.2.0"], repo_path)

    # main moves on
    _write_package_json(repo_path, "1.3.0-dev")
    _git(["commit", "-am", "Start 1.3.0"], repo_path)
    main_sha = _git(["rev-parse", "HEAD"], repo_path)

    # dev branch with an extra file
    _git(["checkout", "-b", "dev"], repo_path)
    (repo_path / "lib").mkdir()
    (repo_path / "lib" / "extra.js").write_text("module.exports = 2;\n", encoding="utf-8")
    _git(["add", "lib"], repo_path)
    _git(["commit", "-m", "Add extra on dev"], repo_path)
    dev_sha = _git(["rev-parse", "HEAD"], repo_path)

    _git(["checkout", "main"], repo_path)

    return {
        "path": repo_path,
        "tag_sha": tag_sha,
        "annotated_tag_object": annotated_tag_object,
        "main_sha": main_sha,
        "dev_sha": dev_sha,
    }


@pytest.fixture
def example_remote(git_repo_fixture, monkeypatch) -> Dict[str, any]:
    """Serve https://example.com/<name> from the fixture's remotes directory.

    Uses git's url.<base>.insteadOf through GIT_CONFIG_* variables, so
    git+https://example.com/repo.git clones the local fixture repository.
    """
    remotes_dir = git_repo_fixture["path"].parent
    monkeypatch.setenv("GIT_CONFIG_COUNT", "1")
    monkeypatch.setenv("GIT_CONFIG_KEY_0", f"url.{remotes_dir}/.insteadOf")
    monkeypatch.setenv("GIT_CONFIG_VALUE_0", "https://example.com/")
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")
    return git_repo_fixture


@pytest.fixture
def fake_nix_hash(tmp_path: Path) -> Path:
    """Write an executable nix-hash replacement and return its path."""
    script = tmp_path / "bin" / "fake-nix-hash"
    script.parent.mkdir(parents=True)
    script.write_text(FAKE_NIX_HASH.replace("{python}", sys.executable), encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Parent directory for checkout workspaces; empty after every fetch."""
    root = tmp_path / "workspaces"
    root.mkdir()
    return root


@pytest.fixture
def fetch_settings(fake_nix_hash: Path, workspace_root: Path) -> FetchSettings:
    """Settings using the fake hash tool and a watched workspace root."""
    return FetchSettings(
        hash_command=[str(fake_nix_hash)],
        temp_root=workspace_root,
        clone_timeout=60,
        git_timeout=30,
        hash_timeout=30,
    )
