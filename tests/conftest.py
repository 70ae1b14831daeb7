"""Shared pytest fixtures and test helpers for nixcomment tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from nixcomment.config.settings import NixCommentSettings
from nixcomment.domain.rules import RULE_REGISTRY
from nixcomment.services.telemetry import _current_span, disable_telemetry

COMMENTED_PACKAGE = """\
# What: GNU hello package definition.
# Does: Builds hello from the upstream release tarball.
# Why: Smallest useful derivation for the examples.
{ stdenv, fetchurl }:
stdenv.mkDerivation {
  pname = "hello"; # Package name shown in nix-env
  version = "2.12"; # Upstream release
  # version = "2.10";
  src = fetchurl {
    url = "mirror://gnu/hello/hello-2.12.tar.gz"; # Release tarball
  };
}
"""

SAMPLE_GUIDE = """\
# Commenting Nix Code

Every block starts with a What/Does/Why comment.

## Examples

### Example 1: Package Definition

```nix
# What: hello package.
# Does: Builds GNU hello.
# Why: Minimal derivation.
{ stdenv }:
stdenv.mkDerivation {
  pname = "hello"; # Package name
}
```

- **Block Comments**: the header names the package.
- **Inline Comments**: `pname` explains the attribute.

### Example 2: NixOS Configuration

```nix
# What: SSH service.
# Does: Enables OpenSSH.
# Why: Remote administration.
{
  services.openssh.enable = true; # Start sshd
  services.openssh.port = 22; # Default port
  # services.openssh.port = 2222;
}
```

- **Block Comments**: describe the service.
- **Inline Comments**: explain each option.
- **Alternatives**: the commented port is a hardened variant.

### Example 3: Flake

```nix
# What: Flake outputs.
# Does: Exposes the hello package.
# Why: Pins nixpkgs for reproducible builds.
{
  description = "hello flake"; # Shown by nix flake show
}
```

- **Block Comments**: summarise the flake.
- **Inline Comments**: describe the metadata.

### Example 4: Custom Script

```bash
# What: Build helper.
# Does: Runs nix build.
# Why: One entry point for CI.
nix build .#hello
```

- **Block Comments**: the script header.
- **Inline Comments**: none needed beyond the header.
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project directory with one fully commented Nix file."""
    (tmp_path / "pkgs").mkdir()
    (tmp_path / "pkgs" / "hello.nix").write_text(COMMENTED_PACKAGE)
    return tmp_path


@pytest.fixture
def settings(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> NixCommentSettings:
    """Default settings rooted at the temporary project."""
    monkeypatch.delenv("NIXCOMMENT_CONFIG", raising=False)
    return NixCommentSettings.from_cli(project_root=project_root)


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temporary project so the CLI lints only its files.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.delenv("NIXCOMMENT_CONFIG", raising=False)
    monkeypatch.chdir(project_root)


@pytest.fixture
def guide_path(tmp_path: Path) -> Path:
    """A style guide with four explained worked examples."""
    path = tmp_path / "GUIDE.md"
    path.write_text(SAMPLE_GUIDE)
    return path


@pytest.fixture(autouse=True)
def _restore_global_state() -> Generator[None]:
    """Undo rule registrations, telemetry, and logging handlers between tests."""
    rules = dict(RULE_REGISTRY)
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    RULE_REGISTRY.clear()
    RULE_REGISTRY.update(rules)
    disable_telemetry()
    _current_span.set(None)
    root.handlers = handlers
    root.setLevel(level)
