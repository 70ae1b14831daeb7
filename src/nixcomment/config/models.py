"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, nixcomment.toml only contains
overrides. An empty file (or none at all) lints with the built-in rules.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

SeverityName = Literal["warning", "error"]


class LintConfig(BaseModel):
    """[lint] section."""

    model_config = {"frozen": True}

    line_length: int = Field(default=100, ge=20)
    min_block_lines: int = Field(default=1, ge=1)
    select: list[str] = Field(default_factory=list)
    ignore: list[str] = Field(default_factory=list)
    severity: dict[str, SeverityName] = Field(default_factory=dict)
    fail_on: SeverityName = "error"


class FilesConfig(BaseModel):
    """[files] section."""

    model_config = {"frozen": True}

    include: list[str] = Field(default_factory=lambda: ["*.nix"])
    exclude: list[str] = Field(
        default_factory=lambda: [".git", "result", "result-*", "node_modules", ".direnv"]
    )


class GuideConfig(BaseModel):
    """[guide] section."""

    model_config = {"frozen": True}

    expected_examples: int = Field(default=4, ge=0)
    example_topics: list[str] = Field(
        default_factory=lambda: [
            "package definition",
            "nixos configuration",
            "flake",
            "custom script",
        ]
    )
    examples_section: str = "example"
    example_languages: list[str] = Field(default_factory=lambda: ["nix", "sh", "bash", ""])
    explain_all_fences: bool = True
    lint_snippets: bool = False


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".nixcomment/plugins"


class NixCommentConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    lint: LintConfig = Field(default_factory=LintConfig)
    files: FilesConfig = Field(default_factory=FilesConfig)
    guide: GuideConfig = Field(default_factory=GuideConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
