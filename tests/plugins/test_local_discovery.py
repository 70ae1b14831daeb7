"""Tests for single-file plugins loaded from a local directory."""

from __future__ import annotations

from nixcomment.domain.rules import RULE_REGISTRY
from nixcomment.plugins.manager import PluginManager

_VALID_PLUGIN_SRC = '''
import pluggy

from nixcomment.domain.rules import Finding, Rule
from nixcomment.domain.types import Severity

hookimpl = pluggy.HookimplMarker("nixcomment")


def _no_fixme(ctx):
    for line in ctx.lines:
        if line.comment and "FIXME" in line.comment:
            yield Finding(line=line.number, column=1, message="FIXME left in comment")


class FixmePlugin:
    @hookimpl
    def register_rules(self):
        return [
            Rule(
                code="LP001",
                name="fixme-comment",
                severity=Severity.WARNING,
                summary="A comment contains FIXME.",
                check=_no_fixme,
            )
        ]

    @hookimpl
    def post_check(self, files_checked, issues_found):
        pass
'''

_SYNTAX_ERROR_SRC = "def broken(:\n"

_NO_HOOKS_SRC = '''
class Helper:
    def register_rules(self):
        return []
'''


class TestLocalDiscovery:
    def test_valid_plugin_loaded(self, tmp_path):
        (tmp_path / "fixme.py").write_text(_VALID_PLUGIN_SRC)
        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path)
        assert "nixcomment_local_plugin_fixme.FixmePlugin" in names
        assert RULE_REGISTRY["LP001"].name == "fixme-comment"
        assert pm.warnings == []

    def test_syntax_error_becomes_warning(self, tmp_path):
        (tmp_path / "broken.py").write_text(_SYNTAX_ERROR_SRC)
        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path)
        assert not any("broken" in n for n in names)
        assert pm.warnings == ["Failed to load local plugin broken.py"]

    def test_broken_file_does_not_block_others(self, tmp_path):
        (tmp_path / "a_broken.py").write_text(_SYNTAX_ERROR_SRC)
        (tmp_path / "fixme.py").write_text(_VALID_PLUGIN_SRC)
        pm = PluginManager()
        pm.discover_and_load(local_dir=tmp_path)
        assert "LP001" in RULE_REGISTRY
        assert len(pm.warnings) == 1

    def test_class_without_hooks_ignored(self, tmp_path):
        (tmp_path / "helper.py").write_text(_NO_HOOKS_SRC)
        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path)
        assert not any("helper" in n for n in names)

    def test_underscore_files_skipped(self, tmp_path):
        (tmp_path / "_private.py").write_text(_VALID_PLUGIN_SRC)
        pm = PluginManager()
        pm.discover_and_load(local_dir=tmp_path)
        assert "LP001" not in RULE_REGISTRY

    def test_missing_dir_is_fine(self, tmp_path):
        pm = PluginManager()
        pm.discover_and_load(local_dir=tmp_path / "nope")
        assert pm.warnings == []
