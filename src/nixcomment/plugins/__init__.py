"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) plus single-file local plugins.
INVARIANT: Plugin failures are warnings, never errors.
"""

from nixcomment.plugins.hookspecs import hookimpl
from nixcomment.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
