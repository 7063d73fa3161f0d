"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins from ``[plugins] local_dir``.
INVARIANT: Plugin failures are warnings, never errors.
"""

from gitok.plugins.manager import PluginManager

__all__ = ["PluginManager"]
