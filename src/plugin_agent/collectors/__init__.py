"""
Bundled plugins.

Each plugin samples a source and reports into its own component.
"""

from .system import SystemCollector, SystemPlugin, SystemSnapshot

__all__ = [
    "SystemCollector",
    "SystemPlugin",
    "SystemSnapshot",
]
