"""
Optional dependency management.
"""
from functools import lru_cache
from importlib import import_module
from types import ModuleType


# Classes --------------------------------------------------------------------------------------------------------------
class Resources:
    """
    Tracks optional packages that extend the readers (e.g. ``zstandard`` for .zst input).
    """
    @staticmethod
    @lru_cache(maxsize=None)
    def has_module(module_name: str) -> bool:
        """Checks if a python package is installed."""
        try:
            import_module(module_name)
            return True
        except ImportError: return False

    @staticmethod
    def require_module(module_name: str) -> ModuleType:
        """
        Imports an optional package, failing with a readable message if it is missing.

        Raises:
            ModuleNotFoundError: If the package is not installed.
        """
        if not Resources.has_module(module_name):
            raise ModuleNotFoundError(f"Optional module '{module_name}' is not installed.")
        return import_module(module_name)


# Constants ------------------------------------------------------------------------------------------------------------
RESOURCES = Resources()
