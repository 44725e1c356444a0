"""
Registry of mpd-trigger subsystems.

Each subsystem owns a named logger and a CLI flag that turns on its DEBUG
output. Modules register themselves on import.
"""

import logging
from typing import Dict, Iterable, Set


class ModuleRegistry:
    """Registry of subsystems with their loggers and debug flags."""

    def __init__(self):
        """Initialize an empty registry."""
        self._modules: Dict[str, dict] = {}

    def register_module(
        self,
        name: str,
        description: str,
        logger_name: str,
        debug_flag: str,
        category: str = "core",
    ) -> logging.Logger:
        """Register a subsystem and return its logger."""
        logger = logging.getLogger(logger_name)
        self._modules[name] = {
            "description": description,
            "logger_name": logger_name,
            "debug_flag": debug_flag,
            "logger": logger,
            "category": category,
        }
        return logger

    def get_logger(self, name: str) -> logging.Logger:
        """Get the logger of a registered subsystem."""
        return self._modules[name]["logger"]

    def get_module_info(self, name: str) -> dict:
        """Get information about a specific subsystem."""
        return self._modules.get(name, {})

    def get_all_modules(self) -> Dict[str, dict]:
        """Get all registered subsystems."""
        return self._modules.copy()

    def get_modules_by_category(self, category: str) -> Dict[str, dict]:
        """Get all subsystems in a specific category."""
        return {name: info for name, info in self._modules.items() if info["category"] == category}

    def get_debug_flags(self) -> Dict[str, str]:
        """Get mapping of debug CLI flags to subsystem names."""
        return {info["debug_flag"]: name for name, info in self._modules.items()}

    def logger_names_for(self, names: Iterable[str]) -> Set[str]:
        """Translate subsystem names to logger names, skipping unknown ones."""
        return {self._modules[name]["logger_name"] for name in names if name in self._modules}


# Global registry instance
module_registry = ModuleRegistry()
