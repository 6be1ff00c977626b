# src/rdfsteps/plugins/manager.py
"""Plugin manager for discovery, registration, and lookup.

Uses pluggy for hook-based plugin registration.
"""

from typing import Any

import pluggy

from rdfsteps.contracts.errors import ConfigurationError
from rdfsteps.core.logging import get_logger
from rdfsteps.plugins.base import BaseStep
from rdfsteps.plugins.hookspecs import PROJECT_NAME, RdfstepsStepSpec

logger = get_logger(__name__)


class PluginManager:
    """Manages step plugin discovery, registration, and lookup.

    Usage:
        manager = PluginManager()
        manager.register_builtin_plugins()

        steps = manager.get_steps()
        step = manager.create_step("group_merge", options)
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(RdfstepsStepSpec)

        # Cache - maps name to plugin class for duplicate detection
        self._steps: dict[str, type[BaseStep]] = {}

    def register_builtin_plugins(self) -> None:
        """Register the steps shipped with rdfsteps.

        Call this once at startup to make built-in steps discoverable.
        """
        from rdfsteps.plugins.builtin import BuiltinSteps

        self.register(BuiltinSteps())

    def register(self, plugin: Any) -> None:
        """Register a plugin.

        Args:
            plugin: Plugin instance implementing hook methods

        Raises:
            ValueError: If a step with the same name is already registered
        """
        self._pm.register(plugin)
        try:
            self._refresh_caches()
        except ValueError:
            # Leave the manager as it was before the bad registration
            self._pm.unregister(plugin)
            raise

    def _refresh_caches(self) -> None:
        """Refresh the step cache from hooks.

        Raises:
            ValueError: If two plugins provide a step with the same name, or
                a provided class is not a BaseStep subclass
        """
        new_steps: dict[str, type[BaseStep]] = {}

        for steps in self._pm.hook.rdfsteps_get_steps():
            for cls in steps:
                if not (isinstance(cls, type) and issubclass(cls, BaseStep)):
                    raise ValueError(f"Step plugin {cls!r} must be a BaseStep subclass")
                name = cls.name
                if name in new_steps:
                    raise ValueError(f"Duplicate step plugin name: '{name}'. Already registered by {new_steps[name].__name__}")
                new_steps[name] = cls

        # All validated, update cache
        self._steps = new_steps
        logger.debug("step plugins refreshed", steps=sorted(new_steps))

    # === Getters ===

    def get_steps(self) -> list[type[BaseStep]]:
        """Get all registered step plugins."""
        return list(self._steps.values())

    def get_step_by_name(self, name: str) -> type[BaseStep] | None:
        """Get step plugin by name."""
        return self._steps.get(name)

    def create_step(self, name: str, options: dict[str, Any]) -> BaseStep:
        """Instantiate a registered step with the given options.

        Raises:
            ConfigurationError: Unknown plugin name, or invalid options
        """
        step_cls = self.get_step_by_name(name)
        if step_cls is None:
            available = ", ".join(sorted(self._steps)) or "none"
            raise ConfigurationError(f"Unknown step plugin '{name}'. Available: {available}")
        return step_cls(options)
