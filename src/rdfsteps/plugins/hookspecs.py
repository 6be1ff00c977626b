# src/rdfsteps/plugins/hookspecs.py
"""pluggy hooks through which step classes reach the PluginManager.

A plugin is any object with an ``rdfsteps_get_steps`` method marked with
``hookimpl``; it returns the step classes it contributes:

    from rdfsteps.plugins.hookspecs import hookimpl

    class ExtraSteps:
        @hookimpl
        def rdfsteps_get_steps(self):
            return [DedupeTriples]
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from rdfsteps.plugins.base import BaseStep

PROJECT_NAME = "rdfsteps"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class RdfstepsStepSpec:
    """Hooks a step plugin may implement."""

    @hookspec
    def rdfsteps_get_steps(self) -> list[type["BaseStep"]]:  # type: ignore[empty-body]
        """Step classes (BaseStep subclasses, not instances) this plugin provides."""
