"""Built-in step registration."""

from rdfsteps.plugins.base import BaseStep
from rdfsteps.plugins.hookspecs import hookimpl


class BuiltinSteps:
    """Hook implementer for the steps shipped with rdfsteps."""

    @hookimpl
    def rdfsteps_get_steps(self) -> list[type[BaseStep]]:
        from rdfsteps.plugins.transforms.combine import GraphCombine
        from rdfsteps.plugins.transforms.group_merge import GroupMerge

        return [GroupMerge, GraphCombine]
