"""Built-in step plugins for rdfsteps.

Steps process rows handed to them by a host pipeline. Each step receives
a row and returns a StepResult with the rows to emit.

Plugins are accessed via PluginManager, not direct imports:
    manager = PluginManager()
    manager.register_builtin_plugins()
    step_cls = manager.get_step_by_name("group_merge")
"""
