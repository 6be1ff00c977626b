# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/

Steps are instantiated directly in tests (GroupMerge({...})) rather than
through the PluginManager: configuration validation happens in the step
constructor either way, and the manager has its own tests.
"""

import os
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from rdfsteps.contracts.types import OutputRow, Row
from rdfsteps.plugins.base import BaseStep
from rdfsteps.plugins.context import StepContext

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


@pytest.fixture
def ctx() -> StepContext:
    """Fresh step context per test."""
    return StepContext(run_id="test-run", step_name="test_step")


def drive(step: BaseStep, rows: list[Row], ctx: StepContext) -> list[OutputRow]:
    """Push rows through a step, then finish it; return everything emitted."""
    emitted: list[OutputRow] = []
    for row in rows:
        emitted.extend(step.process(row, ctx).rows)
    emitted.extend(step.finish(ctx).rows)
    return emitted


def group_merge_config(**overrides: Any) -> dict[str, Any]:
    """Minimal valid group_merge options: key 'id', merge field 'model'."""
    config: dict[str, Any] = {
        "key_fields": [{"name": "id"}],
        "merge_fields": [{"name": "model"}],
    }
    config.update(overrides)
    return config

