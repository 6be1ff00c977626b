"""Reading configured fields under their missing/null policies.

Key fields, merge fields and combine fields all follow the same rules:

- absent from the row: apply if_missing, return MISSING
- present but null:    apply if_null, return None
- otherwise:           return the value

For each policy, IGNORE is silent, WARN records a diagnostic on the
StepContext and carries on, ERROR raises MissingFieldError or
NullValueError. What "carry on" means (omit from a key, skip a
contribution) is up to the caller.
"""

from typing import Any

from rdfsteps.contracts.enums import FieldPolicy, ViolationKind
from rdfsteps.contracts.errors import MissingFieldError, NullValueError, StepError, TypeMismatchError
from rdfsteps.contracts.types import Row
from rdfsteps.core.graph import Graph
from rdfsteps.plugins.config_base import FieldSpec
from rdfsteps.plugins.context import StepContext
from rdfsteps.plugins.sentinels import MISSING


def _enforce(
    policy: FieldPolicy,
    error_cls: type[StepError],
    kind: ViolationKind,
    message: str,
    spec: FieldSpec,
    ctx: StepContext,
) -> None:
    if policy is FieldPolicy.IGNORE:
        return
    if policy is FieldPolicy.WARN:
        ctx.warn(kind, spec.name, message)
        return
    raise error_cls(message, field_name=spec.name, rows_processed=ctx.rows_processed)


def read_field(row: Row, spec: FieldSpec, ctx: StepContext, *, role: str) -> Any:
    """Read a configured field from a row, applying its policies.

    Args:
        row: Input row
        spec: Field specification with if_missing/if_null policies
        ctx: Step context (diagnostics, row count)
        role: Label used in messages ("Key", "Merge", "Graph")

    Returns:
        The field value, None for a tolerated null, or MISSING for a
        tolerated absent field.

    Raises:
        MissingFieldError: Field absent and if_missing is ERROR
        NullValueError: Field null and if_null is ERROR
    """
    if spec.name not in row:
        _enforce(
            spec.if_missing,
            MissingFieldError,
            ViolationKind.MISSING_FIELD,
            f"{role} field '{spec.name}' is absent from row {ctx.rows_processed}",
            spec,
            ctx,
        )
        return MISSING

    value = row[spec.name]
    if value is None:
        _enforce(
            spec.if_null,
            NullValueError,
            ViolationKind.NULL_VALUE,
            f"{role} field '{spec.name}' has a null value in row {ctx.rows_processed}",
            spec,
            ctx,
        )
    return value


def read_graph_field(row: Row, spec: FieldSpec, ctx: StepContext, *, role: str) -> Graph | None:
    """Read a graph-valued field; None when the field is tolerably absent or null.

    Raises:
        MissingFieldError, NullValueError: Per the field's policies
        TypeMismatchError: The value is present but not a Graph
    """
    value = read_field(row, spec, ctx, role=role)
    if value is MISSING or value is None:
        return None
    if not isinstance(value, Graph):
        raise TypeMismatchError(
            f"{role} field '{spec.name}' must contain a Graph, got {type(value).__name__} in row {ctx.rows_processed}. "
            f"This indicates an upstream step wrote the wrong value type.",
            field_name=spec.name,
            rows_processed=ctx.rows_processed,
        )
    return value
