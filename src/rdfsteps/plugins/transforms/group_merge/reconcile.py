"""Reconciliation of other fields across a group.

Other fields are every output field that is neither a key field, a merge
field nor a merge target. One OtherFieldAction applies to all of them.
Given a group whose rows supply [v1, v2, v3] for a field:

    USE_FIRST          -> v1
    USE_LAST           -> v3
    SET_NULL           -> None
    NULL_IF_DIFFERENT  -> v1 if v1 == v2 == v3, else None
    DROP               -> field not in the output at all

Only rows that actually carry the field contribute; a row where the field
is absent leaves the running value alone. A present null is a value like
any other.
"""

from typing import Any

from rdfsteps.contracts.enums import OtherFieldAction
from rdfsteps.contracts.errors import ResourceStateError
from rdfsteps.core.graph import Graph
from rdfsteps.plugins.transforms.group_merge.state import Group, OtherFieldState


class FieldReconciler:
    """Apply the shared other-field policy to a group's running values."""

    def __init__(self, action: OtherFieldAction) -> None:
        self._action = action

    @property
    def action(self) -> OtherFieldAction:
        return self._action

    @property
    def includes_field(self) -> bool:
        """False when other fields are dropped from the output schema."""
        return self._action is not OtherFieldAction.DROP

    def fold(self, group: Group, field_name: str, value: Any, *, rows_processed: int | None = None) -> None:
        """Fold one row's value for an other field into the group.

        Raises:
            ResourceStateError: NULL_IF_DIFFERENT has to compare a graph that
                was already closed
        """
        if not self.includes_field:
            return

        state = group.other_fields.setdefault(field_name, OtherFieldState())
        action = self._action

        if action is OtherFieldAction.USE_FIRST:
            if not state.seen:
                state.value = value
        elif action is OtherFieldAction.USE_LAST:
            state.value = value
        elif action is OtherFieldAction.SET_NULL:
            state.value = None
        elif action is OtherFieldAction.NULL_IF_DIFFERENT:
            if not state.seen:
                state.value = value
            elif not state.differs and not _compare(field_name, state.value, value, rows_processed):
                state.differs = True
        state.seen = True

    def result(self, group: Group, field_name: str) -> Any:
        """Final value of an other field for the group's output row."""
        state = group.other_fields.get(field_name)
        if state is None or self._action is OtherFieldAction.SET_NULL:
            return None
        if state.differs:
            return None
        return state.value


def _compare(field_name: str, stored: Any, incoming: Any, rows_processed: int | None) -> bool:
    for value in (stored, incoming):
        if isinstance(value, Graph) and value.closed:
            raise ResourceStateError(
                f"Other field '{field_name}' holds a graph that has already been closed (row {rows_processed})",
                field_name=field_name,
                rows_processed=rows_processed,
            )
    return _same_value(stored, incoming)


def _same_value(stored: Any, incoming: Any) -> bool:
    # Null equals only null, matching key comparison.
    if stored is None or incoming is None:
        return stored is None and incoming is None
    return bool(stored == incoming)
