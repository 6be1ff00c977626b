# src/rdfsteps/plugins/transforms/group_merge/step.py
"""Group merge step.

Detects runs of consecutive rows with equal key values, merges the
graphs in the configured merge fields into one head graph per field, and
emits exactly one row per run.

IMPORTANT: Grouping is adjacency-only. The input must already be sorted
(or at least clustered) by the key fields. Two separate runs of the same
key are two groups and produce two output rows:

    ids  1, 1, 2, 1   ->   groups [1, 1], [2], [1]

State machine:

    NO_GROUP --row--> COLLECTING --row, same key--> COLLECTING
                      COLLECTING --row, new key---> emit group, COLLECTING
    NO_GROUP / COLLECTING --finish()--> emit open group (if any), DONE

Output is strictly deferred: a group is only emitted once the next key is
seen or finish() is called.
"""

from collections.abc import Sequence
from typing import Any

from rdfsteps.contracts.enums import GroupState
from rdfsteps.contracts.errors import StepError, StepLifecycleError
from rdfsteps.contracts.results import StepResult
from rdfsteps.contracts.types import OutputRow, Row
from rdfsteps.plugins.base import BaseStep
from rdfsteps.plugins.context import StepContext
from rdfsteps.plugins.sentinels import MISSING
from rdfsteps.plugins.transforms.group_merge.config import GroupMergeConfig
from rdfsteps.plugins.transforms.group_merge.keys import KeyTuple, extract_key, keys_match
from rdfsteps.plugins.transforms.group_merge.merge import GraphMergeEngine
from rdfsteps.plugins.transforms.group_merge.reconcile import FieldReconciler
from rdfsteps.plugins.transforms.group_merge.state import Group


class GroupMerge(BaseStep):
    """Merge graph fields across consecutive rows that share a key.

    Config options:
        key_fields: Required. Fields identifying a group, with if_missing/if_null
        merge_fields: Required. Graph fields to merge, with if_missing/if_null,
            mutate_leader (default true) and target_field
        other_field_action: drop | use_first | use_last | set_null |
            null_if_different (default: drop)
        close_merged_graphs: Close contributor graphs once merged (default: false)
        remove_merged_fields: Omit the original column of merge fields that
            write a target_field (default: false)

    Output schema is fixed by the first row of the run: that row's fields
    in order (other fields omitted under DROP, non-leader merge columns
    omitted under remove_merged_fields), followed by any configured key,
    merge or target field the first row did not have.
    """

    name = "group_merge"
    plugin_version = "1.0.0"

    def __init__(self, config: dict[str, Any]) -> None:
        super().__init__(config)
        cfg = GroupMergeConfig.from_dict(config)
        self.options = cfg

        self._key_fields = tuple(cfg.key_fields)
        self._merge_fields = tuple(cfg.merge_fields)
        self._merge_engine = GraphMergeEngine(cfg.close_merged_graphs)
        self._reconciler = FieldReconciler(cfg.other_field_action)
        self._remove_merged_fields = cfg.remove_merged_fields

        self._key_names = frozenset(f.name for f in self._key_fields)
        self._merge_by_name = {f.name: f for f in self._merge_fields}
        self._merge_by_target = {f.target_field: f for f in self._merge_fields if f.target_field is not None}

        self._state = GroupState.NO_GROUP
        self._group: Group | None = None

        # Fixed on the first row of the run
        self._schema: tuple[str, ...] | None = None
        self._other_fields: tuple[str, ...] = ()

        self._groups_emitted = 0

    @property
    def state(self) -> GroupState:
        return self._state

    @property
    def output_schema(self) -> tuple[str, ...] | None:
        """Output field order, or None before the first row."""
        return self._schema

    def process(self, row: Row, ctx: StepContext) -> StepResult:
        """Fold a row into the open group, or close that group and start a new one.

        Raises:
            StepLifecycleError: If finish() was already called
            StepError: Any fatal key/merge field condition (run aborts)
        """
        if self._state is GroupState.DONE:
            raise StepLifecycleError(
                f"Step '{self.name}' received a row after finish()",
                rows_processed=ctx.rows_processed,
            )
        ctx.rows_processed += 1

        key = extract_key(row, self._key_fields, ctx)

        if self._schema is None:
            self._schema, self._other_fields = self._build_schema(row)

        if self._group is None:
            self._open_group(key, row, ctx)
            return StepResult.hold()

        if keys_match(self._group.key, key):
            self._fold_row(self._group, row, ctx)
            return StepResult.hold()

        # Boundary: the open group is complete
        completed = self._group
        output = self._flush(ctx)
        try:
            self._open_group(key, row, ctx)
        except StepError:
            # The run aborts and output never reaches the sink
            _release_owned_heads(completed)
            raise
        return StepResult.emit(output)

    def finish(self, ctx: StepContext) -> StepResult:
        """End of input: emit the open group, if any, and stop accepting rows."""
        if self._state is GroupState.DONE:
            raise StepLifecycleError(f"Step '{self.name}' finish() called twice", rows_processed=ctx.rows_processed)

        self._state = GroupState.DONE
        if self._group is None:
            ctx.logger.debug("group merge finished", groups_emitted=self._groups_emitted)
            return StepResult.hold()

        output = self._flush(ctx)
        ctx.logger.debug("group merge finished", groups_emitted=self._groups_emitted)
        return StepResult.emit(output)

    def close(self) -> None:
        """Discard any open group without emitting it.

        Only reached with an open group when the run was aborted before
        finish(). Head graphs the step allocated itself are released; graphs
        that came from rows are left to their holders.
        """
        group = self._group
        self._group = None
        self._state = GroupState.DONE
        if group is not None:
            _release_owned_heads(group)

    # === Group handling ===

    def _open_group(self, key: KeyTuple, row: Row, ctx: StepContext) -> None:
        group = Group(key=key)
        for merge_field in self._merge_fields:
            if not merge_field.mutate_leader:
                group.originals[merge_field.name] = row.get(merge_field.name, MISSING)
        # Installed before folding so close() can release heads if the fold fails
        self._group = group
        self._state = GroupState.COLLECTING
        self._fold_row(group, row, ctx)

    def _fold_row(self, group: Group, row: Row, ctx: StepContext) -> None:
        group.row_count += 1
        for merge_field in self._merge_fields:
            self._merge_engine.fold(group, merge_field, row, ctx)
        for field_name in self._other_fields:
            if field_name in row:
                self._reconciler.fold(group, field_name, row[field_name], rows_processed=ctx.rows_processed)

    def _flush(self, ctx: StepContext) -> OutputRow:
        group = self._group
        assert group is not None and self._schema is not None

        output: OutputRow = {name: self._output_value(group, name) for name in self._schema}

        self._group = None
        self._groups_emitted += 1
        ctx.logger.debug(
            "group flushed",
            group_rows=group.row_count,
            groups_emitted=self._groups_emitted,
        )
        return output

    def _output_value(self, group: Group, name: str) -> Any:
        if name in self._key_names:
            return dict(group.key).get(name)

        if name in self._merge_by_target:
            return group.heads.get(self._merge_by_target[name].name)

        merge_field = self._merge_by_name.get(name)
        if merge_field is not None:
            if merge_field.mutate_leader:
                return group.heads.get(name)
            original = group.originals.get(name, MISSING)
            return None if original is MISSING else original

        return self._reconciler.result(group, name)

    # === Schema ===

    def _build_schema(self, row: Row) -> tuple[tuple[str, ...], tuple[str, ...]]:
        """Fix the output field order and the set of other fields from the first row."""
        fields: list[str] = []
        others: list[str] = []

        for name in row:
            if name in self._key_names or name in self._merge_by_target:
                fields.append(name)
            elif name in self._merge_by_name:
                if self._is_removed(name):
                    continue
                fields.append(name)
            elif self._reconciler.includes_field:
                fields.append(name)
                others.append(name)

        configured: Sequence[str] = [
            *(f.name for f in self._key_fields),
            *(f.name for f in self._merge_fields if not self._is_removed(f.name)),
            *self._merge_by_target,
        ]
        for name in configured:
            if name not in fields:
                fields.append(name)

        return tuple(fields), tuple(others)

    def _is_removed(self, merge_field_name: str) -> bool:
        merge_field = self._merge_by_name[merge_field_name]
        return self._remove_merged_fields and not merge_field.mutate_leader


def _release_owned_heads(group: Group) -> None:
    """Close the head graphs the step allocated for group (mutate_leader=false)."""
    for name in group.owned_heads:
        head = group.heads[name]
        if not head.closed:
            head.close()
