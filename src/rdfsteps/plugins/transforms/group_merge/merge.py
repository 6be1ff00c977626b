"""Folding row graphs into a group's head graphs.

Per merge field and per row, one contributor graph is folded into the
group's head graph for that field:

    mutate_leader=True
        first contribution  -> the contributor becomes the head (same object)
        later contributions -> union into the head; close the contributor
                               if close_merged_graphs is set

    mutate_leader=False
        first contribution  -> allocate an empty head, union the contributor
        later contributions -> union into the head
        either way          -> close the contributor if close_merged_graphs
                               is set (it is never the head)

Union is commutative and associative, so the head's final triples do not
depend on the order rows arrive in. Ownership only moves one way: once a
graph is the head or is closed, that never changes back.
"""

from rdfsteps.contracts.errors import ResourceStateError
from rdfsteps.contracts.types import Row
from rdfsteps.core.graph import Graph
from rdfsteps.plugins.config_base import MergeField
from rdfsteps.plugins.context import StepContext
from rdfsteps.plugins.fields import read_graph_field
from rdfsteps.plugins.transforms.group_merge.state import Group


class GraphMergeEngine:
    """Apply the merge-field policies to fold row graphs into head graphs."""

    def __init__(self, close_merged_graphs: bool) -> None:
        self._close_merged_graphs = close_merged_graphs

    def fold(self, group: Group, merge_field: MergeField, row: Row, ctx: StepContext) -> None:
        """Fold row's graph for merge_field into the group.

        Raises:
            MissingFieldError, NullValueError: Per the field's policies
            TypeMismatchError: The field holds something other than a Graph
            ResourceStateError: The contributor or the head is already closed
        """
        if not merge_field.mutate_leader:
            self._release_stale_target(group, merge_field, row)

        contributor = read_graph_field(row, merge_field, ctx, role="Merge")
        if contributor is None:
            # Tolerated absent/null: this row contributes nothing for the field
            return

        name = merge_field.name
        if contributor.closed:
            raise ResourceStateError(
                f"Merge field '{name}' holds a graph that has already been closed in row {ctx.rows_processed}",
                field_name=name,
                rows_processed=ctx.rows_processed,
            )

        head = group.heads.get(name)

        if merge_field.mutate_leader:
            if head is None:
                group.heads[name] = contributor
                return
            if contributor is head:
                # Same graph object handed in twice; nothing to union, and
                # closing it would close the head.
                return
            self._union(head, contributor, name, ctx)
        else:
            if head is None:
                head = Graph()
                group.heads[name] = head
                group.owned_heads.add(name)
            self._union(head, contributor, name, ctx)

        if self._close_merged_graphs:
            contributor.close()

    def _union(self, head: Graph, contributor: Graph, name: str, ctx: StepContext) -> None:
        if head.closed:
            raise ResourceStateError(
                f"Head graph for merge field '{name}' was closed while its group was still open (row {ctx.rows_processed})",
                field_name=name,
                rows_processed=ctx.rows_processed,
            )
        head.merge(contributor)

    def _release_stale_target(self, group: Group, merge_field: MergeField, row: Row) -> None:
        """Close a graph already sitting in the target column of an input row.

        The target column is overwritten with the group's head on output, so
        a graph an earlier step left there would otherwise never be released.
        """
        if not self._close_merged_graphs or merge_field.target_field is None:
            return
        stale = row.get(merge_field.target_field)
        if not isinstance(stale, Graph) or stale.closed:
            return
        if stale is group.heads.get(merge_field.name) or stale is row.get(merge_field.name):
            return
        stale.close()
