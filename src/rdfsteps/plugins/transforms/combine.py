"""Graph combine step.

Combines the graphs held in several fields of the same row into one graph.
This is the single-row counterpart of group_merge: no state is carried
between rows, and every input row produces exactly one output row.
"""

from typing import Any, Self

from pydantic import Field, field_validator, model_validator

from rdfsteps.contracts.errors import ResourceStateError, StepError
from rdfsteps.contracts.results import StepResult
from rdfsteps.contracts.types import OutputRow, Row
from rdfsteps.core.graph import Graph
from rdfsteps.plugins.base import BaseStep
from rdfsteps.plugins.config_base import FieldSpec, StepConfig, find_duplicates, validate_field_name
from rdfsteps.plugins.context import StepContext
from rdfsteps.plugins.fields import read_graph_field


class GraphCombineConfig(StepConfig):
    """Configuration for the graph combine step.

    Either mutate_leader is true (the first graph present in the row
    absorbs the others) or target_field names the column that receives a
    newly built graph.
    """

    graph_fields: list[FieldSpec] = Field(
        min_length=1,
        description="Graph fields to combine, in order; the first present one leads",
    )
    mutate_leader: bool = Field(
        default=True,
        description="Combine into the first present graph instead of building a new one",
    )
    target_field: str | None = Field(
        default=None,
        description="Output field for the new graph (required when mutate_leader is false)",
    )
    remove_selected_fields: bool = Field(
        default=False,
        description="Close consumed graphs and drop their columns from the output row",
    )

    @field_validator("target_field")
    @classmethod
    def _validate_target_field(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return validate_field_name(v, "target_field")

    @model_validator(mode="after")
    def _validate_mode(self) -> Self:
        names = [f.name for f in self.graph_fields]
        duplicates = find_duplicates(names)
        if duplicates:
            raise ValueError(f"Duplicate graph fields: {', '.join(duplicates)}")
        if not self.mutate_leader and self.target_field is None:
            raise ValueError("mutate_leader is false and target_field is empty. One or the other must be set.")
        if self.mutate_leader and self.target_field is not None:
            raise ValueError(f"target_field '{self.target_field}' is set but mutate_leader=true never writes it")
        if self.target_field is not None and self.target_field in names:
            raise ValueError(f"target_field '{self.target_field}' is also one of the graph fields")
        return self


class GraphCombine(BaseStep):
    """Combine several graph fields of a row into one graph.

    Config options:
        graph_fields: Required. Fields to combine, with if_missing/if_null
        mutate_leader: Merge into the first present graph (default: true)
        target_field: Output field for a new graph when mutate_leader is false
        remove_selected_fields: Close consumed graphs and drop their columns,
            keeping only the leading field's column (default: false)

    Example YAML:
        steps:
          - name: combine_models
            plugin: graph_combine
            options:
              graph_fields:
                - name: subject_model
                - name: rights_model
                  if_null: ignore
              mutate_leader: false
              target_field: combined_model
              remove_selected_fields: true
    """

    name = "graph_combine"
    plugin_version = "1.0.0"

    def __init__(self, config: dict[str, Any]) -> None:
        super().__init__(config)
        cfg = GraphCombineConfig.from_dict(config)
        self.options = cfg
        self._graph_fields = tuple(cfg.graph_fields)
        self._mutate_leader = cfg.mutate_leader
        self._target_field = cfg.target_field
        self._remove_selected_fields = cfg.remove_selected_fields

    def process(self, row: Row, ctx: StepContext) -> StepResult:
        """Combine this row's graphs and emit the row.

        Raises:
            MissingFieldError, NullValueError: Per each field's policies
            TypeMismatchError: A graph field holds a non-graph value
            ResourceStateError: A graph in the row was already closed
        """
        ctx.rows_processed += 1

        present: list[tuple[str, Graph]] = []
        for spec in self._graph_fields:
            graph = read_graph_field(row, spec, ctx, role="Graph")
            if graph is None or any(graph is seen for _, seen in present):
                continue
            present.append((spec.name, graph))

        for field_name, graph in present:
            if graph.closed:
                raise ResourceStateError(
                    f"Graph field '{field_name}' holds a graph that has already been closed in row {ctx.rows_processed}",
                    field_name=field_name,
                    rows_processed=ctx.rows_processed,
                )

        head_field: str | None
        if self._mutate_leader:
            if not present:
                return StepResult.emit(self._output_row(row, head_field=None, head=None))
            head_field, head = present[0]
            tail = present[1:]
        else:
            head_field = None
            head = Graph()
            tail = present

        try:
            for _, graph in tail:
                head.merge(graph)
                if self._remove_selected_fields:
                    graph.close()
        except StepError:
            if not head.closed:
                head.close()
            raise

        return StepResult.emit(self._output_row(row, head_field=head_field, head=head))

    def _output_row(self, row: Row, *, head_field: str | None, head: Graph | None) -> OutputRow:
        output: OutputRow = dict(row)
        if self._remove_selected_fields:
            # Only the leading graph's column survives (none for a new head)
            for spec in self._graph_fields:
                if spec.name != head_field:
                    output.pop(spec.name, None)
        if not self._mutate_leader:
            assert self._target_field is not None
            output[self._target_field] = head
        return output
