"""Configuration for the group merge step."""

from typing import Any, Self

from pydantic import Field, field_validator, model_validator

from rdfsteps.contracts.enums import OtherFieldAction
from rdfsteps.plugins.config_base import KeyField, MergeField, StepConfig, find_duplicates


class GroupMergeConfig(StepConfig):
    """Configuration for the group merge step.

    Example YAML:
        steps:
          - name: merge_by_record
            plugin: group_merge
            options:
              key_fields:
                - name: record_id
                  if_null: warn
              merge_fields:
                - name: model
                - name: provenance
                  mutate_leader: false
                  target_field: provenance_merged
              other_field_action: use_first
              close_merged_graphs: true
    """

    key_fields: list[KeyField] = Field(
        min_length=1,
        description="Fields whose values identify a group, in comparison order",
    )
    merge_fields: list[MergeField] = Field(
        min_length=1,
        description="Graph fields merged across each group, in merge order",
    )
    other_field_action: OtherFieldAction = Field(
        default=OtherFieldAction.DROP,
        description="How fields that are neither key nor merge fields are carried per group",
    )
    close_merged_graphs: bool = Field(
        default=False,
        description="Close each contributor graph once its triples are in the head graph",
    )
    remove_merged_fields: bool = Field(
        default=False,
        description="Omit the original column of merge fields that write a target_field",
    )

    @field_validator("other_field_action", mode="before")
    @classmethod
    def _normalise_action(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def _validate_field_roles(self) -> Self:
        """Each field name plays exactly one role."""
        key_names = [f.name for f in self.key_fields]
        merge_names = [f.name for f in self.merge_fields]
        target_names = [f.target_field for f in self.merge_fields if f.target_field is not None]

        duplicates = find_duplicates(key_names)
        if duplicates:
            raise ValueError(f"Duplicate key fields: {', '.join(duplicates)}")
        duplicates = find_duplicates(merge_names)
        if duplicates:
            raise ValueError(f"Duplicate merge fields: {', '.join(duplicates)}")
        duplicates = find_duplicates(target_names)
        if duplicates:
            raise ValueError(f"Several merge fields write the same target_field: {', '.join(duplicates)}")

        both = sorted(set(key_names) & set(merge_names))
        if both:
            raise ValueError(f"Fields cannot be both key and merge fields: {', '.join(both)}")
        clashing = sorted(set(target_names) & (set(key_names) | set(merge_names)))
        if clashing:
            raise ValueError(f"target_field collides with a key or merge field: {', '.join(clashing)}")
        return self
