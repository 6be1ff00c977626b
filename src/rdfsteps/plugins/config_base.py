# src/rdfsteps/plugins/config_base.py
"""Pydantic bases shared by every step's options model.

StepConfig forbids unknown keys and turns validation failures into
ConfigurationError. FieldSpec is the common shape of a configured input
field: its name plus the if_missing and if_null policies.

    class GraphCombineConfig(StepConfig):
        graph_fields: list[FieldSpec]
        mutate_leader: bool = True

    cfg = GraphCombineConfig.from_dict(options)
"""

from collections.abc import Iterable
from typing import Any, Self

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from rdfsteps.contracts.enums import FieldPolicy
from rdfsteps.contracts.errors import ConfigurationError


def validate_field_name(value: str, label: str = "field name") -> str:
    """Strip a configured field name and reject blanks."""
    if not isinstance(value, str):
        raise ValueError(f"{label} must be a string, got {type(value).__name__}")
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{label} cannot be empty")
    return stripped


def find_duplicates(names: Iterable[str]) -> list[str]:
    """Return the names that occur more than once, sorted."""
    seen: set[str] = set()
    duplicates: set[str] = set()
    for name in names:
        if name in seen:
            duplicates.add(name)
        seen.add(name)
    return sorted(duplicates)


class StepConfig(BaseModel):
    """Base class for typed step configurations.

    Provides common validation patterns and helpful error messages.
    All step configs should inherit from this class.
    """

    model_config = {"extra": "forbid"}  # Reject unknown fields

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        """Validate raw options into this model.

        Raises:
            ConfigurationError: options is not a dict, or fails validation
        """
        if not isinstance(config, dict):
            raise ConfigurationError(f"Invalid configuration for {cls.__name__}: config must be a dict, got {type(config).__name__}.")

        try:
            return cls.model_validate(config)
        except (ValidationError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration for {cls.__name__}: {e}") from e


class FieldSpec(BaseModel):
    """A configured input field and what to do when it is absent or null.

    Policies default to ERROR: a configured field that cannot be read
    aborts the run unless the configuration explicitly relaxes it.
    """

    model_config = {"extra": "forbid", "frozen": True}

    name: str = Field(description="Name of the row field")
    if_missing: FieldPolicy = Field(
        default=FieldPolicy.ERROR,
        description="Action when the field is absent from the row: ignore, warn or error",
    )
    if_null: FieldPolicy = Field(
        default=FieldPolicy.ERROR,
        description="Action when the field is present but null: ignore, warn or error",
    )

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        return validate_field_name(v)

    @field_validator("if_missing", "if_null", mode="before")
    @classmethod
    def _normalise_policy(cls, v: Any) -> Any:
        """Accept IGNORE/Warn/error spellings from settings files."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class KeyField(FieldSpec):
    """A field whose value identifies the group a row belongs to."""


class MergeField(FieldSpec):
    """A graph-valued field whose graphs are merged across a group.

    mutate_leader=True: the first graph contributed in a group becomes the
    group's head graph and later graphs are merged into it in place.

    mutate_leader=False: a new head graph is built for each group and
    written to target_field; the original field keeps its own value.
    """

    mutate_leader: bool = Field(
        default=True,
        description="Merge into the first row's graph in place instead of building a new graph",
    )
    target_field: str | None = Field(
        default=None,
        description="Output field for the new head graph (required when mutate_leader is false)",
    )

    @field_validator("target_field")
    @classmethod
    def _validate_target_field(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return validate_field_name(v, "target_field")

    @model_validator(mode="after")
    def _validate_target_against_mode(self) -> Self:
        if not self.mutate_leader and self.target_field is None:
            raise ValueError(f"Merge field '{self.name}' has mutate_leader=false but no target_field. One or the other must be set.")
        if self.mutate_leader and self.target_field is not None:
            raise ValueError(f"Merge field '{self.name}' sets target_field '{self.target_field}' but mutate_leader=true never writes a target field.")
        if self.target_field == self.name:
            raise ValueError(f"Merge field '{self.name}' cannot use itself as target_field")
        return self
