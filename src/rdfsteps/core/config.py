# src/rdfsteps/core/config.py
"""Pipeline settings: which steps to build and how to log.

Settings are loaded from a YAML file with Dynaconf (environment overrides
via RDFSTEPS_*) and validated with Pydantic. Step options are kept as
plain dicts here; each step validates its own options when constructed.

Example YAML:
    logging:
      level: DEBUG
      json_output: false

    steps:
      - name: merge_by_record
        plugin: group_merge
        options:
          key_fields:
            - name: record_id
          merge_fields:
            - name: model
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from rdfsteps.plugins.config_base import find_duplicates, validate_field_name

# ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


class StepSettings(BaseModel):
    """One configured step of the pipeline."""

    model_config = {"frozen": True, "extra": "forbid"}

    name: str = Field(description="Unique name of this step within the pipeline")
    plugin: str = Field(description="Registered step plugin name (group_merge, graph_combine)")
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Plugin-specific configuration options",
    )

    @field_validator("name", "plugin")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        return validate_field_name(v, "step name/plugin")


class LoggingSettings(BaseModel):
    """Log output configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )
    json_output: bool = Field(
        default=False,
        description="Emit JSON lines instead of console output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v


class RdfstepsSettings(BaseModel):
    """Top-level settings for an rdfsteps pipeline."""

    model_config = {"frozen": True}

    steps: list[StepSettings] = Field(
        min_length=1,
        description="Steps to build, in pipeline order",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Log output configuration",
    )

    @model_validator(mode="after")
    def _unique_step_names(self) -> "RdfstepsSettings":
        duplicates = find_duplicates(step.name for step in self.steps)
        if duplicates:
            raise ValueError(f"Duplicate step names: {', '.join(duplicates)}")
        return self


def _substitute_env(match: re.Match[str]) -> str:
    name, fallback = match.group(1), match.group(2)
    if name in os.environ:
        return os.environ[name]
    # Unset with no fallback: leave the reference visible
    return fallback if fallback is not None else match.group(0)


def _expand_env_vars(value: Any) -> Any:
    """Replace ${VAR} and ${VAR:-default} in every string nested in value."""
    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(_substitute_env, value)
    if isinstance(value, dict):
        return {key: _expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def _lower_keys(value: Any) -> Any:
    """Undo Dynaconf's key upper-casing on one settings section.

    Only the section's own keys are touched. Step options keep their keys as
    written because field names are case sensitive.
    """
    if isinstance(value, dict):
        return {k.lower(): v for k, v in value.items()}
    return value


# Keys Dynaconf reports alongside the file's own content
_DYNACONF_KEYS = frozenset({"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"})


def load_settings(config_path: Path) -> RdfstepsSettings:
    """Read, expand and validate a settings file.

    Values set as RDFSTEPS_* environment variables win over the file
    (RDFSTEPS_LOGGING__LEVEL=DEBUG sets logging.level); anything neither
    sets falls back to the model defaults. ${VAR} references inside values
    are expanded after loading.

    Raises:
        FileNotFoundError: config_path does not exist
        ValidationError: The loaded settings do not validate
    """
    from dynaconf import Dynaconf

    # Dynaconf treats a missing settings file as empty
    if not config_path.exists():
        raise FileNotFoundError(f"Settings file not found: {config_path}")

    loaded = Dynaconf(
        envvar_prefix="RDFSTEPS",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    ).as_dict()

    raw: dict[str, Any] = {key.lower(): value for key, value in loaded.items() if key not in _DYNACONF_KEYS}
    if "logging" in raw:
        raw["logging"] = _lower_keys(raw["logging"])
    if isinstance(raw.get("steps"), list):
        raw["steps"] = [_lower_keys(step) for step in raw["steps"]]

    return RdfstepsSettings(**_expand_env_vars(raw))
