"""Policy, state and violation enums shared across subsystem boundaries.

Configuration files spell these values in lower case (``if_null: warn``).
Upper-case spellings are accepted by the config models and normalised
before validation.
"""

from enum import StrEnum


class FieldPolicy(StrEnum):
    """What to do when a configured field is absent from a row or holds null.

    Values:
        IGNORE: Skip the field silently
        WARN: Skip the field and record a diagnostic
        ERROR: Abort the run
    """

    IGNORE = "ignore"
    WARN = "warn"
    ERROR = "error"


class OtherFieldAction(StrEnum):
    """How fields that are neither key nor merge fields are carried per group.

    Values:
        DROP: Remove the field from the output schema
        USE_FIRST: Keep the value from the first row that supplied one
        USE_LAST: Keep the value from the last row that supplied one
        SET_NULL: Always emit null
        NULL_IF_DIFFERENT: Emit the common value, or null if rows disagree
    """

    DROP = "drop"
    USE_FIRST = "use_first"
    USE_LAST = "use_last"
    SET_NULL = "set_null"
    NULL_IF_DIFFERENT = "null_if_different"


class GroupState(StrEnum):
    """Lifecycle of the group merge state machine."""

    NO_GROUP = "no_group"
    COLLECTING = "collecting"
    DONE = "done"


class ViolationKind(StrEnum):
    """Kind of condition reported by a step error or diagnostic."""

    CONFIGURATION = "configuration"
    MISSING_FIELD = "missing_field"
    NULL_VALUE = "null_value"
    TYPE_MISMATCH = "type_mismatch"
    RESOURCE_STATE = "resource_state"
    LIFECYCLE = "lifecycle"
