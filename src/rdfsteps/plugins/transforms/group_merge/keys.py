"""Key extraction and comparison for group detection.

A key is the tuple of configured key field values read from one row, as
(name, value) pairs in configuration order. Fields that are absent from
the row (and tolerated by if_missing) are left out of the key entirely,
while tolerated nulls stay in as (name, None) so that comparisons remain
well defined.
"""

import math
from collections.abc import Sequence
from typing import Any, TypeAlias

from rdfsteps.contracts.types import Row
from rdfsteps.plugins.config_base import KeyField
from rdfsteps.plugins.context import StepContext
from rdfsteps.plugins.fields import read_field
from rdfsteps.plugins.sentinels import MISSING

KeyTuple: TypeAlias = tuple[tuple[str, Any], ...]


def extract_key(row: Row, key_fields: Sequence[KeyField], ctx: StepContext) -> KeyTuple:
    """Read the key of a row.

    Raises:
        MissingFieldError: A key field is absent and its if_missing is ERROR
        NullValueError: A key field is null and its if_null is ERROR
    """
    key: list[tuple[str, Any]] = []
    for spec in key_fields:
        value = read_field(row, spec, ctx, role="Key")
        if value is MISSING:
            continue
        key.append((spec.name, value))
    return tuple(key)


def keys_match(current: KeyTuple, incoming: KeyTuple) -> bool:
    """True if incoming continues the group identified by current.

    Field-wise equality: two nulls are equal, a null never equals a
    non-null, two float NaNs are equal, other non-nulls use value
    equality. Keys that cover different fields (because a field was absent
    from one of the rows) never match.
    """
    if len(current) != len(incoming):
        return False

    for (current_name, current_value), (incoming_name, incoming_value) in zip(current, incoming, strict=True):
        if current_name != incoming_name:
            return False
        if (current_value is None) != (incoming_value is None):
            return False
        if current_value is not None and not _same_key_value(current_value, incoming_value):
            return False
    return True


def _same_key_value(current: Any, incoming: Any) -> bool:
    if isinstance(current, float) and isinstance(incoming, float) and math.isnan(current) and math.isnan(incoming):
        return True
    return bool(current == incoming)
