"""Per-group state held by the group merge step between rows."""

from dataclasses import dataclass, field
from typing import Any

from rdfsteps.core.graph import Graph
from rdfsteps.plugins.transforms.group_merge.keys import KeyTuple


@dataclass
class OtherFieldState:
    """Running value of one other field across a group.

    Attributes:
        value: Value carried forward so far
        seen: True once any row in the group supplied the field
        differs: True once two rows supplied unequal values
    """

    value: Any = None
    seen: bool = False
    differs: bool = False


@dataclass
class Group:
    """The currently open group.

    Created when a row starts a new group, folded into by each continuing
    row, and dropped the moment it is flushed.

    Attributes:
        key: Key of the row that opened the group
        heads: Merge field name -> head graph (absent until the first
            graph is contributed for that field)
        owned_heads: Merge fields whose head graph was allocated by the
            step rather than taken from a row
        originals: Merge field name -> value of the opening row's own
            column, for merge fields that write a target_field
        other_fields: Other field name -> running reconciliation state
        row_count: Rows folded into the group
    """

    key: KeyTuple
    heads: dict[str, Graph] = field(default_factory=dict)
    owned_heads: set[str] = field(default_factory=set)
    originals: dict[str, Any] = field(default_factory=dict)
    other_fields: dict[str, OtherFieldState] = field(default_factory=dict)
    row_count: int = 0
