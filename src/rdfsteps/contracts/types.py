"""Row type aliases.

A row is an ordered mapping from field name to value. A field that is not
a key of the mapping is absent from the row's schema; a key mapped to None
is present but null. Steps never mutate the rows they receive.
"""

from collections.abc import Mapping
from typing import Any, TypeAlias

Row: TypeAlias = Mapping[str, Any]

# Rows built by a step for output. Insertion order is the output schema order.
OutputRow: TypeAlias = dict[str, Any]
