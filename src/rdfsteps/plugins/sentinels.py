"""The MISSING marker returned when a row lacks a field.

An absent field and a field holding null are governed by different
policies (if_missing and if_null). A null key value also still takes part
in group comparison, while an absent one is left out of the key.

    value = read_field(row, spec, ctx, role="Key")
    if value is MISSING:
        ...  # not in the row
    elif value is None:
        ...  # in the row, null
"""

from typing import Final


class MissingSentinel:
    """Type of MISSING. Compare with ``is``; never build another instance."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"


MISSING: Final[MissingSentinel] = MissingSentinel()
