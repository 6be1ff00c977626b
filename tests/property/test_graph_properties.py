# tests/property/test_graph_properties.py
"""Property-based tests for Graph merge and equality.

- merge is set union, so it is commutative, associative and idempotent
  up to isomorphism
- copy() is equal to the original and independent of it
"""

from hypothesis import given
from hypothesis import strategies as st

from rdfsteps.core.graph import Graph
from rdfsteps.testing import make_graph
from tests.property.settings import STANDARD_SETTINGS

graph_contents = st.frozensets(
    st.tuples(st.sampled_from(["a", "b", "c"]), st.sampled_from(["p", "q"]), st.integers(0, 3)),
    max_size=6,
)


def _graph(content: frozenset[tuple[str, str, int]]) -> Graph:
    return make_graph(*content)


def _merged(*contents: frozenset[tuple[str, str, int]]) -> Graph:
    head = Graph()
    for content in contents:
        head.merge(_graph(content))
    return head


class TestMergeProperties:
    """Union laws."""

    @given(x=graph_contents, y=graph_contents)
    @STANDARD_SETTINGS
    def test_commutative(self, x: frozenset[tuple[str, str, int]], y: frozenset[tuple[str, str, int]]) -> None:
        assert _merged(x, y) == _merged(y, x)

    @given(x=graph_contents, y=graph_contents, z=graph_contents)
    @STANDARD_SETTINGS
    def test_associative(
        self,
        x: frozenset[tuple[str, str, int]],
        y: frozenset[tuple[str, str, int]],
        z: frozenset[tuple[str, str, int]],
    ) -> None:
        left = _merged(x, y)
        left.merge(_graph(z))
        right = _graph(x)
        right.merge(_merged(y, z))

        assert left == right

    @given(x=graph_contents)
    @STANDARD_SETTINGS
    def test_idempotent(self, x: frozenset[tuple[str, str, int]]) -> None:
        g = _graph(x)
        g.merge(_graph(x))

        assert g == _graph(x)
        assert len(g) == len(x)

    @given(x=graph_contents, y=graph_contents)
    @STANDARD_SETTINGS
    def test_copy_independent(self, x: frozenset[tuple[str, str, int]], y: frozenset[tuple[str, str, int]]) -> None:
        g = _graph(x)
        c = g.copy()
        c.merge(_graph(y))

        assert c == _merged(x, y)
        assert g == _graph(x)
