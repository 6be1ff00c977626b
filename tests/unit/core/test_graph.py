# tests/unit/core/test_graph.py
"""Tests for the closable Graph wrapper."""

import pytest
from rdflib import BNode, Literal

from rdfsteps.contracts.errors import ResourceStateError
from rdfsteps.core.graph import Graph
from rdfsteps.testing import EX, make_graph, triple


class TestGraphBasics:
    """Construction and reads."""

    def test_empty_graph(self) -> None:
        g = Graph()

        assert len(g) == 0
        assert g.triples() == []
        assert not g.closed

    def test_of_and_contains(self) -> None:
        g = Graph.of((EX.a, EX.p, Literal(1)), (EX.a, EX.q, EX.b))

        assert len(g) == 2
        assert (EX.a, EX.p, Literal(1)) in g
        assert (EX.b, EX.p, Literal(1)) not in g

    def test_duplicate_triples_collapse(self) -> None:
        g = make_graph(("a", "p", "x"), ("a", "p", "x"))

        assert len(g) == 1

    def test_add_and_update(self) -> None:
        g = Graph()
        g.add(triple("a", "p", 1))
        g.update([triple("a", "p", 2), triple("a", "p", 3)])

        assert len(g) == 3

    def test_parse_turtle(self) -> None:
        g = Graph.parse("@prefix ex: <http://example.org/> . ex:a ex:p 1 .")

        assert triple("a", "p", 1) in g

    def test_iter_yields_triples(self) -> None:
        g = make_graph(("a", "p", "x"))

        assert list(g) == [triple("a", "p", "x")]

    def test_repr(self) -> None:
        g = make_graph(("a", "p", "x"))

        assert repr(g) == "<Graph triples=1>"
        g.close()
        assert repr(g) == "<Graph closed>"


class TestGraphMerge:
    """In-place union."""

    def test_merge_is_union(self) -> None:
        a = make_graph(("a", "p", 1), ("a", "p", 2))
        b = make_graph(("a", "p", 2), ("a", "p", 3))

        a.merge(b)

        assert set(a.triples()) == {triple("a", "p", 1), triple("a", "p", 2), triple("a", "p", 3)}

    def test_merge_leaves_source_untouched(self) -> None:
        a = make_graph(("a", "p", 1))
        b = make_graph(("b", "p", 2))

        a.merge(b)

        assert b.triples() == [triple("b", "p", 2)]

    def test_self_merge_is_noop(self) -> None:
        a = make_graph(("a", "p", 1))

        a.merge(a)

        assert len(a) == 1

    def test_merge_keeps_shared_blank_nodes(self) -> None:
        shared = BNode()
        a = Graph.of((shared, EX.p, Literal(1)))
        b = Graph.of((shared, EX.q, Literal(2)))

        a.merge(b)

        subjects = {s for s, _, _ in a.triples()}
        assert subjects == {shared}

    def test_copy_is_independent(self) -> None:
        a = make_graph(("a", "p", 1))
        b = a.copy()
        b.add(triple("a", "p", 2))

        assert len(a) == 1
        assert len(b) == 2


class TestGraphEquality:
    """Equality is isomorphism."""

    def test_equal_triples(self) -> None:
        assert make_graph(("a", "p", 1)) == make_graph(("a", "p", 1))

    def test_different_triples(self) -> None:
        assert make_graph(("a", "p", 1)) != make_graph(("a", "p", 2))

    def test_blank_nodes_compared_up_to_renaming(self) -> None:
        a = Graph.of((BNode(), EX.p, Literal(1)))
        b = Graph.of((BNode(), EX.p, Literal(1)))

        assert a == b

    def test_not_hashable(self) -> None:
        with pytest.raises(TypeError):
            hash(Graph())

    def test_not_equal_to_other_types(self) -> None:
        assert Graph() != set()


class TestGraphLifecycle:
    """Every operation on a closed graph is a ResourceStateError."""

    def test_close_sets_closed(self) -> None:
        g = Graph()
        g.close()

        assert g.closed

    def test_double_close_raises(self) -> None:
        g = Graph()
        g.close()

        with pytest.raises(ResourceStateError, match="close"):
            g.close()

    @pytest.mark.parametrize(
        "operation",
        [
            lambda g: g.triples(),
            lambda g: len(g),
            lambda g: triple("a", "p", 1) in g,
            lambda g: g.add(triple("a", "p", 1)),
            lambda g: g.update([]),
            lambda g: g.copy(),
            lambda g: g.as_rdflib(),
            lambda g: g.merge(Graph()),
            lambda g: Graph().merge(g),
            lambda g: g == Graph(),
        ],
        ids=["triples", "len", "contains", "add", "update", "copy", "as_rdflib", "merge_into", "merge_from", "eq"],
    )
    def test_operations_on_closed_graph_raise(self, operation) -> None:
        g = make_graph(("a", "p", 1))
        g.close()

        with pytest.raises(ResourceStateError) as exc_info:
            operation(g)

        assert exc_info.value.kind.value == "resource_state"

    def test_context_manager_closes(self) -> None:
        with Graph() as g:
            g.add(triple("a", "p", 1))

        assert g.closed

    def test_context_manager_tolerates_close_inside(self) -> None:
        with Graph() as g:
            g.close()

        assert g.closed

    def test_closing_source_does_not_affect_merged_target(self) -> None:
        a = make_graph(("a", "p", 1))
        b = make_graph(("b", "p", 2))
        a.merge(b)

        b.close()

        assert triple("b", "p", 2) in a
