# src/rdfsteps/core/graph.py
"""Closable RDF graph carried in row fields.

Graph wraps an in-memory rdflib.Graph. rdflib already gives us what a
row-level graph needs: triples indexed by interned terms, blank nodes that
belong to the graph that minted them, set-union merge and isomorphism
checks (rdflib.compare). What rdflib does not give us is a lifecycle:
closing a memory store leaves it readable, so a released graph could be
merged again without anyone noticing.

This wrapper adds that lifecycle. A Graph is owned by one holder at a
time (a row field, or a step's in-progress head graph) and is released
exactly once with close(). Every later operation on it raises
ResourceStateError, including a second close().

Equality is isomorphism, not identity: two graphs are equal when a
bijection between their blank nodes maps every triple of one onto a
triple of the other. Named nodes and literals must match exactly.
Graphs are mutable, so they are not hashable.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from types import TracebackType
from typing import TypeAlias

from rdflib import Graph as RDFGraph
from rdflib.compare import isomorphic
from rdflib.term import Node

from rdfsteps.contracts.errors import ResourceStateError

Triple: TypeAlias = tuple[Node, Node, Node]


class Graph:
    """Mutable set of RDF triples with an explicit closed state.

    Example:
        head = Graph.of((EX.a, EX.p, Literal(1)))
        head.merge(other)      # union other's triples into head
        other.close()          # other is released; head is unaffected
        other.merge(head)      # raises ResourceStateError
    """

    __hash__ = None  # type: ignore[assignment]  # mutable, equality is isomorphism

    def __init__(self, triples: Iterable[Triple] = ()) -> None:
        self._graph: RDFGraph | None = RDFGraph()
        for triple in triples:
            self._graph.add(triple)

    @classmethod
    def of(cls, *triples: Triple) -> Graph:
        """Create a graph holding the given triples."""
        return cls(triples)

    @classmethod
    def parse(cls, data: str, format: str = "turtle") -> Graph:
        """Create a graph from serialized RDF text (any format rdflib parses)."""
        graph = cls()
        graph._open("write").parse(data=data, format=format)
        return graph

    # === Lifecycle ===

    @property
    def closed(self) -> bool:
        """True once close() has been called."""
        return self._graph is None

    def close(self) -> None:
        """Release the graph's store.

        Raises:
            ResourceStateError: If the graph was already closed
        """
        store = self._open("close")
        store.close()
        self._graph = None

    def __enter__(self) -> Graph:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self.closed:
            self.close()

    def _open(self, operation: str) -> RDFGraph:
        """Return the live rdflib graph, or fail if this graph was released."""
        if self._graph is None:
            raise ResourceStateError(f"Cannot {operation} a graph that has already been closed")
        return self._graph

    # === Reads ===

    def triples(self) -> list[Triple]:
        """Snapshot of the graph's triples (order unspecified)."""
        return list(self._open("read"))

    def __iter__(self) -> Iterator[Triple]:
        return iter(self.triples())

    def __len__(self) -> int:
        return len(self._open("read"))

    def __contains__(self, triple: object) -> bool:
        return triple in self._open("read")

    def as_rdflib(self) -> RDFGraph:
        """Expose the underlying rdflib graph to serializers and validators.

        The returned object is only valid while this Graph is open.
        """
        return self._open("read")

    # === Writes ===

    def add(self, triple: Triple) -> None:
        """Add one triple."""
        self._open("write").add(triple)

    def update(self, triples: Iterable[Triple]) -> None:
        """Add every triple from an iterable."""
        store = self._open("write")
        for triple in triples:
            store.add(triple)

    def merge(self, other: Graph) -> None:
        """Union other's triples into this graph in place.

        other is read but never modified. Merging a graph into itself is a
        no-op.

        Raises:
            ResourceStateError: If either graph is closed
        """
        target = self._open("merge into")
        source = other._open("merge from")
        if source is target:
            return
        target += source

    def copy(self) -> Graph:
        """Create a new open graph with the same triples."""
        return Graph(self._open("copy"))

    # === Comparison ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Graph):
            return NotImplemented
        if other is self:
            self._open("compare")
            return True
        return isomorphic(self._open("compare"), other._open("compare"))

    def __repr__(self) -> str:
        if self._graph is None:
            return "<Graph closed>"
        return f"<Graph triples={len(self._graph)}>"
