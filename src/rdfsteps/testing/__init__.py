"""Builders shared by the test suite and by downstream step authors.

Example:
    from rdfsteps.testing import EX, make_graph, triple

    g = make_graph(("alice", "name", "Alice"), ("alice", "knows", EX.bob))
    assert triple("alice", "knows", EX.bob) in g
"""

from typing import Any

from rdflib import Literal, Namespace
from rdflib.term import Node

from rdfsteps.core.graph import Graph, Triple

EX = Namespace("http://example.org/")


def triple(subject: Any, predicate: Any, obj: Any) -> Triple:
    """Build a triple from short names.

    Strings in subject and predicate position become EX IRIs. Objects that
    are already rdflib terms are kept; anything else becomes a Literal.
    """
    s = subject if isinstance(subject, Node) else EX[subject]
    p = predicate if isinstance(predicate, Node) else EX[predicate]
    o = obj if isinstance(obj, Node) else Literal(obj)
    return (s, p, o)


def make_graph(*triples: tuple[Any, Any, Any]) -> Graph:
    """Build an open Graph from short-form triples (see triple())."""
    return Graph(triple(*t) for t in triples)


__all__ = [
    "EX",
    "make_graph",
    "triple",
]
