# tests/unit/plugins/transforms/group_merge/test_merge.py
"""Tests for GraphMergeEngine."""

import pytest

from rdfsteps.contracts.errors import MissingFieldError, NullValueError, ResourceStateError, TypeMismatchError
from rdfsteps.plugins.config_base import MergeField
from rdfsteps.plugins.context import StepContext
from rdfsteps.plugins.transforms.group_merge.merge import GraphMergeEngine
from rdfsteps.plugins.transforms.group_merge.state import Group
from rdfsteps.testing import make_graph, triple

LEADER = MergeField(name="model")
NEW_HEAD = MergeField(name="model", mutate_leader=False, target_field="merged")


class TestMutateLeader:
    """The first contributed graph becomes the head."""

    def test_first_contribution_becomes_head(self, ctx: StepContext) -> None:
        engine = GraphMergeEngine(close_merged_graphs=False)
        group = Group(key=())
        g1 = make_graph(("a", "p", 1))

        engine.fold(group, LEADER, {"model": g1}, ctx)

        assert group.heads["model"] is g1
        assert group.owned_heads == set()

    def test_later_contributions_merged_into_head(self, ctx: StepContext) -> None:
        engine = GraphMergeEngine(close_merged_graphs=False)
        group = Group(key=())
        g1 = make_graph(("a", "p", 1))
        g2 = make_graph(("a", "p", 2))

        engine.fold(group, LEADER, {"model": g1}, ctx)
        engine.fold(group, LEADER, {"model": g2}, ctx)

        assert group.heads["model"] is g1
        assert triple("a", "p", 2) in g1
        assert not g2.closed

    def test_close_policy_closes_contributors_not_head(self, ctx: StepContext) -> None:
        engine = GraphMergeEngine(close_merged_graphs=True)
        group = Group(key=())
        g1 = make_graph(("a", "p", 1))
        g2 = make_graph(("a", "p", 2))

        engine.fold(group, LEADER, {"model": g1}, ctx)
        engine.fold(group, LEADER, {"model": g2}, ctx)

        assert not g1.closed
        assert g2.closed

    def test_same_graph_twice_is_not_closed(self, ctx: StepContext) -> None:
        engine = GraphMergeEngine(close_merged_graphs=True)
        group = Group(key=())
        g1 = make_graph(("a", "p", 1))

        engine.fold(group, LEADER, {"model": g1}, ctx)
        engine.fold(group, LEADER, {"model": g1}, ctx)

        assert not g1.closed
        assert len(g1) == 1

    def test_closed_head_raises(self, ctx: StepContext) -> None:
        engine = GraphMergeEngine(close_merged_graphs=False)
        group = Group(key=())
        g1 = make_graph(("a", "p", 1))
        engine.fold(group, LEADER, {"model": g1}, ctx)
        g1.close()

        with pytest.raises(ResourceStateError, match="Head graph for merge field 'model'"):
            engine.fold(group, LEADER, {"model": make_graph(("a", "p", 2))}, ctx)


class TestNewHead:
    """A fresh head graph per group, written to target_field."""

    def test_head_allocated_and_owned(self, ctx: StepContext) -> None:
        engine = GraphMergeEngine(close_merged_graphs=False)
        group = Group(key=())
        g1 = make_graph(("a", "p", 1))

        engine.fold(group, NEW_HEAD, {"model": g1}, ctx)

        head = group.heads["model"]
        assert head is not g1
        assert head == g1
        assert group.owned_heads == {"model"}

    def test_close_policy_closes_every_contributor(self, ctx: StepContext) -> None:
        engine = GraphMergeEngine(close_merged_graphs=True)
        group = Group(key=())
        g1 = make_graph(("a", "p", 1))
        g2 = make_graph(("a", "p", 2))

        engine.fold(group, NEW_HEAD, {"model": g1}, ctx)
        engine.fold(group, NEW_HEAD, {"model": g2}, ctx)

        assert g1.closed
        assert g2.closed
        assert set(group.heads["model"].triples()) == {triple("a", "p", 1), triple("a", "p", 2)}

    def test_stale_target_graph_released(self, ctx: StepContext) -> None:
        engine = GraphMergeEngine(close_merged_graphs=True)
        group = Group(key=())
        stale = make_graph(("old", "p", 1))

        engine.fold(group, NEW_HEAD, {"model": make_graph(("a", "p", 1)), "merged": stale}, ctx)

        assert stale.closed
        assert triple("old", "p", 1) not in group.heads["model"]

    def test_stale_target_kept_without_close_policy(self, ctx: StepContext) -> None:
        engine = GraphMergeEngine(close_merged_graphs=False)
        group = Group(key=())
        stale = make_graph(("old", "p", 1))

        engine.fold(group, NEW_HEAD, {"model": make_graph(("a", "p", 1)), "merged": stale}, ctx)

        assert not stale.closed


class TestContributorChecks:
    """Policies and contract violations on the contributor."""

    def test_closed_contributor_raises(self, ctx: StepContext) -> None:
        engine = GraphMergeEngine(close_merged_graphs=False)
        g = make_graph(("a", "p", 1))
        g.close()

        with pytest.raises(ResourceStateError) as exc_info:
            engine.fold(Group(key=()), LEADER, {"model": g}, ctx)

        assert exc_info.value.field_name == "model"

    def test_non_graph_raises(self, ctx: StepContext) -> None:
        engine = GraphMergeEngine(close_merged_graphs=False)

        with pytest.raises(TypeMismatchError):
            engine.fold(Group(key=()), LEADER, {"model": "<a> <p> 1 ."}, ctx)

    def test_absent_and_null_raise_by_default(self, ctx: StepContext) -> None:
        engine = GraphMergeEngine(close_merged_graphs=False)

        with pytest.raises(MissingFieldError):
            engine.fold(Group(key=()), LEADER, {}, ctx)
        with pytest.raises(NullValueError):
            engine.fold(Group(key=()), LEADER, {"model": None}, ctx)

    def test_tolerated_null_contributes_nothing(self, ctx: StepContext) -> None:
        engine = GraphMergeEngine(close_merged_graphs=False)
        group = Group(key=())
        field = MergeField(name="model", if_null="warn")

        engine.fold(group, field, {"model": None}, ctx)

        assert group.heads == {}
        assert len(ctx.diagnostics) == 1
