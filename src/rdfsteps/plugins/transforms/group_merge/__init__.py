"""Group merge step: one output row per run of key-equal input rows.

Modules:
- config: GroupMergeConfig (key fields, merge fields, policies)
- keys: key extraction and adjacency comparison
- merge: GraphMergeEngine, folding row graphs into head graphs
- reconcile: FieldReconciler, carrying other fields across a group
- state: per-group state
- step: GroupMerge, the state machine tying the above together
"""

from rdfsteps.plugins.transforms.group_merge.config import GroupMergeConfig
from rdfsteps.plugins.transforms.group_merge.keys import KeyTuple, extract_key, keys_match
from rdfsteps.plugins.transforms.group_merge.merge import GraphMergeEngine
from rdfsteps.plugins.transforms.group_merge.reconcile import FieldReconciler
from rdfsteps.plugins.transforms.group_merge.state import Group, OtherFieldState
from rdfsteps.plugins.transforms.group_merge.step import GroupMerge

__all__ = [
    "FieldReconciler",
    "GraphMergeEngine",
    "Group",
    "GroupMerge",
    "GroupMergeConfig",
    "KeyTuple",
    "OtherFieldState",
    "extract_key",
    "keys_match",
]
