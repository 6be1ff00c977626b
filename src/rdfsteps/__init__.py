"""
rdfsteps: pipeline steps for RDF graphs carried in tabular rows.

Rows arrive from a host pipeline with graph-valued fields already attached.
The steps in this package merge those graphs across runs of key-equal rows
(group_merge) or across several fields of one row (graph_combine).
"""

__version__ = "0.1.0"
