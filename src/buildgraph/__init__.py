"""Build-graph ingestion layer.

Exports:
- label parsing -> Label
- query invocation -> run_query
- QueryResult decoding -> Target / Rule
- rule classification -> GraphIndex
"""

from buildgraph.errors import (
    GopathError,
    InvalidImportPathError,
    MalformedGraphError,
    MalformedLabelError,
    MissingProtoSourcesError,
    QueryDecodeError,
    QueryError,
)
from buildgraph.index import GraphIndex, build_graph_index
from buildgraph.labels import Label, parse_label
from buildgraph.model import Rule, RuleClass, Target
from buildgraph.query import QueryOptions, run_query
from buildgraph.query_proto import decode_query_result

__all__ = [
    "GopathError",
    "InvalidImportPathError",
    "GraphIndex",
    "Label",
    "MalformedGraphError",
    "MalformedLabelError",
    "MissingProtoSourcesError",
    "QueryDecodeError",
    "QueryError",
    "QueryOptions",
    "Rule",
    "RuleClass",
    "Target",
    "build_graph_index",
    "decode_query_result",
    "parse_label",
    "run_query",
]
