"""Single-pass classification of graph nodes into lookup tables."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from buildgraph.model import Rule, RuleClass, Target

LOGGER = logging.getLogger(__name__)

GO_SOURCE_SUFFIX = ".go"
PROTO_SUFFIX = ".proto"

# proto_compile variants keyed by the last dotted token of the rule label.
PROTO_COMPILE_EXTENSIONS: Mapping[str, str] = MappingProxyType(
    {
        "pb": ".pb.go",
        "gw": ".pb.gw.go",
    }
)


@dataclass(frozen=True)
class GraphIndex:
    """Read-only lookup tables built from one pass over the graph.

    Parameters
    ----------
    prefixes
        Prefix-declaration label to declared import-path prefix.
    generated_outputs
        Generating target label to the labels of Go files it produces.
    proto_sources
        proto_library label to its ``.proto`` source labels.
    proto_generator_suffixes
        go_proto_compiler label to the file suffix it generates.
    go_rules
        Go-producing rules in graph order.
    """

    prefixes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    generated_outputs: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    proto_sources: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    proto_generator_suffixes: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    go_rules: tuple[Rule, ...] = ()


@dataclass
class _IndexBuilder:
    prefixes: dict[str, str] = field(default_factory=dict)
    generated_outputs: dict[str, list[str]] = field(default_factory=dict)
    proto_sources: dict[str, tuple[str, ...]] = field(default_factory=dict)
    proto_generator_suffixes: dict[str, str] = field(default_factory=dict)
    go_rules: list[Rule] = field(default_factory=list)

    def add_outputs(self, label: str, outputs: Iterable[str]) -> None:
        self.generated_outputs.setdefault(label, []).extend(outputs)

    def freeze(self) -> GraphIndex:
        return GraphIndex(
            prefixes=MappingProxyType(dict(self.prefixes)),
            generated_outputs=MappingProxyType(
                {label: tuple(outs) for label, outs in self.generated_outputs.items()}
            ),
            proto_sources=MappingProxyType(dict(self.proto_sources)),
            proto_generator_suffixes=MappingProxyType(dict(self.proto_generator_suffixes)),
            go_rules=tuple(self.go_rules),
        )


def proto_compile_suffix(rule_name: str) -> str | None:
    """Return the generated suffix for a proto_compile target.

    Returns
    -------
    str | None
        Suffix registered for the trailing name token, or None.
    """
    variant = rule_name.rsplit(".", 1)[-1]
    return PROTO_COMPILE_EXTENSIONS.get(variant)


def replace_proto_suffix(label: str, suffix: str) -> str:
    """Substitute the first ``.proto`` in ``label`` with ``suffix``.

    Returns
    -------
    str
        Generated file label.
    """
    return label.replace(PROTO_SUFFIX, suffix, 1)


def _index_genrule(builder: _IndexBuilder, rule: Rule) -> None:
    outputs = [out for out in rule.rule_outputs if out.endswith(GO_SOURCE_SUFFIX)]
    if outputs:
        builder.add_outputs(rule.name, outputs)


def _index_proto_compile(builder: _IndexBuilder, rule: Rule) -> None:
    LOGGER.info("Found proto: %r", rule.name)
    suffix = proto_compile_suffix(rule.name)
    if suffix is None:
        LOGGER.warning("Unknown proto_compile variant for %r; no outputs recorded", rule.name)
        return
    builder.add_outputs(
        rule.name,
        (replace_proto_suffix(proto, suffix) for proto in rule.list_attr("protos")),
    )


def _index_proto_library(builder: _IndexBuilder, rule: Rule) -> None:
    builder.proto_sources[rule.name] = rule.list_attr("srcs")


def _index_go_proto_compiler(builder: _IndexBuilder, rule: Rule) -> None:
    LOGGER.info("Found proto generator: %r", rule.name)
    suffix = rule.string_attr("suffix")
    if suffix is not None:
        builder.proto_generator_suffixes[rule.name] = suffix


def _index_go_prefix(builder: _IndexBuilder, rule: Rule) -> None:
    prefix = rule.string_attr("prefix")
    if prefix is not None:
        builder.prefixes[rule.name] = prefix


def _index_go_rule(builder: _IndexBuilder, rule: Rule) -> None:
    builder.go_rules.append(rule)


def _ignore(builder: _IndexBuilder, rule: Rule) -> None:
    _ = (builder, rule)


_INDEXERS: Mapping[RuleClass, Callable[[_IndexBuilder, Rule], None]] = MappingProxyType(
    {
        RuleClass.GENRULE: _index_genrule,
        RuleClass.PROTO_COMPILE: _index_proto_compile,
        RuleClass.PROTO_LIBRARY: _index_proto_library,
        RuleClass.GO_PROTO_COMPILER: _index_go_proto_compiler,
        RuleClass.GO_PREFIX: _index_go_prefix,
        RuleClass.GO_LIBRARY: _index_go_rule,
        RuleClass.GO_PROTO_LIBRARY: _index_go_rule,
        RuleClass.GO_BINARY: _index_go_rule,
        RuleClass.OTHER: _ignore,
    }
)


def build_graph_index(targets: Iterable[Target]) -> GraphIndex:
    """Classify every rule-bearing target and freeze the lookup tables.

    Parameters
    ----------
    targets
        Graph nodes in query order.

    Returns
    -------
    GraphIndex
        Immutable tables consumed by the projection phase.
    """
    builder = _IndexBuilder()
    for target in targets:
        if target.rule is None:
            continue
        _INDEXERS[target.rule.kind](builder, target.rule)

    index = builder.freeze()
    LOGGER.info("Discovered following prefixes:")
    for label, prefix in sorted(index.prefixes.items()):
        LOGGER.info("%r -> %r", label, prefix)
    return index


__all__ = [
    "PROTO_COMPILE_EXTENSIONS",
    "GraphIndex",
    "build_graph_index",
    "proto_compile_suffix",
    "replace_proto_suffix",
]
