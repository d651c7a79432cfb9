"""Map the sources of Go-producing rules to literal or generated files."""

from __future__ import annotations

import posixpath
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from buildgraph.errors import MissingProtoSourcesError
from buildgraph.index import replace_proto_suffix
from buildgraph.labels import Label, parse_label
from buildgraph.model import RuleClass

if TYPE_CHECKING:
    from buildgraph.index import GraphIndex
    from buildgraph.model import Rule

LITERAL_SOURCE_SUFFIXES = (".go", ".s", ".S", ".h")


class SourceKind(StrEnum):
    """Origin of a projected file."""

    LITERAL = "literal"
    GENERATED = "generated"


@dataclass(frozen=True)
class SourceFile:
    """One file to link into the GOPATH tree.

    Parameters
    ----------
    label
        Label of the file itself (not of its generating rule).
    kind
        Whether the file lives in the source tree or the genfiles tree.
    nested
        Whether the owning rule's name adds a sub-directory under a
        prefix-derived import path. Flat files still get the package path.
    """

    label: Label
    kind: SourceKind
    nested: bool = True

    @property
    def filename(self) -> str:
        """Return the base name linked under the package directory.

        Returns
        -------
        str
            Last path component of the label name.
        """
        return posixpath.basename(self.label.name)


def map_source(src: str, index: GraphIndex) -> Iterator[SourceFile]:
    """Expand one ``srcs`` entry.

    A label found in the generated-output table stands for every file its
    rule generates. Otherwise the label is a literal file and is kept only
    when it carries a Go, assembly or header suffix.

    Yields
    ------
    SourceFile
        Files contributed by ``src``.
    """
    label = parse_label(src)
    outputs = index.generated_outputs.get(src)
    if outputs is not None:
        for output in outputs:
            yield SourceFile(label=parse_label(output), kind=SourceKind.GENERATED)
        return
    if label.name.endswith(LITERAL_SOURCE_SUFFIXES):
        yield SourceFile(label=label, kind=SourceKind.LITERAL)


def proto_library_outputs(rule: Rule, index: GraphIndex) -> Iterator[SourceFile]:
    """Yield the files a go_proto_library's compilers generate.

    Yields
    ------
    SourceFile
        Generated Go file per registered compiler and ``.proto`` source.

    Raises
    ------
    MissingProtoSourcesError
        Raised when the referenced proto_library was not indexed.
    """
    proto_labels = rule.list_attr("protos")
    single = rule.string_attr("proto")
    if single is not None:
        proto_labels = (single, *proto_labels)

    srcs: list[str] = []
    for proto in proto_labels:
        found = index.proto_sources.get(proto)
        if found is None:
            raise MissingProtoSourcesError(rule.name, proto)
        srcs.extend(found)

    for compiler in rule.list_attr("compilers"):
        suffix = index.proto_generator_suffixes.get(compiler)
        if suffix is None:
            continue
        for src in srcs:
            label = parse_label(src)
            yield SourceFile(
                label=label.with_name(replace_proto_suffix(label.name, suffix)),
                kind=SourceKind.GENERATED,
                nested=False,
            )


def rule_sources(rule: Rule, index: GraphIndex) -> Iterator[SourceFile]:
    """Yield every file a Go-producing rule contributes.

    Yields
    ------
    SourceFile
        Literal and generated files in declaration order.
    """
    for src in rule.list_attr("srcs"):
        yield from map_source(src, index)
    if rule.kind is RuleClass.GO_PROTO_LIBRARY:
        yield from proto_library_outputs(rule, index)


__all__ = [
    "LITERAL_SOURCE_SUFFIXES",
    "SourceFile",
    "SourceKind",
    "map_source",
    "proto_library_outputs",
    "rule_sources",
]
