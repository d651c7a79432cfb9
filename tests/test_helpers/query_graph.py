"""Build query graphs and serialized QueryResult payloads for tests."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from buildgraph.model import AttributeValue, Rule, Target
from buildgraph.query_proto import ATTR_LABEL_LIST, query_result_class

TARGET_RULE = 1
TARGET_SOURCE_FILE = 2
ATTR_STRING = 2


def rule_target(
    name: str,
    rule_class: str,
    *,
    attributes: Mapping[str, AttributeValue] | None = None,
    inputs: Iterable[str] = (),
    outputs: Iterable[str] = (),
) -> Target:
    """Return a rule-bearing target.

    Returns
    -------
    Target
        Target wrapping a Rule with the given fields.
    """
    rule = Rule(
        name=name,
        rule_class=rule_class,
        attributes=dict(attributes or {}),
        rule_inputs=tuple(inputs),
        rule_outputs=tuple(outputs),
    )
    return Target(label=name, rule=rule)


def source_target(label: str) -> Target:
    """Return a plain source-file target.

    Returns
    -------
    Target
        Target without a rule.
    """
    return Target(label=label)


def serialize_targets(targets: Iterable[Target]) -> bytes:
    """Encode targets the way ``bazel query --output=proto`` does.

    Returns
    -------
    bytes
        Serialized QueryResult.
    """
    message = query_result_class()()
    for target in targets:
        entry = message.target.add()
        if target.rule is None:
            entry.type = TARGET_SOURCE_FILE
            entry.source_file.name = target.label
            continue
        entry.type = TARGET_RULE
        rule = entry.rule
        rule.name = target.rule.name
        rule.rule_class = target.rule.rule_class
        for name, value in target.rule.attributes.items():
            attr = rule.attribute.add()
            attr.name = name
            if isinstance(value, tuple):
                attr.type = ATTR_LABEL_LIST
                attr.string_list_value.extend(value)
            else:
                attr.type = ATTR_STRING
                attr.string_value = value
        rule.rule_input.extend(target.rule.rule_inputs)
        rule.rule_output.extend(target.rule.rule_outputs)
    return message.SerializeToString()


def sample_graph() -> tuple[Target, ...]:
    """Return a workspace graph exercising every rule role.

    Returns
    -------
    tuple[Target, ...]
        Targets in query order; consumers appear before some of the
        declarations they depend on.
    """
    return (
        rule_target(
            "//cmd/server:go_default_library",
            "go_library",
            attributes={
                "importpath": "github.com/acme/app/cmd/server",
                "srcs": (
                    "//cmd/server:main.go",
                    "//cmd/server:asm_amd64.s",
                    "//cmd/server:README.md",
                ),
            },
        ),
        rule_target(
            "//lib:util",
            "go_library",
            attributes={"srcs": ("//lib:util.go", "//lib:gen_version")},
            inputs=("//:go_prefix", "//lib:util.go"),
        ),
        rule_target(
            "//lib:gen_version",
            "genrule",
            outputs=("//lib:version.go", "//lib:version.txt"),
        ),
        rule_target(
            "//api:go_default_library",
            "go_library",
            attributes={
                "importpath": "github.com/acme/app/api",
                "srcs": ("//api:api.pb",),
            },
        ),
        rule_target(
            "//api:api.pb",
            "proto_compile",
            attributes={"protos": ("//api:service.proto",)},
        ),
        rule_target(
            "//proto:foo_go_proto",
            "go_proto_library",
            attributes={
                "importpath": "github.com/acme/app/proto/foo",
                "proto": "//proto:foo_proto",
                "compilers": (
                    "@io_bazel_rules_go//proto:go_proto",
                    "//unknown:compiler",
                ),
            },
        ),
        rule_target(
            "//proto:foo_proto",
            "proto_library",
            attributes={"srcs": ("//proto:foo.proto",)},
        ),
        rule_target(
            "@io_bazel_rules_go//proto:go_proto",
            "go_proto_compiler",
            attributes={"suffix": ".pb.go"},
        ),
        rule_target(
            "@com_github_x_y//:go_default_library",
            "go_library",
            attributes={"importpath": "github.com/x/y", "srcs": ("@com_github_x_y//:y.go",)},
        ),
        rule_target(
            "//tools:gen",
            "go_binary",
            attributes={"go_prefix": "//:go_prefix", "srcs": ("//tools:gen.go",)},
        ),
        rule_target(
            "//orphan:go_default_library",
            "go_library",
            attributes={"srcs": ("//orphan:orphan.go",)},
        ),
        rule_target(
            "//:go_prefix",
            "_go_prefix_rule",
            attributes={"prefix": "github.com/acme/app"},
        ),
        rule_target("//docs:site", "filegroup", attributes={"srcs": ("//docs:index.md",)}),
        source_target("//cmd/server:main.go"),
        source_target("//lib:util.go"),
    )


def expected_links(workspace: Path) -> dict[str, Path]:
    """Return the links ``sample_graph`` should project.

    Returns
    -------
    dict[str, Path]
        Destination relative to ``<gopath>/src`` mapped to link target.
    """
    genfiles = workspace / "bazel-genfiles"
    external = workspace / f"bazel-{workspace.name}" / "external"
    return {
        "github.com/acme/app/cmd/server/main.go": workspace / "cmd/server/main.go",
        "github.com/acme/app/cmd/server/asm_amd64.s": workspace / "cmd/server/asm_amd64.s",
        "github.com/acme/app/lib/util/util.go": workspace / "lib/util.go",
        "github.com/acme/app/lib/util/version.go": genfiles / "lib/version.go",
        "github.com/acme/app/api/service.pb.go": genfiles / "api/service.pb.go",
        "github.com/acme/app/proto/foo/foo.pb.go": genfiles / "proto/foo.pb.go",
        "github.com/x/y/y.go": external / "com_github_x_y/y.go",
        "github.com/acme/app/tools/gen/gen.go": workspace / "tools/gen.go",
    }


__all__ = [
    "expected_links",
    "rule_target",
    "sample_graph",
    "serialize_targets",
    "source_target",
]
