"""Typed build-graph nodes decoded from a query result."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum

import msgspec

from serde_msgspec import StructBaseStrict

type AttributeValue = str | tuple[str, ...]


class RuleClass(StrEnum):
    """Rule classes the projection understands.

    Every other Bazel rule class collapses into ``OTHER``, which all
    consumers treat as a no-op.
    """

    GENRULE = "genrule"
    GO_PREFIX = "_go_prefix_rule"
    PROTO_COMPILE = "proto_compile"
    PROTO_LIBRARY = "proto_library"
    GO_PROTO_COMPILER = "go_proto_compiler"
    GO_LIBRARY = "go_library"
    GO_PROTO_LIBRARY = "go_proto_library"
    GO_BINARY = "go_binary"
    OTHER = "other"

    @classmethod
    def from_rule_class(cls, value: str) -> RuleClass:
        """Classify a raw Bazel rule class string.

        Returns
        -------
        RuleClass
            Matching member, or ``OTHER`` for unrecognized classes.
        """
        try:
            member = cls(value)
        except ValueError:
            return cls.OTHER
        return cls.OTHER if member is cls.OTHER else member

    @property
    def produces_go(self) -> bool:
        """Return whether rules of this class contribute Go packages.

        Returns
        -------
        bool
            True for go_library, go_proto_library and go_binary.
        """
        return self in _GO_PRODUCING


_GO_PRODUCING = frozenset(
    {RuleClass.GO_LIBRARY, RuleClass.GO_PROTO_LIBRARY, RuleClass.GO_BINARY}
)


class Rule(StructBaseStrict, frozen=True):
    """Buildable unit attached to a graph node.

    Parameters
    ----------
    name
        Label string of the rule.
    rule_class
        Raw Bazel rule class string.
    attributes
        Attribute name to string or string-list value.
    rule_inputs
        Input label references in graph order.
    rule_outputs
        Declared output labels in graph order.
    """

    name: str
    rule_class: str
    attributes: Mapping[str, AttributeValue] = msgspec.field(default_factory=dict)
    rule_inputs: tuple[str, ...] = ()
    rule_outputs: tuple[str, ...] = ()

    @property
    def kind(self) -> RuleClass:
        """Return the classified rule class.

        Returns
        -------
        RuleClass
            Closed classification of ``rule_class``.
        """
        return RuleClass.from_rule_class(self.rule_class)

    def string_attr(self, name: str) -> str | None:
        """Return a single-valued attribute.

        Returns
        -------
        str | None
            Attribute value, or None when absent or list-valued.
        """
        value = self.attributes.get(name)
        if isinstance(value, str):
            return value
        return None

    def list_attr(self, name: str) -> tuple[str, ...]:
        """Return a list-valued attribute.

        Returns
        -------
        tuple[str, ...]
            Attribute values, empty when absent or single-valued.
        """
        value = self.attributes.get(name)
        if isinstance(value, tuple):
            return value
        return ()


class Target(StructBaseStrict, frozen=True):
    """Graph node identified by a label, optionally carrying a rule."""

    label: str
    rule: Rule | None = None


__all__ = ["AttributeValue", "Rule", "RuleClass", "Target"]
