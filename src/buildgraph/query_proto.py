"""Decode ``bazel query --output=proto`` results into typed graph nodes.

The message classes are assembled at runtime from a descriptor that covers
only the ``blaze_query`` fields the projection reads. Fields outside that
subset are skipped by the protobuf parser, so newer query outputs decode
without regenerated bindings.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError, Message

from buildgraph.errors import QueryDecodeError
from buildgraph.model import AttributeValue, Rule, Target

LOGGER = logging.getLogger(__name__)

PROTO_PACKAGE = "blaze_query"
PROTO_FILENAME = "bazel_gopath/blaze_query_subset.proto"

# Attribute.Discriminator values carrying string_list_value.
ATTR_STRING_LIST = 5
ATTR_LABEL_LIST = 6
ATTR_OUTPUT_LIST = 7
_LIST_DISCRIMINATORS = frozenset({ATTR_STRING_LIST, ATTR_LABEL_LIST, ATTR_OUTPUT_LIST})

_Field = descriptor_pb2.FieldDescriptorProto


def _field(
    name: str,
    number: int,
    field_type: int,
    *,
    repeated: bool = False,
    message: str | None = None,
) -> descriptor_pb2.FieldDescriptorProto:
    field = _Field(
        name=name,
        number=number,
        type=field_type,
        label=_Field.LABEL_REPEATED if repeated else _Field.LABEL_OPTIONAL,
    )
    if message is not None:
        field.type_name = f".{PROTO_PACKAGE}.{message}"
    return field


def query_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    """Return the descriptor for the QueryResult subset.

    Returns
    -------
    descriptor_pb2.FileDescriptorProto
        proto2 file descriptor with Attribute, Rule, SourceFile,
        GeneratedFile, Target and QueryResult messages.
    """
    file_proto = descriptor_pb2.FileDescriptorProto(
        name=PROTO_FILENAME,
        package=PROTO_PACKAGE,
        syntax="proto2",
    )
    file_proto.message_type.add(
        name="Attribute",
        field=[
            _field("name", 1, _Field.TYPE_STRING),
            _field("type", 2, _Field.TYPE_INT32),
            _field("int_value", 3, _Field.TYPE_INT32),
            _field("string_value", 5, _Field.TYPE_STRING),
            _field("string_list_value", 6, _Field.TYPE_STRING, repeated=True),
            _field("explicitly_specified", 13, _Field.TYPE_BOOL),
            _field("boolean_value", 14, _Field.TYPE_BOOL),
        ],
    )
    file_proto.message_type.add(
        name="Rule",
        field=[
            _field("name", 1, _Field.TYPE_STRING),
            _field("rule_class", 2, _Field.TYPE_STRING),
            _field("location", 3, _Field.TYPE_STRING),
            _field("attribute", 4, _Field.TYPE_MESSAGE, repeated=True, message="Attribute"),
            _field("rule_input", 5, _Field.TYPE_STRING, repeated=True),
            _field("rule_output", 6, _Field.TYPE_STRING, repeated=True),
        ],
    )
    file_proto.message_type.add(
        name="SourceFile",
        field=[_field("name", 1, _Field.TYPE_STRING)],
    )
    file_proto.message_type.add(
        name="GeneratedFile",
        field=[
            _field("name", 1, _Field.TYPE_STRING),
            _field("generating_rule", 2, _Field.TYPE_STRING),
        ],
    )
    file_proto.message_type.add(
        name="Target",
        field=[
            _field("type", 1, _Field.TYPE_INT32),
            _field("rule", 2, _Field.TYPE_MESSAGE, message="Rule"),
            _field("source_file", 3, _Field.TYPE_MESSAGE, message="SourceFile"),
            _field("generated_file", 4, _Field.TYPE_MESSAGE, message="GeneratedFile"),
        ],
    )
    file_proto.message_type.add(
        name="QueryResult",
        field=[_field("target", 1, _Field.TYPE_MESSAGE, repeated=True, message="Target")],
    )
    return file_proto


@lru_cache(maxsize=1)
def query_result_class() -> type[Message]:
    """Build the QueryResult message class.

    Returns
    -------
    type[Message]
        Message class for ``blaze_query.QueryResult``.
    """
    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(query_file_descriptor().SerializeToString())
    descriptor = pool.FindMessageTypeByName(f"{PROTO_PACKAGE}.QueryResult")
    return message_factory.GetMessageClass(descriptor)


def _attribute_value(attr: Message) -> AttributeValue | None:
    if attr.type in _LIST_DISCRIMINATORS or len(attr.string_list_value) > 0:
        return tuple(attr.string_list_value)
    if attr.HasField("string_value"):
        return attr.string_value
    return None


def _rule_from_message(rule: Message) -> Rule:
    attributes: dict[str, AttributeValue] = {}
    for attr in rule.attribute:
        value = _attribute_value(attr)
        if value is not None:
            attributes[attr.name] = value
    return Rule(
        name=rule.name,
        rule_class=rule.rule_class,
        attributes=attributes,
        rule_inputs=tuple(rule.rule_input),
        rule_outputs=tuple(rule.rule_output),
    )


def _target_from_message(target: Message) -> Target:
    if target.HasField("rule"):
        rule = _rule_from_message(target.rule)
        return Target(label=rule.name, rule=rule)
    if target.HasField("source_file"):
        return Target(label=target.source_file.name)
    if target.HasField("generated_file"):
        return Target(label=target.generated_file.name)
    return Target(label="")


def decode_query_result(data: bytes) -> tuple[Target, ...]:
    """Decode serialized QueryResult bytes.

    Parameters
    ----------
    data
        Raw standard output of ``bazel query --output=proto``.

    Returns
    -------
    tuple[Target, ...]
        Graph nodes in query order.

    Raises
    ------
    QueryDecodeError
        Raised when ``data`` is not a valid QueryResult encoding.
    """
    message = query_result_class()()
    try:
        message.ParseFromString(data)
    except DecodeError as exc:
        msg = f"Failed to decode query output ({len(data)} bytes): {exc}"
        raise QueryDecodeError(msg) from exc
    targets = tuple(_target_from_message(target) for target in message.target)
    LOGGER.debug("Decoded %d query targets", len(targets))
    return targets


__all__ = [
    "PROTO_PACKAGE",
    "decode_query_result",
    "query_file_descriptor",
    "query_result_class",
]
