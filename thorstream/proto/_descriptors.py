"""
Schema tables -> FileDescriptorProto.

The *_pb2 modules register their file with the default descriptor pool the
same way protoc output does (AddSerializedFile + builder); the serialized
file is produced here from the tables that mirror events.proto and
publisher.proto.
"""

from __future__ import annotations

from dataclasses import dataclass

from google.protobuf import descriptor_pb2

_F = descriptor_pb2.FieldDescriptorProto

_SCALARS = {
    "double": _F.TYPE_DOUBLE,
    "int32": _F.TYPE_INT32,
    "int64": _F.TYPE_INT64,
    "uint32": _F.TYPE_UINT32,
    "uint64": _F.TYPE_UINT64,
    "bool": _F.TYPE_BOOL,
    "string": _F.TYPE_STRING,
    "bytes": _F.TYPE_BYTES,
}


@dataclass(frozen=True)
class Field:
    """One field row: scalar type name, or a fully-qualified message/enum name (leading dot)."""

    name: str
    number: int
    type: str
    repeated: bool = False
    optional: bool = False  # proto3 `optional` (synthetic oneof)
    oneof: str | None = None
    enum: bool = False


@dataclass(frozen=True)
class Method:
    name: str
    input_type: str
    output_type: str
    server_streaming: bool = True


def new_file(name: str, package: str, dependencies: tuple[str, ...] = ()) -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(name=name, package=package, syntax="proto3")
    file_proto.dependency.extend(dependencies)
    return file_proto


def add_enum(file_proto: descriptor_pb2.FileDescriptorProto, name: str, values: list[tuple[str, int]]) -> None:
    enum_proto = file_proto.enum_type.add(name=name)
    for value_name, number in values:
        enum_proto.value.add(name=value_name, number=number)


def add_message(
    file_proto: descriptor_pb2.FileDescriptorProto,
    name: str,
    fields: list[Field],
    oneofs: tuple[str, ...] = (),
) -> None:
    msg = file_proto.message_type.add(name=name)
    # real oneofs first; synthetic ones for proto3 optional go after them
    for oneof_name in oneofs:
        msg.oneof_decl.add(name=oneof_name)
    synthetic: list[descriptor_pb2.FieldDescriptorProto] = []
    for spec in fields:
        field_proto = msg.field.add(
            name=spec.name,
            number=spec.number,
            label=_F.LABEL_REPEATED if spec.repeated else _F.LABEL_OPTIONAL,
        )
        if spec.type.startswith("."):
            field_proto.type = _F.TYPE_ENUM if spec.enum else _F.TYPE_MESSAGE
            field_proto.type_name = spec.type
        else:
            field_proto.type = _SCALARS[spec.type]
        if spec.oneof is not None:
            field_proto.oneof_index = oneofs.index(spec.oneof)
        if spec.optional:
            synthetic.append(field_proto)
    for field_proto in synthetic:
        field_proto.proto3_optional = True
        field_proto.oneof_index = len(msg.oneof_decl)
        msg.oneof_decl.add(name="_" + field_proto.name)


def add_service(file_proto: descriptor_pb2.FileDescriptorProto, name: str, methods: list[Method]) -> None:
    service = file_proto.service.add(name=name)
    for method in methods:
        service.method.add(
            name=method.name,
            input_type=method.input_type,
            output_type=method.output_type,
            server_streaming=method.server_streaming,
        )
