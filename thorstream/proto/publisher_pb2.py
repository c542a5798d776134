# Protocol buffer bindings for publisher.proto (package publisher).
"""Generated-style protocol buffer code for publisher.proto."""
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import empty_pb2 as google_dot_protobuf_dot_empty__pb2  # noqa: F401
from google.protobuf import symbol_database as _symbol_database
from google.protobuf.internal import builder as _builder

from thorstream.proto._descriptors import Field, Method, add_message, add_service, new_file

_sym_db = _symbol_database.Default()

_EMPTY = ".google.protobuf.Empty"


def _file():
    f = new_file("publisher.proto", "publisher", dependencies=("google/protobuf/empty.proto",))
    add_message(f, "StreamResponse", [Field("data", 1, "bytes")])
    add_message(f, "SubscribeAccountsRequest", [
        Field("account_address", 1, "string", repeated=True),
        Field("owner_address", 2, "string", repeated=True),
    ])
    add_message(f, "SubscribeWalletRequest", [Field("wallet_address", 1, "string", repeated=True)])
    add_service(f, "EventPublisher", [
        Method("SubscribeToTransactions", _EMPTY, ".publisher.StreamResponse"),
        Method("SubscribeToSlotStatus", _EMPTY, ".publisher.StreamResponse"),
        Method("SubscribeToWalletTransactions", ".publisher.SubscribeWalletRequest", ".publisher.StreamResponse"),
        Method("SubscribeToAccountUpdates", ".publisher.SubscribeAccountsRequest", ".publisher.StreamResponse"),
    ])
    return f


DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(_file().SerializeToString())

_globals = globals()
_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)
_builder.BuildTopDescriptorsAndMessages(DESCRIPTOR, "thorstream.proto.publisher_pb2", _globals)
