# Protocol buffer bindings for events.proto (package thor_streamer.types).
"""Generated-style protocol buffer code for events.proto."""
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import symbol_database as _symbol_database
from google.protobuf.internal import builder as _builder

from thorstream.proto._descriptors import Field, add_enum, add_message, new_file

_sym_db = _symbol_database.Default()

_PKG = ".thor_streamer.types."


def _file():
    f = new_file("events.proto", "thor_streamer.types")
    add_message(f, "Empty", [])
    slot_fields = [
        Field("slot", 1, "uint64"),
        Field("parent", 2, "uint64"),
        Field("status", 3, "int32"),
        Field("block_hash", 4, "bytes"),
        Field("block_height", 5, "uint64"),
    ]
    add_message(f, "SlotStatus", slot_fields)
    add_message(f, "SubscribeUpdateAccountInfo", [
        Field("pubkey", 1, "bytes"),
        Field("lamports", 2, "uint64"),
        Field("owner", 3, "bytes"),
        Field("executable", 4, "bool"),
        Field("rent_epoch", 5, "uint64"),
        Field("data", 6, "bytes"),
        Field("write_version", 7, "uint64"),
        Field("txn_signature", 8, "bytes", optional=True),
        Field("slot", 9, _PKG + "SlotStatus", optional=True),
    ])
    add_message(f, "ThorAccountsRequest", [Field("account_address", 1, "string", repeated=True)])
    add_message(f, "SlotStatusEvent", slot_fields)
    add_message(f, "MessageHeader", [
        Field("num_required_signatures", 1, "uint32"),
        Field("num_readonly_signed_accounts", 2, "uint32"),
        Field("num_readonly_unsigned_accounts", 3, "uint32"),
    ])
    add_message(f, "CompiledInstruction", [
        Field("program_id_index", 1, "uint32"),
        Field("data", 2, "bytes"),
        Field("accounts", 3, "uint32", repeated=True),
    ])
    add_message(f, "LoadedAddresses", [
        Field("writable", 1, "bytes", repeated=True),
        Field("readonly", 2, "bytes", repeated=True),
    ])
    add_message(f, "MessageAddressTableLookup", [
        Field("account_key", 1, "bytes"),
        Field("writable_indexes", 2, "bytes"),
        Field("readonly_indexes", 3, "bytes"),
    ])
    add_message(f, "Message", [
        Field("version", 1, "uint32"),
        Field("header", 2, _PKG + "MessageHeader"),
        Field("recent_block_hash", 3, "bytes"),
        Field("account_keys", 4, "bytes", repeated=True),
        Field("instructions", 5, _PKG + "CompiledInstruction", repeated=True),
        Field("address_table_lookups", 6, _PKG + "MessageAddressTableLookup", repeated=True),
        Field("loaded_addresses", 7, _PKG + "LoadedAddresses"),
        Field("is_writable", 8, "bool", repeated=True),
    ])
    add_message(f, "SanitizedTransaction", [
        Field("message", 1, _PKG + "Message"),
        Field("message_hash", 2, "bytes"),
        Field("signatures", 3, "bytes", repeated=True),
        Field("is_simple_vote_transaction", 4, "bool"),
    ])
    add_message(f, "TransactionEvent", [
        Field("slot", 1, "uint64"),
        Field("signature", 2, "bytes"),
        Field("index", 3, "uint64"),
        Field("is_vote", 4, "bool"),
        Field("transaction", 5, _PKG + "SanitizedTransaction"),
        Field("transaction_status_meta", 6, _PKG + "TransactionStatusMeta"),
    ])
    add_message(f, "InnerInstruction", [
        Field("instruction", 1, _PKG + "CompiledInstruction"),
        Field("stack_height", 2, "uint32", optional=True),
    ])
    add_message(f, "InnerInstructions", [
        Field("index", 1, "uint32"),
        Field("instructions", 2, _PKG + "InnerInstruction", repeated=True),
    ])
    add_message(f, "UiTokenAmount", [
        Field("ui_amount", 1, "double"),
        Field("decimals", 2, "uint32"),
        Field("amount", 3, "string"),
        Field("ui_amount_string", 4, "string"),
    ])
    add_message(f, "TransactionTokenBalance", [
        Field("account_index", 1, "uint32"),
        Field("mint", 2, "string"),
        Field("ui_token_amount", 3, _PKG + "UiTokenAmount"),
        Field("owner", 4, "string"),
    ])
    add_message(f, "Reward", [
        Field("pubkey", 1, "string"),
        Field("lamports", 2, "int64"),
        Field("post_balance", 3, "uint64"),
        Field("reward_type", 4, "int32"),
        Field("commission", 5, "uint32"),
    ])
    add_message(f, "TransactionStatusMeta", [
        Field("is_status_err", 1, "bool"),
        Field("fee", 2, "uint64"),
        Field("pre_balances", 3, "uint64", repeated=True),
        Field("post_balances", 4, "uint64", repeated=True),
        Field("inner_instructions", 5, _PKG + "InnerInstructions", repeated=True),
        Field("log_messages", 6, "string", repeated=True),
        Field("pre_token_balances", 7, _PKG + "TransactionTokenBalance", repeated=True),
        Field("post_token_balances", 8, _PKG + "TransactionTokenBalance", repeated=True),
        Field("rewards", 9, _PKG + "Reward", repeated=True),
        Field("error_info", 10, "string"),
    ])
    add_enum(f, "StreamType", [
        ("STREAM_TYPE_UNSPECIFIED", 0),
        ("STREAM_TYPE_FILTERED", 1),
        ("STREAM_TYPE_WALLET", 2),
        ("STREAM_TYPE_ACCOUNT", 3),
    ])
    add_message(f, "TransactionEventWrapper", [
        Field("stream_type", 1, _PKG + "StreamType", enum=True),
        Field("transaction", 2, _PKG + "TransactionEvent"),
    ])
    add_message(f, "MessageWrapper", [
        Field("account_update", 1, _PKG + "SubscribeUpdateAccountInfo", oneof="event_message"),
        Field("slot", 2, _PKG + "SlotStatusEvent", oneof="event_message"),
        Field("transaction", 3, _PKG + "TransactionEventWrapper", oneof="event_message"),
    ], oneofs=("event_message",))
    return f


DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(_file().SerializeToString())

_globals = globals()
_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)
_builder.BuildTopDescriptorsAndMessages(DESCRIPTOR, "thorstream.proto.events_pb2", _globals)
