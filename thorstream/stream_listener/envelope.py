"""
Binary envelope decoder: one raw frame -> Envelope.

The populated variant is read once from the `event_message` oneof and carried
as Envelope.kind, so callers never probe payload fields (a slot-0 payload is
still a slot payload).
"""

from __future__ import annotations

from google.protobuf.message import DecodeError as ProtobufDecodeError

from thorstream.core.exceptions import DecodeError
from thorstream.proto import events_pb2
from thorstream.stream_listener.models import Envelope, VariantKind

ONEOF_NAME = "event_message"

_FIELD_KINDS = {
    "account_update": VariantKind.ACCOUNT_UPDATE,
    "slot": VariantKind.SLOT_STATUS,
    "transaction": VariantKind.TRANSACTION,
}


def decode(frame: bytes) -> Envelope:
    """
    Decode one frame as delivered by the transport.

    Raises DecodeError when the bytes are not a MessageWrapper. Pure.
    """
    try:
        wrapper = events_pb2.MessageWrapper.FromString(bytes(frame))
    except (ProtobufDecodeError, TypeError) as e:
        raise DecodeError(f"malformed frame: {e}", frame_size=len(frame)) from e
    field_name = wrapper.WhichOneof(ONEOF_NAME)
    if field_name is None:
        return Envelope(kind=VariantKind.NONE)
    return Envelope(kind=_FIELD_KINDS[field_name], payload=getattr(wrapper, field_name))
