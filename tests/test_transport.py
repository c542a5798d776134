"""
Tests for the gRPC bindings and GrpcEventTransport stream handling.

No network: the stub is replaced by fakes returning scripted calls.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import grpc
import pytest

from thorstream.core.exceptions import TransportError
from thorstream.proto import events_pb2, publisher_pb2, publisher_pb2_grpc
from thorstream.stream_listener.transport import GrpcEventTransport


class FakeCall:
    """Async-iterable call yielding StreamResponse messages, then optionally raising."""

    def __init__(self, payloads, error=None):
        self._payloads = list(payloads)
        self._error = error
        self.cancelled = False

    def __aiter__(self):
        return self._iter()

    async def _iter(self):
        for payload in self._payloads:
            yield publisher_pb2.StreamResponse(data=payload)
        if self._error is not None:
            raise self._error

    def cancel(self):
        self.cancelled = True
        return True


def _rpc_error(code: grpc.StatusCode, details: str) -> grpc.aio.AioRpcError:
    return grpc.aio.AioRpcError(code, grpc.aio.Metadata(), grpc.aio.Metadata(), details=details)


def _transport_with(call: FakeCall, method: str) -> tuple[GrpcEventTransport, MagicMock]:
    transport = GrpcEventTransport("localhost:50051", "secret")
    stub = MagicMock()
    getattr(stub, method).return_value = call
    transport._stub = stub
    return transport, stub


async def _collect(stream):
    return [frame async for frame in stream]


def test_stub_registers_four_streaming_methods():
    channel = MagicMock()
    publisher_pb2_grpc.EventPublisherStub(channel)
    paths = [c.args[0] for c in channel.unary_stream.call_args_list]
    assert paths == [
        "/publisher.EventPublisher/SubscribeToTransactions",
        "/publisher.EventPublisher/SubscribeToSlotStatus",
        "/publisher.EventPublisher/SubscribeToWalletTransactions",
        "/publisher.EventPublisher/SubscribeToAccountUpdates",
    ]


def test_message_wrapper_oneof_descriptor():
    oneof = events_pb2.MessageWrapper.DESCRIPTOR.oneofs_by_name["event_message"]
    assert [f.name for f in oneof.fields] == ["account_update", "slot", "transaction"]
    assert [f.number for f in oneof.fields] == [1, 2, 3]


def test_stream_yields_frame_bytes_with_auth_metadata():
    call = FakeCall([b"one", b"two"])
    transport, stub = _transport_with(call, "SubscribeToSlotStatus")
    frames = asyncio.run(_collect(transport.subscribe_slot_status()))
    assert frames == [b"one", b"two"]
    _, kwargs = stub.SubscribeToSlotStatus.call_args
    assert kwargs["metadata"] == (("authorization", "secret"),)
    assert call.cancelled


def test_wallet_request_carries_addresses():
    call = FakeCall([])
    transport, stub = _transport_with(call, "SubscribeToWalletTransactions")
    asyncio.run(_collect(transport.subscribe_wallet_transactions(["W1", "W2"])))
    request = stub.SubscribeToWalletTransactions.call_args.args[0]
    assert list(request.wallet_address) == ["W1", "W2"]


def test_account_request_carries_accounts_and_owners():
    call = FakeCall([])
    transport, stub = _transport_with(call, "SubscribeToAccountUpdates")
    asyncio.run(_collect(transport.subscribe_account_updates(["A1"], ["O1"])))
    request = stub.SubscribeToAccountUpdates.call_args.args[0]
    assert list(request.account_address) == ["A1"]
    assert list(request.owner_address) == ["O1"]


def test_rpc_error_maps_to_transport_error():
    call = FakeCall([b"one"], error=_rpc_error(grpc.StatusCode.UNAVAILABLE, "server gone"))
    transport, _ = _transport_with(call, "SubscribeToTransactions")
    with pytest.raises(TransportError) as exc_info:
        asyncio.run(_collect(transport.subscribe_transactions()))
    assert exc_info.value.code == "UNAVAILABLE"
    assert exc_info.value.details == "server gone"


def test_cancelled_status_is_clean_end():
    call = FakeCall([b"one"], error=_rpc_error(grpc.StatusCode.CANCELLED, "cancelled"))
    transport, _ = _transport_with(call, "SubscribeToTransactions")
    assert asyncio.run(_collect(transport.subscribe_transactions())) == [b"one"]


def test_constructor_validation():
    with pytest.raises(ValueError):
        GrpcEventTransport(" ", "t")
    with pytest.raises(ValueError):
        GrpcEventTransport("host:1", "t", max_retries=0)


def _channel(ready: bool) -> MagicMock:
    channel = MagicMock()
    channel.channel_ready = AsyncMock(side_effect=None if ready else asyncio.TimeoutError())
    channel.close = AsyncMock()
    return channel


def test_connect_gives_up_after_max_retries_with_capped_backoff():
    transport = GrpcEventTransport(
        "localhost:1", "t", max_retries=4, min_retry_delay_sec=1.0, max_retry_delay_sec=3.0
    )
    channels = [_channel(False) for _ in range(4)]
    with patch.object(transport, "_open_channel", side_effect=channels) as open_channel, patch(
        "thorstream.stream_listener.transport.asyncio.sleep", new_callable=AsyncMock
    ) as sleep:
        with pytest.raises(TransportError) as exc_info:
            asyncio.run(transport.connect())
    assert open_channel.call_count == 4
    assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0, 3.0]
    assert all(ch.close.await_count == 1 for ch in channels)
    assert "after 4 attempts" in str(exc_info.value)
    assert transport._stub is None


def test_connect_succeeds_on_later_attempt():
    transport = GrpcEventTransport("localhost:50051", "t", max_retries=5, min_retry_delay_sec=0.5)
    channels = [_channel(False), _channel(False), _channel(True)]
    with patch.object(transport, "_open_channel", side_effect=channels) as open_channel, patch(
        "thorstream.stream_listener.transport.asyncio.sleep", new_callable=AsyncMock
    ) as sleep:
        asyncio.run(transport.connect())
        assert open_channel.call_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [0.5, 1.0]
        assert channels[0].close.await_count == 1
        assert channels[2].close.await_count == 0
        assert transport._stub is not None

        asyncio.run(transport.close())
    assert channels[2].close.await_count == 1
    assert transport._stub is None


def test_connect_is_noop_when_already_connected():
    transport = GrpcEventTransport("localhost:50051", "t")
    transport._stub = MagicMock()
    with patch.object(transport, "_open_channel") as open_channel:
        asyncio.run(transport.connect())
    open_channel.assert_not_called()
