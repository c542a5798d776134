"""
Event transport — gRPC streams of raw frames.

Responsibilities:
- Define the EventTransport protocol the subscriber consumes: four
  server-streaming operations, each an async iterator of raw frames.
- Back it with grpc.aio (GrpcEventTransport): open the channel with bounded
  exponential-backoff retries, attach the `authorization` metadata to every
  call, and yield StreamResponse.data per frame.
- Map RPC failures to TransportError; a CANCELLED status is a clean end.
  A running stream is never reconnected here.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Sequence
from typing import Any, Protocol

import grpc
from google.protobuf import empty_pb2

from thorstream.core.exceptions import TransportError
from thorstream.proto import publisher_pb2, publisher_pb2_grpc
from thorstream.stream_logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONNECT_TIMEOUT_SEC = 30.0


class EventTransport(Protocol):
    """Source of raw frames for the four subscription operations."""

    def subscribe_transactions(self) -> AsyncIterator[bytes]: ...

    def subscribe_slot_status(self) -> AsyncIterator[bytes]: ...

    def subscribe_wallet_transactions(self, addresses: Sequence[str]) -> AsyncIterator[bytes]: ...

    def subscribe_account_updates(
        self, accounts: Sequence[str], owners: Sequence[str]
    ) -> AsyncIterator[bytes]: ...


class GrpcEventTransport:
    """
    grpc.aio implementation of EventTransport for the EventPublisher service.

    The channel is opened lazily by the first subscription (or explicitly via
    connect()) and closed by close() / the async context manager.
    """

    def __init__(
        self,
        server_address: str,
        auth_token: str,
        *,
        use_tls: bool = False,
        max_retries: int = 5,
        connect_timeout_sec: float = DEFAULT_CONNECT_TIMEOUT_SEC,
        min_retry_delay_sec: float = 1.0,
        max_retry_delay_sec: float = 30.0,
    ) -> None:
        """
        Args:
            server_address: host:port of the publisher.
            auth_token: sent as `authorization` metadata on every call.
            use_tls: open a TLS channel with default root certificates.
            max_retries: connection attempts before giving up (>= 1).
            connect_timeout_sec: wait for the channel to become ready per attempt.
            min_retry_delay_sec: first backoff delay; doubled after each failed attempt.
            max_retry_delay_sec: cap for the backoff delay.
        """
        if not server_address.strip():
            raise ValueError("server_address must be non-empty")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._address = server_address.strip()
        self._token = auth_token
        self._use_tls = use_tls
        self._max_retries = max_retries
        self._connect_timeout = connect_timeout_sec
        self._min_retry_delay = min_retry_delay_sec
        self._max_retry_delay = max_retry_delay_sec
        self._channel: grpc.aio.Channel | None = None
        self._stub: publisher_pb2_grpc.EventPublisherStub | None = None

    @classmethod
    def from_settings(cls, settings: Any) -> "GrpcEventTransport":
        return cls(
            settings.server_address,
            settings.auth_token,
            use_tls=settings.use_tls,
            max_retries=settings.max_retries,
            connect_timeout_sec=settings.timeout_sec,
        )

    async def __aenter__(self) -> "GrpcEventTransport":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    def _open_channel(self) -> grpc.aio.Channel:
        if self._use_tls:
            return grpc.aio.secure_channel(self._address, grpc.ssl_channel_credentials())
        return grpc.aio.insecure_channel(self._address)

    async def connect(self) -> None:
        """Open the channel, retrying with exponential backoff. Raises TransportError."""
        if self._stub is not None:
            return
        delay = self._min_retry_delay
        last_error: Exception | None = None
        for attempt in range(1, self._max_retries + 1):
            channel = self._open_channel()
            try:
                await asyncio.wait_for(channel.channel_ready(), timeout=self._connect_timeout)
            except (asyncio.TimeoutError, grpc.aio.AioRpcError) as e:
                last_error = e
                await channel.close()
                logger.warning(
                    "transport_connect_failed",
                    server_address=self._address,
                    attempt=attempt,
                    max_retries=self._max_retries,
                    error=str(e) or type(e).__name__,
                )
                if attempt < self._max_retries:
                    await asyncio.sleep(delay)
                    delay = min(delay * 2, self._max_retry_delay)
                continue
            self._channel = channel
            self._stub = publisher_pb2_grpc.EventPublisherStub(channel)
            logger.info("transport_connected", server_address=self._address, tls=self._use_tls, attempt=attempt)
            return
        raise TransportError(
            f"failed to connect to {self._address} after {self._max_retries} attempts",
            details=str(last_error) if last_error is not None else None,
        )

    async def close(self) -> None:
        channel, self._channel, self._stub = self._channel, None, None
        if channel is not None:
            await channel.close()
            logger.info("transport_closed", server_address=self._address)

    def _metadata(self) -> tuple[tuple[str, str], ...]:
        return (("authorization", self._token),)

    async def _stream(self, method: str, request: Any) -> AsyncIterator[bytes]:
        await self.connect()
        call = getattr(self._stub, method)(request, metadata=self._metadata())
        try:
            async for response in call:
                yield bytes(response.data)
        except grpc.aio.AioRpcError as e:
            if e.code() == grpc.StatusCode.CANCELLED:
                logger.info("transport_stream_cancelled", method=method)
                return
            raise TransportError(
                f"{method} failed: {e.code().name}",
                code=e.code().name,
                details=e.details(),
            ) from e
        finally:
            call.cancel()

    def subscribe_transactions(self) -> AsyncIterator[bytes]:
        return self._stream("SubscribeToTransactions", empty_pb2.Empty())

    def subscribe_slot_status(self) -> AsyncIterator[bytes]:
        return self._stream("SubscribeToSlotStatus", empty_pb2.Empty())

    def subscribe_wallet_transactions(self, addresses: Sequence[str]) -> AsyncIterator[bytes]:
        request = publisher_pb2.SubscribeWalletRequest(wallet_address=list(addresses))
        return self._stream("SubscribeToWalletTransactions", request)

    def subscribe_account_updates(
        self, accounts: Sequence[str], owners: Sequence[str]
    ) -> AsyncIterator[bytes]:
        request = publisher_pb2.SubscribeAccountsRequest(
            account_address=list(accounts), owner_address=list(owners)
        )
        return self._stream("SubscribeToAccountUpdates", request)
