"""
Stream subscriber — subscription selection and per-frame dispatch.

Responsibilities:
- Validate a subscription request and turn it into a SubscriptionPlan
  (expected variant, accepted origins, transport operation) before any
  stream is opened.
- Pipe each frame through decode -> route -> structural decoder -> filter ->
  sink, strictly in arrival order, one frame at a time.
- Report and skip malformed frames, variant mismatches and sink failures;
  end the stream on transport errors, a closed output pipe, cancellation or
  an optional consecutive-mismatch limit.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from typing import Any, AsyncIterator

from thorstream.core.exceptions import DecodeError, TransportError, ValidationError
from thorstream.stream_listener import parser
from thorstream.stream_listener.envelope import decode
from thorstream.stream_listener.filter import TransactionFilter
from thorstream.stream_listener.models import MismatchNotice, StreamOrigin, VariantKind
from thorstream.stream_listener.router import route
from thorstream.stream_listener.transport import EventTransport
from thorstream.stream_logging import bind_subscription, get_logger

logger = get_logger(__name__)

END_COMPLETED = "completed"
END_TRANSPORT_ERROR = "transport_error"
END_CANCELLED = "cancelled"
END_MISMATCH_LIMIT = "mismatch_limit"
END_SINK_CLOSED = "sink_closed"


class SubscriptionMode(str, enum.Enum):
    ALL_TRANSACTIONS = "transactions"
    SLOT_STATUS = "slots"
    WALLET_TRANSACTIONS = "wallet"
    ACCOUNT_UPDATES = "accounts"


@dataclass(frozen=True)
class SubscriptionRequest:
    """Operator's choice of mode and filter parameters (addresses are base58 strings)."""

    mode: SubscriptionMode
    wallets: tuple[str, ...] = ()
    accounts: tuple[str, ...] = ()
    owners: tuple[str, ...] = ()


@dataclass(frozen=True)
class SubscriptionPlan:
    """Validated subscription: what to open and which envelopes to accept."""

    mode: SubscriptionMode
    expected_kind: VariantKind
    expected_origins: frozenset[StreamOrigin] | None = None
    wallets: tuple[str, ...] = ()
    accounts: tuple[str, ...] = ()
    owners: tuple[str, ...] = ()

    def open(self, transport: EventTransport) -> AsyncIterator[bytes]:
        """Start the transport operation for this mode."""
        if self.mode is SubscriptionMode.ALL_TRANSACTIONS:
            return transport.subscribe_transactions()
        if self.mode is SubscriptionMode.SLOT_STATUS:
            return transport.subscribe_slot_status()
        if self.mode is SubscriptionMode.WALLET_TRANSACTIONS:
            return transport.subscribe_wallet_transactions(list(self.wallets))
        return transport.subscribe_account_updates(list(self.accounts), list(self.owners))


def _clean(values: Any) -> tuple[str, ...]:
    """Strip blanks and duplicates, keep first-seen order."""
    out: list[str] = []
    for value in values or ():
        text = str(value).strip()
        if text and text not in out:
            out.append(text)
    return tuple(out)


def select_subscription(request: SubscriptionRequest) -> SubscriptionPlan:
    """
    Validate the request and build its plan. Raises ValidationError when the
    mode's required parameters are missing; nothing is opened in that case.
    Address format is left to the server.
    """
    try:
        mode = SubscriptionMode(request.mode)
    except ValueError as e:
        raise ValidationError(f"unknown subscription mode: {request.mode!r}") from e

    if mode is SubscriptionMode.ALL_TRANSACTIONS:
        return SubscriptionPlan(
            mode=mode,
            expected_kind=VariantKind.TRANSACTION,
            expected_origins=frozenset({StreamOrigin.UNFILTERED, StreamOrigin.UNSPECIFIED}),
        )
    if mode is SubscriptionMode.SLOT_STATUS:
        return SubscriptionPlan(mode=mode, expected_kind=VariantKind.SLOT_STATUS)
    if mode is SubscriptionMode.WALLET_TRANSACTIONS:
        wallets = _clean(request.wallets)
        if not wallets:
            raise ValidationError("wallet subscription requires at least one wallet address")
        return SubscriptionPlan(
            mode=mode,
            expected_kind=VariantKind.TRANSACTION,
            expected_origins=frozenset({StreamOrigin.WALLET}),
            wallets=wallets,
        )
    accounts = _clean(request.accounts)
    owners = _clean(request.owners)
    if not accounts and not owners:
        raise ValidationError("account subscription requires account addresses or owner addresses")
    return SubscriptionPlan(
        mode=mode,
        expected_kind=VariantKind.ACCOUNT_UPDATE,
        accounts=accounts,
        owners=owners,
    )


@dataclass
class SubscriptionStats:
    """Counters for one subscription run."""

    mode: SubscriptionMode | None = None
    frames: int = 0
    events: int = 0
    decode_errors: int = 0
    mismatches: int = 0
    filtered: int = 0
    sink_errors: int = 0
    consecutive_mismatches: int = 0
    end_reason: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value if self.mode is not None else None,
            "frames": self.frames,
            "events": self.events,
            "decode_errors": self.decode_errors,
            "mismatches": self.mismatches,
            "filtered": self.filtered,
            "sink_errors": self.sink_errors,
            "end_reason": self.end_reason,
            "error": self.error,
        }


class StreamSubscriber:
    """
    Runs one subscription against a transport and feeds decoded records to a sink.

    The sink only needs handle(record); the subscriber does not close it.
    """

    def __init__(
        self,
        transport: EventTransport,
        sink: Any,
        *,
        transaction_filter: TransactionFilter | None = None,
        max_consecutive_mismatches: int | None = None,
    ) -> None:
        if max_consecutive_mismatches is not None and max_consecutive_mismatches < 1:
            raise ValueError("max_consecutive_mismatches must be positive when set")
        self._transport = transport
        self._sink = sink
        self._filter = transaction_filter
        self._max_mismatches = max_consecutive_mismatches
        self.stats = SubscriptionStats()

    def _decode_payload(self, kind: VariantKind, payload: Any) -> Any:
        if kind is VariantKind.TRANSACTION:
            return parser.decode_transaction(payload)
        if kind is VariantKind.ACCOUNT_UPDATE:
            return parser.decode_account_update(payload)
        return parser.decode_slot_status(payload)

    def process_frame(self, frame: bytes, plan: SubscriptionPlan) -> Any:
        """
        Handle one frame to completion.

        Returns the record handed to the sink, the MismatchNotice for a
        rejected envelope, or None for a malformed or filtered frame or one
        the sink failed on. A closed output pipe (BrokenPipeError) is not
        absorbed here; run() ends the subscription on it.
        """
        stats = self.stats
        stats.frames += 1
        try:
            envelope = decode(frame)
        except DecodeError as e:
            stats.decode_errors += 1
            logger.warning("frame_decode_failed", error=str(e), frame_size=e.frame_size, frame_no=stats.frames)
            return None

        outcome = route(envelope, plan.expected_kind, plan.expected_origins)
        if isinstance(outcome, MismatchNotice):
            stats.mismatches += 1
            stats.consecutive_mismatches += 1
            logger.warning(
                "variant_mismatch",
                subscription=plan.mode.value,
                frame_no=stats.frames,
                detail=str(outcome.as_error()),
                **outcome.to_dict(),
            )
            return outcome
        stats.consecutive_mismatches = 0

        record = self._decode_payload(outcome.kind, outcome.payload)
        if (
            outcome.kind is VariantKind.TRANSACTION
            and self._filter is not None
            and not self._filter.wants(record)
        ):
            stats.filtered += 1
            return None
        try:
            self._sink.handle(record)
        except BrokenPipeError:
            raise
        except Exception as e:
            stats.sink_errors += 1
            logger.exception(
                "sink_handle_failed",
                subscription=plan.mode.value,
                frame_no=stats.frames,
                record_type=type(record).__name__,
                error=str(e),
            )
            return None
        stats.events += 1
        return record

    def _mismatch_limit_reached(self) -> bool:
        return (
            self._max_mismatches is not None
            and self.stats.consecutive_mismatches >= self._max_mismatches
        )

    async def run(self, request: SubscriptionRequest) -> SubscriptionStats:
        """
        Validate, open the stream and process frames until it ends.

        ValidationError propagates before anything is opened. Transport errors,
        a closed output pipe and cancellation end the run; the stream is always
        closed.
        """
        plan = select_subscription(request)
        self.stats = SubscriptionStats(mode=plan.mode)
        stats = self.stats
        log = bind_subscription(plan.mode.value)
        log.info(
            "subscription_started",
            wallets=len(plan.wallets),
            accounts=len(plan.accounts),
            owners=len(plan.owners),
        )

        stream = plan.open(self._transport)
        try:
            async for frame in stream:
                self.process_frame(frame, plan)
                if self._mismatch_limit_reached():
                    stats.end_reason = END_MISMATCH_LIMIT
                    log.warning("subscription_mismatch_limit", limit=self._max_mismatches)
                    break
            else:
                stats.end_reason = END_COMPLETED
                log.info("stream_ended", frames=stats.frames)
        except TransportError as e:
            stats.end_reason = END_TRANSPORT_ERROR
            stats.error = str(e)
            log.error("stream_transport_error", error=str(e), code=e.code, details=e.details)
        except BrokenPipeError as e:
            stats.end_reason = END_SINK_CLOSED
            stats.error = str(e) or type(e).__name__
            log.error("sink_output_closed", frames=stats.frames, error=stats.error)
        except asyncio.CancelledError:
            stats.end_reason = END_CANCELLED
            log.info("subscription_cancelled", frames=stats.frames)
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
        log.info("subscription_stopped", **stats.to_dict())
        return stats
