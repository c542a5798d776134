"""
Variant router: accept or reject a decoded envelope for a subscription.
"""

from __future__ import annotations

from collections.abc import Collection

from thorstream.stream_listener.models import (
    Envelope,
    MismatchNotice,
    RoutedEvent,
    StreamOrigin,
    VariantKind,
)


def route(
    envelope: Envelope,
    expected_kind: VariantKind,
    expected_origins: Collection[StreamOrigin] | None = None,
) -> RoutedEvent | MismatchNotice:
    """
    Return a RoutedEvent iff the envelope's variant equals expected_kind.

    Otherwise (including an unset envelope) return a MismatchNotice carrying the
    actual kind. For transaction envelopes, expected_origins optionally restricts
    the accepted stream origins; another origin yields reason="origin".
    """
    if envelope.kind is not expected_kind:
        return MismatchNotice(expected=expected_kind, actual=envelope.kind)
    if envelope.kind is not VariantKind.TRANSACTION:
        return RoutedEvent(kind=envelope.kind, payload=envelope.payload)

    origin = StreamOrigin.from_wire(envelope.payload.stream_type)
    if expected_origins is not None and origin not in expected_origins:
        return MismatchNotice(
            expected=expected_kind,
            actual=envelope.kind,
            origin=origin,
            reason="origin",
        )
    return RoutedEvent(kind=envelope.kind, payload=envelope.payload, origin=origin)
