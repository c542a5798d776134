"""
Stream listener: envelope decoding, variant routing, structural decoding and
subscription handling for the event publisher feed.
"""

from thorstream.stream_listener.envelope import decode  # noqa: F401
from thorstream.stream_listener.listener import (  # noqa: F401
    StreamSubscriber,
    SubscriptionMode,
    SubscriptionPlan,
    SubscriptionRequest,
    SubscriptionStats,
    select_subscription,
)
from thorstream.stream_listener.models import (  # noqa: F401
    Envelope,
    MismatchNotice,
    RoutedEvent,
    StreamOrigin,
    VariantKind,
)
from thorstream.stream_listener.router import route  # noqa: F401

__all__ = [
    "Envelope",
    "MismatchNotice",
    "RoutedEvent",
    "StreamOrigin",
    "StreamSubscriber",
    "SubscriptionMode",
    "SubscriptionPlan",
    "SubscriptionRequest",
    "SubscriptionStats",
    "VariantKind",
    "decode",
    "route",
    "select_subscription",
]
