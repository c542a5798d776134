"""
Core utilities: the error taxonomy shared by the decoder, subscriber,
transport and sink.
"""

from thorstream.core.exceptions import (
    ConfigError,
    DecodeError,
    PersistenceError,
    ThorStreamError,
    TransportError,
    ValidationError,
    VariantMismatch,
)

__all__ = [
    "ConfigError",
    "DecodeError",
    "PersistenceError",
    "ThorStreamError",
    "TransportError",
    "ValidationError",
    "VariantMismatch",
]
