"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AlreadyComposedError,
    EmailError,
    InfrastructureError,
    InvalidAddressError,
    InvalidContentError,
    InvalidHeaderError,
    LifecycleError,
    MissingFromError,
    MissingHostError,
    NoRecipientsError,
    SessionAlreadyInitializedError,
    TransportFailureError,
    UnsupportedCharsetError,
)

__all__ = [
    "AlreadyComposedError",
    "EmailError",
    "InfrastructureError",
    "InvalidAddressError",
    "InvalidContentError",
    "InvalidHeaderError",
    "LifecycleError",
    "MissingFromError",
    "MissingHostError",
    "NoRecipientsError",
    "SessionAlreadyInitializedError",
    "TransportFailureError",
    "UnsupportedCharsetError",
]
