"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ValidationError,
    ConflictError,
    ExternalServiceError,

    # Backends
    BackendUnavailableError,
    AdminClientUnavailableError,
    UnknownBackendError,
    UnknownCollectionError,

    # Operations
    OperationInProgressError,
    LocalCacheError,
)

__all__ = [
    # Base
    "AppError",
    "ValidationError",
    "ConflictError",
    "ExternalServiceError",

    # Backends
    "BackendUnavailableError",
    "AdminClientUnavailableError",
    "UnknownBackendError",
    "UnknownCollectionError",

    # Operations
    "OperationInProgressError",
    "LocalCacheError",
]
