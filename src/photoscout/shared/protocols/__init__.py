"""Protocol interfaces for dependency inversion."""

from .services import (
    IdentityProviderProtocol,
    Middleware,
    RequestExecutor,
    SearchServiceProtocol,
)

__all__ = [
    "IdentityProviderProtocol",
    "Middleware",
    "RequestExecutor",
    "SearchServiceProtocol",
]
