"""Services module for PhotoScout.

This module contains the outbound request pipeline, the response store and
the clients and resolvers built on top of them.
"""

from .discovery import DiscoveryResolver, IdentityResolution, SecondaryNetworkMatch
from .instagram import InstagramClient
from .response_store import ResponseStore
from .search import SearchIndexClient, SearchPage, SearchPaginator, SearchRecord
from .users import InMemoryUserRepository, User, UserDirectory

__all__ = [
    "DiscoveryResolver",
    "IdentityResolution",
    "InMemoryUserRepository",
    "InstagramClient",
    "ResponseStore",
    "SearchIndexClient",
    "SearchPage",
    "SearchPaginator",
    "SearchRecord",
    "SecondaryNetworkMatch",
    "User",
    "UserDirectory",
]
