"""User records and identity-to-user resolution.

Users are keyed by their photo network identity. A record is created on first
sight and its username is backfilled from the identity provider.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import Protocol

from photoscout.services.discovery import DiscoveryResolver, ResolutionSource
from photoscout.shared.constants import InstagramAPI
from photoscout.shared.errors import create_config_error, create_not_found_error
from photoscout.shared.models.instagram import InstagramProfile, MediaFeed
from photoscout.shared.protocols.services import IdentityProviderProtocol

logger = logging.getLogger(__name__)


@dataclass
class User:
    """A known photo network user.

    ``instagram_info`` is fetched once per instance and memoized without a
    lock; concurrent first reads may fetch twice and keep either result.

    Attributes:
        user_id: Photo network identity
        username: Photo network account name
        twitter: Micro-blog screen name, when known
        twitter_id: Micro-blog account id, when known
        provider: Identity provider used for lazy fetches
    """

    user_id: int
    username: str | None = None
    twitter: str | None = None
    twitter_id: int | None = None
    provider: IdentityProviderProtocol | None = field(
        default=None, repr=False, compare=False
    )

    def _provider(self) -> IdentityProviderProtocol:
        if self.provider is None:
            raise create_config_error(
                f"User {self.user_id} is not bound to an identity provider",
                config_key="provider",
                operation="user_fetch",
            )
        return self.provider

    @cached_property
    def instagram_info(self) -> InstagramProfile:
        return self._provider().fetch_profile(self.user_id)

    def photos(self, max_id: str | int | None = None) -> MediaFeed:
        """Recent media, newest first, starting below ``max_id``."""
        return self._provider().fetch_recent_media(
            self.user_id,
            count=InstagramAPI.RECENT_MEDIA_COUNT,
            max_id=str(max_id) if max_id is not None else None,
        )


class UserRepository(Protocol):
    """Persistence for user records."""

    def find_by_id(self, user_id: int) -> User | None: ...

    def find_by_username(self, username: str) -> User | None: ...

    def save(self, user: User) -> None: ...


class InMemoryUserRepository:
    """Thread-safe, process-local user repository."""

    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._lock = threading.Lock()

    def find_by_id(self, user_id: int) -> User | None:
        with self._lock:
            user = self._users.get(user_id)
        return replace(user) if user else None

    def find_by_username(self, username: str) -> User | None:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return replace(user)
        return None

    def save(self, user: User) -> None:
        with self._lock:
            self._users[user.user_id] = replace(user, provider=None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)


class UserDirectory:
    """Finds or creates users by identity, username or profile URL.

    Args:
        repository: User persistence
        provider: Identity provider bound to returned users
        resolver: Cross-network identity resolver
    """

    def __init__(
        self,
        repository: UserRepository,
        provider: IdentityProviderProtocol,
        resolver: DiscoveryResolver | None = None,
    ) -> None:
        self.repository = repository
        self.provider = provider
        self.resolver = resolver

    def _bind(self, user: User) -> User:
        user.provider = self.provider
        return user

    def lookup(self, id_or_username: str | int) -> User:
        """Find a user by numeric identity or by username.

        Anything containing a non-digit is treated as a username, which must
        already be known.

        Raises:
            NotFoundError: If no user has that username
        """
        key = str(id_or_username)
        if key.isdigit():
            return self.get(int(key))

        user = self.repository.find_by_username(key)
        if user is None:
            raise create_not_found_error(
                f"No user named {key!r}", identifier=key, operation="lookup"
            )
        return self._bind(user)

    def get(self, user_id: int) -> User:
        """Find a user, creating the record on first sight.

        A record without a username is completed from the identity provider
        and saved.
        """
        user = self._bind(self.repository.find_by_id(user_id) or User(user_id=user_id))
        if not user.username:
            user.username = user.instagram_info.username
            self.repository.save(user)
            logger.info("Registered user %s (%s)", user.user_id, user.username)
        return user

    def find_by_instagram_url(
        self,
        url: str,
        twitter_username: str | None = None,
    ) -> User | None:
        """Resolve a profile URL to a user.

        Args:
            url: Public profile page URL
            twitter_username: Micro-blog screen name for the fallback search

        Returns:
            The user, or None when the identity could not be resolved
        """
        if self.resolver is None:
            raise create_config_error(
                "UserDirectory has no discovery resolver",
                config_key="resolver",
                operation="find_by_instagram_url",
            )

        resolution = self.resolver.resolve_identity(url, twitter_username)
        if not resolution.resolved or resolution.identity is None:
            return None

        user = self.get(resolution.identity)
        if resolution.source is ResolutionSource.SECONDARY_NETWORK and not user.twitter:
            user.twitter = twitter_username
            self.repository.save(user)
        return user
