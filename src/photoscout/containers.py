"""Dependency Injection container for PhotoScout.

This module wires the request pipelines, clients and resolvers with
dependency-injector. The response stores are resources: they are opened by
``init_resources()`` (or on first use) and closed by ``shutdown_resources()``,
so the application's startup and shutdown own their lifecycle.

The container manages:
- Settings (Singleton)
- Instrumenter with the logging subscriber (Singleton)
- Response stores per service namespace (Resource)
- HTTP transport and per-service pipelines
- Photo network client, search index client and paginator
- Discovery resolver and user directory
"""

from __future__ import annotations

from collections.abc import Iterator

from dependency_injector import containers, providers

from photoscout.config.loader import load_settings
from photoscout.config.models.settings import Settings
from photoscout.services.discovery import DiscoveryResolver
from photoscout.services.http import (
    OAuth2ParamsMiddleware,
    RequestsTransport,
    build_pipeline,
)
from photoscout.services.instagram import InstagramClient
from photoscout.services.response_store import ResponseStore
from photoscout.services.search import SearchIndexClient, SearchPaginator
from photoscout.services.users import InMemoryUserRepository, UserDirectory
from photoscout.shared.cache_utils import CacheKeyNormalizer
from photoscout.shared.constants import CacheNamespace
from photoscout.shared.instrumentation import Instrumenter, LoggingSubscriber


def create_instrumenter() -> Instrumenter:
    """Instrumenter that logs every event."""
    instrumenter = Instrumenter()
    instrumenter.subscribe("*", LoggingSubscriber())
    return instrumenter


def open_response_store(settings: Settings, namespace: str) -> Iterator[ResponseStore | None]:
    """Resource initializer: open a store for the lifetime of the container.

    Yields None when caching is disabled.
    """
    if not settings.cache.enabled:
        yield None
        return

    store = ResponseStore(
        settings.cache.database_path,
        namespace=namespace,
        ttl_seconds=settings.cache_ttl,
    )
    try:
        yield store
    finally:
        store.close()


class Container(containers.DeclarativeContainer):
    """Dependency Injection container for PhotoScout services.

    Example:
        >>> container = Container()
        >>> container.init_resources()
        >>> page = container.search_paginator().search("sunset", filter="nashville")
        >>> container.shutdown_resources()
    """

    # Configuration
    config = providers.Singleton(load_settings)

    instrumenter = providers.Singleton(create_instrumenter)

    cache_key_normalizer = providers.Singleton(
        CacheKeyNormalizer,
        volatile_params=providers.Callable(
            lambda config: tuple(config.cache.volatile_params),
            config=config,
        ),
    )

    # Response stores
    instagram_store = providers.Resource(
        open_response_store,
        settings=config,
        namespace=CacheNamespace.INSTAGRAM,
    )
    search_store = providers.Resource(
        open_response_store,
        settings=config,
        namespace=CacheNamespace.SEARCH_INDEX,
    )

    # Transport and pipelines
    instagram_transport = providers.Singleton(
        RequestsTransport,
        timeout=providers.Callable(lambda config: config.api.instagram.timeout, config=config),
    )
    search_transport = providers.Singleton(
        RequestsTransport,
        timeout=providers.Callable(lambda config: config.api.search_index.timeout, config=config),
    )
    discovery_transport = providers.Singleton(RequestsTransport)

    oauth_middleware = providers.Factory(
        OAuth2ParamsMiddleware,
        client_id=providers.Callable(lambda config: config.api.instagram.client_id, config=config),
        access_token=providers.Callable(
            lambda config: config.api.instagram.access_token,
            config=config,
        ),
    )

    instagram_pipeline = providers.Singleton(
        build_pipeline,
        instagram_transport,
        store=instagram_store,
        instrumenter=instrumenter,
        normalizer=cache_key_normalizer,
        namespace=CacheNamespace.INSTAGRAM,
        outer=providers.List(oauth_middleware),
    )

    search_pipeline = providers.Singleton(
        build_pipeline,
        search_transport,
        store=search_store,
        instrumenter=instrumenter,
        normalizer=cache_key_normalizer,
        namespace=CacheNamespace.SEARCH_INDEX,
    )

    # Page fetches must see every status, so no status checking or caching
    discovery_pipeline = providers.Singleton(
        build_pipeline,
        discovery_transport,
        instrumenter=instrumenter,
        namespace=CacheNamespace.TWITTER,
        raise_for_status=False,
    )

    # Clients
    instagram_client = providers.Singleton(
        InstagramClient,
        executor=instagram_pipeline,
        base_url=providers.Callable(lambda config: config.api.instagram.base_url, config=config),
    )

    search_index_client = providers.Singleton(
        SearchIndexClient,
        executor=search_pipeline,
        api_url=providers.Callable(lambda config: config.api.search_index.api_url, config=config),
        index_name=providers.Callable(
            lambda config: config.api.search_index.index_name,
            config=config,
        ),
    )

    search_paginator = providers.Factory(
        SearchPaginator,
        index=search_index_client,
        instrumenter=instrumenter,
        default_per_page=providers.Callable(
            lambda config: config.api.search_index.per_page,
            config=config,
        ),
    )

    discovery_resolver = providers.Factory(
        DiscoveryResolver,
        executor=discovery_pipeline,
        instrumenter=instrumenter,
        search_url=providers.Callable(lambda config: config.api.twitter.search_url, config=config),
        timeline_url=providers.Callable(
            lambda config: config.api.twitter.timeline_url,
            config=config,
        ),
        sentinel=providers.Callable(lambda config: config.api.twitter.sentinel, config=config),
        timeline_count=providers.Callable(
            lambda config: config.api.twitter.timeline_count,
            config=config,
        ),
    )

    # Users
    user_repository = providers.Singleton(InMemoryUserRepository)

    user_directory = providers.Factory(
        UserDirectory,
        repository=user_repository,
        provider=instagram_client,
        resolver=discovery_resolver,
    )
