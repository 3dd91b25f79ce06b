"""Response cache configuration model."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from photoscout.shared.constants import Cache, FileSystem


class CacheSettings(BaseModel):
    """Response cache configuration.

    The TTL depends on the runtime mode: minutes in production, an hour
    otherwise.
    """

    enabled: bool = Field(default=True, description="Enable response caching")
    directory: str = Field(
        default=str(Path.home() / FileSystem.HOME_DIR / FileSystem.CACHE_DIRECTORY),
        description="Directory holding the cache database",
    )
    database_name: str = Field(
        default=FileSystem.CACHE_DATABASE,
        min_length=1,
        description="Cache database file name",
    )
    ttl_seconds: int = Field(
        default=Cache.TTL,
        gt=0,
        description="Entry lifetime outside production",
    )
    production_ttl_seconds: int = Field(
        default=Cache.PRODUCTION_TTL,
        gt=0,
        description="Entry lifetime in production",
    )
    volatile_params: list[str] = Field(
        default_factory=lambda: list(Cache.VOLATILE_PARAMS),
        description="Query parameters stripped from cache keys",
    )

    @property
    def database_path(self) -> Path:
        return Path(self.directory).expanduser() / self.database_name

    def effective_ttl(self, production: bool) -> int:
        return self.production_ttl_seconds if production else self.ttl_seconds


__all__ = ["CacheSettings"]
