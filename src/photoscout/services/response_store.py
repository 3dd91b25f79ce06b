"""SQLite-backed response store.

Durable key-value store for successful HTTP responses, shared by every
caching pipeline. Rows are namespaced per external service, so one database
file can hold the photo network, search index and micro-blog caches side by
side without key collisions.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable

import orjson

from photoscout.shared.cache_utils import hash_cache_key
from photoscout.shared.constants import Cache, CacheValidationConstants
from photoscout.shared.errors import (
    CacheUnavailable,
    ErrorCode,
    ErrorContext,
    create_validation_error,
)
from photoscout.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)
from photoscout.shared.models.http import CachedResponse

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS http_responses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    namespace TEXT NOT NULL,
    cache_key TEXT NOT NULL,
    key_hash TEXT NOT NULL,
    status INTEGER NOT NULL,
    headers TEXT NOT NULL,
    body BLOB NOT NULL,
    created_at TEXT NOT NULL,
    expires_at TEXT NOT NULL,
    response_size INTEGER,
    CHECK (length(cache_key) > 0),
    CHECK (length(key_hash) = 64),
    UNIQUE (namespace, key_hash)
);
CREATE INDEX IF NOT EXISTS idx_http_responses_expires_at
    ON http_responses (expires_at);
"""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp(moment: datetime) -> str:
    # Fixed-width ISO strings compare correctly as text
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


class ResponseStore:
    """Namespaced, TTL-bound store of cached HTTP responses.

    Entries expire ``ttl_seconds`` after they were written and are dropped
    lazily when read. Writes overwrite (last write wins). The store is safe to
    share between threads: SQLite runs in WAL mode and every statement is
    serialized through one connection lock.

    Any SQLite failure is raised as ``CacheUnavailable``; a missing entry is
    never confused with a broken store.

    Attributes:
        db_path: Path to the SQLite database file
        namespace: External service the entries belong to
        ttl_seconds: Lifetime of new entries

    Example:
        >>> store = ResponseStore(Path("responses.db"), namespace="instagram")
        >>> store.write("/v1/users/42/", CachedResponse(200, {}, b"{}"))
        >>> store.read("/v1/users/42/").status
        200
        >>> store.close()
    """

    def __init__(
        self,
        db_path: Path | str,
        namespace: str,
        ttl_seconds: int = Cache.TTL,
        clock: Clock | None = None,
    ) -> None:
        """Open (and create if needed) the response store.

        Args:
            db_path: Path to the SQLite database file
            namespace: External service namespace, e.g. ``instagram``
            ttl_seconds: Lifetime of new entries in seconds
            clock: Returns the current UTC time, injectable for tests

        Raises:
            DomainError: If ttl_seconds is out of range
            CacheUnavailable: If the database cannot be opened
        """
        if not (
            CacheValidationConstants.MIN_TTL
            <= ttl_seconds
            <= CacheValidationConstants.MAX_TTL
        ):
            raise create_validation_error(
                f"ttl_seconds must be between {CacheValidationConstants.MIN_TTL} "
                f"and {CacheValidationConstants.MAX_TTL}, got {ttl_seconds}",
                field="ttl_seconds",
                operation="open_response_store",
            )

        self.db_path = Path(db_path)
        self.namespace = namespace
        self.ttl_seconds = ttl_seconds
        self._clock = clock or _utc_now
        self._lock = threading.Lock()
        self.conn: sqlite3.Connection | None = None
        self._initialize_db()

    def _initialize_db(self) -> None:
        context = ErrorContext(
            operation="initialize_response_store",
            additional_data={"db_path": str(self.db_path), "namespace": self.namespace},
        )
        log_operation_start(logger, "initialize_response_store", context.safe_dict())
        start = time.perf_counter()

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
                isolation_level=None,
                timeout=30.0,
            )
            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA synchronous=NORMAL")
            self.conn.executescript(_SCHEMA_SQL)
        except (sqlite3.Error, OSError) as e:
            error = CacheUnavailable(
                ErrorCode.CACHE_UNAVAILABLE,
                f"Failed to open response store: {e!s}",
                context,
                e,
            )
            log_operation_error(logger, error)
            raise error from e

        log_operation_success(
            logger,
            operation="initialize_response_store",
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            context=context,
        )

    def _connection(self, operation: str) -> sqlite3.Connection:
        if self.conn is None:
            raise CacheUnavailable(
                ErrorCode.CACHE_UNAVAILABLE,
                "Response store is closed",
                ErrorContext(operation=operation),
            )
        return self.conn

    def _unavailable(
        self,
        e: sqlite3.Error,
        operation: str,
        code: ErrorCode,
        key: str | None = None,
    ) -> CacheUnavailable:
        additional: dict[str, Any] = {"namespace": self.namespace}
        if key is not None:
            additional["cache_key"] = key[: CacheValidationConstants.KEY_PREFIX_LOG_LENGTH]
        return CacheUnavailable(
            code,
            f"Response store {operation} failed: {e!s}",
            ErrorContext(operation=operation, additional_data=additional),
            e,
        )

    def read(self, key: str) -> CachedResponse | None:
        """Look up a live entry.

        Args:
            key: Normalized cache key

        Returns:
            The cached response, or None when absent or expired

        Raises:
            CacheUnavailable: If the database cannot be read
        """
        key_hash = hash_cache_key(key)
        now = _timestamp(self._clock())

        try:
            with self._lock:
                conn = self._connection("read")
                row = conn.execute(
                    """
                    SELECT status, headers, body, expires_at
                    FROM http_responses
                    WHERE namespace = ? AND key_hash = ?
                    """,
                    (self.namespace, key_hash),
                ).fetchone()

                if row is None:
                    return None

                status, headers_json, body, expires_at = row
                if expires_at <= now:
                    conn.execute(
                        "DELETE FROM http_responses WHERE namespace = ? AND key_hash = ?",
                        (self.namespace, key_hash),
                    )
                    logger.debug("Cache entry expired: %s", key[:50])
                    return None
        except sqlite3.Error as e:
            raise self._unavailable(e, "read", ErrorCode.CACHE_READ_FAILED, key) from e

        try:
            headers = orjson.loads(headers_json)
            return CachedResponse.from_tuple((status, dict(headers), body))
        except (orjson.JSONDecodeError, TypeError, ValueError) as e:
            logger.warning(
                "Discarding corrupted cache entry %s...: %s",
                key_hash[: CacheValidationConstants.HASH_PREFIX_LOG_LENGTH],
                e,
            )
            return None

    def write(self, key: str, response: CachedResponse) -> None:
        """Store a response under a key, replacing any previous entry.

        Args:
            key: Normalized cache key
            response: Response snapshot to keep

        Raises:
            DomainError: If the key is empty
            CacheUnavailable: If the database cannot be written
        """
        if not key:
            raise create_validation_error(
                "Cache key must not be empty",
                field="cache_key",
                operation="write",
            )

        status, headers, body = response.to_tuple()
        headers_json = orjson.dumps(headers).decode("utf-8")
        created = self._clock()
        expires = created + timedelta(seconds=self.ttl_seconds)

        try:
            with self._lock:
                conn = self._connection("write")
                conn.execute(
                    """
                    INSERT OR REPLACE INTO http_responses (
                        namespace, cache_key, key_hash, status, headers, body,
                        created_at, expires_at, response_size
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        self.namespace,
                        key,
                        hash_cache_key(key),
                        status,
                        headers_json,
                        sqlite3.Binary(body),
                        _timestamp(created),
                        _timestamp(expires),
                        len(body),
                    ),
                )
        except sqlite3.Error as e:
            raise self._unavailable(e, "write", ErrorCode.CACHE_WRITE_FAILED, key) from e

        logger.debug(
            "Cache stored: namespace=%s key=%s size=%d bytes ttl=%ds",
            self.namespace,
            key[:50],
            len(body),
            self.ttl_seconds,
        )

    def purge_expired(self) -> int:
        """Delete expired entries of this namespace.

        Returns:
            Number of deleted entries
        """
        now = _timestamp(self._clock())
        try:
            with self._lock:
                cursor = self._connection("purge_expired").execute(
                    "DELETE FROM http_responses WHERE namespace = ? AND expires_at <= ?",
                    (self.namespace, now),
                )
        except sqlite3.Error as e:
            raise self._unavailable(e, "purge_expired", ErrorCode.CACHE_WRITE_FAILED) from e
        return cursor.rowcount

    def clear(self) -> int:
        """Delete every entry of this namespace.

        Returns:
            Number of deleted entries
        """
        try:
            with self._lock:
                cursor = self._connection("clear").execute(
                    "DELETE FROM http_responses WHERE namespace = ?",
                    (self.namespace,),
                )
        except sqlite3.Error as e:
            raise self._unavailable(e, "clear", ErrorCode.CACHE_WRITE_FAILED) from e
        return cursor.rowcount

    def count(self) -> int:
        """Number of stored entries in this namespace, expired ones included."""
        try:
            with self._lock:
                row = self._connection("count").execute(
                    "SELECT COUNT(*) FROM http_responses WHERE namespace = ?",
                    (self.namespace,),
                ).fetchone()
        except sqlite3.Error as e:
            raise self._unavailable(e, "count", ErrorCode.CACHE_READ_FAILED) from e
        return int(row[0])

    def get_cache_info(self) -> dict[str, Any]:
        """Get store statistics for this namespace.

        Returns:
            Dictionary with:
            - db_path: Path to the database file
            - namespace: Store namespace
            - total_entries: Stored entries
            - valid_entries: Non-expired entries
            - expired_entries: Expired entries not yet purged
            - total_size_bytes: Sum of body sizes
        """
        now = _timestamp(self._clock())
        try:
            with self._lock:
                total, valid, size = self._connection("get_cache_info").execute(
                    """
                    SELECT COUNT(*),
                           COALESCE(SUM(CASE WHEN expires_at > ? THEN 1 ELSE 0 END), 0),
                           COALESCE(SUM(response_size), 0)
                    FROM http_responses
                    WHERE namespace = ?
                    """,
                    (now, self.namespace),
                ).fetchone()
        except sqlite3.Error as e:
            raise self._unavailable(e, "get_cache_info", ErrorCode.CACHE_READ_FAILED) from e

        return {
            "db_path": str(self.db_path),
            "namespace": self.namespace,
            "total_entries": total,
            "valid_entries": valid,
            "expired_entries": total - valid,
            "total_size_bytes": size,
        }

    def close(self) -> None:
        """Close the database connection. Further calls raise CacheUnavailable."""
        with self._lock:
            if self.conn is not None:
                self.conn.close()
                self.conn = None
                logger.debug("Closed response store: %s [%s]", self.db_path, self.namespace)
