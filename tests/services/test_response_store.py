"""Tests for ResponseStore.

Tests follow the Failure-First pattern:
1. Test failure cases first
2. Test edge cases
3. Test happy path
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path

import pytest

from photoscout.services.response_store import ResponseStore
from photoscout.shared.errors import CacheUnavailable, DomainError, ErrorCode
from photoscout.shared.models.http import CachedResponse

KEY = "/v1/users/42/?count=20"


def sample(body: bytes = b'{"data": {"id": "42"}}') -> CachedResponse:
    return CachedResponse(200, {"Content-Type": "application/json"}, body)


class TestResponseStoreFailures:
    """Store failures surface as CacheUnavailable."""

    def test_read_after_close_raises(self, response_store: ResponseStore) -> None:
        # Given
        response_store.close()

        # When / Then
        with pytest.raises(CacheUnavailable):
            response_store.read(KEY)

    def test_write_after_close_raises(self, response_store: ResponseStore) -> None:
        response_store.close()

        with pytest.raises(CacheUnavailable):
            response_store.write(KEY, sample())

    def test_sqlite_error_on_read_is_wrapped(self, response_store: ResponseStore, mocker) -> None:
        # Given
        original = response_store.conn
        broken = mocker.Mock()
        broken.execute.side_effect = sqlite3.OperationalError("database is locked")
        response_store.conn = broken

        # When
        with pytest.raises(CacheUnavailable) as exc_info:
            response_store.read(KEY)

        # Then
        assert exc_info.value.code is ErrorCode.CACHE_READ_FAILED
        assert isinstance(exc_info.value.original_error, sqlite3.OperationalError)
        response_store.conn = original

    def test_sqlite_error_on_write_is_wrapped(self, response_store: ResponseStore, mocker) -> None:
        original = response_store.conn
        broken = mocker.Mock()
        broken.execute.side_effect = sqlite3.OperationalError("disk I/O error")
        response_store.conn = broken

        with pytest.raises(CacheUnavailable) as exc_info:
            response_store.write(KEY, sample())

        assert exc_info.value.code is ErrorCode.CACHE_WRITE_FAILED
        response_store.conn = original

    def test_unopenable_path_raises(self, tmp_path: Path) -> None:
        # A directory cannot be opened as a database file
        db_path = tmp_path / "is_a_dir"
        db_path.mkdir()

        with pytest.raises(CacheUnavailable):
            ResponseStore(db_path, namespace="instagram")

    @pytest.mark.parametrize("ttl", [0, -5])
    def test_invalid_ttl(self, tmp_path: Path, ttl: int) -> None:
        with pytest.raises(DomainError):
            ResponseStore(tmp_path / "r.db", namespace="instagram", ttl_seconds=ttl)

    def test_empty_key_rejected(self, response_store: ResponseStore) -> None:
        with pytest.raises(DomainError):
            response_store.write("", sample())


class TestResponseStoreExpiry:
    def test_entry_expires_after_ttl(self, response_store: ResponseStore, clock) -> None:
        # Given
        response_store.write(KEY, sample())

        # When
        clock.advance(seconds=3599)
        still_live = response_store.read(KEY)
        clock.advance(seconds=1)
        expired = response_store.read(KEY)

        # Then
        assert still_live is not None
        assert expired is None
        assert response_store.count() == 0

    def test_purge_expired(self, response_store: ResponseStore, clock) -> None:
        response_store.write("/a", sample())
        clock.advance(minutes=30)
        response_store.write("/b", sample())
        clock.advance(minutes=45)

        purged = response_store.purge_expired()

        assert purged == 1
        assert response_store.read("/a") is None
        assert response_store.read("/b") is not None

    def test_cache_info(self, response_store: ResponseStore, clock) -> None:
        response_store.write("/a", sample(b"12345"))
        clock.advance(hours=2)
        response_store.write("/b", sample(b"123"))

        info = response_store.get_cache_info()

        assert info["namespace"] == "instagram"
        assert info["total_entries"] == 2
        assert info["valid_entries"] == 1
        assert info["expired_entries"] == 1
        assert info["total_size_bytes"] == 8


class TestResponseStoreReadWrite:
    def test_missing_key_returns_none(self, response_store: ResponseStore) -> None:
        assert response_store.read(KEY) is None

    def test_write_then_read(self, response_store: ResponseStore) -> None:
        # Given
        response = sample()

        # When
        response_store.write(KEY, response)

        # Then
        assert response_store.read(KEY) == response

    def test_last_write_wins(self, response_store: ResponseStore) -> None:
        response_store.write(KEY, sample(b"first"))
        response_store.write(KEY, sample(b"second"))

        assert response_store.read(KEY).body == b"second"
        assert response_store.count() == 1

    def test_long_key_accepted(self, response_store: ResponseStore) -> None:
        key = "/v1/indexes/photos/search?q=" + "x" * 4000

        response_store.write(key, sample())

        assert response_store.read(key) == sample()

    def test_open_is_logged(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        # Given
        db_path = tmp_path / "logged.db"

        # When
        with caplog.at_level(logging.DEBUG, logger="photoscout.services.response_store"):
            store = ResponseStore(db_path, namespace="instagram")
        store.close()

        # Then
        operations = [
            (record.getMessage(), getattr(record, "operation", None)) for record in caplog.records
        ]
        assert ("Starting operation 'initialize_response_store'", "initialize_response_store") in operations
        assert (
            "Operation 'initialize_response_store' completed successfully",
            "initialize_response_store",
        ) in operations
        start = next(r for r in caplog.records if r.getMessage().startswith("Starting"))
        assert start.context["additional_data"]["namespace"] == "instagram"

    def test_namespaces_are_isolated(self, tmp_path: Path) -> None:
        db_path = tmp_path / "shared.db"
        photos = ResponseStore(db_path, namespace="instagram")
        index = ResponseStore(db_path, namespace="indextank")
        try:
            photos.write(KEY, sample(b"photos"))

            assert index.read(KEY) is None
            assert photos.read(KEY).body == b"photos"

            index.clear()
            assert photos.count() == 1
        finally:
            photos.close()
            index.close()

    def test_entries_survive_reopen(self, tmp_path: Path) -> None:
        db_path = tmp_path / "durable.db"
        first = ResponseStore(db_path, namespace="instagram")
        first.write(KEY, sample())
        first.close()

        second = ResponseStore(db_path, namespace="instagram")
        try:
            assert second.read(KEY) == sample()
        finally:
            second.close()

    def test_corrupted_row_is_a_miss(self, response_store: ResponseStore) -> None:
        # Given
        response_store.write(KEY, sample())
        response_store.conn.execute("UPDATE http_responses SET headers = 'not json'")

        # When / Then
        assert response_store.read(KEY) is None

    def test_clear(self, response_store: ResponseStore) -> None:
        response_store.write("/a", sample())
        response_store.write("/b", sample())

        assert response_store.clear() == 2
        assert response_store.count() == 0

    def test_concurrent_writers(self, response_store: ResponseStore) -> None:
        # Given
        errors: list[Exception] = []

        def worker(n: int) -> None:
            try:
                for i in range(20):
                    response_store.write(f"/k{i}", sample(str(n).encode()))
                    response_store.read(f"/k{i}")
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]

        # When
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Then
        assert errors == []
        assert response_store.count() == 20
