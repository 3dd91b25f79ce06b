"""Tests for search records and pages."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from photoscout.services.search.models import (
    ImageVariant,
    IndexedPhoto,
    SearchPage,
    SearchQuery,
    SearchRecord,
)
from photoscout.shared.errors import DataProcessingError

DOCUMENT = {
    "docid": "p-1",
    "text": "sunset over the bay",
    "thumbnail_url": "http://img.test/1_5.jpg",
    "big": "http://img.test/1_7.jpg",
    "username": "mislav",
    "timestamp": "1296000000",
    "filter": "Nashville",
}


class TestSearchRecordFromDocument:
    def test_maps_fields(self) -> None:
        record = SearchRecord.from_document(DOCUMENT)

        assert record.id == "p-1"
        assert record.caption_text == "sunset over the bay"
        assert record.thumbnail_url == "http://img.test/1_5.jpg"
        assert record.large_url == "http://img.test/1_7.jpg"
        assert record.username == "mislav"
        assert record.taken_at == datetime(2011, 1, 26, 0, 0, tzinfo=timezone.utc)
        assert record.filter_name == "Nashville"

    def test_missing_caption_is_none(self) -> None:
        record = SearchRecord.from_document({**DOCUMENT, "text": None})

        assert record.caption_text is None
        assert record.caption is None

    def test_missing_docid(self) -> None:
        document = {k: v for k, v in DOCUMENT.items() if k != "docid"}

        with pytest.raises(DataProcessingError) as exc_info:
            SearchRecord.from_document(document)

        assert exc_info.value.context.additional_data == {"field": "docid"}

    @pytest.mark.parametrize(
        ("field", "attribute"),
        [("thumbnail_url", "thumbnail_url"), ("big", "large_url"), ("username", "username")],
    )
    def test_missing_projected_field_is_none(self, field: str, attribute: str) -> None:
        document = {k: v for k, v in DOCUMENT.items() if k != field}

        record = SearchRecord.from_document(document)

        assert getattr(record, attribute) is None
        assert record.id == "p-1"

    def test_missing_big_keeps_thumbnail_variant(self) -> None:
        document = {k: v for k, v in DOCUMENT.items() if k != "big"}

        images = SearchRecord.from_document(document).images

        assert images["standard_resolution"] == ImageVariant(None, 612, 612)
        assert images["thumbnail"].url == "http://img.test/1_5.jpg"

    @pytest.mark.parametrize("timestamp", [None, "yesterday", ""])
    def test_unusable_timestamp_is_epoch(self, timestamp) -> None:
        record = SearchRecord.from_document({**DOCUMENT, "timestamp": timestamp})

        assert record.taken_at == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_missing_timestamp_is_epoch(self) -> None:
        document = {k: v for k, v in DOCUMENT.items() if k != "timestamp"}

        assert SearchRecord.from_document(document).taken_at == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_alias(self) -> None:
        assert IndexedPhoto is SearchRecord


class TestSearchRecordDerivedFields:
    def test_user_stub(self) -> None:
        user = SearchRecord.from_document(DOCUMENT).user

        assert (user.id, user.full_name, user.username) == (None, None, "mislav")

    def test_caption(self) -> None:
        assert SearchRecord.from_document(DOCUMENT).caption.text == "sunset over the bay"

    def test_empty_caption_is_kept(self) -> None:
        assert SearchRecord.from_document({**DOCUMENT, "text": ""}).caption.text == ""

    def test_images(self) -> None:
        images = SearchRecord.from_document(DOCUMENT).images

        assert images == {
            "thumbnail": ImageVariant("http://img.test/1_5.jpg", 150, 150),
            "standard_resolution": ImageVariant("http://img.test/1_7.jpg", 612, 612),
        }

    def test_fields_are_memoized(self) -> None:
        record = SearchRecord.from_document(DOCUMENT)

        assert record.user is record.user
        assert record.images is record.images
        assert record.caption is record.caption


class TestSearchQuery:
    def test_filter_is_folded_into_text(self) -> None:
        query = SearchQuery.build("cats", filter="nashville", page=3, per_page=10)

        assert query.text == "cats AND filter:nashville"
        assert query.offset == 20
        assert query.to_params() == {
            "len": 10,
            "start": 20,
            "fetch": "text,thumbnail_url,username,timestamp,big,filter",
        }

    def test_extra_params_override(self) -> None:
        query = SearchQuery.build("cats", extra_params={"fetch": "text", "function": 1})

        assert query.to_params()["fetch"] == "text"
        assert query.to_params()["function"] == 1


class TestSearchPage:
    def test_navigation(self) -> None:
        page = SearchPage(total_matches=70, records=[], page=2, per_page=32)

        assert page.offset == 32
        assert page.total_pages == 3
        assert page.next_page == 3
        assert page.previous_page == 1

    def test_last_and_first_page(self) -> None:
        assert SearchPage(total_matches=64, page=2, per_page=32).next_page is None
        assert SearchPage(total_matches=64, page=1, per_page=32).previous_page is None

    def test_empty(self) -> None:
        page = SearchPage(total_matches=0)

        assert len(page) == 0
        assert list(page) == []
        assert page.total_pages == 0
        assert page.next_page is None
