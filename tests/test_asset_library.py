"""Tests for the photo library backend and its batch processor."""

import asyncio
from datetime import timedelta

import pytest

from geotagger.asset_library import (
    Asset,
    AssetGeoAnchorsLoader,
    AssetGeotagBatchProcessor,
    AssetGeotaggingItem,
    AssetLibrary,
)
from geotagger.config import GeotaggerSettings
from geotagger.exceptions import AssetGeotaggingError
from geotagger.geotagger import Geotagger
from geotagger.items import TimeAdjustmentSaveMode
from geotagger.loaders import StaticGeoAnchorsLoader
from geotagger.models import Geotag, Location

from tests.conftest import BASE_DATE, make_anchor

GEOTAG = Geotag(Location.from_degrees(52.0, 13.0))


class FakeLibrary(AssetLibrary):

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.batches = []

    async def perform_changes(self, changes):
        await asyncio.sleep(0)
        if self.fail:
            raise RuntimeError("library is read-only")
        self.batches.append(list(changes))


def make_asset(name: str, seconds: float = 0, **kwargs) -> Asset:
    return Asset(local_identifier=name, creation_date=BASE_DATE + timedelta(seconds=seconds), **kwargs)


class TestBatchProcessor:

    def test_rapid_changes_coalesce_into_one_batch(self):
        library = FakeLibrary()
        processor = AssetGeotagBatchProcessor(library, batch_delay=0.01)
        assets = [make_asset(str(i)) for i in range(3)]

        async def run():
            await asyncio.gather(*(processor.record_geotag(asset, GEOTAG) for asset in assets))

        asyncio.run(run())
        assert len(library.batches) == 1
        assert [change.asset for change in library.batches[0]] == assets

    def test_failure_resumes_every_waiter_with_the_error(self):
        processor = AssetGeotagBatchProcessor(FakeLibrary(fail=True), batch_delay=0.01)

        async def run():
            return await asyncio.gather(
                processor.record_geotag(make_asset("a"), GEOTAG),
                processor.record_time_adjustment(make_asset("b"), BASE_DATE),
                return_exceptions=True
            )

        results = asyncio.run(run())
        assert all(isinstance(result, RuntimeError) for result in results)

    def test_flush_commits_without_waiting(self):
        library = FakeLibrary()
        processor = AssetGeotagBatchProcessor(library, batch_delay=60)

        async def run():
            pending = asyncio.ensure_future(processor.record_geotag(make_asset("a"), GEOTAG))
            await asyncio.sleep(0)
            await processor.flush()
            await asyncio.wait_for(pending, timeout=1)

        asyncio.run(run())
        assert len(library.batches) == 1

    def test_time_adjustment_change(self):
        library = FakeLibrary()
        processor = AssetGeotagBatchProcessor(library, batch_delay=0)
        asyncio.run(processor.record_time_adjustment(make_asset("a"), BASE_DATE))
        change = library.batches[0][0]
        assert change.geotag is None
        assert change.adjusted_date == BASE_DATE


class TestAssetGeotaggingItem:

    def test_apply_records_geotag(self):
        library = FakeLibrary()
        item = AssetGeotaggingItem(make_asset("a"), AssetGeotagBatchProcessor(library, batch_delay=0))
        asyncio.run(item.apply(GEOTAG))
        change = library.batches[0][0]
        assert change.geotag == GEOTAG
        assert change.adjusted_date is None

    def test_apply_records_adjusted_date_in_tagged_mode(self):
        library = FakeLibrary()
        item = AssetGeotaggingItem(
            make_asset("a"),
            AssetGeotagBatchProcessor(library, batch_delay=0),
            time_offset=120,
            time_adjustment_save_mode=TimeAdjustmentSaveMode.TAGGED
        )
        asyncio.run(item.apply(GEOTAG))
        assert library.batches[0][0].adjusted_date == BASE_DATE + timedelta(minutes=2)

    def test_apply_to_read_only_asset_fails(self):
        item = AssetGeotaggingItem(make_asset("a", can_edit=False), AssetGeotagBatchProcessor(FakeLibrary()))
        with pytest.raises(AssetGeotaggingError):
            asyncio.run(item.apply(GEOTAG))

    def test_apply_without_processor_fails(self):
        with pytest.raises(AssetGeotaggingError):
            asyncio.run(AssetGeotaggingItem(make_asset("a"), None).apply(GEOTAG))

    def test_skip_records_time_adjustment_only_in_all_mode(self):
        library = FakeLibrary()
        processor = AssetGeotagBatchProcessor(library, batch_delay=0)
        tagged_mode = AssetGeotaggingItem(make_asset("a"), processor, time_offset=60,
                                          time_adjustment_save_mode=TimeAdjustmentSaveMode.TAGGED)
        all_mode = AssetGeotaggingItem(make_asset("b"), processor, time_offset=60,
                                       time_adjustment_save_mode=TimeAdjustmentSaveMode.ALL)

        async def run():
            await tagged_mode.skip(RuntimeError("skipped"))
            await all_mode.skip(RuntimeError("skipped"))

        asyncio.run(run())
        assert len(library.batches) == 1
        assert library.batches[0][0].asset.local_identifier == "b"

    def test_orchestrated_run_batches_library_writes(self):
        library = FakeLibrary()
        processor = AssetGeotagBatchProcessor(library, batch_delay=0.05)
        geotagger = Geotagger(exact_match_time_range=60)
        geotagger.load_anchors(StaticGeoAnchorsLoader([make_anchor(0, 52.0, 13.0)]))
        items = [AssetGeotaggingItem(make_asset(str(i), seconds=i), processor) for i in range(5)]

        geotagger.tag_all(items)

        assert sum(len(batch) for batch in library.batches) == 5
        assert len(library.batches) < 5


class TestAssetGeoAnchorsLoader:

    def test_located_assets_become_anchors(self):
        assets = [
            make_asset("a", location=Location.from_degrees(1.0, 2.0, altitude=0.0)),
            make_asset("b", location=Location.from_degrees(3.0, 4.0, altitude=12.0)),
            make_asset("c"),
            Asset(local_identifier="d", location=Location.from_degrees(5.0, 6.0)),
        ]
        anchors = AssetGeoAnchorsLoader(assets).load_anchors()
        assert len(anchors) == 2
        assert anchors[0].location.altitude is None
        assert anchors[1].location.altitude.value == 12.0


def test_batch_delay_from_settings(monkeypatch):
    monkeypatch.setenv("GEOTAGGER_BATCH_DELAY", "0.5")
    processor = AssetGeotagBatchProcessor.from_settings(FakeLibrary(), GeotaggerSettings())
    assert processor.batch_delay == 0.5
