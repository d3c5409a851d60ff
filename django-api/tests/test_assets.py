"""Tests for the filesystem asset store.

Run with: pytest tests/test_assets.py -v
"""

from uuid import uuid4

import pytest

from events.domain import EventCode, EventId
from events.domain.errors import AssetIOError, InvalidFilenameError
from events.stores.interfaces import Removal


@pytest.fixture
def event_id() -> EventId:
    return EventId(uuid4())


class TestPlacement:
    """Tests for moving staged files into place."""

    def test_place_upload_moves_file_under_event_directory(self, assets, staged_file, event_id):
        source = staged_file(b"jpeg bytes")

        stored = assets.place_upload(event_id, source, "abc123.jpg", "IMG_0001.JPG")

        assert stored == f"events/{event_id}/abc123.jpg"
        assert not source.exists()
        assert assets.resolve(stored).read_bytes() == b"jpeg bytes"

    def test_place_upload_rejects_traversal_in_display_name(self, assets, staged_file, event_id):
        source = staged_file()

        with pytest.raises(InvalidFilenameError):
            assets.place_upload(event_id, source, "abc123.jpg", "../../etc/passwd")

        assert source.exists()
        assert not assets.event_directory(event_id).exists()

    def test_place_upload_rejects_separator_in_generated_name(self, assets, staged_file, event_id):
        with pytest.raises(InvalidFilenameError):
            assets.place_upload(event_id, staged_file(), "../escape.jpg")

    def test_place_upload_missing_source_raises_asset_error(self, assets, event_id, tmp_path):
        with pytest.raises(AssetIOError) as exc_info:
            assets.place_upload(event_id, tmp_path / "gone.jpg", "abc123.jpg")
        assert exc_info.value.operation == "move"

    def test_place_cover_replaces_previous_cover(self, assets, staged_file, event_id):
        first = assets.place_cover(event_id, staged_file(b"one"), "first.jpg")

        second = assets.place_cover(event_id, staged_file(b"two"), "second.jpg", previous=first)

        assert second == f"events/{event_id}/cover-second.jpg"
        assert not assets.resolve(first).exists()
        assert assets.resolve(second).read_bytes() == b"two"

    def test_place_qr_image_writes_png(self, assets):
        stored = assets.place_qr_image(EventCode("AB12CD34"), b"png-data")

        assert stored == "qrcodes/qr-AB12CD34.png"
        assert assets.resolve(stored).read_bytes() == b"png-data"

    def test_stage_writes_chunks_into_staging(self, assets):
        path = assets.stage([b"a", b"b", b"c"], suffix=".mp4")

        assert path.parent == assets.staging_dir
        assert path.suffix == ".mp4"
        assert path.read_bytes() == b"abc"


class TestResolve:
    """Tests for mapping stored paths to local paths."""

    def test_accepts_url_style_reference(self, assets, event_id):
        local = assets.resolve(f"/uploads/events/{event_id}/x.jpg")
        assert local == assets.root / "events" / str(event_id) / "x.jpg"

    @pytest.mark.parametrize("stored", ["../outside.jpg", "events/../../outside.jpg", "", "/"])
    def test_rejects_paths_outside_root(self, assets, stored):
        with pytest.raises(InvalidFilenameError):
            assets.resolve(stored)


class TestRemoval:
    """Tests for idempotent removals."""

    def test_remove_file_then_again_reports_missing(self, assets, staged_file, event_id):
        stored = assets.place_upload(event_id, staged_file(), "abc123.jpg")

        assert assets.remove_file(stored) is Removal.REMOVED
        assert assets.remove_file(stored) is Removal.MISSING

    def test_remove_file_outside_root_fails_without_raising(self, assets):
        assert assets.remove_file("../../etc/passwd") is Removal.FAILED

    def test_remove_event_directory_is_idempotent(self, assets, staged_file, event_id):
        assets.place_upload(event_id, staged_file(), "one.jpg")
        assets.place_upload(event_id, staged_file(), "two.jpg")

        assert assets.remove_event_directory(event_id) is Removal.REMOVED
        assert not assets.event_directory(event_id).exists()
        assert assets.remove_event_directory(event_id) is Removal.MISSING

    def test_remove_event_directory_leaves_other_events(self, assets, staged_file, event_id):
        other = EventId(uuid4())
        kept = assets.place_upload(other, staged_file(), "keep.jpg")
        assets.place_upload(event_id, staged_file(), "drop.jpg")

        assets.remove_event_directory(event_id)

        assert assets.resolve(kept).exists()
