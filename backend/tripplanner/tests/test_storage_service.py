"""
Tests for local object storage.
"""
import pytest

from tripplanner.core.errors import StorageError, TripValidationError
from tripplanner.services.storage_service import file_extension, timestamped_name, validate_image


def test_upload_and_remove(storage):
    storage.upload("trip-photos", "1/2/a.jpg", b"data")
    assert storage.exists("trip-photos", "1/2/a.jpg")

    storage.remove("trip-photos", ["1/2/a.jpg", "1/2/missing.jpg"])
    assert not storage.exists("trip-photos", "1/2/a.jpg")


def test_public_url_round_trip(storage):
    url = storage.public_url("trip-covers", "7/123.png")
    assert url == "/static/trip-covers/7/123.png"
    assert storage.path_from_url("trip-covers", url) == "7/123.png"
    assert storage.path_from_url("trip-covers", "https://elsewhere.example/x.png") is None
    assert storage.path_from_url("trip-covers", None) is None


def test_rejects_paths_outside_bucket(storage):
    with pytest.raises(StorageError):
        storage.upload("trip-photos", "../../escape.jpg", b"data")


def test_file_names():
    assert file_extension("Beach.JPEG") == "jpeg"
    assert file_extension("no_extension") == "jpg"
    assert timestamped_name("cover.png").endswith(".png")


def test_validate_image():
    validate_image("image/webp", 10)
    with pytest.raises(TripValidationError):
        validate_image("application/pdf", 10)
