"""
Object storage for uploaded images.

Objects live under UPLOAD_DIR/<bucket>/<path> and are served by the app's
static mount, so a public URL is STATIC_URL/<bucket>/<path>.
"""
import logging
import os
import time
from pathlib import Path
from typing import Iterable, Optional

from tripplanner.core.config import settings
from tripplanner.core.errors import StorageError, TripValidationError

logger = logging.getLogger(__name__)

TRIP_COVERS_BUCKET = "trip-covers"
TRIP_PHOTOS_BUCKET = "trip-photos"


def file_extension(filename: Optional[str], default: str = "jpg") -> str:
    """Extension of an uploaded file name without the dot."""
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
    return ext or default


def timestamped_name(filename: Optional[str]) -> str:
    """<milliseconds since epoch>.<ext>, unique enough per owner folder."""
    return f"{int(time.time() * 1000)}.{file_extension(filename)}"


def validate_image(content_type: Optional[str], size: int):
    """Reject non-image uploads and files over MAX_UPLOAD_SIZE."""
    if content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise TripValidationError(f"Invalid file type: {content_type}")
    if size > settings.MAX_UPLOAD_SIZE:
        raise TripValidationError(
            f"File is too large ({size} bytes, max {settings.MAX_UPLOAD_SIZE})"
        )


class LocalObjectStorage:
    """Bucket/path object store on the local filesystem."""

    def __init__(self, root: Optional[str] = None, base_url: Optional[str] = None):
        self.root = Path(root or settings.UPLOAD_DIR)
        self.base_url = (base_url or settings.STATIC_URL).rstrip("/")

    def _object_path(self, bucket: str, path: str) -> Path:
        target = (self.root / bucket / path).resolve()
        bucket_root = (self.root / bucket).resolve()
        if bucket_root not in target.parents:
            raise StorageError(f"Invalid object path: {path}")
        return target

    def upload(self, bucket: str, path: str, content: bytes) -> str:
        """Store content at bucket/path and return the path."""
        target = self._object_path(bucket, path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as buffer:
                buffer.write(content)
        except OSError as e:
            logger.error(f"Upload to {bucket}/{path} failed: {e}")
            raise StorageError(f"Upload failed: {e}") from e
        logger.debug(f"Stored {len(content)} bytes at {bucket}/{path}")
        return path

    def remove(self, bucket: str, paths: Iterable[str]):
        """Delete objects; missing objects are ignored."""
        for path in paths:
            target = self._object_path(bucket, path)
            try:
                target.unlink()
            except FileNotFoundError:
                logger.debug(f"Object {bucket}/{path} already gone")
            except OSError as e:
                logger.error(f"Removing {bucket}/{path} failed: {e}")
                raise StorageError(f"Remove failed: {e}") from e

    def exists(self, bucket: str, path: str) -> bool:
        return self._object_path(bucket, path).exists()

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/{bucket}/{path}"

    def path_from_url(self, bucket: str, url: str) -> Optional[str]:
        """Storage path of a public URL produced by public_url, None for foreign URLs."""
        marker = f"/{bucket}/"
        if not url or marker not in url:
            return None
        return url.split(marker, 1)[1]
