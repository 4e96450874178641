"""Upload built assets to the hosting bucket and empty it on removal."""

import logging
import mimetypes
import os
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from stackfront.aws.client import S3Client
from stackfront.models import (
    ASSET_CACHE_MAX_AGE,
    INDEX_CACHE_MAX_AGE,
    AssetRecord,
)

logger = logging.getLogger(__name__)

INDEX_KEY = "index.html"


def cache_max_age_for(key: str) -> int:
    """index.html is cached for 5 minutes, everything else for 24 hours."""
    return INDEX_CACHE_MAX_AGE if key == INDEX_KEY else ASSET_CACHE_MAX_AGE


def collect_assets(dist_dir: str | Path) -> list[AssetRecord]:
    """Walk dist_dir recursively and map each file to a flat bucket key.

    Subdirectories are not preserved in the key: ``dist/js/app.js`` becomes
    ``app.js``, and a later file with the same name overwrites an earlier one.
    """
    root = Path(dist_dir)
    if not root.is_dir():
        raise FileNotFoundError(f"Build output directory not found: {root}")

    assets = []
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            assets.append(
                AssetRecord(
                    local_path=os.path.join(dirpath, filename),
                    remote_key=filename,
                    cache_max_age=cache_max_age_for(filename),
                )
            )
    return assets


class BucketSynchronizer:
    """Pushes a build directory into a bucket and empties it again.

    Every item in a batch is submitted at once (``max_concurrent=None``) or
    with at most ``max_concurrent`` in flight. A batch always runs to the
    end; the first failure is re-raised afterwards.
    """

    def __init__(self, client: S3Client, max_concurrent: int | None = None):
        self._client = client
        self._max_concurrent = max_concurrent

    def upload(self, bucket: str, dist_dir: str | Path) -> list[AssetRecord]:
        """Upload every file under dist_dir. Returns the uploaded records."""
        assets = collect_assets(dist_dir)
        self._run_batch(lambda asset: self._upload_one(bucket, asset), assets)
        return assets

    def _upload_one(self, bucket: str, asset: AssetRecord) -> None:
        logger.info("Uploading %s to %s/%s", asset.local_path, bucket, asset.remote_key)
        content_type, _ = mimetypes.guess_type(asset.remote_key)
        self._client.put_object(
            bucket,
            asset.remote_key,
            Path(asset.local_path).read_bytes(),
            cache_control=asset.cache_control,
            content_type=content_type,
        )

    def delete_all(self, bucket: str) -> int:
        """Delete every object in the bucket, page by page.

        Returns the number of objects deleted. Each page is fully deleted
        before the next one is requested.
        """
        logger.info("Removing objects from %s...", bucket)
        deleted = 0
        marker = None

        while True:
            page = self._client.list_objects(bucket, marker=marker)
            self._run_batch(lambda key: self._client.delete_object(bucket, key), page.keys)
            deleted += len(page.keys)

            if not page.is_truncated or not page.keys:
                break
            # NextMarker is only returned when a delimiter is set
            marker = page.next_marker or page.keys[-1]

        logger.info("Removed %d objects from %s", deleted, bucket)
        return deleted

    def _run_batch(self, fn: Callable, items: Iterable) -> None:
        items = list(items)
        if not items:
            return

        workers = self._max_concurrent or len(items)
        first_error: Exception | None = None

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(fn, item): item for item in items}
            for future in as_completed(futures):
                try:
                    future.result()
                except Exception as e:
                    logger.exception("Batch item %s failed", futures[future])
                    if first_error is None:
                        first_error = e

        if first_error is not None:
            raise first_error
