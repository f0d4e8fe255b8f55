"""Supabase Storage implementation of the image store."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import httpx
from supabase import Client, StorageException

from school_portal.adapters.supabase_rows import parse_timestamp
from school_portal.domain.errors import PersistenceError, UploadError
from school_portal.services.images import ImageStore, StoredObject

_PAGE_SIZE = 100


@contextmanager
def _storage_errors(action: str, bucket: str) -> Iterator[None]:
    try:
        yield
    except (StorageException, httpx.HTTPError) as exc:
        raise PersistenceError(f"Failed to {action} {bucket}: {exc}") from exc


@dataclass
class SupabaseImageStore(ImageStore):
    """Stores entity photos in public Supabase Storage buckets."""

    client: Client

    def upload(
        self, bucket: str, path: str, content: bytes, content_type: str
    ) -> str:
        """Upload with upsert so re-uploading the same path overwrites it."""
        storage = self.client.storage.from_(bucket)
        try:
            storage.upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "upsert": "true"},
            )
        except (StorageException, httpx.HTTPError) as exc:
            raise UploadError(bucket, path, str(exc)) from exc
        return storage.get_public_url(path)

    def remove(self, bucket: str, paths: list[str]) -> None:
        """Delete objects from a bucket."""
        with _storage_errors("remove photos from", bucket):
            self.client.storage.from_(bucket).remove(paths)

    def list_prefixes(self, bucket: str) -> list[str]:
        """Return top-level folder names (one per entity id)."""
        return [
            entry["name"]
            for entry in self._list(bucket, "")
            # Folders come back without an object id.
            if entry.get("id") is None
        ]

    def list_objects(self, bucket: str, prefix: str) -> list[StoredObject]:
        """Return the objects directly under a folder with their write times."""
        return [
            StoredObject(
                path=f"{prefix}/{entry['name']}",
                updated_at=parse_timestamp(
                    entry.get("updated_at") or entry.get("created_at")
                ),
            )
            for entry in self._list(bucket, prefix)
            if entry.get("id") is not None
        ]

    def _list(self, bucket: str, prefix: str) -> list[dict[str, object]]:
        storage = self.client.storage.from_(bucket)
        entries: list[dict[str, object]] = []
        offset = 0
        with _storage_errors("list", bucket):
            while True:
                page = storage.list(
                    prefix,
                    {
                        "limit": _PAGE_SIZE,
                        "offset": offset,
                        "sortBy": {"column": "name", "order": "asc"},
                    },
                )
                entries.extend(page)
                if len(page) < _PAGE_SIZE:
                    return entries
                offset += _PAGE_SIZE
