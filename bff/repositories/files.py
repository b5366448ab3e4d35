from __future__ import annotations

from bff.db.store import Store
from bff.models.file import StoredFile
from bff.repositories.base import BaseRepository


class FileRepository(BaseRepository[StoredFile]):
    """Uploaded blobs; stands in for an object store."""

    collection = "files"
    model = StoredFile

    def __init__(self, store: Store, url_prefix: str = "/files") -> None:
        super().__init__(store)
        self.url_prefix = url_prefix.rstrip("/")

    def url_for(self, file_id: str) -> str:
        return f"{self.url_prefix}/{file_id}"

    async def get_file_url(self, file_id: str) -> str | None:
        file = await self.get_by_id(file_id)
        return self.url_for(file.id) if file is not None else None

    async def get_file_urls(self, file_ids: list[str]) -> dict[str, str]:
        """Resolve ids to URLs, silently skipping ids with no stored file."""
        urls: dict[str, str] = {}
        for file_id in file_ids:
            url = await self.get_file_url(file_id)
            if url:
                urls[file_id] = url
        return urls

    async def get_by_uploader(self, user_id: str) -> list[StoredFile]:
        return await self._get_by_index("uploadedBy", user_id)
