"""
File endpoints — upload, download and delete of stored blobs.

Products reference uploads by id; URLs are ``FILE_URL_PREFIX/<id>``.
"""

from __future__ import annotations

import logging

from bff.api.routing import RequestContext, RouteTable
from bff.core.exceptions import NotFoundError
from bff.core.responses import Envelope, created, no_content, ok
from bff.models.file import StoredFile
from bff.repositories.files import FileRepository
from bff.schemas.file import FileUpload

router = RouteTable(prefix="/files", tags=["files"])
logger = logging.getLogger(__name__)


class FileHandler:
    def __init__(self, files: FileRepository) -> None:
        self.files = files

    def describe(self, file: StoredFile) -> dict:
        return {**file.metadata(), "url": self.files.url_for(file.id)}

    async def upload(self, body: FileUpload, uploaded_by: str | None = None) -> StoredFile:
        file = StoredFile(
            filename=body.filename,
            mimetype=body.mimetype,
            size=body.size,
            blob=body.data,
            uploaded_by=uploaded_by,
        )
        await self.files.create(file)
        logger.info("Stored file %s (%s, %d bytes)", file.id, file.mimetype, file.size)
        return file

    async def get(self, file_id: str) -> StoredFile:
        file = await self.files.get_by_id(file_id)
        if file is None:
            raise NotFoundError("File not found")
        return file

    async def delete(self, file_id: str) -> None:
        await self.get(file_id)
        await self.files.delete(file_id)
        logger.info("Deleted file %s", file_id)


@router.post("", delay=True, failure="Failed to upload file")
async def upload_file(ctx: RequestContext) -> Envelope:
    uploader = ctx.current_user.id if ctx.current_user else None
    handler = ctx.handlers.files
    file = await handler.upload(ctx.parse(FileUpload), uploaded_by=uploader)
    return created(handler.describe(file))


@router.get("/{file_id}", failure="Failed to fetch file")
async def get_file(ctx: RequestContext) -> Envelope:
    handler = ctx.handlers.files
    file = await handler.get(ctx.path_params["file_id"])
    return ok({**handler.describe(file), "data": file.blob})


@router.delete("/{file_id}", delay=True, failure="Failed to delete file")
async def delete_file(ctx: RequestContext) -> Envelope:
    await ctx.handlers.files.delete(ctx.path_params["file_id"])
    return no_content()
