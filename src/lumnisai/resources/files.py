"""Files resource: uploads, processed content and semantic search."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from typing import Any

from lumnisai.errors import ValidationError
from lumnisai.models import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    BulkUploadResponse,
    DuplicateHandling,
    FileContentResponse,
    FileContentType,
    FileDeleteResponse,
    FileListResponse,
    FileMetadata,
    FileScope,
    FileScopeUpdateRequest,
    FileSearchRequest,
    FileSearchResponse,
    FileStatisticsResponse,
    FileUploadResponse,
    ProcessingStatus,
    ProcessingStatusResponse,
)
from lumnisai.resources._base import Resource, parse_model, quote_segment

logger = logging.getLogger(__name__)

#: A file part as httpx accepts it: raw bytes, a binary file object, or a
#: ``(filename, content[, content_type])`` tuple.
FileInput = Any


def _file_path(file_id: str, *rest: str) -> str:
    return "/".join(("/files", quote_segment(file_id), *rest))


class FilesResource(Resource):
    """Endpoints under ``/files``."""

    async def upload(
        self,
        file: FileInput,
        *,
        scope: FileScope,
        user_id: str | None = None,
        tags: str | None = None,
        duplicate_handling: DuplicateHandling | None = None,
    ) -> FileUploadResponse:
        """Upload one file for parsing and embedding.

        Args:
            file: The file part.
            scope: ``user`` files need *user_id*; ``tenant`` files are shared.
            user_id: Owner of a user-scoped file.
            tags: Comma-separated tags.
            duplicate_handling: What to do when the file name already exists.
        """
        form = {
            "scope": scope,
            "user_id": user_id,
            "tags": tags,
            "duplicate_handling": duplicate_handling,
        }
        data = await self._http.post(
            "/files/upload", files=[("file", file)], form=form
        )
        return parse_model(FileUploadResponse, data)

    async def bulk_upload(
        self,
        files: Sequence[FileInput],
        *,
        scope: FileScope,
        user_id: str | None = None,
        tags: str | None = None,
    ) -> BulkUploadResponse:
        if not files:
            raise ValidationError("At least one file is required", code="NO_FILES")
        form = {"scope": scope, "user_id": user_id, "tags": tags}
        data = await self._http.post(
            "/files/bulk-upload", files=[("files", f) for f in files], form=form
        )
        return parse_model(BulkUploadResponse, data)

    async def get(self, file_id: str, *, user_id: str | None = None) -> FileMetadata:
        data = await self._http.get(_file_path(file_id), params={"user_id": user_id})
        return parse_model(FileMetadata, data)

    async def list(
        self,
        *,
        user_id: str | None = None,
        scope: FileScope | None = None,
        file_type: str | None = None,
        status: ProcessingStatus | None = None,
        tags: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> FileListResponse:
        """List files, optionally filtered."""
        params = {
            "user_id": user_id,
            "scope": scope,
            "file_type": file_type,
            "status": status,
            "tags": tags,
            "page": page,
            "limit": limit,
        }
        data = await self._http.get("/files", params=params)
        return parse_model(FileListResponse, data)

    async def get_content(
        self,
        file_id: str,
        *,
        content_type: FileContentType | None = None,
        start_line: int | None = None,
        end_line: int | None = None,
        user_id: str | None = None,
    ) -> FileContentResponse:
        """Fetch extracted content, optionally a line range."""
        params = {
            "content_type": content_type,
            "start_line": start_line,
            "end_line": end_line,
            "user_id": user_id,
        }
        data = await self._http.get(_file_path(file_id, "content"), params=params)
        return parse_model(FileContentResponse, data)

    async def download(self, file_id: str, *, user_id: str | None = None) -> Any:
        """Fetch the original file: a JSON body with a storage URL, or raw text."""
        return await self._http.get(
            _file_path(file_id, "download"), params={"user_id": user_id}
        )

    async def update_scope(
        self, file_id: str, request: FileScopeUpdateRequest | Mapping[str, Any]
    ) -> FileMetadata:
        body = FileScopeUpdateRequest.model_validate(request)
        data = await self._http.patch(_file_path(file_id, "scope"), body)
        return parse_model(FileMetadata, data)

    async def delete(
        self, file_id: str, *, hard_delete: bool = True, user_id: str | None = None
    ) -> FileDeleteResponse:
        """Delete a file; hard deletes also remove its chunks and blob."""
        data = await self._http.delete(
            _file_path(file_id),
            params={"hard_delete": hard_delete, "user_id": user_id},
        )
        return parse_model(FileDeleteResponse, data)

    async def bulk_delete(
        self,
        request: BulkDeleteRequest | Mapping[str, Any],
        *,
        hard_delete: bool = True,
        user_id: str | None = None,
    ) -> BulkDeleteResponse:
        body = BulkDeleteRequest.model_validate(request)
        logger.debug("Deleting %d files", len(body.file_ids))
        data = await self._http.request(
            "/files/bulk",
            method="DELETE",
            body=body,
            params={"hard_delete": hard_delete, "user_id": user_id},
        )
        return parse_model(BulkDeleteResponse, data)

    async def get_status(
        self, file_id: str, *, user_id: str | None = None
    ) -> ProcessingStatusResponse:
        """Report parsing and embedding progress."""
        data = await self._http.get(
            _file_path(file_id, "status"), params={"user_id": user_id}
        )
        return parse_model(ProcessingStatusResponse, data)

    async def search(
        self, request: FileSearchRequest | Mapping[str, Any]
    ) -> FileSearchResponse:
        """Semantic search across file chunks."""
        body = FileSearchRequest.model_validate(request)
        data = await self._http.post("/files/search", body)
        return parse_model(FileSearchResponse, data)

    async def get_statistics(self) -> FileStatisticsResponse:
        data = await self._http.get("/files/statistics")
        return parse_model(FileStatisticsResponse, data)
