"""Files API routes."""
from urllib.parse import quote

from fastapi import APIRouter, Depends, UploadFile, File as FastAPIFile
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from fileguard.config import settings
from fileguard.database import get_db
from fileguard.schemas.common import DeleteResponse
from fileguard.schemas.file import FileResponse as FileResponseSchema
from fileguard.services.file_storage import FileStorageService, file_storage
from fileguard.services.file_upload import FileUploadService, UploadedFile

router = APIRouter(prefix="/api/files", tags=["files"])


def get_file_storage() -> FileStorageService:
    return file_storage


def get_upload_service(
    db: AsyncSession = Depends(get_db),
    storage: FileStorageService = Depends(get_file_storage),
) -> FileUploadService:
    return FileUploadService(db, storage)


@router.post("/upload", response_model=FileResponseSchema, status_code=201)
async def upload_file(
    file: UploadFile = FastAPIFile(...),
    service: FileUploadService = Depends(get_upload_service),
):
    """Upload a file after the extension policy check."""
    # Read at most one byte past the limit
    contents = await file.read(settings.MAX_UPLOAD_SIZE_BYTES + 1)
    return await service.upload(
        UploadedFile(filename=file.filename, content_type=file.content_type, content=contents)
    )


@router.get("", response_model=list[FileResponseSchema])
async def list_files(service: FileUploadService = Depends(get_upload_service)):
    """List uploaded files, newest first."""
    return await service.get_all()


@router.get("/{file_id}", response_model=FileResponseSchema)
async def get_file_metadata(
    file_id: int,
    service: FileUploadService = Depends(get_upload_service),
):
    """Get file metadata by ID."""
    return await service.get_by_id(file_id)


@router.get("/{file_id}/download")
async def download_file(
    file_id: int,
    service: FileUploadService = Depends(get_upload_service),
):
    """Download a file by ID under its original name."""
    downloaded = await service.download(file_id)
    record = downloaded.record
    return Response(
        content=downloaded.content,
        media_type=record.content_type or "application/octet-stream",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(record.original_filename)}",
        },
    )


@router.delete("/{file_id}", response_model=DeleteResponse)
async def delete_file(
    file_id: int,
    service: FileUploadService = Depends(get_upload_service),
):
    """Delete a file and its record."""
    await service.delete(file_id)
    return {"deleted": True, "id": file_id}
