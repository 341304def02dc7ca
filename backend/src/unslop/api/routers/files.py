"""File read/write API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query

from unslop.api.deps import get_reader, get_writer
from unslop.api.schemas import FileContent, FileList, SaveFileBody, SaveResultResponse
from unslop.storage.reader import RuntimeFileReader
from unslop.storage.writer import FileSystemWriter, SaveFileRequest


router = APIRouter(prefix="/api/files", tags=["files"])


@router.get("", response_model=FileContent)
async def read_file(
    path: str = Query(..., min_length=1, description="Path relative to the project root"),
    reader: RuntimeFileReader = Depends(get_reader),
) -> FileContent:
    """Read a file from the project directory.

    Returns 404 when there is no directory grant or the file does not exist.
    """
    content = reader.read_file(path)
    if content is None:
        raise HTTPException(status_code=404, detail=f"File not found: {path}")
    return FileContent(path=path, content=content)


@router.get("/list", response_model=FileList)
async def list_files(
    dir: str = Query("", description="Directory relative to the project root"),
    reader: RuntimeFileReader = Depends(get_reader),
) -> FileList:
    """Names of the files (not subdirectories) in a directory."""
    return FileList(dir=dir, files=reader.list_files(dir))


@router.put("", response_model=SaveResultResponse)
async def save_file(
    body: SaveFileBody,
    writer: FileSystemWriter = Depends(get_writer),
) -> SaveResultResponse:
    """Save a file, falling back to a download when it cannot be written in place."""
    result = writer.save_file(body.path, body.content, body.mime_type)
    return SaveResultResponse.model_validate(result)


@router.put("/batch", response_model=list[SaveResultResponse])
async def save_files(
    files: list[SaveFileBody],
    writer: FileSystemWriter = Depends(get_writer),
) -> list[SaveResultResponse]:
    """Save several files in order; one result per file."""
    results = writer.save_files(
        SaveFileRequest(path=f.path, content=f.content, mime_type=f.mime_type) for f in files
    )
    return [SaveResultResponse.model_validate(r) for r in results]
