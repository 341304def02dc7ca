"""Directory access API endpoints."""

from pathlib import Path

from fastapi import APIRouter, Depends, status

from unslop.api.deps import get_access
from unslop.api.schemas import DirectoryAccessResponse, DirectoryRequest, DirectoryStatus
from unslop.storage.access import DirectoryAccessManager


router = APIRouter(prefix="/api/directory", tags=["directory"])


def _status(access: DirectoryAccessManager) -> DirectoryStatus:
    handle = access.get_handle()
    return DirectoryStatus(
        supported=access.is_supported(),
        has_access=access.has_access(),
        initialized=access.initialized,
        path=str(handle.path) if handle is not None else None,
    )


@router.get("", response_model=DirectoryStatus)
async def get_directory(
    access: DirectoryAccessManager = Depends(get_access),
) -> DirectoryStatus:
    """Current directory grant, if any."""
    return _status(access)


@router.post("", response_model=DirectoryAccessResponse)
async def select_directory(
    request: DirectoryRequest,
    access: DirectoryAccessManager = Depends(get_access),
) -> DirectoryAccessResponse:
    """Grant read-write access to the directory the user picked.

    A directory that does not exist, is not writable, or lies outside the
    workspace base path is refused with granted=false; the previous grant,
    if any, is kept.
    """
    granted = access.request_access(picker=lambda mode: Path(request.path).expanduser())
    return DirectoryAccessResponse(granted=granted, status=_status(access))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_directory(
    access: DirectoryAccessManager = Depends(get_access),
) -> None:
    """Start a new project: forget the directory and reset the completion state."""
    access.clear_access()
