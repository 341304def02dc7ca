"""Download fallback API endpoints."""

from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from unslop.api.deps import get_outbox
from unslop.api.schemas import PendingDownloadInfo
from unslop.storage.downloads import DownloadOutbox


router = APIRouter(prefix="/api/downloads", tags=["downloads"])


@router.get("", response_model=list[PendingDownloadInfo])
async def list_downloads(
    outbox: DownloadOutbox = Depends(get_outbox),
) -> list[PendingDownloadInfo]:
    """Files waiting to be downloaded, oldest first."""
    return [PendingDownloadInfo.model_validate(d) for d in outbox.list()]


def _content_disposition(filename: str) -> str:
    """Attachment header; names that need escaping use the RFC 5987 form."""
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


@router.get("/{download_id}")
async def fetch_download(
    download_id: str,
    outbox: DownloadOutbox = Depends(get_outbox),
) -> Response:
    """Serve a pending file as an attachment. Each download is served once."""
    download = outbox.get(download_id)
    if download is None:
        raise HTTPException(status_code=404, detail="Download not found")

    response = Response(
        content=download.content,
        media_type=download.mime_type,
        headers={"Content-Disposition": _content_disposition(download.filename)},
    )
    outbox.pop(download_id)
    return response
