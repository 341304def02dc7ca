"""Product data API endpoints."""

import dataclasses
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from unslop.api.deps import get_loader
from unslop.content.loader import EXPORT_ZIP_NAME, ProductLoader


router = APIRouter(prefix="/api/product", tags=["product"])


@router.get("")
async def get_product(
    loader: ProductLoader = Depends(get_loader),
) -> dict[str, Any]:
    """Parsed overview, roadmap, data model, design system and shell.

    Parts that are missing or fail to parse are null.
    """
    return dataclasses.asdict(loader.load_product_data())


@router.get("/export-zip")
async def download_export_zip(
    loader: ProductLoader = Depends(get_loader),
) -> FileResponse:
    zip_path = loader.export_zip_path()
    if zip_path is None:
        raise HTTPException(status_code=404, detail="No export package found")
    return FileResponse(zip_path, media_type="application/zip", filename=EXPORT_ZIP_NAME)
