"""Completion state API endpoints."""

from fastapi import APIRouter, Depends, status

from unslop.api.deps import get_loader, get_project_state
from unslop.api.schemas import ExportReadiness, ProjectStateResponse
from unslop.content.loader import ProductLoader
from unslop.project_state.service import ProjectStateService


router = APIRouter(prefix="/api/state", tags=["state"])


@router.get("", response_model=ProjectStateResponse)
async def get_state(
    project_state: ProjectStateService = Depends(get_project_state),
) -> ProjectStateResponse:
    """Which planning artifacts have been produced."""
    return ProjectStateResponse.model_validate(project_state.get_state().to_dict())


@router.get("/export-readiness", response_model=ExportReadiness)
async def get_export_readiness(
    project_state: ProjectStateService = Depends(get_project_state),
    loader: ProductLoader = Depends(get_loader),
) -> ExportReadiness:
    return ExportReadiness(
        ready=project_state.is_ready_for_export(),
        sections_with_screen_designs=project_state.get_sections_with_screen_designs(),
        has_export_zip=loader.has_export_zip(),
    )


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_state(
    project_state: ProjectStateService = Depends(get_project_state),
) -> None:
    """Reset the completion state. The directory grant is kept."""
    project_state.clear_state()
