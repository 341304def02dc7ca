"""FastAPI dependency injection functions."""

from fastapi import Depends, HTTPException, Request, status

from unslop.content.context import ProductContextService
from unslop.content.loader import ProductLoader
from unslop.llm.client import LLMClient
from unslop.preferences import PreferencesStore
from unslop.project_state.service import ProjectStateService
from unslop.services import Services
from unslop.storage.access import DirectoryAccessManager
from unslop.storage.downloads import DownloadOutbox
from unslop.storage.reader import RuntimeFileReader
from unslop.storage.writer import FileSystemWriter


def get_services(request: Request) -> Services:
    """Services created by the application lifespan.

    Raises:
        HTTPException: 503 if the application has not started yet.
    """
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is starting up",
        )
    return services


def get_access(services: Services = Depends(get_services)) -> DirectoryAccessManager:
    return services.access


def get_reader(services: Services = Depends(get_services)) -> RuntimeFileReader:
    return services.reader


def get_writer(services: Services = Depends(get_services)) -> FileSystemWriter:
    return services.writer


def get_outbox(services: Services = Depends(get_services)) -> DownloadOutbox:
    return services.outbox


def get_project_state(services: Services = Depends(get_services)) -> ProjectStateService:
    return services.project_state


def get_preferences(services: Services = Depends(get_services)) -> PreferencesStore:
    return services.preferences


def get_loader(services: Services = Depends(get_services)) -> ProductLoader:
    return services.loader


def get_context_service(services: Services = Depends(get_services)) -> ProductContextService:
    return services.context


def get_llm(services: Services = Depends(get_services)) -> LLMClient:
    """LLM client built per request so a newly saved API key applies at once."""
    return services.llm_client()
