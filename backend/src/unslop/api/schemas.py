"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class DirectoryStatus(BaseModel):
    """Current directory grant."""

    supported: bool
    has_access: bool
    initialized: bool
    path: Optional[str] = None


class DirectoryRequest(BaseModel):
    """The directory the user picked."""

    path: str = Field(..., description="Absolute path of the project directory")


class DirectoryAccessResponse(BaseModel):
    granted: bool
    status: DirectoryStatus


class FileContent(BaseModel):
    path: str
    content: str


class FileList(BaseModel):
    dir: str
    files: list[str]


class SaveFileBody(BaseModel):
    """A file to write into the project directory."""

    path: str = Field(..., min_length=1, description="Path relative to the project root")
    content: str
    mime_type: str = Field("text/markdown", description="Used for the download fallback")


class SaveResultResponse(BaseModel):
    model_config = {"from_attributes": True}

    success: bool
    message: str
    saved_path: Optional[str] = None
    download_id: Optional[str] = None


class PendingDownloadInfo(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    filename: str
    mime_type: str
    created_at: datetime


class SectionStateResponse(BaseModel):
    model_config = {"from_attributes": True}

    section_id: str
    has_spec: bool
    has_data: bool
    has_types: bool
    has_screen_designs: bool
    has_screenshots: bool
    screen_design_count: int
    screenshot_count: int


class ProjectStateResponse(BaseModel):
    model_config = {"from_attributes": True}

    has_product_overview: bool
    has_product_roadmap: bool
    has_data_model: bool
    has_design_system: bool
    has_shell: bool
    has_colors: bool
    has_typography: bool
    sections: dict[str, SectionStateResponse]
    last_updated: int
    project_name: Optional[str] = None


class ExportReadiness(BaseModel):
    ready: bool
    sections_with_screen_designs: list[str]
    has_export_zip: bool


class ApiKeyStatus(BaseModel):
    configured: bool
    masked: Optional[str] = None


class ApiKeyUpdate(BaseModel):
    api_key: str = Field(..., description="OpenRouter API key (sk-or-v1-...)")


class ModelPreference(BaseModel):
    model: str = Field(..., min_length=1, description="OpenRouter model id")


class GenerateRequest(BaseModel):
    """Text generation request."""

    prompt: str = Field(..., min_length=1)
    system_prompt: Optional[str] = None
    model: Optional[str] = None
    include_product_context: bool = Field(
        False, description="Prepend the saved product overview and roadmap to the prompt"
    )
    save_path: Optional[str] = Field(
        None, description="If set, the generated text is saved to this project path"
    )
    mime_type: str = "text/markdown"


class GenerateResponse(BaseModel):
    content: str
    save_result: Optional[SaveResultResponse] = None
