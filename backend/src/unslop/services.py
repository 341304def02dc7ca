"""Application services and their lifecycle.

Everything is constructed explicitly from a Config so tests can build
isolated instances. start() restores persisted state; close() releases the
database connections.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from unslop.config import Config
from unslop.content.context import ProductContextService
from unslop.content.loader import ProductLoader
from unslop.llm.client import LLMClient
from unslop.preferences import PreferencesStore
from unslop.project_state.service import ProjectStateService
from unslop.project_state.tracker import CompletionTracker
from unslop.storage.access import DirectoryAccessManager, DirectoryPicker
from unslop.storage.cache import ReadCache
from unslop.storage.downloads import DownloadOutbox
from unslop.storage.handle_store import DirectoryHandleStore
from unslop.storage.reader import RuntimeFileReader
from unslop.storage.writer import FileSystemWriter

logger = logging.getLogger(__name__)


@dataclass
class Services:
    settings: Config
    project_state: ProjectStateService
    access: DirectoryAccessManager
    reader: RuntimeFileReader
    writer: FileSystemWriter
    outbox: DownloadOutbox
    preferences: PreferencesStore
    loader: ProductLoader
    context: ProductContextService

    @classmethod
    def create(cls, settings: Config, picker: Optional[DirectoryPicker] = None) -> "Services":
        settings.data_dir.mkdir(parents=True, exist_ok=True)

        project_state = ProjectStateService(settings.state_db_path)
        access = DirectoryAccessManager(
            DirectoryHandleStore(settings.handles_db_path),
            project_state,
            picker=picker,
            supported=settings.storage.directory_access,
            base_path=settings.workspace_base_path,
        )
        reader = RuntimeFileReader(access, ReadCache(ttl_ms=settings.cache_ttl_ms))
        outbox = DownloadOutbox(max_pending=settings.storage.max_pending_downloads)
        writer = FileSystemWriter(access, outbox, CompletionTracker(project_state))
        loader = ProductLoader(reader, access, defaults_dir=settings.defaults_dir)

        return cls(
            settings=settings,
            project_state=project_state,
            access=access,
            reader=reader,
            writer=writer,
            outbox=outbox,
            preferences=PreferencesStore(settings.preferences_db_path),
            loader=loader,
            context=ProductContextService(loader),
        )

    def start(self) -> None:
        """Load the completion state, then restore the directory grant."""
        self.project_state.load()
        if self.access.initialize():
            logger.info(f"Project directory: {self.access.get_handle().path}")
        else:
            logger.info("No project directory selected")

    def close(self) -> None:
        self.access.close()
        self.project_state.close()
        self.preferences.close()

    def llm_client(self) -> LLMClient:
        """Client using the saved credential and model, else the environment's."""
        llm = self.settings.llm
        return LLMClient(
            api_key=self.preferences.get_api_key() or self.settings.openrouter_api_key,
            model=(
                self.preferences.get_model() or self.settings.model_override or llm.default_model
            ),
            api_base=llm.api_base,
            temperature=llm.default_temperature,
            max_tokens=llm.max_tokens,
            log_path=self.settings.llm_log_path,
        )
