"""Completion-state index."""

from unslop.project_state.models import ProjectState, SectionState
from unslop.project_state.service import ProjectStateService
from unslop.project_state.tracker import CompletionTracker

__all__ = ["CompletionTracker", "ProjectState", "ProjectStateService", "SectionState"]
