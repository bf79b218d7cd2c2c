"""Repository layer for database access.

This module provides repository classes that abstract database operations.
Repositories handle CRUD operations and business rules for each entity.

Usage:
    from copydrive.repositories import credit_repository, workspace_repository

    # Check membership
    workspace_repository.is_member(db, workspace_id, user_id)

    # Debit a completed generation
    credit_repository.debit_workspace_credits(db, workspace_id, model, tokens, tin, tout)
"""

from copydrive.repositories.credit import CreditRepository, calculate_credits, credit_repository
from copydrive.repositories.generation_history import (
    GenerationHistoryRepository,
    generation_history_repository,
)
from copydrive.repositories.project import ProjectRepository, project_repository
from copydrive.repositories.prompt_template import PromptTemplateRepository, prompt_template_repository
from copydrive.repositories.user import UserRepository, user_repository
from copydrive.repositories.workspace import WorkspaceRepository, workspace_repository

__all__ = [
    "UserRepository",
    "user_repository",
    "WorkspaceRepository",
    "workspace_repository",
    "ProjectRepository",
    "project_repository",
    "CreditRepository",
    "credit_repository",
    "calculate_credits",
    "GenerationHistoryRepository",
    "generation_history_repository",
    "PromptTemplateRepository",
    "prompt_template_repository",
]
