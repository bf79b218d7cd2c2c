"""AI generation history repository."""

from typing import Any

from sqlalchemy.orm import Session

from copydrive.db.models import AIGenerationHistory
from copydrive.repositories.base import BaseRepository


class GenerationHistoryRepository(BaseRepository[AIGenerationHistory]):
    """Repository for AIGenerationHistory entity operations."""

    id_prefix = "gen"

    def __init__(self):
        super().__init__(AIGenerationHistory)

    def record(self, db: Session, **fields: Any) -> AIGenerationHistory:
        """Write one generation row.

        Args:
            db: Database session
            **fields: Column values (workspace_id, prompt and sessions are required)

        Returns:
            Created history row
        """
        return self.create(db, fields)

    def list_for_workspace(self, db: Session, workspace_id: str, limit: int = 50) -> list[AIGenerationHistory]:
        """Most recent generations of a workspace."""
        return self.list_by(db, limit=limit, workspace_id=workspace_id)


generation_history_repository = GenerationHistoryRepository()
