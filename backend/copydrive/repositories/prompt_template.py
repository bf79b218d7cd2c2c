"""Prompt template repository."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from copydrive.db.models import AIPromptTemplate
from copydrive.repositories.base import BaseRepository


class PromptTemplateRepository(BaseRepository[AIPromptTemplate]):
    """Repository for admin-editable system prompts."""

    id_prefix = "apt"

    def __init__(self):
        super().__init__(AIPromptTemplate)

    def get_active(self, db: Session, prompt_key: str) -> AIPromptTemplate | None:
        """Get the active template for a key, or None."""
        stmt = select(AIPromptTemplate).where(
            AIPromptTemplate.prompt_key == prompt_key,
            AIPromptTemplate.is_active.is_(True),
        )
        return db.execute(stmt).scalar_one_or_none()


prompt_template_repository = PromptTemplateRepository()
