"""Project repository.

Projects carry the AI context (brand identity, audience segments, offers)
as JSON documents edited by the frontend.
"""

import copy

from sqlalchemy import select
from sqlalchemy.orm import Session

from copydrive.db.models import Project
from copydrive.repositories.base import BaseRepository
from copydrive.utils import get_logger, utc_now_iso

logger = get_logger(__name__)


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entity operations."""

    id_prefix = "prj"

    def __init__(self):
        super().__init__(Project)

    def get_in_workspace(self, db: Session, workspace_id: str, project_id: str) -> Project | None:
        """Get a project only if it belongs to the given workspace."""
        stmt = select(Project).where(Project.id == project_id, Project.workspace_id == workspace_id)
        return db.execute(stmt).scalar_one_or_none()

    def save_segment_analysis(self, db: Session, project: Project, segment_id: str, analysis: dict) -> bool:
        """Store an advanced analysis into the matching audience segment.

        The JSON column is replaced with a new list so SQLAlchemy detects the
        change.

        Returns:
            True if a segment with ``segment_id`` was found and updated
        """
        segments = copy.deepcopy(project.audience_segments or [])
        for segment in segments:
            if isinstance(segment, dict) and segment.get("id") == segment_id:
                segment["advanced_analysis"] = analysis
                segment["analysis_generated_at"] = utc_now_iso()
                break
        else:
            logger.warning(f"Segment {segment_id} not found in project {project.id}")
            return False

        self.update(db, project, {"audience_segments": segments})
        logger.info(f"Saved advanced analysis for segment {segment_id} in project {project.id}")
        return True


project_repository = ProjectRepository()
