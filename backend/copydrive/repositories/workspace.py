"""Workspace repository: workspaces, memberships and the per-workspace credits row."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from copydrive.db.models import User, Workspace, WorkspaceCredits, WorkspaceMember
from copydrive.repositories.base import BaseRepository
from copydrive.utils import generate_id, get_timestamp_ms


class WorkspaceRepository(BaseRepository[Workspace]):
    """Repository for Workspace entity operations."""

    id_prefix = "ws"

    def __init__(self):
        super().__init__(Workspace)

    def create_workspace(self, db: Session, owner: User, name: str, commit: bool = True) -> Workspace:
        """Create a workspace owned by ``owner``.

        The owner membership and a zero-balance credits row are created in the
        same unit of work.
        """
        now = get_timestamp_ms()
        workspace = self.create(db, {"name": name, "owner_id": owner.id}, commit=False)
        db.add(
            WorkspaceMember(
                id=generate_id("wsm"),
                workspace_id=workspace.id,
                user_id=owner.id,
                role="owner",
                created_at=now,
            )
        )
        db.add(
            WorkspaceCredits(
                id=generate_id("wcr"),
                workspace_id=workspace.id,
                balance=0.0,
                total_added=0.0,
                total_used=0.0,
                created_at=now,
                updated_at=now,
            )
        )
        self._finish(db, workspace, commit)
        return workspace

    def add_member(self, db: Session, workspace_id: str, user_id: str, role: str = "member") -> WorkspaceMember:
        """Add a user to a workspace."""
        member = WorkspaceMember(
            id=generate_id("wsm"),
            workspace_id=workspace_id,
            user_id=user_id,
            role=role,
            created_at=get_timestamp_ms(),
        )
        db.add(member)
        db.commit()
        db.refresh(member)
        return member

    def get_member(self, db: Session, workspace_id: str, user_id: str) -> WorkspaceMember | None:
        """Get the membership row of a user in a workspace."""
        stmt = select(WorkspaceMember).where(
            WorkspaceMember.workspace_id == workspace_id,
            WorkspaceMember.user_id == user_id,
        )
        return db.execute(stmt).scalar_one_or_none()

    def is_member(self, db: Session, workspace_id: str, user_id: str) -> bool:
        """Check whether a user belongs to an active workspace."""
        workspace = self.get_by_id(db, workspace_id)
        if workspace is None or not workspace.is_active:
            return False
        return self.get_member(db, workspace_id, user_id) is not None

    def list_for_user(self, db: Session, user_id: str) -> list[Workspace]:
        """List active workspaces the user belongs to, oldest first."""
        stmt = (
            select(Workspace)
            .join(WorkspaceMember, WorkspaceMember.workspace_id == Workspace.id)
            .where(WorkspaceMember.user_id == user_id, Workspace.is_active.is_(True))
            .order_by(Workspace.created_at)
        )
        return list(db.execute(stmt).scalars().all())


workspace_repository = WorkspaceRepository()
