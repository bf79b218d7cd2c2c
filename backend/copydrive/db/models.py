"""SQLAlchemy ORM models for CopyDrive.

Entity Hierarchy:
    User <-> WorkspaceMember <-> Workspace
    Workspace -> Project -> Copy
              -> Folder -> Copy
              -> WorkspaceCredits
              -> CreditTransaction
              -> AIGenerationHistory
    ModelMultiplier, AIPromptTemplate (global configuration)

Timestamps are Unix epoch milliseconds. JSON columns hold the editor
documents (sessions/blocks) and project context exactly as the frontend
sends them.
"""

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Column,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class User(Base):
    """User account."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    hashed_password = Column(String(255), nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=True)

    memberships = relationship("WorkspaceMember", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (Index("idx_users_email", "email"),)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class Workspace(Base):
    """Workspace - tenant boundary owning projects, copies, credits and members."""

    __tablename__ = "workspaces"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    owner_id = Column(String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    members = relationship("WorkspaceMember", back_populates="workspace", cascade="all, delete-orphan")
    projects = relationship("Project", back_populates="workspace", cascade="all, delete-orphan")
    credits = relationship("WorkspaceCredits", back_populates="workspace", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (Index("idx_workspaces_owner_id", "owner_id"),)

    def __repr__(self) -> str:
        return f"<Workspace(id={self.id}, name={self.name})>"


class WorkspaceMember(Base):
    """Membership of a user in a workspace."""

    __tablename__ = "workspace_members"

    id = Column(String(64), primary_key=True)
    workspace_id = Column(String(64), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role = Column(Enum("owner", "admin", "member", name="workspace_role"), default="member", nullable=False)
    created_at = Column(BigInteger, nullable=False)

    workspace = relationship("Workspace", back_populates="members")
    user = relationship("User", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("workspace_id", "user_id", name="uq_workspace_member"),
        Index("idx_workspace_members_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<WorkspaceMember(workspace_id={self.workspace_id}, user_id={self.user_id}, role={self.role})>"


class Project(Base):
    """Project - brand identity, audience segments and offers used as AI context."""

    __tablename__ = "projects"

    id = Column(String(64), primary_key=True)
    workspace_id = Column(String(64), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    identity = Column(JSON, nullable=True)  # brand_name, sector, central_purpose, ...
    audience_segments = Column(JSON, nullable=True)  # list of segments, each may carry advanced_analysis
    offers = Column(JSON, nullable=True)
    created_by = Column(String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    workspace = relationship("Workspace", back_populates="projects")
    copies = relationship("Copy", back_populates="project")

    __table_args__ = (Index("idx_projects_workspace_id", "workspace_id"),)

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name})>"


class Folder(Base):
    """Folder - drive node grouping copies inside a workspace."""

    __tablename__ = "folders"

    id = Column(String(64), primary_key=True)
    workspace_id = Column(String(64), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False)
    project_id = Column(String(64), ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    parent_id = Column(String(64), ForeignKey("folders.id", ondelete="CASCADE"), nullable=True)
    name = Column(String(255), nullable=False)
    position = Column(Integer, default=0, nullable=False)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    copies = relationship("Copy", back_populates="folder")

    __table_args__ = (
        Index("idx_folders_workspace_id", "workspace_id"),
        Index("idx_folders_parent_id", "parent_id"),
    )

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name={self.name})>"


class Copy(Base):
    """Copy - document of ordered sessions, each with ordered content blocks."""

    __tablename__ = "copies"

    id = Column(String(64), primary_key=True)
    workspace_id = Column(String(64), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False)
    project_id = Column(String(64), ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    folder_id = Column(String(64), ForeignKey("folders.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(255), nullable=False)
    copy_type = Column(String(32), nullable=True)  # anuncio, landing_page, vsl, email, ...
    sessions = Column(JSON, nullable=False, default=list)
    created_by = Column(String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    project = relationship("Project", back_populates="copies")
    folder = relationship("Folder", back_populates="copies")

    __table_args__ = (
        Index("idx_copies_workspace_id", "workspace_id"),
        Index("idx_copies_folder_id", "folder_id"),
    )

    def __repr__(self) -> str:
        return f"<Copy(id={self.id}, title={self.title})>"


class WorkspaceCredits(Base):
    """WorkspaceCredits - metered usage balance of a workspace."""

    __tablename__ = "workspace_credits"

    id = Column(String(64), primary_key=True)
    workspace_id = Column(String(64), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, unique=True)
    balance = Column(Float, default=0.0, nullable=False)
    total_added = Column(Float, default=0.0, nullable=False)
    total_used = Column(Float, default=0.0, nullable=False)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    workspace = relationship("Workspace", back_populates="credits")

    def __repr__(self) -> str:
        return f"<WorkspaceCredits(workspace_id={self.workspace_id}, balance={self.balance})>"


class CreditTransaction(Base):
    """CreditTransaction - ledger entry for every debit and credit.

    Snapshots (multiplier, tokens-per-credit) record the pricing in force at
    the time of the debit so later configuration changes do not rewrite history.
    """

    __tablename__ = "credit_transactions"

    id = Column(String(64), primary_key=True)
    workspace_id = Column(String(64), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    transaction_type = Column(Enum("debit", "credit", name="credit_transaction_type"), nullable=False)
    amount = Column(Float, nullable=False)
    balance_before = Column(Float, nullable=False)
    balance_after = Column(Float, nullable=False)
    tokens_used = Column(Integer, nullable=True)
    input_tokens = Column(Integer, nullable=True)
    output_tokens = Column(Integer, nullable=True)
    model_used = Column(String(128), nullable=True)
    multiplier_snapshot = Column(Float, nullable=True)
    tpc_snapshot = Column(Integer, nullable=True)
    generation_id = Column(String(64), ForeignKey("ai_generation_history.id", ondelete="SET NULL"), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(BigInteger, nullable=False)

    __table_args__ = (
        Index("idx_credit_transactions_workspace_id", "workspace_id"),
        Index("idx_credit_transactions_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<CreditTransaction(id={self.id}, type={self.transaction_type}, amount={self.amount})>"


class ModelMultiplier(Base):
    """ModelMultiplier - per-model credit price relative to the baseline model."""

    __tablename__ = "model_multipliers"

    id = Column(String(64), primary_key=True)
    model_name = Column(String(128), nullable=False, unique=True)
    display_name = Column(String(255), nullable=False)
    multiplier = Column(Float, default=1.0, nullable=False)
    is_baseline = Column(Boolean, default=False, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        return f"<ModelMultiplier(model_name={self.model_name}, multiplier={self.multiplier})>"


class AIPromptTemplate(Base):
    """AIPromptTemplate - admin-editable system prompts keyed by purpose."""

    __tablename__ = "ai_prompt_templates"

    id = Column(String(64), primary_key=True)
    prompt_key = Column(String(128), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    current_prompt = Column(Text, nullable=False)
    default_prompt = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        return f"<AIPromptTemplate(prompt_key={self.prompt_key})>"


class AIGenerationHistory(Base):
    """AIGenerationHistory - one row per AI generation for a copy."""

    __tablename__ = "ai_generation_history"

    id = Column(String(64), primary_key=True)
    workspace_id = Column(String(64), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False)
    copy_id = Column(String(64), nullable=True)
    created_by = Column(String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    generation_type = Column(String(32), nullable=True)  # optimize, variation, ...
    generation_category = Column(String(32), nullable=True)  # text, image, web_page
    copy_type = Column(String(32), nullable=True)
    prompt = Column(Text, nullable=False)
    parameters = Column(JSON, nullable=True)
    original_content = Column(JSON, nullable=True)
    sessions = Column(JSON, nullable=False)
    project_identity = Column(JSON, nullable=True)
    audience_segment = Column(JSON, nullable=True)
    offer = Column(JSON, nullable=True)
    model_used = Column(String(128), nullable=True)
    input_tokens = Column(Integer, nullable=True)
    output_tokens = Column(Integer, nullable=True)
    total_tokens = Column(Integer, nullable=True)
    credits_debited = Column(Float, nullable=True)
    created_at = Column(BigInteger, nullable=False)

    __table_args__ = (
        Index("idx_ai_generation_history_workspace_id", "workspace_id"),
        Index("idx_ai_generation_history_copy_id", "copy_id"),
        Index("idx_ai_generation_history_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<AIGenerationHistory(id={self.id}, type={self.generation_type})>"
