"""Pydantic models matching the frontend TypeScript types.

The optimize-copy payload keeps the editor's camelCase names.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# ==================== Project context ====================


class ProjectIdentity(BaseModel):
    model_config = ConfigDict(extra="allow")

    brand_name: str | None = None
    sector: str | None = None
    central_purpose: str | None = None
    brand_personality: list[str] = Field(default_factory=list)
    voice_tones: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)


class AudienceSegment(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    who_is: str | None = None
    biggest_desire: str | None = None
    biggest_pain: str | None = None
    failed_attempts: str | None = None
    beliefs: str | None = None
    behavior: str | None = None
    journey: str | None = None


# ==================== Analyze audience ====================


class AnalyzeAudienceRequest(BaseModel):
    segment: AudienceSegment
    workspace_id: str = Field(..., min_length=1)
    project_context: ProjectIdentity | None = None
    project_id: str | None = None


class AnalyzeAudienceResponse(BaseModel):
    analysis: dict[str, Any]
    tokens_used: int
    credits_debited: float


# ==================== Optimize copy ====================


class ContentBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    type: str
    content: str | list[str] = ""
    config: dict[str, Any] | None = None


class CopySession(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    title: str = ""
    blocks: list[ContentBlock] = Field(default_factory=list)


class OptimizeCopyRequest(BaseModel):
    action: Literal["otimizar", "variacao"]
    originalContent: list[CopySession]
    instructions: str
    projectIdentity: dict[str, Any] | None = None
    audienceSegment: dict[str, Any] | None = None
    offer: dict[str, Any] | None = None
    regenerateInstructions: str | None = None
    copyId: str = Field(..., min_length=1)
    workspaceId: str = Field(..., min_length=1)


class OptimizeCopyResponse(BaseModel):
    sessions: list[dict[str, Any]]


# ==================== Workspaces & credits ====================


class WorkspaceSummary(BaseModel):
    id: str
    name: str
    role: str | None = None
    balance: float = 0.0
    created_at: int


class CreditsResponse(BaseModel):
    workspace_id: str
    balance: float
    total_added: float
    total_used: float


class CreditCheckResponse(BaseModel):
    has_sufficient_credits: bool
    balance: float
    estimated_debit: float


class AddCreditsRequest(BaseModel):
    amount: float = Field(..., gt=0)
    description: str | None = None


class AddCreditsResponse(BaseModel):
    success: bool
    added: float
    balance_before: float
    balance_after: float


class CreditTransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    transaction_type: str
    amount: float
    balance_before: float
    balance_after: float
    tokens_used: int | None = None
    model_used: str | None = None
    multiplier_snapshot: float | None = None
    tpc_snapshot: int | None = None
    description: str | None = None
    created_at: int


class GenerationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    copy_id: str | None = None
    generation_type: str | None = None
    generation_category: str | None = None
    model_used: str | None = None
    total_tokens: int | None = None
    credits_debited: float | None = None
    created_at: int
