from .auth_schemas import RegisterResponse, Token, UserLogin, UserRegister, UserResponse
from .schemas import (
    AddCreditsRequest,
    AnalyzeAudienceRequest,
    AnalyzeAudienceResponse,
    AudienceSegment,
    ContentBlock,
    CopySession,
    CreditCheckResponse,
    CreditsResponse,
    CreditTransactionOut,
    GenerationOut,
    OptimizeCopyRequest,
    OptimizeCopyResponse,
    ProjectIdentity,
    WorkspaceSummary,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "RegisterResponse",
    "Token",
    "ProjectIdentity",
    "AudienceSegment",
    "AnalyzeAudienceRequest",
    "AnalyzeAudienceResponse",
    "ContentBlock",
    "CopySession",
    "OptimizeCopyRequest",
    "OptimizeCopyResponse",
    "WorkspaceSummary",
    "CreditsResponse",
    "CreditCheckResponse",
    "AddCreditsRequest",
    "CreditTransactionOut",
    "GenerationOut",
]
