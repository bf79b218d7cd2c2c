from .auth_service import authenticate_user, create_access_token, get_password_hash, verify_password, verify_token
from .prompt_service import get_system_prompt

__all__ = [
    "authenticate_user",
    "create_access_token",
    "get_password_hash",
    "verify_password",
    "verify_token",
    "get_system_prompt",
]
