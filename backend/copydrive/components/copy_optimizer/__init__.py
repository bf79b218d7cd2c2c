"""Copy optimization ("otimizar") and variation ("variacao") of editor sessions."""

from copydrive.components.copy_optimizer.prompts import ACTIONS, build_system_prompt, build_user_prompt
from copydrive.components.copy_optimizer.schema import copy_schema, copy_tool, stamp_ids
from copydrive.components.copy_optimizer.service import CopyOptimizer

__all__ = [
    "ACTIONS",
    "CopyOptimizer",
    "build_system_prompt",
    "build_user_prompt",
    "copy_schema",
    "copy_tool",
    "stamp_ids",
]
