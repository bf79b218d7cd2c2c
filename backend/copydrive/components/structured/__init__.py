"""Structured generation: field registry and the repair pipeline."""

from copydrive.components.structured.fields import FieldRegistry, FieldSpec
from copydrive.components.structured.pipeline import GenerationPipeline, PipelineResult, merge_fields

__all__ = [
    "FieldRegistry",
    "FieldSpec",
    "GenerationPipeline",
    "PipelineResult",
    "merge_fields",
]
