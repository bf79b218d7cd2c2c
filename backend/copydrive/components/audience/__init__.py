"""Advanced audience analysis (15 psychological fields plus ranked mental triggers)."""

from copydrive.components.audience.fields import (
    AUDIENCE_FIELDS,
    MENTAL_TRIGGERS,
    build_audience_registry,
    normalize_mental_triggers,
)
from copydrive.components.audience.service import AudienceAnalyzer

__all__ = [
    "AUDIENCE_FIELDS",
    "MENTAL_TRIGGERS",
    "AudienceAnalyzer",
    "build_audience_registry",
    "normalize_mental_triggers",
]
