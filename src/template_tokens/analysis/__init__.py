"""
Token analysis: path classification and the scope-aware tree walk.
"""

from .path_classifier import (
    SKIP, Classification, ClassificationKind, PathContext,
    classify, dasherize, head_segment, normalize_tag_name, to_angle_bracket_name,
)
from .token_collector import TemplateTokensCollector, TokenUsage

__all__ = [
    "SKIP", "Classification", "ClassificationKind", "PathContext",
    "classify", "dasherize", "head_segment", "normalize_tag_name", "to_angle_bracket_name",
    "TemplateTokensCollector", "TokenUsage",
]
