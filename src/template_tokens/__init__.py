"""
template_tokens: scope-aware extraction of component, helper and modifier
invocations from Glimmer/Handlebars templates.
"""

from .driver import TokenExtractor, collect_token_usages, default_extractor, extract_tokens_from_template
from .analysis import ClassificationKind, PathContext, TemplateTokensCollector, TokenUsage, classify
from .shared.errors import TemplateSourceError, TemplateSyntaxError, TemplateTokensError

__version__ = "0.1.0"

__all__ = [
    "TokenExtractor",
    "extract_tokens_from_template",
    "collect_token_usages",
    "default_extractor",
    "TemplateTokensCollector",
    "TokenUsage",
    "ClassificationKind",
    "PathContext",
    "classify",
    "TemplateTokensError",
    "TemplateSourceError",
    "TemplateSyntaxError",
]
