"""
Extraction Driver

Wires the template parser to the token collector. Parsing is all-or-nothing:
a template that fails to parse raises TemplateSyntaxError and yields no
tokens at all.
"""

from functools import lru_cache
from typing import List, Optional
import logging

from .analysis.token_collector import TemplateTokensCollector, TokenUsage
from .frontend.parser import Parser
from .shared.nodes import Template
from .utils.config import DEFAULT_SOURCE_FILE

logger = logging.getLogger("template_tokens.driver")


class TokenExtractor:
    """
    Template source -> ordered invocation tokens.

    Building the parser is the expensive part; create one extractor and
    reuse it. Calls share no mutable state, so one extractor may serve
    several threads.
    """

    def __init__(self, parser: Optional[Parser] = None,
                 collector: Optional[TemplateTokensCollector] = None):
        self.parser = parser or Parser()
        self.collector = collector or TemplateTokensCollector()

    def parse(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> Template:
        return self.parser.parse(source, source_file)

    def collect(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> List[TokenUsage]:
        """Token usages with kinds and locations, in document order."""
        if not source.strip():
            return []
        usages = self.collector.collect(self.parse(source, source_file))
        logger.debug(f"{source_file}: {len(usages)} tokens")
        return usages

    def extract(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> List[str]:
        """Normalized tokens in document order, duplicates kept."""
        return [usage.token for usage in self.collect(source, source_file)]


@lru_cache(maxsize=1)
def default_extractor() -> TokenExtractor:
    """Process-wide extractor, built on first use."""
    return TokenExtractor()


def extract_tokens_from_template(source: str, source_file: str = DEFAULT_SOURCE_FILE) -> List[str]:
    return default_extractor().extract(source, source_file)


def collect_token_usages(source: str, source_file: str = DEFAULT_SOURCE_FILE) -> List[TokenUsage]:
    return default_extractor().collect(source, source_file)
