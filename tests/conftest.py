"""
Pytest configuration and shared fixtures for all template_tokens tests.

Building the lark parser is the only expensive step, so one extractor is
created per session and shared; it holds no per-call state.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from template_tokens.driver import TokenExtractor


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_extractor():
    """Session-scoped extractor shared across ALL tests (stateless, safe to share)."""
    return TokenExtractor()


@pytest.fixture(scope="session")
def session_parser(session_extractor):
    return session_extractor.parser


# =============================================================================
# Function-scoped conveniences
# =============================================================================

@pytest.fixture
def extract(session_extractor):
    """Template source -> token list."""
    return session_extractor.extract


@pytest.fixture
def parse(session_parser):
    """Template source -> Template node tree."""
    return session_parser.parse
