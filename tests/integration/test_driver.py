"""Tests for the extraction driver and the package-level API."""

from concurrent.futures import ThreadPoolExecutor

import pytest

import template_tokens
from template_tokens import (
    ClassificationKind, TemplateSyntaxError, TokenExtractor, collect_token_usages,
    default_extractor, extract_tokens_from_template,
)


class TestModuleFunctions:

    def test_extract_tokens_from_template(self):
        assert extract_tokens_from_template("<MyComponent {{autocomplete}} />") == [
            "my-component", "autocomplete",
        ]

    def test_collect_token_usages(self):
        (usage,) = collect_token_usages("<Foo />", "foo.hbs")
        assert usage.token == "foo"
        assert usage.kind is ClassificationKind.COMPONENT
        assert usage.location.file == "foo.hbs"

    def test_default_extractor_is_shared(self):
        assert default_extractor() is default_extractor()

    def test_syntax_error_propagates(self):
        with pytest.raises(TemplateSyntaxError):
            extract_tokens_from_template("{{#foo}}")

    def test_version(self):
        assert template_tokens.__version__


class TestTokenExtractor:

    def test_whitespace_skips_parsing(self, session_extractor):
        assert session_extractor.collect(" \n ") == []

    def test_parse_returns_tree(self, session_extractor):
        template = session_extractor.parse("{{foo}}")
        assert session_extractor.collector.tokens(template) == ["foo"]

    def test_concurrent_extraction(self, session_extractor):
        sources = [
            "<Foo as |Bar|><Bar /></Foo>",
            "{{#each xs as |x|}}{{x}}{{helper x}}{{/each}}",
            '<input {{autocomplete "on"}} >',
            "<A::B @x={{c (d)}} />",
        ] * 25
        expected = [session_extractor.extract(source) for source in sources]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(session_extractor.extract, sources))
        assert results == expected

    def test_independent_instances(self):
        assert TokenExtractor().extract("{{a}}") == ["a"]
