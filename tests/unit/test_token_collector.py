"""
Tests for token extraction: which invocations a template references, in
what order, and how block parameters shadow them.
"""

import pytest

from template_tokens.analysis import ClassificationKind, TemplateTokensCollector
from template_tokens.shared.nodes import (
    Hash, MustacheStatement, NodeType, PathExpression, Template, TextNode,
)


class TestBasicInvocations:
    """One kind of invocation site per case."""

    @pytest.mark.parametrize("source,expected", [
        ("<MyComponent />", ["my-component"]),
        ("<MyComponent::Bar />", ["my-component/bar"]),
        ("{{my-component}}", ["my-component"]),
        ("{{my-component/bar}}", ["my-component/bar"]),
        ("<input {{autocomplete}} >", ["autocomplete"]),
        ("<MyComponent {{autocomplete}} />", ["my-component", "autocomplete"]),
        ("{{#my-component/foo}} {{/my-component/foo}}", ["my-component/foo"]),
        ("<MyComponent::Foo></MyComponent::Foo>", ["my-component/foo"]),
        ('<MyComponent::Foo @name={{format-name "boo"}}></MyComponent::Foo>',
         ["my-component/foo", "format-name"]),
        ('<MyComponent::Foo @name={{format-name (to-uppercase "boo")}}></MyComponent::Foo>',
         ["my-component/foo", "format-name", "to-uppercase"]),
        ('{{#my-component/foo name=(format-name (to-uppercase "boo"))}} {{/my-component/foo}}',
         ["my-component/foo", "format-name", "to-uppercase"]),
        ("<@Foo />", []),
    ])
    def test_extracts(self, extract, source, expected):
        assert extract(source) == expected

    def test_trusting_mustache(self, extract):
        assert extract("{{{raw-html this.body}}}") == ["raw-html"]

    def test_whitespace_controlled_trusting_mustache(self, extract):
        assert extract("{{~{raw-html x}~}}") == ["raw-html"]
        assert extract("<p>\n  {{{~raw-html x~}}}\n</p>") == ["raw-html"]

    def test_modifier_with_helper_argument(self, extract):
        assert extract('<button {{on "click" (fn this.save 1)}}></button>') == ["on", "fn"]

    def test_mustache_inside_quoted_attribute(self, extract):
        assert extract('<div class="a {{if this.active "b"}} c"></div>') == ["if"]

    def test_nested_angle_segments_are_dasherized(self, extract):
        assert extract("<Ui::DataTable::HeaderRow />") == ["ui/data-table/header-row"]

    def test_curly_paths_are_not_normalized(self, extract):
        assert extract("{{MyHelper}}") == ["MyHelper"]

    def test_this_paths_are_emitted_verbatim(self, extract):
        assert extract("{{this.name}}") == ["this.name"]


class TestSkipped:
    """Paths that never produce a token."""

    def test_plain_html(self, extract):
        assert extract('<div class="x"><p>hello</p><br></div>') == []

    def test_arguments(self, extract):
        assert extract("{{@title}}{{yield @model}}<@Item />") == ["yield"]

    def test_comments(self, extract):
        assert extract("{{!-- <Foo /> --}}{{! <Bar /> }}<!-- <Baz /> -->") == []

    def test_escaped_mustache(self, extract):
        assert extract(r"<p>\{{not-a-helper}}</p>{{real}}") == ["real"]
        assert extract(r"\{{<Foo />}}") == []

    def test_named_blocks(self, extract):
        assert extract("<Card><:header>hi</:header></Card>") == ["card"]

    def test_literal_params_only(self, extract):
        assert extract('{{t "hello" 1 true null undefined}}') == ["t"]

    @pytest.mark.parametrize("source", ["", "   ", "\n\t\n"])
    def test_empty_template(self, extract, source):
        assert extract(source) == []


class TestBlockParamScope:
    """Block parameters hide same-named invocations inside their body only."""

    def test_element_block_params(self, extract):
        assert extract("<Foo as |Bar|><Bar /></Foo>") == ["foo"]

    def test_curly_block_params_hide_angle_tag(self, extract):
        assert extract("{{#foo-bar as |Bar|}}<Bar />{{/foo-bar}}") == ["foo-bar"]

    def test_nested_scopes(self, extract):
        assert extract("{{#a as |X|}}{{#b as |Y|}}<X/><Y/>{{/b}}{{/a}}") == ["a", "b"]

    def test_binding_ends_with_the_block(self, extract):
        source = "<Bar /><Foo as |Bar|><Bar /></Foo><Bar />"
        assert extract(source) == ["bar", "foo", "bar"]

    def test_curly_local_shadowed(self, extract):
        source = "{{#each items as |item|}}{{item}}{{item.name}}{{/each}}{{item}}"
        assert extract(source) == ["each", "item"]

    def test_own_arguments_use_outer_scope(self, extract):
        source = '{{#let (concat "a") as |concat|}}{{concat}}{{/let}}'
        assert extract(source) == ["let", "concat"]

    def test_element_attributes_use_outer_scope(self, extract):
        assert extract("<Foo @x={{Bar}} as |Bar|>{{Bar}}</Foo>") == ["foo", "Bar"]

    def test_lookup_is_case_sensitive(self, extract):
        assert extract("{{#foo as |bar|}}<Bar />{{/foo}}") == ["foo", "bar"]

    def test_bound_head_hides_dotted_tag(self, extract):
        source = '{{#let (component "x") as |Card|}}<Card.Header />{{/let}}'
        assert extract(source) == ["let", "component"]

    def test_inverse_does_not_see_program_params(self, extract):
        source = "{{#each xs as |x|}}{{x}}{{else}}{{x}}{{/each}}"
        assert extract(source) == ["each", "x"]

    def test_chained_inverse(self, extract):
        source = "{{#if a}}{{foo}}{{else if b}}{{bar}}{{else}}{{baz}}{{/if}}"
        assert extract(source) == ["if", "foo", "if", "bar", "baz"]

    def test_chained_inverse_block_params(self, extract):
        source = "{{#if a}}{{else let-thing as |z|}}{{z}}{{/if}}"
        assert extract(source) == ["if", "let-thing"]


class TestOrderingAndDuplicates:

    def test_duplicates_kept(self, extract):
        assert extract("{{foo}}<Foo />{{foo}}") == ["foo", "foo", "foo"]

    def test_document_order(self, extract):
        source = '<A @x={{b (c)}} {{d}}>{{#e f=(g)}}<H />{{/e}}</A>{{i}}'
        assert extract(source) == ["a", "b", "c", "d", "e", "g", "h", "i"]

    def test_deep_nesting(self, extract):
        depth = 2000
        source = "<div>" * depth + "{{foo}}" + "</div>" * depth
        assert extract(source) == ["foo"]


class TestTokenUsages:
    """Usage records keep kind, site and location."""

    def test_kinds_and_sites(self, session_extractor):
        usages = session_extractor.collect("<Foo {{bar}}>{{#baz}}{{/baz}}</Foo>")
        assert [u.token for u in usages] == ["foo", "bar", "baz"]
        assert [u.kind for u in usages] == [
            ClassificationKind.COMPONENT, ClassificationKind.INVOCABLE, ClassificationKind.INVOCABLE,
        ]
        assert [u.site for u in usages] == [NodeType.ELEMENT, NodeType.ELEMENT_MODIFIER, NodeType.BLOCK]

    def test_locations(self, session_extractor):
        usages = session_extractor.collect("<div>\n  <Foo />\n  {{bar}}\n</div>", "app.hbs")
        foo, bar = usages
        assert (foo.location.file, foo.location.line, foo.location.column) == ("app.hbs", 2, 3)
        assert (bar.location.line, bar.location.column) == (3, 3)


class _Custom:
    """A node kind the collector has no visitor for."""

    def __init__(self, children):
        self.children = children


class TestCollectorOnTrees:
    """Collector used directly on hand-built trees."""

    def test_unknown_node_children_are_walked(self):
        inner = MustacheStatement(PathExpression("foo"), [], Hash())
        tree = Template([TextNode("x"), _Custom([inner])])
        assert TemplateTokensCollector().tokens(tree) == ["foo"]

    def test_unknown_leaf_yields_nothing(self):
        tree = Template([object()])
        assert TemplateTokensCollector().tokens(tree) == []

    def test_literal_callee_yields_nothing(self, extract):
        assert extract('{{("foo")}}') == []
