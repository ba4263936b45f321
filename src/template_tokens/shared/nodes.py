"""
Template AST (Abstract Syntax Tree) Definitions

Node shapes produced by the template frontend and consumed read-only by the
token collector. Every node carries a NodeType tag; consumers dispatch on the
tag instead of on the Python class.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from .source_location import SourceLocation


class NodeType(Enum):
    """AST node types"""
    TEMPLATE = "template"
    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    TEXT = "text"
    COMMENT = "comment"
    MUSTACHE_COMMENT = "mustache_comment"
    CONCAT = "concat"
    MUSTACHE = "mustache"
    BLOCK = "block"
    BLOCK_BODY = "block_body"
    SUB_EXPRESSION = "sub_expression"
    ELEMENT_MODIFIER = "element_modifier"
    HASH = "hash"
    HASH_PAIR = "hash_pair"
    PATH = "path"
    STRING_LITERAL = "string_literal"
    NUMBER_LITERAL = "number_literal"
    BOOLEAN_LITERAL = "boolean_literal"
    NULL_LITERAL = "null_literal"
    UNDEFINED_LITERAL = "undefined_literal"


class ASTNode:
    """
    Base class for all template nodes.

    - __slots__ for the two fields every node has
    - location is excluded from equality so trees parsed from differently
      formatted sources compare equal
    """
    __slots__ = ('node_type', 'location')

    def __init__(self, node_type: NodeType, location: Optional[SourceLocation] = None):
        self.node_type = node_type
        self.location = location


# ============================================
# EXPRESSIONS
# ============================================

@dataclass
class PathExpression(ASTNode):
    """A path such as `foo`, `foo-bar/baz`, `this.name` or `@arg.value`, kept as written."""
    original: str

    def __init__(self, original: str, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.PATH, location)
        self.original = original


@dataclass
class StringLiteral(ASTNode):
    value: str

    def __init__(self, value: str, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.STRING_LITERAL, location)
        self.value = value


@dataclass
class NumberLiteral(ASTNode):
    value: Union[int, float]

    def __init__(self, value: Union[int, float], location: Optional[SourceLocation] = None):
        super().__init__(NodeType.NUMBER_LITERAL, location)
        self.value = value


@dataclass
class BooleanLiteral(ASTNode):
    value: bool

    def __init__(self, value: bool, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.BOOLEAN_LITERAL, location)
        self.value = value


@dataclass
class NullLiteral(ASTNode):
    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.NULL_LITERAL, location)


@dataclass
class UndefinedLiteral(ASTNode):
    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.UNDEFINED_LITERAL, location)


@dataclass
class HashPair(ASTNode):
    """`key=value` argument of an invocation."""
    key: str
    value: Expression

    def __init__(self, key: str, value: Expression, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.HASH_PAIR, location)
        self.key = key
        self.value = value


@dataclass
class Hash(ASTNode):
    pairs: List[HashPair]

    def __init__(self, pairs: Optional[List[HashPair]] = None, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.HASH, location)
        self.pairs = list(pairs or [])

    def values(self) -> List[Expression]:
        return [pair.value for pair in self.pairs]


@dataclass
class SubExpression(ASTNode):
    """`(helper param key=value)` nested inside another invocation."""
    path: Expression
    params: List[Expression]
    hash: Hash

    def __init__(self, path: Expression, params: List[Expression], hash: Hash,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.SUB_EXPRESSION, location)
        self.path = path
        self.params = params
        self.hash = hash


Expression = Union[
    PathExpression, SubExpression, StringLiteral, NumberLiteral,
    BooleanLiteral, NullLiteral, UndefinedLiteral,
]


# ============================================
# STATEMENTS
# ============================================

@dataclass
class TextNode(ASTNode):
    chars: str

    def __init__(self, chars: str, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.TEXT, location)
        self.chars = chars


@dataclass
class CommentStatement(ASTNode):
    """HTML comment `<!-- value -->`."""
    value: str

    def __init__(self, value: str, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.COMMENT, location)
        self.value = value


@dataclass
class MustacheCommentStatement(ASTNode):
    """`{{! value }}` or `{{!-- value --}}`."""
    value: str

    def __init__(self, value: str, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.MUSTACHE_COMMENT, location)
        self.value = value


@dataclass
class MustacheStatement(ASTNode):
    """
    `{{path params hash}}`, or `{{{path ...}}}` when trusting is set.

    Appears as content, as a whole attribute value, or as a part of a
    quoted attribute value.
    """
    path: Expression
    params: List[Expression]
    hash: Hash
    trusting: bool

    def __init__(self, path: Expression, params: List[Expression], hash: Hash,
                 trusting: bool = False, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.MUSTACHE, location)
        self.path = path
        self.params = params
        self.hash = hash
        self.trusting = trusting


@dataclass
class ElementModifierStatement(ASTNode):
    """`{{modifier params hash}}` written inside an opening tag."""
    path: Expression
    params: List[Expression]
    hash: Hash

    def __init__(self, path: Expression, params: List[Expression], hash: Hash,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.ELEMENT_MODIFIER, location)
        self.path = path
        self.params = params
        self.hash = hash


@dataclass
class ConcatStatement(ASTNode):
    """Quoted attribute value mixing text and mustaches: `class="a {{b}}"`."""
    parts: List[Union[TextNode, MustacheStatement]]

    def __init__(self, parts: List[Union[TextNode, MustacheStatement]],
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.CONCAT, location)
        self.parts = parts


AttrValue = Union[TextNode, MustacheStatement, ConcatStatement]


@dataclass
class AttrNode(ASTNode):
    """`name`, `name=value`, `@arg=value` or `...attributes` on an element."""
    name: str
    value: AttrValue

    def __init__(self, name: str, value: AttrValue, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.ATTRIBUTE, location)
        self.name = name
        self.value = value


@dataclass
class Block(ASTNode):
    """
    Body of a block statement (its program or its inverse).

    chained is set for `{{else if ...}}` inverses: the body then holds the
    single BlockStatement the chain continues with.
    """
    block_params: List[str]
    body: List[Statement]
    chained: bool

    def __init__(self, body: List[Statement], block_params: Optional[List[str]] = None,
                 chained: bool = False, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.BLOCK_BODY, location)
        self.body = body
        self.block_params = list(block_params or [])
        self.chained = chained


@dataclass
class BlockStatement(ASTNode):
    """`{{#path params hash as |x|}}program{{else}}inverse{{/path}}`: one node for both delimiters."""
    path: Expression
    params: List[Expression]
    hash: Hash
    program: Block
    inverse: Optional[Block]

    def __init__(self, path: Expression, params: List[Expression], hash: Hash,
                 program: Block, inverse: Optional[Block] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.BLOCK, location)
        self.path = path
        self.params = params
        self.hash = hash
        self.program = program
        self.inverse = inverse


@dataclass
class ElementNode(ASTNode):
    """
    `<tag attributes modifiers as |params|>children</tag>`.

    Void elements (`<input>`) and self-closing tags have no children.
    """
    tag: str
    attributes: List[AttrNode]
    modifiers: List[ElementModifierStatement]
    block_params: List[str]
    children: List[Statement]
    self_closing: bool

    def __init__(self, tag: str,
                 attributes: Optional[List[AttrNode]] = None,
                 modifiers: Optional[List[ElementModifierStatement]] = None,
                 block_params: Optional[List[str]] = None,
                 children: Optional[List[Statement]] = None,
                 self_closing: bool = False,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.ELEMENT, location)
        self.tag = tag
        self.attributes = list(attributes or [])
        self.modifiers = list(modifiers or [])
        self.block_params = list(block_params or [])
        self.children = list(children or [])
        self.self_closing = self_closing


Statement = Union[
    TextNode, CommentStatement, MustacheCommentStatement, MustacheStatement,
    BlockStatement, ElementNode,
]


@dataclass
class Template(ASTNode):
    """Root of a parsed template."""
    body: List[Statement]

    def __init__(self, body: List[Statement], location: Optional[SourceLocation] = None):
        super().__init__(NodeType.TEMPLATE, location)
        self.body = body
