"""
Template AST Transformer
Converts the lark parse tree into template nodes (shared/nodes.py)
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union
import logging

from lark import v_args
from lark.lexer import Token
from lark.visitors import Transformer_NonRecursive
from typing_extensions import TypeAlias

from ...shared import (
    AttrNode, Block, BlockStatement, CommentStatement, ConcatStatement, ElementModifierStatement,
    ElementNode, Expression, Hash, HashPair, MustacheCommentStatement, MustacheStatement,
    PathExpression, SourceLocation, Statement, SubExpression, Template, TemplateErrorCode,
    TemplateSyntaxError, TemplateTokensError, TextNode,
)
from .literals import LiteralNode, LiteralParser

# Lark Meta object carries position information; empty for rules that matched nothing
LarkMeta: TypeAlias = object
TagPart: TypeAlias = Union[AttrNode, ElementModifierStatement, List[str], MustacheCommentStatement]

logger: logging.Logger = logging.getLogger(__name__)


@dataclass
class Invocation:
    """Internal result of the `call` rule: callee plus its arguments"""
    path: Expression
    params: List[Expression] = field(default_factory=list)
    hash: Hash = field(default_factory=Hash)


@dataclass
class TagParts:
    """Internal result of the `tag_parts` rule"""
    attributes: List[AttrNode] = field(default_factory=list)
    modifiers: List[ElementModifierStatement] = field(default_factory=list)
    block_params: List[str] = field(default_factory=list)


def _describe_path(path: Expression) -> str:
    return path.original if isinstance(path, PathExpression) else type(path).__name__


@v_args(inline=True, meta=True)
class TemplateTransformer(Transformer_NonRecursive):
    """
    Template AST transformer.

    Non-recursive so that deeply nested templates do not hit the interpreter
    recursion limit. One instance per parse: it holds the file name used for
    source locations.
    """

    def __init__(self, current_file: str) -> None:
        super().__init__()
        self.current_file = current_file

    def __default__(self, data, children, meta):
        raise TemplateTokensError(f"Missing transformer method for grammar rule '{data}'")

    def _extract_location(self, meta: LarkMeta) -> Optional[SourceLocation]:
        """Extract location from Lark meta object"""
        if meta is None or getattr(meta, "empty", True):
            return None
        return SourceLocation(
            file=self.current_file,
            line=meta.line,
            column=meta.column,
            start=meta.start_pos,
            end=meta.end_pos,
            end_line=meta.end_line,
            end_column=meta.end_column,
        )

    def _token_location(self, token: Token) -> SourceLocation:
        return SourceLocation(
            file=self.current_file,
            line=token.line,
            column=token.column,
            start=token.start_pos,
            end=token.end_pos,
            end_line=token.end_line,
            end_column=token.end_column,
        )

    # =========================================================================
    # TEMPLATE STRUCTURE
    # =========================================================================

    def start(self, meta: LarkMeta, *statements: Statement) -> Template:
        return Template(body=list(statements), location=self._extract_location(meta))

    def text(self, meta: LarkMeta, token: Token) -> TextNode:
        return TextNode(str(token), location=self._extract_location(meta))

    def comment(self, meta: LarkMeta, token: Token) -> CommentStatement:
        return CommentStatement(str(token), location=self._extract_location(meta))

    def mustache_comment(self, meta: LarkMeta, token: Token) -> MustacheCommentStatement:
        return MustacheCommentStatement(str(token), location=self._extract_location(meta))

    # =========================================================================
    # INVOCATIONS
    # =========================================================================

    def call(self, meta: LarkMeta, callee: Expression, *arguments: Union[Expression, HashPair]) -> Invocation:
        """Grammar: _expr _expr* pair* - positional params always precede hash pairs"""
        params = [arg for arg in arguments if not isinstance(arg, HashPair)]
        pairs = [arg for arg in arguments if isinstance(arg, HashPair)]
        hash_location = None
        if pairs:
            first, last = pairs[0].location, pairs[-1].location
            if first is not None and last is not None:
                hash_location = SourceLocation(
                    file=first.file, line=first.line, column=first.column, start=first.start,
                    end=last.end, end_line=last.end_line, end_column=last.end_column,
                )
        return Invocation(path=callee, params=params, hash=Hash(pairs, location=hash_location))

    def pair(self, meta: LarkMeta, key: Token, value: Expression) -> HashPair:
        return HashPair(str(key), value, location=self._extract_location(meta))

    def mustache(self, meta: LarkMeta, invocation: Invocation) -> MustacheStatement:
        return MustacheStatement(invocation.path, invocation.params, invocation.hash,
                                 trusting=False, location=self._extract_location(meta))

    def trusting_mustache(self, meta: LarkMeta, invocation: Invocation) -> MustacheStatement:
        return MustacheStatement(invocation.path, invocation.params, invocation.hash,
                                 trusting=True, location=self._extract_location(meta))

    def sexpr(self, meta: LarkMeta, invocation: Invocation) -> SubExpression:
        return SubExpression(invocation.path, invocation.params, invocation.hash,
                             location=self._extract_location(meta))

    def modifier(self, meta: LarkMeta, invocation: Invocation) -> ElementModifierStatement:
        return ElementModifierStatement(invocation.path, invocation.params, invocation.hash,
                                        location=self._extract_location(meta))

    # =========================================================================
    # EXPRESSIONS
    # =========================================================================

    def path(self, meta: LarkMeta, token: Token) -> PathExpression:
        return PathExpression(str(token), location=self._extract_location(meta))

    def _literal(self, meta: LarkMeta, token: Token) -> LiteralNode:
        return LiteralParser.parse(token.type, str(token), self._extract_location(meta))

    def string(self, meta: LarkMeta, token: Token) -> LiteralNode:
        return self._literal(meta, token)

    def number(self, meta: LarkMeta, token: Token) -> LiteralNode:
        return self._literal(meta, token)

    def boolean(self, meta: LarkMeta, token: Token) -> LiteralNode:
        return self._literal(meta, token)

    def null(self, meta: LarkMeta, token: Token) -> LiteralNode:
        return self._literal(meta, token)

    def undefined(self, meta: LarkMeta, token: Token) -> LiteralNode:
        return self._literal(meta, token)

    # =========================================================================
    # BLOCKS
    # =========================================================================

    def block_params(self, meta: LarkMeta, token: Token) -> List[str]:
        """Grammar: BLOCK_PARAMS - the lexer keeps only the text between the pipes"""
        return str(token).split()

    def program(self, meta: LarkMeta, *statements: Statement) -> Block:
        return Block(list(statements), location=self._extract_location(meta))

    def block(self, meta: LarkMeta, invocation: Invocation, block_params: Optional[List[str]],
              program: Block, inverse: Optional[Block], close_path: PathExpression) -> BlockStatement:
        """Grammar: {{#call as |params|}} program inverse? {{/path}}"""
        opened = _describe_path(invocation.path)
        if not isinstance(invocation.path, PathExpression) or opened != close_path.original:
            raise TemplateSyntaxError(
                f"`{{{{#{opened}}}}}` closed by `{{{{/{close_path.original}}}}}`",
                close_path.location,
                TemplateErrorCode.MISMATCHED_BLOCK_CLOSE.value,
                help=f"close the block with `{{{{/{opened}}}}}`",
            )
        program.block_params = list(block_params or [])
        return BlockStatement(invocation.path, invocation.params, invocation.hash,
                              program, inverse, location=self._extract_location(meta))

    def else_inverse(self, meta: LarkMeta, program: Block) -> Block:
        program.location = self._extract_location(meta)
        return program

    def chained_inverse(self, meta: LarkMeta, invocation: Invocation, block_params: Optional[List[str]],
                        program: Block, inverse: Optional[Block]) -> Block:
        """`{{else if x}}...`: an inverse holding the block the chain continues with"""
        location = self._extract_location(meta)
        program.block_params = list(block_params or [])
        nested = BlockStatement(invocation.path, invocation.params, invocation.hash,
                                program, inverse, location=location)
        return Block([nested], chained=True, location=location)

    # =========================================================================
    # ELEMENTS
    # =========================================================================

    def tag_parts(self, meta: LarkMeta, *parts: TagPart) -> TagParts:
        result = TagParts()
        for part in parts:
            if isinstance(part, AttrNode):
                result.attributes.append(part)
            elif isinstance(part, ElementModifierStatement):
                result.modifiers.append(part)
            elif isinstance(part, list):
                result.block_params.extend(part)
        return result

    def element_body(self, meta: LarkMeta, *statements: Statement) -> List[Statement]:
        return list(statements)

    def _element(self, meta: LarkMeta, start_tag: Token, parts: TagParts,
                 children: List[Statement], self_closing: bool) -> ElementNode:
        return ElementNode(
            str(start_tag),
            attributes=parts.attributes,
            modifiers=parts.modifiers,
            block_params=parts.block_params,
            children=children,
            self_closing=self_closing,
            location=self._extract_location(meta),
        )

    def element(self, meta: LarkMeta, start_tag: Token, parts: TagParts,
                children: List[Statement], end_tag: Token) -> ElementNode:
        if str(end_tag) != str(start_tag):
            raise TemplateSyntaxError(
                f"closing tag </{end_tag}> does not match <{start_tag}>",
                self._token_location(end_tag),
                TemplateErrorCode.MISMATCHED_CLOSING_TAG.value,
                help=f"close the element with </{start_tag}>",
            )
        return self._element(meta, start_tag, parts, children, self_closing=False)

    def self_closing_element(self, meta: LarkMeta, start_tag: Token, parts: TagParts) -> ElementNode:
        return self._element(meta, start_tag, parts, [], self_closing=True)

    def void_element(self, meta: LarkMeta, start_tag: Token, parts: TagParts) -> ElementNode:
        return self._element(meta, start_tag, parts, [], self_closing=False)

    def attribute(self, meta: LarkMeta, name: Token, value: Optional[Union[TextNode, MustacheStatement, ConcatStatement]]) -> AttrNode:
        if value is None:
            value = TextNode("")
        return AttrNode(str(name), value, location=self._extract_location(meta))

    def unquoted_value(self, meta: LarkMeta, token: Token) -> TextNode:
        return TextNode(str(token), location=self._extract_location(meta))

    def attr_text(self, meta: LarkMeta, token: Token) -> TextNode:
        return TextNode(str(token), location=self._extract_location(meta))

    def quoted_value(self, meta: LarkMeta, *parts: Union[TextNode, MustacheStatement]) -> Union[TextNode, ConcatStatement]:
        """Text-only values collapse to one TextNode; anything with a mustache is a concat"""
        location = self._extract_location(meta)
        if all(isinstance(part, TextNode) for part in parts):
            return TextNode("".join(part.chars for part in parts), location=location)
        return ConcatStatement(list(parts), location=location)
