"""
Shared components: node tree, source locations, scopes and errors.
"""

from .source_location import SourceLocation
from .errors import (
    Diagnostic, ErrorReporter, TemplateErrorCode,
    TemplateTokensError, TemplateSourceError, TemplateSyntaxError, ScopeUnderflowError,
)
from .scope import Scope, ScopeFrame, EMPTY_SCOPE
from .nodes import (
    NodeType, ASTNode, Expression, Statement, AttrValue,
    Template, ElementNode, AttrNode, TextNode, CommentStatement, MustacheCommentStatement,
    ConcatStatement, MustacheStatement, ElementModifierStatement, BlockStatement, Block,
    SubExpression, Hash, HashPair, PathExpression,
    StringLiteral, NumberLiteral, BooleanLiteral, NullLiteral, UndefinedLiteral,
)
