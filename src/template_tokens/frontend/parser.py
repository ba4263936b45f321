"""
Parser

Template source text -> Template node tree. Owns the lark LALR parser built
from grammar.lark with TemplateLexer as its lexer, and turns every failure
into a TemplateSyntaxError bound to the parsed file.
"""

from dataclasses import replace
from pathlib import Path
from typing import Dict
import logging

from lark import Lark
from lark.exceptions import UnexpectedInput, UnexpectedToken, VisitError

from ..shared.errors import TemplateErrorCode, TemplateSyntaxError, TemplateTokensError
from ..shared.nodes import Template
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_SOURCE_FILE
from .lexer import TemplateLexer
from .transformers.base import TemplateTransformer

logger = logging.getLogger("template_tokens.frontend.parser")

# Human-readable names for grammar terminals, used in error messages
_TERMINAL_NAMES: Dict[str, str] = {
    "TEXT": "text",
    "HTML_COMMENT": "comment",
    "MUSTACHE_COMMENT": "mustache comment",
    "START_TAG": "opening tag",
    "END_TAG": "closing tag",
    "ATTR_NAME": "attribute name",
    "ATTR_TEXT": "attribute text",
    "PATH": "path",
    "STRING": "string",
    "NUMBER": "number",
    "BOOLEAN": "boolean",
    "NULL": "`null`",
    "UNDEFINED": "`undefined`",
    "HASH_KEY": "hash argument",
    "BLOCK_PARAMS": "block parameters",
    "_OPEN": "`{{`",
    "_CLOSE": "`}}`",
    "_OPEN_UNESCAPED": "`{{{`",
    "_CLOSE_UNESCAPED": "`}}}`",
    "_OPEN_BLOCK": "`{{#`",
    "_OPEN_END_BLOCK": "`{{/`",
    "_OPEN_INVERSE": "`{{else`",
    "_OPEN_SEXPR": "`(`",
    "_CLOSE_SEXPR": "`)`",
    "_TAG_END": "`>`",
    "_TAG_SELF_CLOSE": "`/>`",
    "_VOID_TAG_END": "`>`",
    "_EQUALS": "`=`",
    "_QUOTE_OPEN": "opening quote",
    "_QUOTE_CLOSE": "closing quote",
    "$END": "end of template",
}


def _describe_terminal(name: str) -> str:
    return _TERMINAL_NAMES.get(name, name)


class Parser:
    """
    Template parser.

    - Takes source text, returns a Template node tree
    - Preserves source locations
    - All-or-nothing: any failure raises TemplateSyntaxError, never a partial tree

    The Lark instance is built once and shared; every parse call gets its own
    scanner and transformer, so one Parser can serve concurrent callers.
    """

    def __init__(self):
        grammar_path = Path(__file__).parent / "grammar.lark"
        self.parser = Lark.open(
            grammar_path,
            start='start',
            parser='lalr',
            lexer=TemplateLexer,
            propagate_positions=True,   # node locations for token usages and errors
            maybe_placeholders=True,    # [optional] items always occupy a child slot
        )

    def parse(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> Template:
        """Parse template source to its node tree."""
        try:
            tree = self.parser.parse(source)
            template = TemplateTransformer(source_file).transform(tree)
        except TemplateSyntaxError as e:
            raise self._bind(e, source, source_file) from None
        except VisitError as e:
            if isinstance(e.orig_exc, TemplateSyntaxError):
                raise self._bind(e.orig_exc, source, source_file) from None
            if isinstance(e.orig_exc, TemplateTokensError):
                raise e.orig_exc from e
            raise
        except UnexpectedToken as e:
            raise self._unexpected_token(e, source, source_file) from e
        except UnexpectedInput as e:
            location = SourceLocation(source_file, e.line, e.column, getattr(e, "pos_in_stream", 0) or 0)
            raise TemplateSyntaxError(f"Parse error: {e}", location, source_code=source) from e

        logger.debug(f"Parsed {source_file}: {len(template.body)} top-level statements")
        return template

    @staticmethod
    def _bind(error: TemplateSyntaxError, source: str, source_file: str) -> TemplateSyntaxError:
        """Attach the file name and source text to an error raised while scanning or transforming"""
        location = error.location
        if location is not None and location.file != source_file:
            location = replace(location, file=source_file)
        return TemplateSyntaxError(error.message, location, error.error_code,
                                   source_code=source, help=error.help_text)

    @staticmethod
    def _unexpected_token(error: UnexpectedToken, source: str, source_file: str) -> TemplateSyntaxError:
        token = error.token
        expected = sorted({_describe_terminal(name) for name in (error.expected or ())})
        help = f"expected one of: {', '.join(expected)}" if expected else None
        if token.type == "$END":
            line, column = token.line or 1, token.column or 1
            end_line, end_column = token.end_line or line, token.end_column or column
            location = SourceLocation(source_file, end_line, end_column, len(source), len(source))
            return TemplateSyntaxError("unexpected end of template", location,
                                       TemplateErrorCode.UNEXPECTED_EOF.value,
                                       source_code=source, help=help)
        location = SourceLocation(
            source_file, token.line, token.column, token.start_pos, token.end_pos,
            token.end_line, token.end_column,
        )
        return TemplateSyntaxError(f"unexpected {_describe_terminal(token.type)}", location,
                                   source_code=source, help=help)
