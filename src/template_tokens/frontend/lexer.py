"""
Template Lexer

Hand-written, mode-switching scanner plugged into lark as a custom lexer.
Template text is not regular: whitespace is content between tags but a
separator inside tags and mustaches, and `{{` opens a different language in
every context. The scanner keeps a stack of modes (content, opening tag,
quoted attribute value, mustache expression) and emits lark Tokens whose
types are declared in grammar.lark.
"""

import bisect
import logging
import re
from typing import Iterator, List, NamedTuple, Optional, Tuple

from lark.lexer import Lexer, Token

from ..shared.errors import TemplateErrorCode, TemplateSyntaxError
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_SOURCE_FILE, VOID_ELEMENTS

logger = logging.getLogger("template_tokens.frontend.lexer")

# Scanner modes
CONTENT = "content"
TAG = "tag"
ATTR_STRING = "attr_string"
EXPRESSION = "expression"

_TEXT = re.compile(r"(?:[^<{\\]|\\\\(?=\{\{)|\\(?!\{\{)|\{(?!\{)|<(?![A-Za-z_@:/]|!--))+")
_START_TAG = re.compile(r"<([A-Za-z_@:][^\s/>{}\"'=<]*)")
_END_TAG = re.compile(r"</\s*([^\s>]+)\s*>")
_WHITESPACE = re.compile(r"\s+")
_LONG_COMMENT_END = re.compile(r"--~?\}\}")
_SHORT_COMMENT_END = re.compile(r"~?\}\}")
_CLOSERS = {
    "}}": re.compile(r"~?\}\}"),
    "}}}": re.compile(r"~?\}\}\}|\}~\}\}"),
}
_ELSE = re.compile(r"else(?=[\s~}])")
_BLOCK_PARAMS = re.compile(r"as\s+\|([^|]*)\|")
_ATTR_NAME = re.compile(r"[^\s\"'>/={}]+")
_UNQUOTED_VALUE = re.compile(r"(?:[^\s>\"'=<`/{]|/(?!>))+")
_STRING = re.compile(r"\"((?:[^\"\\]|\\.)*)\"|'((?:[^'\\]|\\.)*)'", re.S)
_HASH_KEY = re.compile(r"([^\s(){}|=~\"'!#^]+)\s*=(?!=)")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?(?=[\s()}~]|$)")
_KEYWORD = re.compile(r"(true|false|null|undefined)(?=[\s()}~]|$)")
_PATH = re.compile(r"[^\s(){}|=~\"']+")

_KEYWORD_TYPES = {
    "true": "BOOLEAN",
    "false": "BOOLEAN",
    "null": "NULL",
    "undefined": "UNDEFINED",
}


class _Mode(NamedTuple):
    kind: str
    arg: Optional[str]  # tag name, quote character or expected closer
    start: int


class TemplateScanner:
    """
    Single-use scanner over one template source.

    Errors carry DEFAULT_SOURCE_FILE as file name; the parser rebinds them to
    the real file.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self._line_starts: List[int] = [0] + [m.end() for m in re.finditer("\n", source)]
        self._modes: List[_Mode] = [_Mode(CONTENT, None, 0)]
        self._expect_value = False

    # =========================================================================
    # Positions and errors
    # =========================================================================

    def _position(self, pos: int) -> Tuple[int, int]:
        index = bisect.bisect_right(self._line_starts, pos) - 1
        return index + 1, pos - self._line_starts[index] + 1

    def _location(self, start: int, end: Optional[int] = None) -> SourceLocation:
        end = start + 1 if end is None else end
        line, column = self._position(start)
        end_line, end_column = self._position(end)
        return SourceLocation(DEFAULT_SOURCE_FILE, line, column, start, end, end_line, end_column)

    def _error(self, message: str, start: int, end: Optional[int] = None,
               code: TemplateErrorCode = TemplateErrorCode.SYNTAX_ERROR,
               help: Optional[str] = None) -> TemplateSyntaxError:
        return TemplateSyntaxError(message, self._location(start, end), code.value, help=help)

    def _advance(self, type_: str, value: str, end: int) -> Token:
        start = self.pos
        line, column = self._position(start)
        end_line, end_column = self._position(end)
        self.pos = end
        return Token(type_, value, start_pos=start, line=line, column=column,
                     end_line=end_line, end_column=end_column, end_pos=end)

    def _push(self, kind: str, arg: Optional[str], start: int) -> None:
        self._modes.append(_Mode(kind, arg, start))

    def _pop(self) -> None:
        self._modes.pop()

    # =========================================================================
    # Driver
    # =========================================================================

    def tokens(self) -> Iterator[Token]:
        handlers = {
            CONTENT: self._scan_content,
            TAG: self._scan_tag,
            ATTR_STRING: self._scan_attr_string,
            EXPRESSION: self._scan_expression,
        }
        count = 0
        while self.pos < len(self.source):
            token = handlers[self._modes[-1].kind]()
            if token is not None:
                count += 1
                yield token
        if len(self._modes) > 1:
            raise self._unterminated(self._modes[-1])
        logger.debug(f"Lexed {count} tokens from {len(self.source)} characters")

    def _unterminated(self, mode: _Mode) -> TemplateSyntaxError:
        code = TemplateErrorCode.UNTERMINATED
        if mode.kind == TAG:
            return self._error(f"unterminated opening tag <{mode.arg}>", mode.start, code=code,
                               help="close the tag with `>` or `/>`")
        if mode.kind == ATTR_STRING:
            return self._error("unterminated attribute value", mode.start, code=code,
                               help=f"add the closing {mode.arg}")
        return self._error("unterminated mustache", mode.start, code=code,
                           help=f"close the mustache with `{mode.arg}`")

    # =========================================================================
    # Modes
    # =========================================================================

    def _scan_content(self) -> Token:
        src, pos = self.source, self.pos
        if src.startswith("\\{{", pos):
            return self._escaped_mustache()
        if src.startswith("{{", pos):
            return self._open_curly()
        if src.startswith("<!--", pos):
            end = src.find("-->", pos + 4)
            if end < 0:
                raise self._error("unterminated comment", pos, pos + 4, TemplateErrorCode.UNTERMINATED,
                                  help="close the comment with `-->`")
            return self._advance("HTML_COMMENT", src[pos + 4:end], end + 3)
        if src.startswith("</", pos):
            m = _END_TAG.match(src, pos)
            if m is None:
                raise self._error("malformed closing tag", pos, pos + 2)
            return self._advance("END_TAG", m.group(1), m.end())
        m = _START_TAG.match(src, pos)
        if m is not None:
            self._push(TAG, m.group(1), pos)
            return self._advance("START_TAG", m.group(1), m.end())
        m = _TEXT.match(src, pos)
        return self._advance("TEXT", m.group(0), m.end())

    def _escaped_mustache(self) -> Token:
        """`\\{{foo}}` is literal text `{{foo}}`; the backslash is dropped."""
        src, pos = self.source, self.pos
        close = src.find("}}", pos + 3)
        end = close + 2 if close >= 0 else pos + 3
        return self._advance("TEXT", src[pos + 1:end], end)

    def _scan_tag(self) -> Optional[Token]:
        src = self.source
        ws = _WHITESPACE.match(src, self.pos)
        if ws is not None:
            self.pos = ws.end()
            return None
        pos = self.pos
        if self._expect_value:
            self._expect_value = False
            return self._scan_attr_value()
        if src.startswith("/>", pos):
            self._pop()
            return self._advance("_TAG_SELF_CLOSE", "/>", pos + 2)
        if src[pos] == ">":
            tag = self._modes[-1].arg
            self._pop()
            kind = "_VOID_TAG_END" if tag in VOID_ELEMENTS else "_TAG_END"
            return self._advance(kind, ">", pos + 1)
        if src.startswith("{{", pos):
            return self._open_curly()
        if src[pos] == "=":
            self._expect_value = True
            return self._advance("_EQUALS", "=", pos + 1)
        m = _BLOCK_PARAMS.match(src, pos)
        if m is not None:
            return self._advance("BLOCK_PARAMS", m.group(1), m.end())
        m = _ATTR_NAME.match(src, pos)
        if m is not None:
            return self._advance("ATTR_NAME", m.group(0), m.end())
        raise self._error(f"unexpected character {src[pos]!r} in tag <{self._modes[-1].arg}>", pos)

    def _scan_attr_value(self) -> Token:
        src, pos = self.source, self.pos
        if src[pos] in "\"'":
            self._push(ATTR_STRING, src[pos], pos)
            return self._advance("_QUOTE_OPEN", src[pos], pos + 1)
        if src.startswith("{{", pos):
            return self._open_curly()
        m = _UNQUOTED_VALUE.match(src, pos)
        if m is None:
            raise self._error("missing attribute value", pos)
        return self._advance("ATTR_TEXT", m.group(0), m.end())

    def _scan_attr_string(self) -> Token:
        src, pos = self.source, self.pos
        quote = self._modes[-1].arg
        if src.startswith(quote, pos):
            self._pop()
            return self._advance("_QUOTE_CLOSE", quote, pos + 1)
        if src.startswith("{{", pos):
            return self._open_curly()
        stops = [i for i in (src.find(quote, pos), src.find("{{", pos)) if i >= 0]
        end = min(stops) if stops else len(src)
        return self._advance("ATTR_TEXT", src[pos:end], end)

    def _scan_expression(self) -> Optional[Token]:
        src = self.source
        ws = _WHITESPACE.match(src, self.pos)
        if ws is not None:
            self.pos = ws.end()
            return None
        pos = self.pos
        closer = self._modes[-1].arg
        m = _CLOSERS[closer].match(src, pos)
        if m is not None:
            self._pop()
            kind = "_CLOSE_UNESCAPED" if closer == "}}}" else "_CLOSE"
            return self._advance(kind, m.group(0), m.end())
        ch = src[pos]
        if ch == "(":
            return self._advance("_OPEN_SEXPR", ch, pos + 1)
        if ch == ")":
            return self._advance("_CLOSE_SEXPR", ch, pos + 1)
        m = _BLOCK_PARAMS.match(src, pos)
        if m is not None:
            return self._advance("BLOCK_PARAMS", m.group(1), m.end())
        m = _STRING.match(src, pos)
        if m is not None:
            value = m.group(1) if m.group(1) is not None else m.group(2)
            return self._advance("STRING", value, m.end())
        m = _HASH_KEY.match(src, pos)
        if m is not None:
            return self._advance("HASH_KEY", m.group(1), m.end())
        m = _NUMBER.match(src, pos)
        if m is not None:
            return self._advance("NUMBER", m.group(0), m.end())
        m = _KEYWORD.match(src, pos)
        if m is not None:
            return self._advance(_KEYWORD_TYPES[m.group(1)], m.group(1), m.end())
        m = _PATH.match(src, pos)
        if m is not None:
            return self._advance("PATH", m.group(0), m.end())
        raise self._error(f"unexpected character {ch!r} in mustache", pos)

    def _open_curly(self) -> Token:
        """Scan `{{`, `{{{` (or `{{~{`), `{{#`, `{{/`, `{{else` or a mustache comment."""
        src, start = self.source, self.pos
        pos = start + 2
        if src.startswith("~", pos):
            pos += 1
        if src.startswith("{", pos):
            end = pos + 1
            if src.startswith("~", end):
                end += 1
            self._push(EXPRESSION, "}}}", start)
            return self._advance("_OPEN_UNESCAPED", src[start:end], end)
        if src.startswith("!--", pos):
            m = _LONG_COMMENT_END.search(src, pos + 3)
            if m is None:
                raise self._error("unterminated comment", start, pos + 3, TemplateErrorCode.UNTERMINATED,
                                  help="close the comment with `--}}`")
            return self._advance("MUSTACHE_COMMENT", src[pos + 3:m.start()], m.end())
        if src.startswith("!", pos):
            m = _SHORT_COMMENT_END.search(src, pos + 1)
            if m is None:
                raise self._error("unterminated comment", start, pos + 1, TemplateErrorCode.UNTERMINATED,
                                  help="close the comment with `}}`")
            return self._advance("MUSTACHE_COMMENT", src[pos + 1:m.start()], m.end())
        if src.startswith(">", pos):
            raise self._error("partials are not supported", start, pos + 1)
        if src.startswith("^", pos):
            raise self._error("`{{^` inverse sections are not supported", start, pos + 1,
                              help="use `{{else}}` inside the block")
        self._push(EXPRESSION, "}}", start)
        if src.startswith("#", pos):
            return self._advance("_OPEN_BLOCK", src[start:pos + 1], pos + 1)
        if src.startswith("/", pos):
            return self._advance("_OPEN_END_BLOCK", src[start:pos + 1], pos + 1)
        m = _ELSE.match(src, pos)
        if m is not None:
            return self._advance("_OPEN_INVERSE", src[start:m.end()], m.end())
        return self._advance("_OPEN", src[start:pos], pos)


class TemplateLexer(Lexer):
    """
    lark custom lexer: one TemplateScanner per parse call, so a single Lark
    instance can serve concurrent callers.
    """
    __future_interface__ = True

    def __init__(self, lexer_conf):
        self.lexer_conf = lexer_conf

    def lex(self, lexer_state, parser_state) -> Iterator[Token]:
        text = lexer_state.text
        source = text if isinstance(text, str) else text.text
        return TemplateScanner(source).tokens()
