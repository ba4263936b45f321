"""
Literal Parser - Extracted from TemplateTransformer
Handles parsing of literal tokens (strings, numbers, booleans, null, undefined)
"""

import re
from typing import Union

from ...shared import (
    BooleanLiteral, NullLiteral, NumberLiteral, SourceLocation, StringLiteral, UndefinedLiteral,
)

_ESCAPE = re.compile(r"\\(.)", re.S)

LiteralNode = Union[StringLiteral, NumberLiteral, BooleanLiteral, NullLiteral, UndefinedLiteral]


class LiteralParser:
    """Dedicated parser for literal tokens"""

    @staticmethod
    def parse(token_type: str, value: str, location: SourceLocation) -> LiteralNode:
        """Parse a literal token (already stripped of quotes) into its node"""
        if token_type == 'STRING':
            return StringLiteral(_ESCAPE.sub(r"\1", value), location=location)
        elif token_type == 'NUMBER':
            return LiteralParser._parse_number(value, location)
        elif token_type == 'BOOLEAN':
            return BooleanLiteral(value == "true", location=location)
        elif token_type == 'NULL':
            return NullLiteral(location=location)
        elif token_type == 'UNDEFINED':
            return UndefinedLiteral(location=location)
        raise ValueError(f"not a literal token: {token_type}")

    @staticmethod
    def _parse_number(value: str, location: SourceLocation) -> NumberLiteral:
        if "." in value:
            return NumberLiteral(float(value), location=location)
        return NumberLiteral(int(value), location=location)
