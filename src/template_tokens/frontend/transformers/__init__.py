"""
Template AST Transformers
=========================

Convert the lark parse tree into template nodes.
"""

from .base import TemplateTransformer
from .literals import LiteralParser

__all__ = [
    'TemplateTransformer',
    'LiteralParser',
]
