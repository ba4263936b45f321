"""
Template frontend: lexer, grammar and transformer producing Template trees.
"""

from .parser import Parser
from .lexer import TemplateLexer, TemplateScanner

__all__ = ["Parser", "TemplateLexer", "TemplateScanner"]
