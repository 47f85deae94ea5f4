"""
Models package for docz

Contains data structures and type definitions for the compilation pipeline.
"""

from .state import ProgramState, pipeline
from .directives import NodeType, DIRECTIVE_TABLE, DIRECTIVE_ALIASES, nodeType_fromDirective
from .parser import Token, TokenKind, ParameterScan, InlineStyleAttrs

__all__ = [
    "ProgramState",
    "pipeline",
    "NodeType",
    "DIRECTIVE_TABLE",
    "DIRECTIVE_ALIASES",
    "nodeType_fromDirective",
    "Token",
    "TokenKind",
    "ParameterScan",
    "InlineStyleAttrs",
]
