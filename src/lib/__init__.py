"""
docz - Directive markup to HTML compiler

Core library: tokenizer, parser, inline and block renderers.
"""

__version__ = "0.1.0"

from .tokenizer import Tokenizer, TokenizerError, TokenizerStuck, tokenize
from .ast import ASTNode
from .parser import Parser, parse
from .inline import InlineRenderer, render_inline
from .compiler import Compiler, RenderOptions, render_html
from .directives import HandlerRegistry
from .plugins import Plugin, PluginManager
from .pipeline import document_compile
from .log import LOG, state_connectToLogger

__all__ = [
    "Tokenizer",
    "TokenizerError",
    "TokenizerStuck",
    "tokenize",
    "ASTNode",
    "Parser",
    "parse",
    "InlineRenderer",
    "render_inline",
    "Compiler",
    "RenderOptions",
    "render_html",
    "HandlerRegistry",
    "Plugin",
    "PluginManager",
    "document_compile",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
