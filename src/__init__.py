"""
docz - Directive markup to HTML compiler

Compiles .dcz documents (@directive(...) blocks mixed with Markdown-like
prose) into a single deterministic HTML5 document.
"""

__version__ = "0.1.0"

from .lib import (
    Parser,
    Compiler,
    HandlerRegistry,
    tokenize,
    parse,
    render_inline,
    render_html,
    document_compile,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "Parser",
    "Compiler",
    "HandlerRegistry",
    "tokenize",
    "parse",
    "render_inline",
    "render_html",
    "document_compile",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
