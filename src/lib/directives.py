"""
Node handlers for docz

Each handler transforms one body-level AST node into HTML. Handlers are
registered per NodeType with a HandlerSpec carrying metadata, and are
called as handler(node, compiler) so they can reach the render options,
the style alias table and the inline renderer.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from ..models.directives import NodeType
from .ast import ASTNode
from .inline import html_escape
from .lexer import DoczLexer, get_lexer
from .styles import inlineStyle_render
from .log import LOG


HEADING_LEVEL_MIN = 1
HEADING_LEVEL_MAX = 6

STYLE_MODE_GLOBAL = 'global'
STYLE_MODE_INLINE = 'inline'

Handler = Callable[[ASTNode, Any], str]


@dataclass
class HandlerSpec:
    """
    Specification for a node handler

    Attributes:
        node_type: Node type the handler renders
        description: Human-readable description
        handler: Rendering function (node, compiler) -> str; None for
                 head-only nodes
        head_only: Node contributes to <head> only and emits nothing in the body
    """
    node_type: NodeType
    description: str
    handler: Optional[Handler] = None
    head_only: bool = False


def headingLevel_resolve(raw: Optional[str]) -> int:
    """
    Resolve a heading level attribute

    Missing or non-numeric values give 1; numbers are clamped to 1..6.
    """
    if raw is None:
        return HEADING_LEVEL_MIN
    try:
        level = int(raw.strip())
    except ValueError:
        LOG(f"Invalid heading level '{raw}', using {HEADING_LEVEL_MIN}", level=2)
        return HEADING_LEVEL_MIN
    return max(HEADING_LEVEL_MIN, min(HEADING_LEVEL_MAX, level))


def codeLexer_get(language: str) -> Lexer:
    """Pygments lexer for a language name, plain text when unknown"""
    if language.lower() in DoczLexer.aliases:
        return get_lexer()
    try:
        return get_lexer_by_name(language)
    except ClassNotFound:
        LOG(f"No highlighter for language '{language}', using plain text", level=2)
        return TextLexer()


class HandlerRegistry:
    """
    Registry of node handler specifications

    Maps NodeType values to HandlerSpec objects.
    """

    def __init__(self) -> None:
        """Initialize the registry and register all built-in handlers"""
        self.specs: Dict[NodeType, HandlerSpec] = {}
        self.blockHandlers_register()
        self.styleHandlers_register()
        self.headOnlyHandlers_register()

    def register(self, spec: HandlerSpec) -> None:
        """Register a handler specification; a later one replaces an earlier one"""
        self.specs[spec.node_type] = spec

    def spec_get(self, node_type: NodeType) -> Optional[HandlerSpec]:
        """
        Get the handler specification for a node type

        Args:
            node_type: Type to look up

        Returns:
            HandlerSpec or None if the type has none
        """
        return self.specs.get(node_type)

    def blockHandlers_register(self) -> None:
        """Register handlers for text, code, math and media blocks"""

        def heading_handler(node: ASTNode, compiler: Any) -> str:
            """Handle @heading - <hN> with inline-rendered text"""
            level = headingLevel_resolve(node.attribute_get('level'))
            text = compiler.inline_render(node.content.rstrip())
            return f'<h{level}>{text}</h{level}>'

        def content_handler(node: ASTNode, compiler: Any) -> str:
            """Handle prose - <p> with inline-rendered text, nothing when blank"""
            text = node.content.strip()
            if not text:
                return ''
            return f'<p>{compiler.inline_render(text)}</p>'

        def code_handler(node: ASTNode, compiler: Any) -> str:
            """Handle @code - verbatim <pre><code>, or Pygments when enabled"""
            language = node.attribute_get('language')
            if compiler.options.highlight_code and language:
                formatter = HtmlFormatter(noclasses=True)
                return highlight(node.content, codeLexer_get(language), formatter).rstrip('\n')
            return f'<pre><code>{node.content}</code></pre>'

        def math_handler(node: ASTNode, compiler: Any) -> str:
            """Handle @math - raw TeX in a math div for client-side rendering"""
            return f'<div class="math">{node.content}</div>'

        def media_handler(node: ASTNode, compiler: Any) -> str:
            """Handle @image / @media"""
            src = html_escape(node.attribute_get('src', ''))
            alt = node.attribute_get('alt')
            alt_attr = f' alt="{html_escape(alt)}"' if alt is not None else ''
            return f'<img src="{src}"{alt_attr} />'

        def import_handler(node: ASTNode, compiler: Any) -> str:
            """Handle @import - stylesheet link"""
            href = html_escape(node.attribute_get('href', ''))
            return f'<link rel="stylesheet" href="{href}">'

        self.register(HandlerSpec(
            node_type=NodeType.HEADING,
            description='Section heading, level 1-6',
            handler=heading_handler,
        ))
        self.register(HandlerSpec(
            node_type=NodeType.CONTENT,
            description='Paragraph of prose',
            handler=content_handler,
        ))
        self.register(HandlerSpec(
            node_type=NodeType.CODEBLOCK,
            description='Preformatted code block',
            handler=code_handler,
        ))
        self.register(HandlerSpec(
            node_type=NodeType.MATH,
            description='Display math',
            handler=math_handler,
        ))
        self.register(HandlerSpec(
            node_type=NodeType.MEDIA,
            description='Image',
            handler=media_handler,
        ))
        self.register(HandlerSpec(
            node_type=NodeType.IMPORT,
            description='External stylesheet',
            handler=import_handler,
        ))

    def styleHandlers_register(self) -> None:
        """
        Register the Style handler

        mode=global rules are collected into <head> by the compiler;
        mode=inline renders a styled span; anything else renders a div
        with classes.
        """

        def style_handler(node: ASTNode, compiler: Any) -> str:
            """Handle @style / @css"""
            mode = node.attribute_get('mode')
            if mode == STYLE_MODE_GLOBAL:
                return ''
            if mode == STYLE_MODE_INLINE:
                style = html_escape(inlineStyle_render(node.attributes))
                return f'<span style="{style}">{node.content}</span>'

            classes = compiler.styleClasses_resolve(node)
            class_attr = f' class="{html_escape(classes)}"' if classes else ''
            return f'<div{class_attr}>{node.content}</div>'

        self.register(HandlerSpec(
            node_type=NodeType.STYLE,
            description='Global CSS rules, inline styled span, or classed block',
            handler=style_handler,
        ))

    def headOnlyHandlers_register(self) -> None:
        """Register nodes that only feed <head> or the alias table"""
        self.register(HandlerSpec(
            node_type=NodeType.META,
            description='Document metadata (title, meta tags, default_css)',
            head_only=True,
        ))
        self.register(HandlerSpec(
            node_type=NodeType.STYLEDEF,
            description='Style alias definitions (alias: class list)',
            head_only=True,
        ))
