"""
Compiler for docz AST to HTML

Transforms a parsed Document tree into one complete HTML5 document.
Rendering is deterministic and never mutates the tree.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..config import AppSettings
from ..models.directives import NodeType
from .ast import ASTNode
from .directives import STYLE_MODE_GLOBAL, HandlerRegistry
from .inline import InlineRenderer, html_escape
from .log import LOG
from .styles import globalRules_render, styleAliases_parse
from .vendor import vendorAssets_render


META_TITLE = 'title'
META_DEFAULT_CSS = 'default_css'


@dataclass(frozen=True)
class RenderOptions:
    """
    Options for the HTML renderer

    Attributes:
        enable_tailwind: Link the vendored Tailwind stylesheet
        enable_katex: Link vendored KaTeX stylesheet and scripts
        asset_root: URL prefix the vendored tree is served under
        lock_path: Path to VENDOR.lock
        highlight_code: Pygments-highlight code blocks with a language
        class_css_heuristic: Move CSS-looking class= values of inline
                             style spans into style=
    """
    enable_tailwind: bool = False
    enable_katex: bool = False
    asset_root: str = '/third_party'
    lock_path: str = 'third_party/VENDOR.lock'
    highlight_code: bool = False
    class_css_heuristic: bool = False

    @classmethod
    def from_settings(cls, settings: AppSettings) -> 'RenderOptions':
        """Derive render options from application settings"""
        return cls(
            enable_tailwind=settings.enable_tailwind,
            enable_katex=settings.enable_katex,
            asset_root=settings.asset_root,
            lock_path=settings.vendor_lock_path,
            highlight_code=settings.highlight_code,
            class_css_heuristic=settings.class_css_heuristic,
        )


class Compiler:
    """
    Compiles a docz Document to a standalone HTML document

    Responsibilities:
    - Collect <head> material (title, meta tags, stylesheets, global CSS,
      vendored assets) from the whole tree before the body is emitted
    - Build the style alias table from StyleDef nodes
    - Render each body node through its registered handler
    """

    def __init__(self, options: Optional[RenderOptions] = None) -> None:
        """
        Initialize compiler

        Args:
            options: Render options (defaults when omitted)
        """
        self.options = options or RenderOptions()
        self.handlers = HandlerRegistry()
        self.aliases: Dict[str, str] = {}
        self.inline = InlineRenderer(self.aliases, class_css_heuristic=self.options.class_css_heuristic)

    def render_html(self, document: ASTNode) -> str:
        """
        Render a Document tree to HTML

        Args:
            document: Document root from the parser

        Returns:
            '<!DOCTYPE html>\\n<html>\\n<head>\\n...</head>\\n<body>\\n...</body>\\n</html>\\n'
        """
        LOG("Rendering HTML...", level=2)
        self.aliases_collect(document)

        head = self.head_build(document)
        body = self.body_build(document)

        parts = ['<!DOCTYPE html>\n<html>\n<head>\n']
        parts.extend(f'{line}\n' for line in head)
        parts.append('</head>\n<body>\n')
        parts.extend(f'{line}\n' for line in body)
        parts.append('</body>\n</html>\n')
        return ''.join(parts)

    def aliases_collect(self, document: ASTNode) -> None:
        """Fill the alias table from every StyleDef node in document order"""
        self.aliases.clear()
        for node in document.find_all(NodeType.STYLEDEF):
            styleAliases_parse(node.content, self.aliases)
        LOG(f"Collected {len(self.aliases)} style aliases", level=3)

    def head_build(self, document: ASTNode) -> List[str]:
        """
        Build the <head> lines

        Order: title and meta tags (in attribute order), default stylesheet,
        the global <style> block, vendored assets.
        """
        lines: List[str] = []
        title_seen = False
        default_css: Optional[str] = None

        for meta in document.find_all(NodeType.META):
            for key, value in meta.attributes.items():
                if key == META_TITLE:
                    if not title_seen:
                        lines.append(f'<title>{html_escape(value)}</title>')
                        title_seen = True
                elif key == META_DEFAULT_CSS:
                    default_css = value
                else:
                    lines.append(f'<meta name="{html_escape(key)}" content="{html_escape(value)}">')

        if default_css:
            lines.append(f'<link rel="stylesheet" href="{html_escape(default_css)}">')

        rules = self.globalRules_collect(document)
        if rules:
            lines.append('<style>')
            lines.extend(rules)
            lines.append('</style>')

        lines.extend(vendorAssets_render(
            self.options.lock_path,
            self.options.asset_root,
            enable_tailwind=self.options.enable_tailwind,
            enable_katex=self.options.enable_katex,
        ))
        return lines

    def globalRules_collect(self, document: ASTNode) -> List[str]:
        """CSS rules from every mode=global Style node, in document order"""
        rules: List[str] = []
        for node in document.find_all(NodeType.STYLE):
            if node.attribute_get('mode') == STYLE_MODE_GLOBAL:
                rules.extend(globalRules_render(node.content))
        return rules

    def body_build(self, document: ASTNode) -> List[str]:
        """Render the document's children, skipping empty output"""
        lines: List[str] = []
        for node in document.children:
            html = self.node_compile(node)
            if html:
                lines.append(html)
        return lines

    def node_compile(self, node: ASTNode) -> str:
        """
        Compile a single body node to HTML

        Args:
            node: AST node to compile

        Returns:
            Compiled HTML for this node; '' for head-only nodes; an HTML
            comment for types without a handler
        """
        spec = self.handlers.spec_get(node.node_type)
        if spec is None or (spec.handler is None and not spec.head_only):
            LOG(f"No handler for {node.node_type.value} node", level=2)
            return f'<!-- Unhandled node: {node.node_type.value} -->'
        if spec.head_only:
            LOG(f"{node.node_type.value} node is head-only ({spec.description})", level=3)
            return ''
        return spec.handler(node, self)

    def inline_render(self, text: str) -> str:
        """Run the inline renderer with the current alias table"""
        return self.inline.render(text)

    def styleClasses_resolve(self, node: ASTNode) -> Optional[str]:
        """
        Class list for a block Style node

        classes= wins over class=; otherwise name= is looked up in the
        alias table.
        """
        for key in ('classes', 'class'):
            value = node.attribute_get(key)
            if value:
                return value
        name = node.attribute_get('name')
        if name is None:
            return None
        resolved = self.aliases.get(name)
        if resolved is None:
            LOG(f"Unresolved style alias '{name}'", level=2)
        return resolved


def render_html(document: ASTNode, options: Optional[RenderOptions] = None) -> str:
    """
    Render a Document tree to a complete HTML document

    Args:
        document: Document root from parse()
        options: Render options (defaults when omitted)

    Returns:
        HTML string
    """
    return Compiler(options).render_html(document)
