"""
Directive table and node type models

Defines the node types of the docz AST and the canonical mapping from
directive names to node types. Downstream converters depend on the exact
node_type values, so this table is the single source of truth.
"""

from enum import Enum
from typing import Dict, FrozenSet


class NodeType(Enum):
    """
    Types of docz AST nodes

    The value is the name used in HTML comments and by converters.
    """
    DOCUMENT = "Document"
    META = "Meta"
    HEADING = "Heading"
    CONTENT = "Content"
    CODEBLOCK = "CodeBlock"
    STYLE = "Style"
    STYLEDEF = "StyleDef"
    IMPORT = "Import"
    MATH = "Math"
    MEDIA = "Media"


# Directive lexeme (with leading '@') -> node type
DIRECTIVE_TABLE: Dict[str, NodeType] = {
    '@meta': NodeType.META,
    '@heading': NodeType.HEADING,
    '@code': NodeType.CODEBLOCK,
    '@math': NodeType.MATH,
    '@image': NodeType.MEDIA,
    '@import': NodeType.IMPORT,
    '@style': NodeType.STYLE,
    '@style-def': NodeType.STYLEDEF,
}

# Alternative spellings resolved before the table lookup
DIRECTIVE_ALIASES: Dict[str, str] = {
    '@css': '@style',
    '@media': '@image',
    '@styledef': '@style-def',
}

# Node types whose body runs up to a closing @end
BODY_NODE_TYPES: FrozenSet[NodeType] = frozenset({
    NodeType.CODEBLOCK,
    NodeType.MATH,
    NodeType.STYLE,
    NodeType.STYLEDEF,
})

DEFAULT_FENCED_DIRECTIVES: FrozenSet[str] = frozenset({'@code', '@math', '@style', '@css'})


def nodeType_fromDirective(directive: str) -> NodeType:
    """
    Map a directive lexeme to its node type

    Aliases are resolved first; anything unrecognized becomes CONTENT so
    unknown directives degrade to plain text instead of failing.

    Args:
        directive: Directive lexeme including the leading '@'

    Returns:
        The NodeType for the directive

    Example:
        >>> nodeType_fromDirective('@css')
        <NodeType.STYLE: 'Style'>
        >>> nodeType_fromDirective('@whatever')
        <NodeType.CONTENT: 'Content'>
    """
    canonical = DIRECTIVE_ALIASES.get(directive, directive)
    return DIRECTIVE_TABLE.get(canonical, NodeType.CONTENT)


def bodyBearing_is(node_type: NodeType) -> bool:
    """Check if a node type captures a body up to @end"""
    return node_type in BODY_NODE_TYPES
