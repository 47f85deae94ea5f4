"""
Parser for the docz token stream

Transforms the flat token stream produced by the tokenizer into an
abstract syntax tree (AST).

The tree is deliberately flat: a Document root whose children are the
directive and paragraph nodes in source order. Inline constructs (code
spans, style spans, links, emphasis) stay in the node text and are resolved
later by the inline renderer.

Key features:
- Directive name -> NodeType resolution through the canonical table
- Parameter pairs collected into ordered attributes (last write wins)
- Inline content attached to the directive that precedes it
- Body-bearing directives joined up to their closing @end
- Unknown directives and stray tokens degrade gracefully, never raise

Example:
    >>> doc = Parser(tokenize("@heading(level=1) Hello @end")).parse()
    >>> doc.children[0].node_type
    <NodeType.HEADING: 'Heading'>
    >>> doc.children[0].content
    'Hello'
"""

from typing import List, Sequence, Tuple

from ..models.directives import (
    DIRECTIVE_ALIASES,
    DIRECTIVE_TABLE,
    NodeType,
    bodyBearing_is,
    nodeType_fromDirective,
)
from ..models.parser import Token, TokenKind
from .ast import ASTNode
from .log import LOG


class Parser:
    """
    Parser for docz token streams

    Handles:
    - Directive nodes with attributes and inline content
    - Fenced/body-bearing nodes (CodeBlock, Math, Style, StyleDef)
    - Plain paragraph content at the top level
    """

    def __init__(self, tokens: Sequence[Token]) -> None:
        """
        Initialize parser with a token stream

        Args:
            tokens: Tokens from the tokenizer, in source order

        Attributes:
            tokens: Token stream being parsed
            position: Index of the next unread token
        """
        self.tokens = tokens
        self.position = 0

    def parse(self) -> ASTNode:
        """
        Build the Document tree

        Returns:
            Document root whose children are the parsed nodes in source order.
            An empty token stream yields an empty Document.
        """
        root = ASTNode(node_type=NodeType.DOCUMENT)
        self.position = 0

        while self.position < len(self.tokens):
            token = self.tokens[self.position]

            if token.kind == TokenKind.DIRECTIVE:
                root.child_add(self.directive_build())
                continue

            if token.kind == TokenKind.CONTENT:
                paragraph = ASTNode(node_type=NodeType.CONTENT)
                paragraph.content_assign(token.lexeme, owned=token.owned)
                root.child_add(paragraph)
            else:
                LOG(f"Skipping stray {token.kind.value} token '{token.lexeme}'", level=3)
            self.position += 1

        LOG(f"Parsed {len(root.children)} top-level nodes", level=2)
        return root

    def directive_build(self) -> ASTNode:
        """
        Build a node for the Directive token at the cursor

        Consumes the directive, its parameter pairs, an optional inline
        Content token and, for body-bearing types, every token up to the
        closing BlockEnd.

        Returns:
            The new node; the cursor is left on the first unconsumed token
        """
        directive = self.tokens[self.position].lexeme
        node_type = nodeType_fromDirective(directive)
        if not directive_known(directive):
            LOG(f"Unknown directive '{directive}' treated as content", level=2)

        node = ASTNode(node_type=node_type)
        self.position += 1

        for key, value in self.parameters_collect():
            node.attribute_set(key, value)

        parts: List[str] = []
        current = self.token_peek()
        if current is not None and current.kind == TokenKind.CONTENT:
            node.content_assign(current.lexeme, owned=current.owned)
            parts.append(current.lexeme)
            self.position += 1

        if bodyBearing_is(node_type):
            parts.extend(self.body_collect(directive))
            node.content_assign('\n'.join(parts), owned=True)

        return node

    def parameters_collect(self) -> List[Tuple[str, str]]:
        """Consume consecutive (ParameterKey, ParameterValue) pairs"""
        pairs: List[Tuple[str, str]] = []
        while self.position + 1 < len(self.tokens):
            key = self.tokens[self.position]
            value = self.tokens[self.position + 1]
            if key.kind != TokenKind.PARAMETER_KEY or value.kind != TokenKind.PARAMETER_VALUE:
                break
            pairs.append((key.lexeme, value.lexeme))
            self.position += 2
        return pairs

    def body_collect(self, directive: str) -> List[str]:
        """
        Consume Content tokens up to the closing BlockEnd

        A new Directive token before any BlockEnd ends the body early so a
        missing @end only affects its own block.

        Returns:
            Content lexemes of the body in order
        """
        parts: List[str] = []
        while self.position < len(self.tokens):
            token = self.tokens[self.position]
            if token.kind == TokenKind.BLOCK_END:
                self.position += 1
                return parts
            if token.kind == TokenKind.DIRECTIVE:
                LOG(f"{directive} body interrupted by {token.lexeme}; missing @end", level=2)
                return parts
            if token.kind == TokenKind.CONTENT:
                parts.append(token.lexeme)
            self.position += 1
        return parts

    def token_peek(self):
        """Token at the cursor, or None at end of stream"""
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None


def directive_known(directive: str) -> bool:
    """Check if a directive name appears in the directive table or alias map"""
    return directive in DIRECTIVE_TABLE or directive in DIRECTIVE_ALIASES


def parse(tokens: Sequence[Token]) -> ASTNode:
    """
    Parse a token stream into a Document tree

    Args:
        tokens: Tokens from tokenize()

    Returns:
        Document root node
    """
    return Parser(tokens).parse()
