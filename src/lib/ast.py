"""
Abstract syntax tree for docz documents

The tree is two levels deep in practice: a Document root whose children
are directive and paragraph nodes in source order. Converters and the HTML
renderer only rely on node_type, attributes, content and children.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from ..models.directives import NodeType


@dataclass
class ASTNode:
    """
    Represents a node in the abstract syntax tree

    Attributes:
        node_type: Kind of node (Document, Heading, CodeBlock, ...)
        attributes: Directive parameters in insertion order; keys are
                    case-sensitive and a repeated key overwrites the earlier value
        content: Node text
        owns_content: True when content is a buffer built by the parser
                      (fenced body), False when it is a token lexeme verbatim
        children: Child nodes, exclusively owned by this node

    Example:
        For source '@heading(level=2) Welcome @end':
        ASTNode(
            node_type=NodeType.HEADING,
            attributes={"level": "2"},
            content="Welcome",
            owns_content=False,
            children=[]
        )
    """
    node_type: NodeType
    attributes: Dict[str, str] = field(default_factory=dict)
    content: str = ""
    owns_content: bool = False
    children: List['ASTNode'] = field(default_factory=list)

    def child_add(self, child: 'ASTNode') -> None:
        """Append a child node"""
        self.children.append(child)

    def attribute_set(self, key: str, value: str) -> None:
        """Set an attribute; last write wins"""
        self.attributes[key] = value

    def attribute_get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Read an attribute"""
        return self.attributes.get(key, default)

    def content_assign(self, text: str, owned: bool) -> None:
        """Assign content together with its ownership flag"""
        self.content = text
        self.owns_content = owned

    def walk(self) -> Iterator['ASTNode']:
        """Yield this node and all descendants in pre-order"""
        yield self
        for child in self.children:
            yield from child.walk()

    def find_all(self, node_type: NodeType) -> List['ASTNode']:
        """Collect every descendant (or self) of the given type, in order"""
        return [node for node in self.walk() if node.node_type == node_type]
