"""
Tokenizer and inline-renderer data models

Type-safe structures passed between the scanning stages.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TokenKind(Enum):
    """Kinds of tokens produced by the block tokenizer"""
    DIRECTIVE = "Directive"
    PARAMETER_KEY = "ParameterKey"
    PARAMETER_VALUE = "ParameterValue"
    CONTENT = "Content"
    BLOCK_END = "BlockEnd"


@dataclass(frozen=True)
class Token:
    """
    A single token of the flat token stream

    Attributes:
        kind: Token kind
        lexeme: Token text. Normally a verbatim slice of the input; a
                synthesized string when owned is True.
        owned: True only for lexemes manufactured by the tokenizer
               (the @@word escape, heading shorthand, unterminated fence flush)

    Example:
        tokenize("@@foo") produces
        Token(kind=TokenKind.CONTENT, lexeme="@foo", owned=True)
    """
    kind: TokenKind
    lexeme: str
    owned: bool = False


@dataclass
class ParameterScan:
    """
    Result of scanning a directive parameter list

    Returned by Tokenizer.parameters_scan() after consuming '( ... )'.

    Attributes:
        position: Cursor position just past the list (past ')' if present)
        terminated: False when EOF was reached before the closing ')'
    """
    position: int
    terminated: bool


@dataclass
class InlineStyleAttrs:
    """
    Attributes recognized inside an inline style span @(...) / @style(...)

    Example:
        '@(name="note", on-click=toggle){hi}' yields
        InlineStyleAttrs(name="note", on_click="toggle")
    """
    name: Optional[str] = None
    class_attr: Optional[str] = None
    style: Optional[str] = None
    on_click: Optional[str] = None
    on_hover: Optional[str] = None
    on_focus: Optional[str] = None
