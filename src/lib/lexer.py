"""
Custom Pygments lexer for docz syntax highlighting

Provides syntax highlighting for @directive(...) markup when a document
shows docz source inside a code block (language=docz or language=dcz).

Token types:
- Keyword.Declaration: Known directive names (e.g., @heading, @code)
- Name.Tag: Unknown directive names
- Keyword: The @end closer
- Name.Attribute / Operator / String: Parameter key=value pairs
- Comment.Single: #: line comments
- String.Escape: @@word escapes
- Generic.Heading / Strong / Emph: # headings, **bold**, *italic*
"""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Literal,
    Comment,
    Generic,
    Operator,
)


KNOWN_DIRECTIVES = r'(style-def|styledef|style|css|meta|heading|code|math|image|media|import)'
DIRECTIVE_NAME_END = r'(?![A-Za-z0-9_-])'


class DoczLexer(RegexLexer):
    """
    Lexer for docz markup

    Example:
        @heading(level=2) Welcome @end

    Tokens:
        @ → Punctuation
        heading → Keyword.Declaration
        ( → Punctuation
        level → Name.Attribute
        = → Operator
        2 → Literal.String
        ) → Punctuation
        Welcome → Text
        @end → Keyword
    """

    name = 'Docz'
    aliases = ['docz', 'dcz']
    filenames = ['*.dcz']

    tokens = {
        'root': [
            # #: line comments
            (r'^[ \t]*#:.*$', Comment.Single),

            # # heading shorthand
            (r'^([ \t]*)(#{1,6})([ \t]+)(.*)$',
             bygroups(Text.Whitespace, Punctuation, Text.Whitespace, Generic.Heading)),

            # @@word escape
            (r'@@\S+', String.Escape),

            # Block closer
            (r'(@)(end)' + DIRECTIVE_NAME_END, bygroups(Punctuation, Keyword)),

            # Known directives, with and without a parameter list
            (r'(@)' + KNOWN_DIRECTIVES + r'(\()',
             bygroups(Punctuation, Keyword.Declaration, Punctuation), 'params'),
            (r'(@)' + KNOWN_DIRECTIVES + DIRECTIVE_NAME_END,
             bygroups(Punctuation, Keyword.Declaration)),

            # Inline style spans @( ... )
            (r'(@)(\()', bygroups(Punctuation, Punctuation), 'params'),

            # Other directives (fallback)
            (r'(@)([A-Za-z0-9_-]+)(\()',
             bygroups(Punctuation, Name.Tag, Punctuation), 'params'),
            (r'(@)([A-Za-z0-9_-]+)', bygroups(Punctuation, Name.Tag)),

            # Inline markup
            (r'`[^`\n]*`', String.Backtick),
            (r'\*\*[^*\n]+\*\*', Generic.Strong),
            (r'\*[^*\n]+\*', Generic.Emph),

            # Everything else is text
            (r'[^@`*#\n]+', Text),
            (r'\n', Text.Whitespace),
            (r'.', Text),
        ],

        'params': [
            (r'\)', Punctuation, '#pop'),

            # key="quoted value"
            (r'([A-Za-z0-9_-]+)(\s*)(=)(\s*)("(?:\\.|[^"\\])*")',
             bygroups(Name.Attribute, Text.Whitespace, Operator, Text.Whitespace, String.Double)),

            # key=bare
            (r'([A-Za-z0-9_-]+)(\s*)(=)(\s*)([^\s,)]*)',
             bygroups(Name.Attribute, Text.Whitespace, Operator, Text.Whitespace, Literal.String)),

            # key with no value
            (r'[A-Za-z0-9_-]+', Name.Attribute),

            (r',', Punctuation),
            (r'\s+', Text.Whitespace),
            (r'.', Text),
        ],
    }


def get_lexer() -> DoczLexer:
    """
    Get the DoczLexer instance

    Returns:
        DoczLexer instance ready for use with Pygments
    """
    return DoczLexer()
