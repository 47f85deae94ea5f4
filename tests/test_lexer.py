"""
Pygments lexer tests

Tests that docz source is split into the expected token types.
"""

from pygments.lexers import TextLexer
from pygments.token import Comment, Generic, Keyword, Name, Operator, String, Token

from docz.lib.directives import codeLexer_get
from docz.lib.lexer import DoczLexer, get_lexer


def lex(source):
    """Non-whitespace (tokentype, value) pairs"""
    return [(ttype, value) for ttype, value in DoczLexer().get_tokens(source) if value.strip()]


class TestDoczLexer:
    """Test DoczLexer token classification"""

    def test_metadata(self):
        """Name, aliases and filename pattern"""
        lexer = get_lexer()
        assert lexer.name == "Docz"
        assert "dcz" in lexer.aliases
        assert "*.dcz" in lexer.filenames

    def test_known_directive_with_parameters(self):
        """Directive name, key, operator and value"""
        tokens = lex('@heading(level=2) Welcome @end')
        assert (Keyword.Declaration, "heading") in tokens
        assert (Name.Attribute, "level") in tokens
        assert (Operator, "=") in tokens
        assert (Keyword, "end") in tokens

    def test_quoted_parameter(self):
        """Quoted values are double strings"""
        tokens = lex('@meta(title="Hello, World")')
        assert (String.Double, '"Hello, World"') in tokens

    def test_unknown_directive(self):
        """Unknown directives are tags"""
        assert (Name.Tag, "sparkle") in lex("@sparkle")

    def test_style_def_is_one_name(self):
        """Hyphenated directive names are not split"""
        assert (Keyword.Declaration, "style-def") in lex("@style-def")

    def test_comment_and_heading(self):
        """#: comments and # headings"""
        tokens = lex("#: note to self\n## Section")
        assert (Comment.Single, "#: note to self") in tokens
        assert (Generic.Heading, "Section") in tokens

    def test_escape_and_inline_markup(self):
        """@@ escapes, code spans and emphasis"""
        tokens = lex("@@name uses `code` and **bold** and *it*")
        assert (String.Escape, "@@name") in tokens
        assert (String.Backtick, "`code`") in tokens
        assert (Generic.Strong, "**bold**") in tokens
        assert (Generic.Emph, "*it*") in tokens

    def test_no_error_tokens(self):
        """Ordinary documents lex without errors"""
        source = '@meta(title="x")\n# Hi\n@code(language=python)\nprint(1)\n@end\n'
        assert all(ttype is not Token.Error for ttype, _ in DoczLexer().get_tokens(source))


class TestCodeLexerLookup:
    """Test lexer selection for highlighted code blocks"""

    def test_docz_aliases(self):
        """dcz and docz select the bundled lexer"""
        assert isinstance(codeLexer_get("dcz"), DoczLexer)
        assert isinstance(codeLexer_get("DOCZ"), DoczLexer)

    def test_known_and_unknown_languages(self):
        """Registered names use Pygments; unknown names fall back to text"""
        assert codeLexer_get("python").name == "Python"
        assert isinstance(codeLexer_get("no-such-language"), TextLexer)
