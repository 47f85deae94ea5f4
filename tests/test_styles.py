"""
Style mini-format tests

Tests global rule lines, inline declaration ordering and StyleDef alias
parsing.
"""

import pytest

from docz.lib.styles import (
    globalRule_render,
    globalRules_render,
    inlineStyle_render,
    styleAliases_parse,
)


class TestGlobalRules:
    """Test 'selector: key=value, ...' lines"""

    def test_single_rule(self):
        """A line becomes a class rule"""
        assert globalRule_render("heading: color=blue, font-size=24px") == \
            ".heading { color:blue; font-size:24px; }"

    def test_quoted_values(self):
        """Quoted values lose their quotes and may contain commas"""
        assert globalRule_render('body: font-family="Inter, sans-serif"') == \
            ".body { font-family:Inter, sans-serif; }"

    def test_explicit_selector_kept(self):
        """Selectors already starting with '.' or '#' are not prefixed"""
        assert globalRule_render("#main: margin=0") == "#main { margin:0; }"
        assert globalRule_render(".card: padding=1rem") == ".card { padding:1rem; }"

    @pytest.mark.parametrize("line", ["", "   ", "no selector here", ": color=red"])
    def test_ignored_lines(self, line):
        """Blank and selector-less lines produce no rule"""
        assert globalRule_render(line) is None

    def test_declaration_without_equals_dropped(self):
        """Malformed declarations are skipped"""
        assert globalRule_render("x: bogus, color=red") == ".x { color:red; }"

    def test_multiple_lines(self):
        """Every non-blank line is a rule"""
        rules = globalRules_render("a: color=red\n\nb: color=blue\n")
        assert rules == [".a { color:red; }", ".b { color:blue; }"]


class TestInlineStyle:
    """Test inline declaration ordering"""

    def test_font_size_then_color(self):
        """font-size and color lead regardless of insertion order"""
        assert inlineStyle_render({"color": "blue", "font-size": "18px"}) == "font-size:18px;color:blue;"
        assert inlineStyle_render({"font-size": "18px", "color": "blue"}) == "font-size:18px;color:blue;"

    def test_mode_excluded(self):
        """The mode attribute is not a declaration"""
        assert inlineStyle_render({"mode": "inline", "color": "red"}) == "color:red;"

    def test_rest_alphabetical(self):
        """Other keys follow alphabetically"""
        attributes = {"margin": "0", "color": "red", "border": "1px", "font-size": "9px"}
        assert inlineStyle_render(attributes) == "font-size:9px;color:red;border:1px;margin:0;"

    def test_empty(self):
        """No declarations gives an empty string"""
        assert inlineStyle_render({"mode": "inline"}) == ""


class TestStyleAliases:
    """Test StyleDef alias tables"""

    def test_aliases(self):
        """Each line defines one alias"""
        table = styleAliases_parse("heading-1: h1-xl h1-weight\nbody-text: prose max-w-none")
        assert table == {"heading-1": "h1-xl h1-weight", "body-text": "prose max-w-none"}

    def test_last_definition_wins(self):
        """Redefinitions overwrite, also across calls"""
        table = styleAliases_parse("note: a")
        styleAliases_parse("note: b\nother: c", table)
        assert table == {"note": "b", "other": "c"}

    def test_whitespace_normalized(self):
        """Class lists collapse internal whitespace"""
        assert styleAliases_parse("  x :  a   b  ") == {"x": "a b"}

    def test_malformed_lines_skipped(self):
        """Lines without ':' are ignored"""
        assert styleAliases_parse("garbage\nok: fine\n\n") == {"ok": "fine"}
