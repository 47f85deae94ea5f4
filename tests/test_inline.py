"""
Inline renderer tests

Tests code spans, style spans, links and emphasis, including the
ordering between passes.
"""

import pytest

from docz.lib.inline import InlineRenderer, html_escape, render_inline, url_isSafe


class TestEscaper:
    """Test the HTML escaper"""

    def test_all_unsafe_characters(self):
        """< > & \" ' map to entities"""
        assert html_escape("<a href=\"x\">&'</a>") == "&lt;a href=&quot;x&quot;&gt;&amp;&#39;&lt;/a&gt;"

    def test_plain_text_unchanged(self):
        """Safe text is returned as-is"""
        assert html_escape("hello world") == "hello world"


class TestBackticks:
    """Test code spans"""

    def test_code_span(self):
        """Backticks become <code> with escaped contents"""
        assert render_inline("use `a < b` here") == "use <code>a &lt; b</code> here"

    def test_code_protects_emphasis(self):
        """Markup inside code is not rendered"""
        assert render_inline("`**not bold**`") == "<code>**not bold**</code>"

    def test_unterminated_backtick(self):
        """A lone backtick is literal"""
        assert render_inline("it`s fine") == "it`s fine"

    def test_escaped_backtick(self):
        """Backslash-backtick is a literal backtick"""
        assert render_inline(r"a \`b\` c") == "a `b` c"

    def test_escaped_dollar_and_backslash(self):
        """Backslash-dollar and double backslash resolve outside code"""
        assert render_inline(r"cost \$5 or \\") == "cost $5 or \\"

    def test_code_protects_style_span(self):
        """Style span syntax inside code is left alone"""
        assert render_inline("`@(class=x){y}`") == "<code>@(class=x){y}</code>"

    def test_span_body_with_code(self):
        """A span may wrap a code span"""
        assert render_inline("@(class=x){see `y`}") == '<span class="x">see <code>y</code></span>'


class TestStyleSpans:
    """Test @(...) and @style(...) spans"""

    def test_shorthand_with_alias(self):
        """name= resolves through the alias table"""
        html = render_inline('@(name="note"){nice}', {"note": "rounded bg-yellow-50 px-2"})
        assert html == '<span class="rounded bg-yellow-50 px-2">nice</span>'

    def test_explicit_form_with_end(self):
        """@style(...) body runs to @end"""
        html = render_inline('The @style(class="color = red") preview @end server.')
        assert html == 'The <span class="color = red">preview </span> server.'

    def test_entity_encoded_quotes(self):
        """&quot; inside the attribute list is decoded"""
        html = render_inline('The @style(class=&quot;color = red&quot;) preview @end server.')
        assert html == 'The <span class="color = red">preview </span> server.'

    def test_css_heuristic_opt_in(self):
        """CSS-looking class values move to style only when enabled"""
        html = render_inline('The @style(class="color = red") preview @end server.', class_css_heuristic=True)
        assert html == 'The <span style="color = red">preview </span> server.'

    def test_quoted_brace_in_body(self):
        """A quoted '}' does not close the body"""
        html = render_inline('@(class="x"){this has "}" inside}')
        assert html == '<span class="x">this has "}" inside</span>'

    def test_nested_braces(self):
        """Balanced braces stay in the body"""
        assert render_inline("@(class=x){a {b} c}") == '<span class="x">a {b} c</span>'

    def test_class_and_style_merged(self):
        """class and style attributes combine"""
        html = render_inline('@(class="a b", style="color:red"){t}')
        assert html == '<span class="a b" style="color:red">t</span>'

    def test_heuristic_style_merge(self):
        """Redirected class and explicit style join with '; '"""
        html = render_inline('@(class="color:red", style="margin:0"){t}', class_css_heuristic=True)
        assert html == '<span style="color:red; margin:0">t</span>'

    def test_event_attributes(self):
        """on-* keys become data-on-* attributes in a fixed order"""
        html = render_inline("@(on-focus=f, on-click=c, on-hover=h){t}")
        assert html == '<span data-on-click="c" data-on-hover="h" data-on-focus="f">t</span>'

    def test_keys_case_insensitive_and_colon(self):
        """Keys ignore case and accept ':' separators"""
        assert render_inline("@(CLASS: big){t}") == '<span class="big">t</span>'

    def test_classes_key(self):
        """classes is a synonym for class"""
        assert render_inline("@(classes='p-2 m-1'){t}") == '<span class="p-2 m-1">t</span>'

    def test_unresolved_alias(self):
        """An unknown name gives a bare span"""
        assert render_inline('@(name="missing"){t}') == "<span>t</span>"

    def test_unterminated_span_literal(self):
        """Spans without a closer are left as written"""
        assert render_inline("@(class=x) never closed") == "@(class=x) never closed"

    def test_unterminated_span_does_not_block_later_spans(self):
        """A broken span leaves following spans working"""
        html = render_inline("@(class=x) no body, then @(class=y){ok}")
        assert html.endswith('<span class="y">ok</span>')

    def test_renderer_alias_table_is_live(self):
        """The renderer reads the alias table it was given"""
        aliases = {}
        renderer = InlineRenderer(aliases)
        aliases["late"] = "added-later"
        assert renderer.render('@(name=late){t}') == '<span class="added-later">t</span>'


class TestLinks:
    """Test [text](url) links"""

    def test_link(self):
        """A safe url becomes an anchor"""
        assert render_inline("see [docs](https://example.com/docs)") == \
            'see <a href="https://example.com/docs">docs</a>'

    def test_emphasis_inside_link_text(self):
        """Emphasis runs after links"""
        assert render_inline("A [**bold** link](https://example.com).") == \
            'A <a href="https://example.com"><strong>bold</strong> link</a>.'

    def test_unsafe_url_untouched(self):
        """Urls without a letter and separator are not links"""
        assert render_inline("cite [1](2) here") == "cite [1](2) here"

    def test_bracket_without_url_kept(self):
        """Plain brackets before a link survive"""
        assert render_inline("[a] and [b](http://x.org)") == '[a] and <a href="http://x.org">b</a>'

    def test_url_escaped(self):
        """Quotes in the url are escaped"""
        assert render_inline('[x](http://a.b/"q)') == '<a href="http://a.b/&quot;q">x</a>'

    @pytest.mark.parametrize("url,safe", [
        ("https://ziglang.org", True),
        ("page.html", True),
        ("/root", True),
        ("12.5", False),
        ("plain", False),
        ("", False),
    ])
    def test_url_safety(self, url, safe):
        """A url needs a letter and one of '.', ':', '/'"""
        assert url_isSafe(url) is safe


class TestEmphasis:
    """Test **bold** and *italic*"""

    def test_bold_and_italic(self):
        """Double and single asterisks"""
        assert render_inline("**b** and *i*") == "<strong>b</strong> and <em>i</em>"

    def test_whitespace_only_inner_is_literal(self):
        """Markers around whitespace are not emphasis"""
        assert render_inline("a ** ** b") == "a ** ** b"

    def test_unclosed_marker_literal(self):
        """An unmatched asterisk is literal"""
        assert render_inline("5 * 3") == "5 * 3"

    def test_italic_inside_bold(self):
        """Italic nested in bold"""
        assert render_inline("**very *much* so**") == "<strong>very <em>much</em> so</strong>"

    def test_escaped_asterisk(self):
        """Backslash-asterisk is literal"""
        assert render_inline(r"\*not italic\*") == "*not italic*"

    def test_currency_unchanged(self):
        """Dollar amounts pass through"""
        text = "Price is $4.39 today (no closing dollar)."
        assert render_inline(text) == text


class TestCombined:
    """Test all passes together"""

    def test_full_sentence(self):
        """Every construct in one paragraph"""
        text = 'Use **bold**, *italic*, `code`, and a [link](https://ziglang.org).\n @(name="note"){nice}'
        html = render_inline(text, {"note": "rounded bg-yellow-50 px-2"})
        assert "<strong>bold</strong>" in html
        assert "<em>italic</em>" in html
        assert "<code>code</code>" in html
        assert '<a href="https://ziglang.org">link</a>' in html
        assert '<span class="rounded bg-yellow-50 px-2">nice</span>' in html

    def test_raw_html_passes_through(self):
        """Prose html is not escaped"""
        assert render_inline("<br> line") == "<br> line"
