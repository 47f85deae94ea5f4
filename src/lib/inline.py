"""
Inline renderer for paragraph and heading text

A second, independent scanner applied to the text of Content and Heading
nodes at render time. Four passes run in a fixed order, each returning a
fresh string:

1. Backticks:     `code`                  -> <code>escaped</code>
2. Style spans:   @(attrs){body}          -> <span ...>body</span>
                  @style(attrs) body @end
3. Links:         [text](url)             -> <a href="url">text</a>
4. Emphasis:      **bold** / *italic*     -> <strong> / <em>

Code spans come first so their text is protected from the later passes;
the style and emphasis passes skip <code>...</code> regions entirely.
Emphasis runs last so it can also apply inside link text.

Example:
    >>> render_inline("Use **bold** and `**raw**`")
    'Use <strong>bold</strong> and <code>**raw**</code>'
"""

import html
from typing import Callable, Mapping, Optional

from ..models.parser import InlineStyleAttrs
from .log import LOG


CODE_OPEN = '<code>'
CODE_CLOSE = '</code>'
END_MARKER = '@end'

SPAN_ATTR_KEYS = {
    'name': 'name',
    'class': 'class_attr',
    'classes': 'class_attr',
    'style': 'style',
    'on-click': 'on_click',
    'on-hover': 'on_hover',
    'on-focus': 'on_focus',
}


def html_escape(text: str) -> str:
    """Escape < > & " ' for HTML text and attribute values"""
    return html.escape(text, quote=True).replace('&#x27;', '&#39;')


def quoteAware_scan(text: str, start: int, stop: Callable[[str, int], bool]) -> Optional[int]:
    """
    Find the first position where stop() fires outside a quoted string

    A '"' or "'" suspends recognition until the matching quote closes;
    a backslash inside a string escapes the next character.

    Args:
        text: String to scan
        start: First position to examine
        stop: Predicate (text, position) -> bool

    Returns:
        Position where stop fired, or None if never
    """
    quote = ''
    escaped = False
    for pos in range(start, len(text)):
        c = text[pos]
        if quote:
            if escaped:
                escaped = False
            elif c == '\\':
                escaped = True
            elif c == quote:
                quote = ''
            continue
        if c in '"\'':
            quote = c
            continue
        if stop(text, pos):
            return pos
    return None


def paren_findClosing(text: str, start: int) -> Optional[int]:
    """Position of the ')' closing an attribute list that starts at start"""
    return quoteAware_scan(text, start, lambda s, i: s[i] == ')')


def braces_findClosing(text: str, open_pos: int) -> Optional[int]:
    """Position of the '}' matching the '{' at open_pos (nesting and quote aware)"""
    depth = 0

    def closes(s: str, i: int) -> bool:
        nonlocal depth
        if s[i] == '{':
            depth += 1
        elif s[i] == '}':
            depth -= 1
            return depth == 0
        return False

    return quoteAware_scan(text, open_pos, closes)


def atEnd_find(text: str, start: int) -> Optional[int]:
    """Position of the first '@end' outside quotes"""
    return quoteAware_scan(text, start, lambda s, i: s.startswith(END_MARKER, i))


def quoteEntities_decode(raw: str) -> str:
    """Decode &quot; and &#34; back to '"' inside an attribute list"""
    return raw.replace('&quot;', '"').replace('&#34;', '"')


def classLooksLikeCss_is(value: str) -> bool:
    """True when a class value contains ':', ';' or '='"""
    return any(c in value for c in ':;=')


def url_isSafe(url: str) -> bool:
    """A link target needs at least one letter and one of '.', ':' or '/'"""
    has_alpha = any(c.isascii() and c.isalpha() for c in url)
    has_sep = any(c in '.:/' for c in url)
    return has_alpha and has_sep


def whitespace_is(text: str) -> bool:
    return not text.strip()


def codeRegion_end(text: str, pos: int) -> Optional[int]:
    """Return the end of the <code>...</code> region holding pos, else None"""
    code_open = text.rfind(CODE_OPEN, 0, pos)
    if code_open == -1:
        return None
    code_close = text.find(CODE_CLOSE, code_open + len(CODE_OPEN))
    if code_close == -1:
        return len(text)
    if code_close < pos:
        return None
    return code_close + len(CODE_CLOSE)


def codeSegments_map(text: str, transform: Callable[[str], str]) -> str:
    """
    Apply transform to every part of text outside <code>...</code>

    Code regions are copied through untouched. An unclosed <code> copies
    the remainder as-is.
    """
    out = []
    pos = 0
    while pos < len(text):
        code_open = text.find(CODE_OPEN, pos)
        if code_open == -1:
            out.append(transform(text[pos:]))
            break
        out.append(transform(text[pos:code_open]))

        code_close = text.find(CODE_CLOSE, code_open + len(CODE_OPEN))
        if code_close == -1:
            out.append(text[code_open:])
            break
        end = code_close + len(CODE_CLOSE)
        out.append(text[code_open:end])
        pos = end
    return ''.join(out)


class InlineRenderer:
    """
    Rewrites inline markup in a single text run to HTML

    Attributes:
        aliases: Style alias table (alias name -> class list) used to
                 resolve name= in style spans
        class_css_heuristic: When True, a class= value that looks like CSS
                             (contains ':', ';' or '=') is moved into style=.
                             Off by default; kept for older .dcz corpora.
    """

    def __init__(
        self,
        aliases: Optional[Mapping[str, str]] = None,
        class_css_heuristic: bool = False,
    ) -> None:
        self.aliases = aliases if aliases is not None else {}
        self.class_css_heuristic = class_css_heuristic

    def render(self, text: str) -> str:
        """
        Run the four inline passes in order

        Args:
            text: Raw paragraph or heading text

        Returns:
            HTML fragment
        """
        step1 = self.backticks_rewrite(text)
        step2 = self.styles_rewrite(step1)
        step3 = self.links_rewrite(step2)
        return codeSegments_map(step3, self.emphasis_rewrite)

    # Pass 1 -----------------------------------------------------------------

    def backticks_rewrite(self, text: str) -> str:
        r"""
        Turn `code` spans into <code> elements with escaped contents

        Outside code spans, \`, \$ and \\ yield the literal character.
        An unterminated backtick is emitted literally.
        """
        out = []
        pos = 0
        while pos < len(text):
            c = text[pos]
            if c == '\\' and pos + 1 < len(text) and text[pos + 1] in '`$\\':
                out.append(text[pos + 1])
                pos += 2
                continue
            if c != '`':
                out.append(c)
                pos += 1
                continue

            end = self.backtick_findEnd(text, pos + 1)
            if end is None:
                out.append('`')
                pos += 1
                continue
            out.append(f'{CODE_OPEN}{html_escape(text[pos + 1:end])}{CODE_CLOSE}')
            pos = end + 1
        return ''.join(out)

    @staticmethod
    def backtick_findEnd(text: str, start: int) -> Optional[int]:
        """Closing backtick position; a backslash skips the next character"""
        pos = start
        while pos < len(text):
            if text[pos] == '\\' and pos + 1 < len(text):
                pos += 2
                continue
            if text[pos] == '`':
                return pos
            pos += 1
        return None

    # Pass 2 -----------------------------------------------------------------

    def styles_rewrite(self, text: str) -> str:
        """
        Turn @(...) / @style(...) spans into <span> elements

        The span body is either a {...} block or the text up to the next
        @end. Unterminated spans leave their '@' literal and scanning
        resumes right after it.
        Openers inside <code> are left alone, but a body may contain code.
        """
        out = []
        pos = 0
        while pos < len(text):
            shorthand = text.find('@(', pos)
            explicit = text.find('@style(', pos)
            found = [idx for idx in (shorthand, explicit) if idx != -1]
            if not found:
                out.append(text[pos:])
                break

            start = min(found)
            inside_code = codeRegion_end(text, start)
            if inside_code is not None:
                out.append(text[pos:inside_code])
                pos = inside_code
                continue
            out.append(text[pos:start])
            attrs_start = start + (2 if start == shorthand else len('@style('))

            rendered = self.span_render(text, attrs_start)
            if rendered is None:
                out.append('@')
                pos = start + 1
                continue
            span_html, pos = rendered
            out.append(span_html)
        return ''.join(out)

    def span_render(self, text: str, attrs_start: int):
        """
        Render one style span whose attribute list starts at attrs_start

        Returns:
            (span html, position after the span) or None when unterminated
        """
        close_paren = paren_findClosing(text, attrs_start)
        if close_paren is None:
            return None
        attrs = self.attrs_parse(text[attrs_start:close_paren])

        pos = close_paren + 1
        while pos < len(text) and text[pos] in ' \t\r\n':
            pos += 1

        if pos < len(text) and text[pos] == '{':
            close_brace = braces_findClosing(text, pos)
            if close_brace is None:
                return None
            body, end = text[pos + 1:close_brace], close_brace + 1
        else:
            at_end = atEnd_find(text, pos)
            if at_end is None:
                return None
            body, end = text[pos:at_end], at_end + len(END_MARKER)

        return f'{self.span_open(attrs)}{body}</span>', end

    def attrs_parse(self, raw: str) -> InlineStyleAttrs:
        """
        Parse a style span attribute list

        Keys are case-insensitive and separated from values by '=' or ':'.
        Values are quoted ('...' or "...") or bare up to ',', ')' or
        whitespace. Unknown keys are ignored.

        Example:
            'name="note", on-click: toggle' ->
            InlineStyleAttrs(name='note', on_click='toggle')
        """
        s = quoteEntities_decode(raw)
        attrs = InlineStyleAttrs()
        pos = 0

        def separators_skip(i: int) -> int:
            while i < len(s) and (s[i].isspace() or s[i] == ','):
                i += 1
            return i

        while pos < len(s):
            pos = separators_skip(pos)
            if pos >= len(s):
                break
            iteration_start = pos

            key_start = pos
            while pos < len(s) and s[pos] not in '=:,)' and not s[pos].isspace():
                pos += 1
            key = s[key_start:pos].strip().lower()

            pos = separators_skip(pos)
            if pos < len(s) and s[pos] in '=:':
                pos += 1
            pos = separators_skip(pos)
            if pos >= len(s):
                break

            if s[pos] in '"\'':
                quote = s[pos]
                value_start = pos + 1
                value_end = s.find(quote, value_start)
                if value_end == -1:
                    value_end = len(s)
                value = s[value_start:value_end]
                pos = value_end + 1
            else:
                value_start = pos
                while pos < len(s) and s[pos] not in ',)' and not s[pos].isspace():
                    pos += 1
                value = s[value_start:pos]

            field_name = SPAN_ATTR_KEYS.get(key)
            if field_name:
                setattr(attrs, field_name, value)

            if pos == iteration_start:
                pos += 1
        return attrs

    def span_open(self, attrs: InlineStyleAttrs) -> str:
        """
        Build the opening <span> tag

        class comes from class= (or the alias table via name=), style from
        style=; data-on-* attributes are added for each event key.
        """
        class_val: Optional[str] = None
        style_val: Optional[str] = None

        if attrs.class_attr is not None:
            if self.class_css_heuristic and classLooksLikeCss_is(attrs.class_attr):
                style_val = attrs.class_attr
            else:
                class_val = attrs.class_attr
        elif attrs.name is not None:
            class_val = self.aliases.get(attrs.name)
            if class_val is None:
                LOG(f"Unresolved style alias '{attrs.name}'", level=2)

        if attrs.style:
            style_val = f'{style_val}; {attrs.style}' if style_val else attrs.style

        parts = ['<span']
        if class_val:
            parts.append(f' class="{html_escape(class_val)}"')
        if style_val:
            parts.append(f' style="{html_escape(style_val)}"')
        for event, value in (('click', attrs.on_click), ('hover', attrs.on_hover), ('focus', attrs.on_focus)):
            if value is not None:
                parts.append(f' data-on-{event}="{html_escape(value)}"')
        parts.append('>')
        return ''.join(parts)

    # Pass 3 -----------------------------------------------------------------

    def links_rewrite(self, text: str) -> str:
        """
        Turn [text](url) into <a href="url">text</a>

        Only URLs passing url_isSafe() are rewritten; anything else,
        such as '[1](2)', is left exactly as written.
        """
        out = []
        pos = 0
        while True:
            lb = text.find('[', pos)
            if lb == -1:
                break
            rb = text.find(']', lb + 1)
            if rb == -1:
                break
            if rb + 1 >= len(text) or text[rb + 1] != '(':
                out.append(text[pos:rb + 1])
                pos = rb + 1
                continue
            par_close = text.find(')', rb + 2)
            if par_close == -1:
                out.append(text[pos:rb + 1])
                pos = rb + 1
                continue

            url = text[rb + 2:par_close].strip()
            if not url_isSafe(url):
                out.append(text[pos:par_close + 1])
            else:
                out.append(text[pos:lb])
                out.append(f'<a href="{html_escape(url)}">{text[lb + 1:rb]}</a>')
            pos = par_close + 1

        out.append(text[pos:])
        return ''.join(out)

    # Pass 4 -----------------------------------------------------------------

    def emphasis_rewrite(self, segment: str) -> str:
        r"""
        Turn **bold** and *italic* into <strong> / <em>

        A marker whose inner text is empty or all whitespace, or that has no
        closing marker, is emitted literally. \* yields a literal '*'.
        """
        out = []
        pos = 0
        while pos < len(segment):
            c = segment[pos]
            if c == '\\' and segment.startswith('*', pos + 1):
                out.append('*')
                pos += 2
                continue

            if segment.startswith('**', pos):
                close = segment.find('**', pos + 2)
                if close != -1 and not whitespace_is(segment[pos + 2:close]):
                    inner = self.emphasis_rewrite(segment[pos + 2:close])
                    out.append(f'<strong>{inner}</strong>')
                    pos = close + 2
                else:
                    out.append('**')
                    pos += 2
                continue

            if c == '*':
                close = segment.find('*', pos + 1)
                if close != -1 and not whitespace_is(segment[pos + 1:close]):
                    out.append(f'<em>{segment[pos + 1:close]}</em>')
                    pos = close + 1
                else:
                    out.append('*')
                    pos += 1
                continue

            out.append(c)
            pos += 1
        return ''.join(out)


def render_inline(
    text: str,
    aliases: Optional[Mapping[str, str]] = None,
    class_css_heuristic: bool = False,
) -> str:
    """
    Render inline markup in text

    Args:
        text: Paragraph or heading text
        aliases: Style alias table for name= lookups
        class_css_heuristic: Redirect CSS-looking class= values into style=

    Returns:
        HTML fragment

    Example:
        >>> render_inline('@(name="note"){nice}', {"note": "rounded px-2"})
        '<span class="rounded px-2">nice</span>'
    """
    return InlineRenderer(aliases, class_css_heuristic=class_css_heuristic).render(text)
