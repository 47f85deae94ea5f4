"""
Tokenizer for .dcz directive markup

Turns raw input into a flat, source-ordered token stream.

The tokenizer works one line at a time and carries a single piece of state
besides the cursor: fence_name. While a fenced directive (@code, @math,
@style, @css by default) is open, lines are captured verbatim until a
standalone or inline @end closes the fence.

Key features:
- Directive headers with quote-aware parameter lists
- @@word escapes producing literal '@word' content
- '#' heading shorthand and '#:' line comments
- Best-effort recovery for unterminated parameter lists and fences
- A no-progress guard that raises TokenizerStuck instead of spinning

Example:
    >>> tokens = tokenize("@heading(level=2) Welcome @end")
    >>> [t.kind.value for t in tokens]
    ['Directive', 'ParameterKey', 'ParameterValue', 'Content', 'BlockEnd']
"""

import re
from typing import Iterable, List, Optional, Tuple, Union

from ..models.directives import DEFAULT_FENCED_DIRECTIVES
from ..models.parser import ParameterScan, Token, TokenKind
from .log import LOG


IDENT_RE = re.compile(r'[A-Za-z0-9_-]+')
HEADING_RE = re.compile(r'(#{1,6})[ \t]+(.*)$')

UTF8_BOM = b'\xef\xbb\xbf'
END_MARKER = '@end'


class TokenizerError(Exception):
    """Raised when the input cannot be tokenized"""
    pass


class TokenizerStuck(TokenizerError):
    """Raised when the scanner stops making forward progress"""
    pass


def escapes_resolve(text: str) -> Tuple[str, bool]:
    """
    Rewrite every '@@word' in text to '@word'

    Returns:
        (resolved text, whether any escape was rewritten)

    Example:
        >>> escapes_resolve("Mail @@support today")
        ('Mail @support today', True)
    """
    escape = text.find('@@')
    if escape == -1:
        return text, False

    out = []
    pos = 0
    while escape != -1:
        out.append(text[pos:escape])
        word_end = escape + 2
        while word_end < len(text) and not text[word_end].isspace():
            word_end += 1
        out.append('@' + text[escape + 2:word_end])
        pos = word_end
        escape = text.find('@@', pos)
    out.append(text[pos:])
    return ''.join(out), True


def source_decode(source: Union[bytes, str]) -> str:
    """
    Normalize raw input to text with any UTF-8 BOM removed

    Undecodable bytes are replaced rather than rejected so that one bad
    byte never loses the rest of the document.
    """
    if isinstance(source, (bytes, bytearray)):
        raw = bytes(source)
        if raw.startswith(UTF8_BOM):
            raw = raw[len(UTF8_BOM):]
        return raw.decode('utf-8', errors='replace')
    if source.startswith('\ufeff'):
        return source[1:]
    return source


class Tokenizer:
    """
    Line-oriented scanner for .dcz markup

    Handles:
    - Directive headers: '@name(key="value", key2=bare)' at start of line
    - Inline bodies on the header line, with an optional trailing @end
    - Fenced raw blocks captured up to a standalone or inline @end
    - Escapes, heading shorthand, comments and plain prose lines
    """

    def __init__(
        self,
        source: Union[bytes, str],
        fenced: Optional[Iterable[str]] = None,
        stuck_limit: int = 1000,
    ) -> None:
        """
        Initialize tokenizer with source text

        Args:
            source: Raw .dcz input (bytes are decoded as UTF-8)
            fenced: Directive names opening fenced raw blocks
                    (defaults to @code, @math, @style, @css)
            stuck_limit: Consecutive no-progress iterations tolerated
                         before raising TokenizerStuck

        Attributes:
            source: Decoded source text being scanned
            position: Current character position in source
            fence_name: Name of the open fenced directive, '' when none
            tokens: Accumulated token stream
        """
        self.source = source_decode(source)
        self.fenced = frozenset(fenced) if fenced is not None else DEFAULT_FENCED_DIRECTIVES
        self.stuck_limit = stuck_limit
        self.position = 0
        self.fence_name = ""
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        """
        Scan the whole source into tokens

        Returns:
            Flat list of tokens in source order

        Raises:
            TokenizerStuck: If the cursor fails to advance for stuck_limit
                            consecutive iterations
        """
        prev_position = -1
        stuck_iters = 0

        while self.position < len(self.source):
            if self.position == prev_position:
                stuck_iters += 1
                if stuck_iters >= self.stuck_limit:
                    self.stuck_raise()
            else:
                prev_position = self.position
                stuck_iters = 0

            if self.fence_name:
                self.fence_scan()
            else:
                self.line_scan()

        if self.fence_name:
            # Fence opened on the very last line with nothing after it
            LOG(f"Unterminated {self.fence_name} block at end of input", level=2)
            self.fence_name = ""

        LOG(f"Tokenized {len(self.tokens)} tokens", level=3)
        return self.tokens

    def emit(self, kind: TokenKind, lexeme: str, owned: bool = False) -> None:
        """Append a token to the stream"""
        self.tokens.append(Token(kind=kind, lexeme=lexeme, owned=owned))

    def line_end_find(self, pos: int) -> int:
        """Position of the newline ending the line at pos (len(source) on the last line)"""
        end = self.source.find('\n', pos)
        return len(self.source) if end == -1 else end

    def line_scan(self) -> None:
        """
        Tokenize one line outside of a fence

        The cursor is always at the start of a line on entry and past the
        line's newline (or at EOF) on exit.
        """
        text = self.source
        start = self.position
        line_end = self.line_end_find(start)
        line = text[start:line_end]
        stripped = line.strip(' \t\r')
        body_start = start + (len(line) - len(line.lstrip(' \t')))

        if not stripped or stripped.startswith('#:'):
            self.position = line_end + 1
            return

        if stripped == END_MARKER:
            self.emit(TokenKind.BLOCK_END, END_MARKER)
            self.position = line_end + 1
            return

        if text[body_start] == '#':
            heading = HEADING_RE.match(line.rstrip(' \t\r'), body_start - start)
            if heading:
                self.heading_emit(heading)
                self.position = line_end + 1
                return

        if text[body_start] == '@' and not text.startswith('@@', body_start):
            name = IDENT_RE.match(text, body_start + 1)
            if name and text[body_start:name.end()] != END_MARKER:
                self.directive_scan(body_start, name.end())
                return
            if not name and (body_start + 1 >= line_end or text[body_start + 1] in ' \t\r'):
                self.emit(TokenKind.CONTENT, '@')
                body_start += 1
                while body_start < line_end and text[body_start] in ' \t':
                    body_start += 1

        self.prose_scan(body_start, line_end)
        self.position = line_end + 1

    def heading_emit(self, match: re.Match) -> None:
        """Emit the synthesized '@heading(level=N) text' tokens for '# text' shorthand"""
        self.emit(TokenKind.DIRECTIVE, '@heading', owned=True)
        self.emit(TokenKind.PARAMETER_KEY, 'level', owned=True)
        self.emit(TokenKind.PARAMETER_VALUE, str(len(match.group(1))), owned=True)
        text = match.group(2).strip()
        if text:
            self.content_emit(text)

    def content_emit(self, text: str) -> None:
        """Emit one Content token for text with its @@word escapes resolved"""
        resolved, owned = escapes_resolve(text)
        self.emit(TokenKind.CONTENT, resolved, owned=owned)

    def prose_scan(self, start: int, end: int) -> None:
        """
        Emit content tokens for text[start:end], splitting out @@word escapes

        Args:
            start: First character of the prose
            end: Position of the line terminator
        """
        text = self.source
        pos = start
        while pos < end:
            escape = text.find('@@', pos, end)
            if escape == -1:
                chunk = text[pos:end].rstrip(' \t\r')
                if chunk:
                    self.emit(TokenKind.CONTENT, chunk)
                return

            if text[pos:escape].strip():
                self.emit(TokenKind.CONTENT, text[pos:escape])

            word_end = escape + 2
            while word_end < end and not text[word_end].isspace():
                word_end += 1
            self.emit(TokenKind.CONTENT, '@' + text[escape + 2:word_end], owned=True)

            pos = word_end
            while pos < end and text[pos] in ' \t':
                pos += 1

    def directive_scan(self, start: int, name_end: int) -> None:
        """
        Tokenize a directive header and whatever follows it on the line

        Args:
            start: Position of the '@'
            name_end: Position just past the directive name
        """
        text = self.source
        name = text[start:name_end]
        self.emit(TokenKind.DIRECTIVE, name)
        pos = name_end

        if pos < len(text) and text[pos] == '(':
            pos = self.parameters_consume(pos + 1, name)

        if name in self.fenced:
            self.fence_name = name
            self.position = self.fence_open(pos)
            return

        line_end = self.line_end_find(pos)
        rest = text[pos:line_end].strip(' \t\r')
        if rest.endswith(END_MARKER) and not rest.endswith('@' + END_MARKER):
            body = rest[:-len(END_MARKER)].rstrip(' \t')
            if body:
                self.content_emit(body)
            self.emit(TokenKind.BLOCK_END, END_MARKER)
        elif rest:
            self.content_emit(rest)
        self.position = line_end + 1

    def parameters_consume(self, pos: int, name: str) -> int:
        """
        Consume a parameter list, recovering from a missing ')'

        A list left open at EOF is rolled back and rescanned up to the end
        of the directive's own line so the rest of the document is still
        tokenized normally.

        Args:
            pos: Position just past '('
            name: Directive name (for diagnostics)

        Returns:
            Cursor position after the parameter list
        """
        mark = len(self.tokens)
        scan = self.parameters_scan(pos, len(self.source))
        if scan.terminated:
            return scan.position

        del self.tokens[mark:]
        line_end = self.line_end_find(pos)
        self.parameters_scan(pos, line_end)
        LOG(f"Unterminated parameter list for {name}; recovered at end of line", level=2)
        return line_end

    def parameters_scan(self, pos: int, limit: int) -> ParameterScan:
        """
        Scan 'key=value' pairs up to ')' or limit

        Emits a ParameterKey/ParameterValue pair per key. Keys without '='
        get an empty value. Characters that cannot start a key are skipped
        one at a time.

        Args:
            pos: Position just past '('
            limit: Position where scanning must stop

        Returns:
            ParameterScan with the cursor position and whether ')' was found

        Raises:
            TokenizerStuck: If the scan stops advancing
        """
        text = self.source
        prev_position = -1
        stuck_iters = 0

        while pos < limit:
            if pos == prev_position:
                stuck_iters += 1
                if stuck_iters >= self.stuck_limit:
                    self.position = pos
                    self.stuck_raise()
            else:
                prev_position = pos
                stuck_iters = 0

            c = text[pos]
            if c == ')':
                return ParameterScan(position=pos + 1, terminated=True)
            if c.isspace() or c == ',':
                pos += 1
                continue

            key = IDENT_RE.match(text, pos, limit)
            if not key:
                pos += 1
                continue

            self.emit(TokenKind.PARAMETER_KEY, key.group(0))
            pos = key.end()

            look = pos
            while look < limit and text[look] in ' \t':
                look += 1
            if look >= limit or text[look] != '=':
                self.emit(TokenKind.PARAMETER_VALUE, '')
                continue

            pos = look + 1
            while pos < limit and text[pos] in ' \t':
                pos += 1
            if pos < limit and text[pos] == '"':
                value, owned, pos = self.quoted_read(pos + 1, limit)
                self.emit(TokenKind.PARAMETER_VALUE, value, owned=owned)
            else:
                value_start = pos
                while pos < limit and not text[pos].isspace() and text[pos] not in ',)':
                    pos += 1
                self.emit(TokenKind.PARAMETER_VALUE, text[value_start:pos])

        return ParameterScan(position=limit, terminated=False)

    def quoted_read(self, pos: int, limit: int) -> Tuple[str, bool, int]:
        """
        Read a double-quoted value starting just past the opening quote

        Backslash escapes the next character. An unterminated string runs
        to limit.

        Returns:
            (value, owned, position past the closing quote)
            owned is True when escapes forced a rewritten value.
        """
        text = self.source
        start = pos
        parts: List[str] = []
        chunk_start = pos
        while pos < limit and text[pos] != '"':
            if text[pos] == '\\' and pos + 1 < limit:
                parts.append(text[chunk_start:pos])
                parts.append(text[pos + 1])
                pos += 2
                chunk_start = pos
                continue
            pos += 1

        if not parts:
            value, owned = text[start:pos], False
        else:
            parts.append(text[chunk_start:pos])
            value, owned = ''.join(parts), True

        if pos < limit:
            pos += 1  # closing quote
        return value, owned, pos

    def fence_open(self, pos: int) -> int:
        """
        Position the cursor at the first character of a fenced body

        Skips spaces/tabs and one newline after the header. @math bodies
        also lose the leading indentation of their first line.
        """
        text = self.source
        while pos < len(text) and text[pos] in ' \t':
            pos += 1
        if text.startswith('\r\n', pos):
            pos += 2
        elif text.startswith('\n', pos):
            pos += 1
        if self.fence_name == '@math':
            while pos < len(text) and text[pos] in ' \t':
                pos += 1
        return pos

    def fence_scan(self) -> None:
        """
        Capture a fenced body up to its closer

        Closers:
            standalone: a line that trims to exactly '@end'
            inline: a line ending in '@end'; the text before it (minus
                    trailing spaces/tabs) is the body's last line

        At EOF without a closer the remaining text is flushed as one owned
        Content token and the fence is force-closed.
        """
        text = self.source
        lines: List[str] = []
        pos = self.position

        while pos < len(text):
            line_end = self.line_end_find(pos)
            line = text[pos:line_end].rstrip('\r')
            core = line.rstrip(' \t')

            if core.strip() == END_MARKER:
                self.fence_close(lines, line_end)
                return
            if core.endswith(END_MARKER):
                lines.append(core[:-len(END_MARKER)].rstrip(' \t'))
                self.fence_close(lines, line_end)
                return

            lines.append(line)
            pos = line_end + 1

        LOG(f"Unterminated {self.fence_name} block; flushed {len(lines)} line(s)", level=2)
        body = '\n'.join(lines)
        if body:
            self.emit(TokenKind.CONTENT, body, owned=True)
        self.fence_name = ""
        self.position = len(text)

    def fence_close(self, lines: List[str], line_end: int) -> None:
        """Emit the captured body and the closing BlockEnd, leaving fenced mode"""
        body = '\n'.join(lines)
        if body:
            self.emit(TokenKind.CONTENT, body)
        self.emit(TokenKind.BLOCK_END, END_MARKER)
        self.fence_name = ""
        self.position = line_end + 1

    def stuck_raise(self) -> None:
        """
        Abort with source context when the scanner makes no progress

        Raises:
            TokenizerStuck: Always
        """
        line_number = self.source.count('\n', 0, self.position) + 1
        context_start = max(0, self.position - 40)
        context = self.source[context_start:self.position + 40]
        raise TokenizerStuck(
            f"\nTokenizer made no progress after {self.stuck_limit} iterations\n"
            f"Line {line_number}, position {self.position}\n"
            f"Context: ...{context}..."
        )


def tokenize(
    source: Union[bytes, str],
    fenced: Optional[Iterable[str]] = None,
    stuck_limit: int = 1000,
) -> List[Token]:
    """
    Tokenize .dcz input

    Args:
        source: Raw input (bytes or text)
        fenced: Fenced directive names, defaults to @code/@math/@style/@css
        stuck_limit: No-progress iterations tolerated before TokenizerStuck

    Returns:
        Flat list of tokens in source order

    Example:
        >>> tokenize("@@foo")
        [Token(kind=<TokenKind.CONTENT: 'Content'>, lexeme='@foo', owned=True)]
    """
    return Tokenizer(source, fenced=fenced, stuck_limit=stuck_limit).tokenize()
