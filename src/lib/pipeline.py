"""
Compilation pipeline stages

Each stage is a function (ProgramState) -> ProgramState that copies its
input, connects the copy to the logger and fills in one more field:

    source_tokenize -> tokens_parse -> html_render -> hooks_apply

document_compile() runs the whole chain for a single source.

Example:
    >>> document_compile("@heading(level=2) Welcome @end")
    '<!DOCTYPE html>\\n<html>\\n<head>\\n</head>\\n<body>\\n<h2>Welcome</h2>\\n</body>\\n</html>\\n'
"""

from typing import Optional, Union

from ..config import AppSettings
from ..models.state import ProgramState, pipeline
from .compiler import RenderOptions, render_html
from .log import LOG, state_connectToLogger
from .parser import parse
from .plugins import PluginManager
from .tokenizer import tokenize


def source_tokenize(inputstate: ProgramState) -> ProgramState:
    """
    Tokenize the source text.

    Args:
        inputstate: Program state with source set

    Returns:
        New state with tokens populated

    Raises:
        TokenizerStuck: If the scanner stops making progress
    """
    state = inputstate.copy()
    state_connectToLogger(state)

    state.tokens = tokenize(
        state.source,
        fenced=state.settings.fenced_directives,
        stuck_limit=state.settings.stuck_limit,
    )
    LOG(f"Tokenized {len(state.tokens)} tokens", level=2)
    return state


def tokens_parse(inputstate: ProgramState) -> ProgramState:
    """
    Build the Document tree from the token stream.

    Args:
        inputstate: Program state with tokens

    Returns:
        New state with document populated
    """
    state = inputstate.copy()
    state_connectToLogger(state)

    state.document = parse(state.tokens or [])
    return state


def html_render(inputstate: ProgramState) -> ProgramState:
    """
    Render the Document tree to HTML.

    Args:
        inputstate: Program state with document

    Returns:
        New state with html populated
    """
    state = inputstate.copy()
    state_connectToLogger(state)

    if state.document is None:
        LOG("No document to render", level=1)
        return state

    state.html = render_html(state.document, RenderOptions.from_settings(state.settings))
    LOG(f"Rendered {len(state.html)} characters of HTML", level=2)
    return state


def hooks_apply(inputstate: ProgramState) -> ProgramState:
    """
    Post-process the HTML with plugin render hooks.

    Args:
        inputstate: Program state with html

    Returns:
        New state with hook output as html (unchanged without plugins)
    """
    state = inputstate.copy()
    state_connectToLogger(state)

    if state.plugins is not None:
        state.html = state.plugins.hooks_apply(state.html)
    return state


def document_compile(
    source: Union[bytes, str],
    settings: Optional[AppSettings] = None,
    plugins: Optional[PluginManager] = None,
    verbosity: int = 0,
) -> str:
    """
    Compile one .dcz source to an HTML document.

    Args:
        source: Document text (bytes are decoded as UTF-8)
        settings: Configuration for this compilation. When omitted, a fresh
                  AppSettings() is built, which reads DOCZ_* environment
                  variables and a .env file in the working directory; pass
                  settings explicitly for environment-independent output.
        plugins: Optional render hooks
        verbosity: Logging verbosity (0 = silent); debug_mode raises it to 3

    Returns:
        Complete HTML document
    """
    settings = settings if settings is not None else AppSettings()
    if settings.debug_mode:
        verbosity = max(verbosity, 3)

    state: ProgramState = ProgramState(
        source=source,
        settings=settings,
        plugins=plugins,
        verbosity=verbosity,
    )
    final_state = pipeline(state, source_tokenize, tokens_parse, html_render, hooks_apply)
    return final_state.html
