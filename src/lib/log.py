"""
Compiler diagnostics through Loguru, gated by the compilation's verbosity.

Every pipeline stage (source_tokenize, tokens_parse, html_render,
hooks_apply) binds its ProgramState with state_connectToLogger(). The
tokenizer, parser, renderer and vendor lookup then call LOG() without
being handed the state, and a message is written to stderr only when the
bound state's verbosity reaches the message's level:

    1  problems the output shows, e.g. rendering with no document
    2  recovered input: unterminated parameter lists, unknown languages,
       unresolved style aliases, unusable VENDOR.lock files
    3  traces: token counts, alias tables, head-only nodes skipped

Core functions called outside a pipeline have no bound state and stay
silent. document_compile(verbosity=N) and AppSettings.debug_mode choose
the level.

Usage:
    from docz.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG(f"Unterminated parameter list for {name}; recovered at end of line", level=2)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# ProgramState of the stage running in this context
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Bind a stage's ProgramState for LOG() calls in this context.

    Args:
        state: ProgramState whose verbosity gates LOG()
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1) -> None:
    """
    Write a diagnostic when the bound state's verbosity is at least level.

    The record is attributed to the caller, so the function and line
    columns point at the tokenizer or renderer code that logged it.

    Args:
        message: Diagnostic text
        level: 1 = visible problem, 2 = recovered input, 3 = trace
    """
    state = _program_state.get()

    if state is not None and getattr(state, 'verbosity', 0) >= level:
        logger.opt(depth=1).debug(message)
