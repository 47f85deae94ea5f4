"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from dataclasses import dataclass, field
from functools import reduce
from typing import Callable, List, Optional, TypeVar, Union, TYPE_CHECKING

from ..config import AppSettings

# Forward reference for type hint - avoid circular import
if TYPE_CHECKING:
    from ..lib.ast import ASTNode
    from ..lib.plugins import PluginManager
    from .parser import Token


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the compilation pipeline (state bus pattern).

    Carries a single document through tokenize -> parse -> render -> hooks,
    with each stage filling in the next field. Stages copy the state rather
    than mutating their input.

    Pipeline stages and their state additions:
        - Initial: source, settings, plugins, verbosity
        - source_tokenize: tokens
        - tokens_parse: document
        - html_render: html
        - hooks_apply: html (post-processed)

    Attributes:
        source: Raw .dcz input (bytes or str)
        settings: Immutable configuration for this compilation
        plugins: Optional render hook list
        verbosity: Logging verbosity level (0-3)
        tokens: Flat token stream
        document: Parsed Document root
        html: Rendered HTML document
    """

    source: Union[bytes, str] = field(default=b"")
    settings: AppSettings = field(default_factory=AppSettings)
    plugins: Optional["PluginManager"] = field(default=None)
    verbosity: int = field(default=1)

    # Pipeline state
    tokens: Optional[List["Token"]] = field(default=None)
    document: Optional["ASTNode"] = field(default=None)
    html: str = field(default="")

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            source_tokenize,
            tokens_parse,
            html_render,
            hooks_apply
        )

    This is equivalent to:
        hooks_apply(html_render(tokens_parse(source_tokenize(initial_state))))
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
