"""
Centralized logging using Loguru with context-aware verbosity.

This module provides a LOG() function that respects the verbosity of the
state connected to the current context, so the parsing stages can trace
their decisions without having a state object passed through them.

When shortweave is used as a library nothing is connected and LOG() stays
silent, unless SHORTWEAVE_DEBUG_MODE is set, which traces everything.

Usage:
    from lib.log import LOG, state_connectToLogger

    # At start of pipeline function:
    state_connectToLogger(state)

    # Anywhere in that context:
    LOG("This message appears if verbosity >= 1", level=1)
    LOG("Error policy decisions appear if verbosity >= 2", level=2)
    LOG("Token and tree traces appear if verbosity >= 3", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

from ..config import appsettings

# Context variable to hold the current state (anything with a verbosity attribute)
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a state object to the logging context.

    Args:
        state: Object with a verbosity attribute (ProgramState in the CLI)
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Example:
        LOG("Parsed 12 shortcode tokens", level=2)
        LOG("Token [note] at 42..48", level=3)
    """
    state = _program_state.get()

    if appsettings.debug_mode:
        logger.opt(depth=1).debug(message, **kwargs)
    elif state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
