"""
Vita - Prompt Rendering
========================
Pure formatting of the message list sent to the chat model:

    [system (context interpolated)] + history (chronological) + [user input]
"""

from __future__ import annotations

from typing import Sequence

from vita.config.prompt_templates import SYSTEM_PROMPT
from vita.src.core.history import Turn
from vita.src.core.interfaces import PromptMessage


def render_system(context: str) -> str:
    """Interpolate *context* into the system instruction."""
    # str.format does not re-parse substituted values, so braces in the
    # retrieved text are kept verbatim.
    return SYSTEM_PROMPT.format(context=context)


def render(context: str, history: Sequence[Turn], user_input: str, window: int | None = None) -> list[PromptMessage]:
    """
    Build the ordered prompt for one turn.

    Parameters
    ----------
    context
        Retrieved document text; may be empty.
    history
        Prior turns in chronological order.
    user_input
        The current user message; always rendered last.
    window
        If positive, only the last *window* turns of *history* are rendered.
        ``None`` or ``0`` renders the full history.
    """
    turns = list(history)
    if window:
        turns = turns[-window:]

    messages = [PromptMessage("system", render_system(context))]
    messages.extend(PromptMessage(turn.role, turn.text) for turn in turns)
    messages.append(PromptMessage("user", user_input))
    return messages
