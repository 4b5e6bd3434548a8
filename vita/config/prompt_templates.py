"""
Vita - Prompt Templates
========================
Centralised prompt text for the chat pipeline.  All prompts live here so
they can be versioned and reviewed independently of application logic.

Exports
-------
SYSTEM_PROMPT, QUIT_COMMANDS, USER_PROMPT, ASSISTANT_PREFIX.
"""

# ══════════════════════════════════════════════════════════════════════
#  SYSTEM PROMPT
# ══════════════════════════════════════════════════════════════════════
# ``{context}`` is the only placeholder; it receives the retrieved chunk
# (or an empty string when the vector store had no match).

SYSTEM_PROMPT: str = (
    "You are a dedicated health assistant tasked with providing tailored advice "
    "on nutrition, exercises, and general health. Each response should be a direct "
    "recommendation that is relevant and specific to the provided context: {context}. "
    "Focus solely on delivering actionable advice without additional commentary."
)


# ══════════════════════════════════════════════════════════════════════
#  CONSOLE
# ══════════════════════════════════════════════════════════════════════

USER_PROMPT: str = "You: "
ASSISTANT_PREFIX: str = "Assistant:"

QUIT_COMMANDS: frozenset[str] = frozenset({"exit", "quit", "bye"})
