"""
Vita - Chat Loop
=================
Top-level console driver.  Per iteration:

    1. Prompt ``You: `` and read one line.
    2. Retrieve context for the line.
    3. Invoke the ``ChatRunner`` with line + context.
    4. Print ``Assistant: <reply>``.

The loop ends on end-of-input, a quit command or Ctrl-C (status 0), or
on any ``VitaError`` from a downstream step (status 1).  A failed turn
prints nothing.  The input stream is closed however the loop ends.
"""

from __future__ import annotations

import sys
from typing import TextIO

from vita.config.prompt_templates import ASSISTANT_PREFIX, QUIT_COMMANDS, USER_PROMPT
from vita.src.core.errors import InputStreamError, VitaError
from vita.src.core.retriever import ContextRetriever
from vita.src.core.runner import ChatRunner
from vita.src.utils.logger import get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class ChatLoop:
    """
    Parameters
    ----------
    retriever
        Produces the context string for each line.
    runner
        Calls the model and records the exchange.
    session_id
        The conversation every line belongs to.
    input_stream, output_stream
        Default to ``sys.stdin`` / ``sys.stdout``.
    """

    __slots__ = ("_retriever", "_runner", "_session_id", "_input", "_output")

    def __init__(self, retriever: ContextRetriever, runner: ChatRunner, session_id: str, input_stream: TextIO | None = None, output_stream: TextIO | None = None) -> None:
        self._retriever = retriever
        self._runner = runner
        self._session_id = session_id
        self._input = input_stream if input_stream is not None else sys.stdin
        self._output = output_stream if output_stream is not None else sys.stdout


    def run(self) -> int:
        """Run until the conversation ends; return the process exit status."""
        logger.info("[CHAT] Session '%s' started.", self._session_id)
        try:
            while True:
                line = self._read_line()
                if line is None:
                    logger.info("[CHAT] End of input.")
                    return EXIT_OK

                user_input = line.strip()
                if not user_input:
                    continue
                if user_input.lower() in QUIT_COMMANDS:
                    logger.info("[CHAT] Quit command received.")
                    return EXIT_OK

                self._turn(user_input)
        except KeyboardInterrupt:
            self._output.write("\n")
            logger.info("[CHAT] Interrupted.")
            return EXIT_OK
        except VitaError as exc:
            logger.error("An error occurred during chat: %s", exc)
            return EXIT_FAILURE
        finally:
            self._close_input()


    def _turn(self, user_input: str) -> None:
        context = self._retriever.retrieve_context(user_input)
        answer = self._runner.invoke(self._session_id, user_input, context)
        self._output.write(f"{ASSISTANT_PREFIX} {answer}\n")
        self._output.flush()


    def _read_line(self) -> str | None:
        """Prompt and read one line; ``None`` means the stream is exhausted."""
        self._output.write(USER_PROMPT)
        self._output.flush()
        try:
            line = self._input.readline()
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            raise InputStreamError(f"failed to read input: {exc}") from exc
        if line == "":
            return None
        return line


    def _close_input(self) -> None:
        try:
            self._input.close()
        except OSError:
            logger.warning("Input stream did not close cleanly.")
