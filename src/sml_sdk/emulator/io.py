"""
Input and Output for the SML Virtual Machine
============================================

READ pulls one whitespace-free token from an input source; WRITE pushes one
line of text to an output sink. Both are injected into the processor so
that programs can run against the console or against scripted data.

Input sources implement ``read_token() -> Optional[str]``; returning None
means no input is left, which the processor turns into an
InputExhaustedError fault.

Output sinks are plain callables taking one line of text.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from collections import deque
from typing import Callable, Iterable, Optional, Protocol
import logging

import click

logger = logging.getLogger(__name__)


OutputSink = Callable[[str], None]


class InputSource(Protocol):
    """
    Protocol for READ input.

    The processor calls read_token() once per READ instruction.
    """
    def read_token(self) -> Optional[str]:
        """Return the next input token, or None when input is exhausted."""
        ...


class ConsoleInput:
    """
    Interactive input from the terminal.

    Prompts with click.prompt and returns the first whitespace-separated
    token of the reply. End of input (Ctrl-D) counts as exhausted input.
    """

    def __init__(self, prompt: str = "Enter value: "):
        self.prompt = prompt

    def read_token(self) -> Optional[str]:
        try:
            reply = click.prompt(self.prompt, prompt_suffix="", type=str)
        except click.Abort:
            logger.debug("Console input closed")
            return None
        tokens = reply.split()
        return tokens[0] if tokens else reply


class ScriptedInput:
    """
    Input from a fixed list of tokens.

    Used by tests and by ``smlrun --input``.

    Example:
        >>> source = ScriptedInput(["5", "hello"])
        >>> source.read_token()
        '5'
        >>> source.remaining
        1
    """

    def __init__(self, tokens: Iterable[str] = ()):
        self._tokens = deque(str(t) for t in tokens)

    def feed(self, *tokens: str) -> None:
        """Append more tokens."""
        self._tokens.extend(tokens)

    @property
    def remaining(self) -> int:
        """Number of tokens not yet consumed."""
        return len(self._tokens)

    def read_token(self) -> Optional[str]:
        if not self._tokens:
            return None
        return self._tokens.popleft()


def console_output(line: str) -> None:
    """Default output sink: echo the line to stdout."""
    click.echo(line)
