"""Text entry collaborators used for key entry and challenges."""

import getpass
import logging
import sys
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, TextIO

__all__ = ["Prompter", "ConsolePrompter", "ScriptedPrompter"]

logger = logging.getLogger(__name__)


class Prompter(ABC):
    """
    Interface for operator input.
    
    Each read returns the entered text, or None at end of input. The core
    never touches terminal state itself; hiding echo is up to the
    implementation.
    """
    
    @abstractmethod
    def hidden(self, prompt: str) -> Optional[str]:
        """Read a line without echoing it (mnemonics, passphrases, secrets)."""
        raise NotImplementedError
        
    @abstractmethod
    def line(self, prompt: str) -> Optional[str]:
        """Read a visible line."""
        raise NotImplementedError
        
    @abstractmethod
    def show(self, text: str) -> None:
        """Display informational text to the operator."""
        raise NotImplementedError


class ConsolePrompter(Prompter):
    """
    Terminal prompter.
    
    Prompts and messages go to ``stream`` (stderr by default) so that stdout
    carries only results. Hidden input uses ``getpass``.
    """
    
    def __init__(
        self,
        input_stream: Optional[TextIO] = None,
        stream: Optional[TextIO] = None
    ) -> None:
        self._input = input_stream or sys.stdin
        self._stream = stream or sys.stderr
        
    def hidden(self, prompt: str) -> Optional[str]:
        try:
            return getpass.getpass(prompt, stream=self._stream)
        except EOFError:
            return None
            
    def line(self, prompt: str) -> Optional[str]:
        self._stream.write(prompt)
        self._stream.flush()
        text = self._input.readline()
        if not text:
            return None
        return text.rstrip("\r\n")
        
    def show(self, text: str) -> None:
        print(text, file=self._stream, flush=True)


class ScriptedPrompter(Prompter):
    """
    Prompter that replays canned answers; None or exhaustion means end of input.
    
    Used by tests and for driving a session from another program.
    """
    
    def __init__(self, answers: Iterable[Optional[str]] = ()) -> None:
        self._answers: List[Optional[str]] = list(answers)
        self.prompts: List[str] = []
        self.shown: List[str] = []
        
    def _next(self, prompt: str) -> Optional[str]:
        self.prompts.append(prompt)
        if not self._answers:
            return None
        return self._answers.pop(0)
        
    def hidden(self, prompt: str) -> Optional[str]:
        return self._next(prompt)
        
    def line(self, prompt: str) -> Optional[str]:
        return self._next(prompt)
        
    def show(self, text: str) -> None:
        self.shown.append(text)
