"""Terminal prompting behind a small interface so collectors can be scripted in tests."""

from abc import ABC, abstractmethod
from typing import Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt


class Prompter(ABC):
    @abstractmethod
    def ask(self, label: str, password: bool = False) -> str:
        """Ask for a free-text value. Password input is not echoed."""
        pass

    @abstractmethod
    def confirm(self, question: str, default: bool) -> bool:
        """Ask a yes/no question; a blank answer returns default."""
        pass

    @abstractmethod
    def show(self, text: str = "") -> None:
        pass


class RichPrompter(Prompter):
    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    def ask(self, label: str, password: bool = False) -> str:
        # Blank answers are allowed here; the collector decides what is missing
        return Prompt.ask(label, password=password, default="", show_default=False, console=self._console).strip()

    def confirm(self, question: str, default: bool) -> bool:
        return Confirm.ask(question, default=default, console=self._console)

    def show(self, text: str = "") -> None:
        self._console.print(text, markup=False, highlight=False)
