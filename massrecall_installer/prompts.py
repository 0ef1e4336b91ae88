from __future__ import annotations

import logging
import webbrowser
from pathlib import Path
from typing import Callable, Protocol

from .errors import NoInputError
from .lib.source import UserChoice

logger = logging.getLogger(__name__)


class UserPrompt(Protocol):
    """Synchronous decisions the installer needs from a person."""

    def choose_download(self) -> UserChoice:
        ...

    def wait_for_manual_placement(self, directory: Path, page_url: str) -> None:
        ...


class FixedPrompt:
    """Answers without asking; used for --download/--skip-download."""

    def __init__(self, choice: UserChoice) -> None:
        self.choice = choice
        self.manual_waits: list[Path] = []

    def choose_download(self) -> UserChoice:
        return self.choice

    def wait_for_manual_placement(self, directory: Path, page_url: str) -> None:
        logger.info("Non-interactive run: expecting archives in %s already", str(directory))
        self.manual_waits.append(directory)


class ConsolePrompt:
    def __init__(
        self,
        *,
        read: Callable[[str], str] = input,
        open_page: Callable[[str], bool] = webbrowser.open,
    ) -> None:
        self._read = read
        self._open_page = open_page

    def _ask(self, message: str) -> str:
        try:
            return self._read(message)
        except EOFError:
            raise NoInputError(
                "No console input available. Run again with --download or --skip-download."
            ) from None

    def choose_download(self) -> UserChoice:
        answer = self._ask("Download the packages now? This can take a while. [a = yes / b = no] ")
        while answer.strip().lower() not in {"a", "b"}:
            answer = self._ask("Please enter a (yes) or b (no): ")
        return UserChoice.DOWNLOAD if answer.strip().lower() == "a" else UserChoice.SKIP

    def wait_for_manual_placement(self, directory: Path, page_url: str) -> None:
        logger.warning("Online, but no package manifest was provided.")
        logger.warning("Opening %s; download the ZIP files and put them in %s", page_url, str(directory))
        try:
            self._open_page(page_url)
        except webbrowser.Error as e:
            logger.warning("Could not open a browser: %s", e)
        self._ask("Press Enter once the ZIP files are in place... ")
