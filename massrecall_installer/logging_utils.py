from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

DEFAULT_LOG_PATH = "massrecall-installer.log"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def _open_log_file(log_path: str) -> Tuple[logging.Handler, str]:
    try:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path, encoding="utf-8"), log_path
    except OSError:
        fallback = str(Path.cwd() / Path(DEFAULT_LOG_PATH).name)
        return logging.FileHandler(fallback, encoding="utf-8"), fallback


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure root logging once per process.

    Every decision the installer makes is written to ``log_path``. When that
    location is not writable (read-only install media, missing permissions)
    the log goes to the current directory instead and the requested path is
    still reported.

    Returns the actual file path being used.
    """

    root = logging.getLogger()
    root.setLevel(level)

    # A second call keeps the handlers of the first.
    if getattr(root, "_massrecall_log_path", None):
        return getattr(root, "_massrecall_log_path")

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    file_handler, chosen_path = _open_log_file(log_path)
    handlers = [file_handler]
    if also_console:
        handlers.append(logging.StreamHandler())

    for h in handlers:
        h.setFormatter(fmt)
        root.addHandler(h)

    setattr(root, "_massrecall_log_path", chosen_path)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
