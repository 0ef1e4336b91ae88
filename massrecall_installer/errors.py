from __future__ import annotations


class InstallerError(RuntimeError):
    """Base class for failures that end an installer run.

    ``exit_code`` is what the CLI returns to the shell.
    """

    exit_code = 1


class InstallRootError(InstallerError):
    exit_code = 2


class NoArchivesError(InstallerError):
    exit_code = 3


class ExtractionError(InstallerError):
    exit_code = 4

    def __init__(self, archive: str, reason: str) -> None:
        super().__init__(f"Failed to extract {archive}: {reason}")
        self.archive = archive
        self.reason = reason


class NoContentError(InstallerError):
    exit_code = 5


class DownloadError(InstallerError):
    exit_code = 6

    def __init__(self, locator: str, index: int, total: int, reason: str) -> None:
        super().__init__(f"Download aborted at package {index}/{total} ({locator}): {reason}")
        self.locator = locator
        self.index = index
        self.total = total
        self.reason = reason


class NoInputError(InstallerError):
    """A question needed an answer but stdin is closed."""

    exit_code = 7
