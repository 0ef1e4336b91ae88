from __future__ import annotations

import logging
import re
import time
import uuid
from dataclasses import dataclass
from email.message import Message
from pathlib import Path
from typing import Callable, List, Optional, Sequence
from urllib.parse import unquote, urlsplit

import requests

from ..errors import DownloadError
from .env import LAYOUT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DownloadPolicy:
    attempt_timeout: float = 20 * 60
    overall_timeout: float = 60 * 60
    max_retries: int = 2
    retry_delay: float = 5.0
    chunk_size: int = 64 * 1024
    connect_timeout: float = 30.0
    # Longest a single socket read may block; bounds how far a stalled stream
    # can run past the attempt deadline.
    read_timeout: float = 30.0


class AttemptTimeout(Exception):
    """A download attempt ran past its time budget."""


class Deadline:
    """A point in time on a monotonic clock; shared by everything it bounds."""

    def __init__(self, seconds: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._expires_at = clock() + max(0.0, seconds)

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def narrowed(self, seconds: float) -> "Deadline":
        """A child deadline that never outlives this one."""
        return Deadline(min(seconds, self.remaining()), clock=self._clock)


def name_from_locator(locator: str) -> Optional[str]:
    """Last path segment of the locator if it names a zip archive."""

    path = urlsplit(locator).path or locator
    segments = [s for s in re.split(r"[/\\]", path) if s]
    if not segments:
        return None
    last = unquote(segments[-1])
    if last.lower().endswith(LAYOUT.archive_ext):
        return last
    return None


def placeholder_name() -> str:
    return f"package_{uuid.uuid4().hex}{LAYOUT.archive_ext}"


def suggested_name(response: requests.Response) -> Optional[str]:
    """File name offered by the server through Content-Disposition."""

    header = response.headers.get("Content-Disposition")
    if not header:
        return None
    msg = Message()
    msg["Content-Disposition"] = header
    name = msg.get_filename()
    if not name:
        return None
    # Never trust directory components from the server.
    name = name.strip().strip('"').replace("\\", "/").rsplit("/", 1)[-1]
    if name in {"", ".", ".."}:
        return None
    return name


def _attempt(
    session: requests.Session,
    locator: str,
    dest_dir: Path,
    fallback_name: str,
    deadline: Deadline,
    policy: DownloadPolicy,
) -> Path:
    remaining = deadline.remaining()
    if remaining <= 0.0:
        raise AttemptTimeout(f"no time left to start {locator}")
    timeout = (min(policy.connect_timeout, remaining), min(policy.read_timeout, remaining))

    with session.get(locator, stream=True, timeout=timeout, allow_redirects=True) as resp:
        resp.raise_for_status()

        # The final name is known once headers are in; the body is written under it from byte one.
        path = dest_dir / (suggested_name(resp) or fallback_name)
        try:
            with open(path, "wb") as fh:
                for chunk in resp.iter_content(chunk_size=policy.chunk_size):
                    if deadline.expired:
                        raise AttemptTimeout(f"timed out while downloading {locator}")
                    if chunk:
                        fh.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise

    return path


def _fetch_one(
    session: requests.Session,
    locator: str,
    *,
    index: int,
    total: int,
    dest_dir: Path,
    overall: Deadline,
    policy: DownloadPolicy,
    sleep: Callable[[float], None],
) -> Path:
    fallback_name = name_from_locator(locator) or placeholder_name()
    attempts = policy.max_retries + 1
    reason = "overall download deadline elapsed"

    for attempt in range(1, attempts + 1):
        if overall.expired:
            reason = "overall download deadline elapsed"
            break

        logger.info("Downloading (%d/%d, attempt %d/%d): %s", index, total, attempt, attempts, locator)
        try:
            path = _attempt(
                session,
                locator,
                dest_dir,
                fallback_name,
                overall.narrowed(policy.attempt_timeout),
                policy,
            )
        except (AttemptTimeout, requests.Timeout) as e:
            reason = f"timeout: {e}"
            logger.warning("Download timed out: %s", locator)
        except (requests.RequestException, OSError) as e:
            reason = str(e)
            logger.warning("Download failed: %s (%s)", locator, e)
        else:
            logger.info("Downloaded %s -> %s", locator, str(path))
            return path

        if attempt < attempts:
            wait = min(policy.retry_delay, overall.remaining())
            if wait > 0:
                sleep(wait)
            logger.info("Retrying %s", locator)

    raise DownloadError(locator, index, total, reason)


def fetch_all(
    locators: Sequence[str],
    dest_dir: str | Path,
    *,
    policy: DownloadPolicy = DownloadPolicy(),
    session: Optional[requests.Session] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> List[Path]:
    """Download every locator into ``dest_dir``, one at a time, in order.

    Each locator gets ``policy.max_retries`` extra attempts. The first locator
    that runs out of attempts aborts the batch with DownloadError; nothing
    after it is fetched and the files already saved should not be relied on.
    A single overall deadline bounds the whole batch.
    """

    dest = Path(dest_dir)
    dest.mkdir(parents=True, exist_ok=True)

    items = list(locators)
    overall = Deadline(policy.overall_timeout, clock=clock)
    own_session = session is None
    s = session if session is not None else requests.Session()

    saved: List[Path] = []
    try:
        for index, locator in enumerate(items, start=1):
            saved.append(
                _fetch_one(
                    s,
                    locator,
                    index=index,
                    total=len(items),
                    dest_dir=dest,
                    overall=overall,
                    policy=policy,
                    sleep=sleep,
                )
            )
    finally:
        if own_session:
            s.close()

    return saved
