from __future__ import annotations

import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_PROBE_URL = "https://www.google.com/generate_204"


def is_online(
    url: str = DEFAULT_PROBE_URL,
    *,
    timeout: float = 3.0,
    session: Optional[requests.Session] = None,
) -> bool:
    """Best-effort online check.

    Any HTTP answer counts as online; only transport failures mean offline.
    """

    try:
        getter = session.get if session is not None else requests.get
        r = getter(url, timeout=timeout)
        r.close()
        return True
    except requests.RequestException as e:
        logger.debug("Online probe %s failed: %s", url, e)
        return False
