# mailcampaign/channels/users.py
"""
Subscriber records for the mailing-list import.

Either an HTTP(S) URL serving a JSON array, or a local UTF-8 file holding
the same. Both paths yield the same Python list, so the import call is
identical whichever source was used.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import httpx

from mailcampaign.common.errors import MissingConfigError, SubscriberSourceError

logger = logging.getLogger("mailcampaign.users")

DEFAULT_FETCH_TIMEOUT_SEC = 30.0


def _as_records(data: Any, source: str) -> List[Any]:
    if not isinstance(data, list):
        raise SubscriberSourceError(
            f"{source}: expected a JSON array of subscribers, got {type(data).__name__}"
        )
    return data


def fetch_users(url: str, *, timeout: float = DEFAULT_FETCH_TIMEOUT_SEC) -> List[Any]:
    logger.info("Fetching users from - %s", url)
    try:
        resp = httpx.get(url, timeout=timeout, follow_redirects=True)
        resp.raise_for_status()
        data = resp.json()
    except httpx.HTTPStatusError as e:
        raise SubscriberSourceError(f"{url}: HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise SubscriberSourceError(f"{url}: {e}") from e
    except ValueError as e:
        raise SubscriberSourceError(f"{url}: invalid JSON: {e}") from e
    return _as_records(data, url)


def read_users(path: str | Path) -> List[Any]:
    path = Path(path)
    logger.info("Reading users from - %s", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SubscriberSourceError(f"{path}: {e}") from e
    except ValueError as e:
        raise SubscriberSourceError(f"{path}: invalid JSON: {e}") from e
    return _as_records(data, str(path))


def load_subscribers(
    users_file: Optional[str],
    users_url: Optional[str],
    *,
    timeout: float = DEFAULT_FETCH_TIMEOUT_SEC,
) -> List[Any]:
    """A configured file wins over a configured URL; one of them must be set."""
    if users_file:
        if users_url:
            logger.info("Both USERS_FILE and USERS_URL set; using USERS_FILE")
        return read_users(users_file)
    if users_url:
        return fetch_users(users_url, timeout=timeout)
    raise MissingConfigError("USERS_FILE or USERS_URL")
