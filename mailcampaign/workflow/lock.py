# mailcampaign/workflow/lock.py
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from mailcampaign.common.errors import LockHeldError, StartupError

logger = logging.getLogger("mailcampaign.lock")

LOCK_SUFFIX = ".lock"

LOCK_HELD_MESSAGE = (
    "Another instance of this script is already running.\n"
    "Run this when the running script has completed."
)


def script_identity(argv0: Optional[str] = None) -> str:
    """Name of the running script, used as the lock file stem."""
    path = Path(argv0 if argv0 is not None else sys.argv[0])
    # `python -m mailcampaign` runs the package's __main__.py
    if not path.name or path.stem == "__main__":
        return "mailcampaign"
    return path.name


class SingleInstanceLock:
    """
    Fail-fast advisory lock: an exclusively-created marker file.

    The file is not removed when a run finishes; it keeps the recorded
    CAMPAIGNID line for the operator until ``release()`` is called
    explicitly.
    """

    def __init__(self, directory: str | Path, identity: Optional[str] = None):
        self.directory = Path(directory)
        self.identity = identity or script_identity()

    @property
    def path(self) -> Path:
        return self.directory / f"{self.identity}{LOCK_SUFFIX}"

    def acquire(self) -> Path:
        try:
            fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError as e:
            raise LockHeldError(self.path) from e
        except OSError as e:
            raise StartupError(f"unable to create lock file {self.path}: {e}") from e

        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(self._line(None))
        logger.info("Acquired lock %s", self.path)
        return self.path

    def record_campaign_id(self, campaign_id: Optional[int]) -> None:
        """Rewrite the lock line with the campaign id for later inspection."""
        self.path.write_text(self._line(campaign_id), encoding="utf-8")
        logger.info("Recorded CAMPAIGNID=%s in %s", campaign_id, self.path)

    def read_campaign_id(self) -> Optional[int]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        _, _, value = text.partition("=")
        value = value.strip()
        return int(value) if value.isdigit() else None

    def release(self) -> bool:
        """Remove the lock file. Returns False when there was nothing to remove."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        logger.info("Released lock %s", self.path)
        return True

    @staticmethod
    def _line(campaign_id: Optional[int]) -> str:
        return f"CAMPAIGNID = {campaign_id if campaign_id is not None else ''}\n"
