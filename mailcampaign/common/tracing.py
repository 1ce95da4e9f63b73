# mailcampaign/common/tracing.py
from __future__ import annotations
import logging, uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, Callable

from mailcampaign.common.errors import ConfigError

_RUN_ID: ContextVar[Optional[str]] = ContextVar("_RUN_ID", default=None)
_STEP: ContextVar[Optional[str]] = ContextVar("_STEP", default=None)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [run=%(run_id)s step=%(step)s]: %(message)s"

def new_run_id() -> str:
    return uuid.uuid4().hex[:12]

def get_run_id() -> Optional[str]:
    return _RUN_ID.get()

def set_run_id(value: Optional[str]) -> None:
    _RUN_ID.set(value)

def get_step() -> Optional[str]:
    return _STEP.get()

@contextmanager
def step_scope(name: str) -> Iterator[None]:
    """Tag every record logged inside the block with the workflow step."""
    token = _STEP.set(name)
    try:
        yield
    finally:
        _STEP.reset(token)

def _install_logrecord_factory() -> None:
    """Ensure every LogRecord has .run_id and .step (even for 3rd-party loggers)."""
    old_factory: Callable[..., logging.LogRecord] = logging.getLogRecordFactory()  # type: ignore

    # Already wrapped on a previous setup_logging() call
    if getattr(old_factory, "_mailcampaign", False):
        return

    def record_factory(*args, **kwargs) -> logging.LogRecord:  # type: ignore
        record = old_factory(*args, **kwargs)
        if not hasattr(record, "run_id"):
            record.run_id = get_run_id() or "-"
        if not hasattr(record, "step"):
            record.step = get_step() or "-"
        return record

    record_factory._mailcampaign = True  # type: ignore[attr-defined]
    logging.setLogRecordFactory(record_factory)

def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    # getLevelName maps known names to ints and anything else to "Level X"
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ConfigError(f"unknown log level {level!r}")
    return resolved

def setup_logging(level: int | str = logging.INFO) -> None:
    """Set a format that includes run and step, and install the factory."""
    resolved = _resolve_level(level)
    _install_logrecord_factory()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
