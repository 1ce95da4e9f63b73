# mailcampaign/config.py
"""
Two configuration layers:

* ``Settings``: process-level knobs (log level, timeouts) read from the
  environment / ``.env`` with the ``MAILCAMPAIGN_`` prefix.
* ``CampaignConfig``: the campaign file handed to the CLI with ``-c``.
  Plain ``KEY = VALUE`` lines, loaded once and never mutated. Steps pull
  the keys they need lazily through ``require()``.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from mailcampaign.common.errors import ConfigError, MissingConfigError

logger = logging.getLogger("mailcampaign.config")

DEFAULT_MAILING_LIST_ID = 83818
DEFAULT_SEND_SUBJECT = "Test Script"

# KEY = VALUE, optionally prefixed with `export`; only whole-line `#` comments
_LINE_RE = re.compile(r"^\s*(?:export\s+)?(?P<key>[A-Za-z_][A-Za-z0-9_.]*)\s*=\s*(?P<value>.*?)\s*$")


class Settings(BaseSettings):
    LOG_LEVEL: str = "INFO"
    RPC_TIMEOUT: float = 30.0
    USERS_FETCH_TIMEOUT: float = 30.0
    DEFAULT_LOCK_DIR: str = "."

    model_config = SettingsConfigDict(
        env_prefix="MAILCAMPAIGN_",
        env_file=".env",
        extra="ignore",
    )


def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(f"invalid MAILCAMPAIGN_* setting: {e}") from e


class CampaignConfig(BaseModel):
    """Immutable view over the campaign file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    url: Optional[str] = Field(None, alias="URL")
    client_id: Optional[str] = Field(None, alias="CLIENTID")
    client_key: Optional[str] = Field(None, alias="CLIENTKEY")

    maillist_name: Optional[str] = Field(None, alias="MAILLIST_NAME")
    maillist_id: Optional[int] = Field(None, alias="MAILLIST_ID", gt=0)

    users_url: Optional[str] = Field(None, alias="USERS_URL")
    users_file: Optional[str] = Field(None, alias="USERS_FILE")

    campaign_name: Optional[str] = Field(None, alias="CAMPAIGN_NAME")
    campaign_description: Optional[str] = Field(None, alias="CAMPAIGN_DESCRIPTION")
    id_allow_email: Optional[str] = Field(None, alias="ID_ALLOW_EMAIL")

    send_to: Optional[str] = Field(None, alias="SEND_TO")
    send_subject: Optional[str] = Field(None, alias="SEND_SUBJECT")
    message_file: Optional[str] = Field(None, alias="MESSAGE_FILE")

    lock_file_location: Optional[str] = Field(None, alias="LOCKFILELOCATION")

    # --- Helpers -------------------------------------------------------------

    @classmethod
    def _field_for(cls, key: str) -> str:
        for name, info in cls.model_fields.items():
            if info.alias == key.upper() or name == key:
                return name
        raise KeyError(key)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Look up a value by its file key (``CAMPAIGN_NAME``) or field name."""
        try:
            value = getattr(self, self._field_for(key))
        except KeyError:
            return default
        if value is None or value == "":
            return default
        return str(value)

    def require(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise MissingConfigError(key.upper())
        return value


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def parse_campaign_config(text: str, source: str = "<string>") -> CampaignConfig:
    """
    Parse ``KEY = VALUE`` lines. The value is the whole right-hand side
    (``#`` inside a value is kept), trimmed, with one pair of matching
    quotes removed. Later lines win.
    """
    values: Dict[str, str] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        m = _LINE_RE.match(line)
        if m is None:
            raise ConfigError(f"{source}:{lineno}: expected KEY = VALUE, got {stripped!r}")
        value = _unquote(m.group("value"))
        # `KEY =` with no value counts as absent
        if value:
            values[m.group("key").upper()] = value
        else:
            values.pop(m.group("key").upper(), None)

    try:
        config = CampaignConfig.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"{source}: invalid configuration: {e}") from e

    known = {info.alias for info in CampaignConfig.model_fields.values()}
    unknown = sorted(set(values) - known)
    if unknown:
        logger.debug("Ignoring unrecognised config keys: %s", unknown)
    return config


def load_campaign_config(path: str | Path) -> CampaignConfig:
    """Read the campaign file; any read/parse problem is a startup error."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"unable to read config file {path}: {e}") from e
    return parse_campaign_config(text, source=str(path))
