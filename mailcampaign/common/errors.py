# mailcampaign/common/errors.py
from __future__ import annotations

# ---- Canonical error classes ------------------------------------------------

class CampaignError(Exception):
    code: str = "unknown"
    fatal: bool = False

    def __init__(self, message: str = ""):
        super().__init__(message)


class StartupError(CampaignError):
    code, fatal = "startup", True


class ConfigError(StartupError):
    code, fatal = "config", True


class LockHeldError(CampaignError):
    code, fatal = "lock_held", True

    def __init__(self, path):
        super().__init__(f"lock file already present: {path}")
        self.path = path


class MissingConfigError(CampaignError):
    code = "missing_config"

    def __init__(self, key: str):
        super().__init__(f"missing configuration key: {key}")
        self.key = key


class SubscriberSourceError(CampaignError):
    code = "subscriber_source"


class TemplateError(CampaignError):
    code = "template"


# ---- Helpers ---------------------------------------------------------------

def describe(exc: BaseException) -> str:
    """Short `code: message` string for operator-facing output."""
    code = exc.code if isinstance(exc, CampaignError) else exc.__class__.__name__
    return f"{code}: {exc}"
