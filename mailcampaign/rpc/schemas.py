# mailcampaign/rpc/schemas.py
"""
Response schema per Mailkit method.

Every raw XML-RPC response is decoded exactly once, here, into one of the
``RpcResult`` variants. Step handlers branch on ``result.kind`` and never
inspect the raw shape themselves.
"""
from __future__ import annotations

import re
from typing import Any, Callable, Dict, Optional

from mailcampaign.rpc.results import AlreadyExists, RemoteError, RpcResult, Success

MAILINGLIST_CREATE = "mailkit.mailinglist.create"
MAILINGLIST_IMPORT = "mailkit.mailinglist.import"
CAMPAIGNS_CREATE = "mailkit.campaigns.create"
SENDMAIL = "mailkit.sendmail"
REPORT_CAMPAIGN = "mailkit.report.campaign"

_POSITIVE_INT_RE = re.compile(r"^\s*\+?0*[1-9]\d*\s*$")


def as_positive_int(value: Any) -> Optional[int]:
    """Return ``value`` as an int if it is a positive integer or numeric string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and _POSITIVE_INT_RE.match(value):
        return int(value)
    return None


def _mentions_exist(value: Any) -> bool:
    return "exist" in str(value).lower()


def _error_message(value: Any) -> str:
    if isinstance(value, dict):
        for key in ("error", "message", "status"):
            if key in value:
                return str(value[key])
    return str(value)


# ---- Decoders ----------------------------------------------------------------

def decode_mailinglist_create(raw: Any) -> RpcResult:
    """``{"data": <id>}`` is success; anything else means the list is already there."""
    if isinstance(raw, dict) and not _mentions_exist(raw):
        list_id = as_positive_int(raw.get("data"))
        if list_id is not None:
            return Success(payload=list_id, raw=raw)
    return AlreadyExists(raw=raw)


def decode_mailinglist_import(raw: Any) -> RpcResult:
    if isinstance(raw, dict) and "error" in raw:
        return RemoteError(message=_error_message(raw), raw=raw)
    return Success(payload=raw, raw=raw)


def decode_campaigns_create(raw: Any) -> RpcResult:
    """A positive integer (or numeric string) is the new campaign id."""
    campaign_id = as_positive_int(raw)
    if campaign_id is not None:
        return Success(payload=campaign_id, raw=raw)
    return RemoteError(message=_error_message(raw), raw=raw)


def decode_sendmail(raw: Any) -> RpcResult:
    if isinstance(raw, dict):
        return Success(payload=raw, raw=raw)
    return RemoteError(message=_error_message(raw), raw=raw)


def decode_report(raw: Any) -> RpcResult:
    if isinstance(raw, (dict, list)):
        return Success(payload=raw, raw=raw)
    return RemoteError(message=_error_message(raw), raw=raw)


def decode_generic(raw: Any) -> RpcResult:
    return Success(payload=raw, raw=raw)


RESPONSE_SCHEMAS: Dict[str, Callable[[Any], RpcResult]] = {
    MAILINGLIST_CREATE: decode_mailinglist_create,
    MAILINGLIST_IMPORT: decode_mailinglist_import,
    CAMPAIGNS_CREATE: decode_campaigns_create,
    SENDMAIL: decode_sendmail,
    REPORT_CAMPAIGN: decode_report,
}


def decode_response(method: str, raw: Any) -> RpcResult:
    return RESPONSE_SCHEMAS.get(method, decode_generic)(raw)
