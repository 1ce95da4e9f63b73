# mailcampaign/channels/encoding.py
import base64
from typing import Any, Dict, Mapping


def b64(value: Any) -> str:
    """Base64 of ``str(value)`` (UTF-8), as Mailkit expects for text fields."""
    return base64.b64encode(str(value).encode("utf-8")).decode("ascii")


def encode_fields(fields: Mapping[str, Any]) -> Dict[str, str]:
    return {key: b64(value) for key, value in fields.items()}
