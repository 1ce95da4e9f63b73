# mailcampaign/channels/message.py
from __future__ import annotations

from pathlib import Path
from string import Template
from typing import Optional

from mailcampaign.common.errors import TemplateError

BUNDLED_TEMPLATE = Path(__file__).parent / "templates" / "campaign.html"


def render_message(source: Optional[str | Path] = None) -> str:
    """Render the campaign HTML body (bundled template unless ``source`` is given)."""
    path = Path(source) if source else BUNDLED_TEMPLATE
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateError(f"unable to read message template {path}: {e}") from e

    html = Template(text).safe_substitute({})
    if not html.strip():
        raise TemplateError(f"message template {path} is empty")
    return html
