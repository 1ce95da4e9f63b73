# mailcampaign/common/bootstrap_env.py
from __future__ import annotations

from dotenv import load_dotenv, find_dotenv


def bootstrap_env() -> bool:
    """Load .env from the working directory tree.

    Only fills missing vars; values already set in the shell/CI win.
    Returns True when a .env file was found.
    """
    path = find_dotenv(usecwd=True)
    if not path:
        return False
    return load_dotenv(path, override=False)
