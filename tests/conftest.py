# tests/conftest.py
import sys
import json
from pathlib import Path
from typing import Any, Dict

import pytest

# --- Ensure project root is importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mailcampaign.config import CampaignConfig  # noqa: E402
from mailcampaign.workflow.stash import CampaignStash  # noqa: E402
from tests.fake_mailkit import FakeMailkitClient  # noqa: E402

SUBSCRIBERS = [
    {"email": "ada@example.com", "first_name": "Ada"},
    {"email": "grace@example.com", "first_name": "Grace"},
]

BASE_CONFIG: Dict[str, str] = {
    "URL": "http://mailkit.test/rpc.fcgi",
    "CLIENTID": "12345",
    "CLIENTKEY": "secret-key",
    "MAILLIST_NAME": "pytest-list",
    "CAMPAIGN_NAME": "Spring Newsletter",
    "CAMPAIGN_DESCRIPTION": "News for spring",
    "ID_ALLOW_EMAIL": "77",
    "SEND_TO": "all",
}


# --- Keep runtime settings deterministic regardless of the shell / .env
@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    for key in ("MAILCAMPAIGN_LOG_LEVEL", "MAILCAMPAIGN_RPC_TIMEOUT",
                "MAILCAMPAIGN_USERS_FETCH_TIMEOUT", "MAILCAMPAIGN_DEFAULT_LOCK_DIR"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def users_file(tmp_path) -> Path:
    path = tmp_path / "users.json"
    path.write_text(json.dumps(SUBSCRIBERS), encoding="utf-8")
    return path


@pytest.fixture()
def config_factory(users_file):
    """Build a CampaignConfig from BASE_CONFIG plus overrides (None drops a key)."""
    def _make(**overrides: Any) -> CampaignConfig:
        values: Dict[str, Any] = {**BASE_CONFIG, "USERS_FILE": str(users_file)}
        for key, value in overrides.items():
            if value is None:
                values.pop(key, None)
            else:
                values[key] = value
        return CampaignConfig.model_validate(values)
    return _make


@pytest.fixture()
def write_config(tmp_path, users_file):
    """Write a KEY = VALUE campaign file and return its path."""
    def _write(**overrides: Any) -> Path:
        values: Dict[str, Any] = {
            **BASE_CONFIG,
            "USERS_FILE": str(users_file),
            "LOCKFILELOCATION": str(tmp_path),
        }
        for key, value in overrides.items():
            if value is None:
                values.pop(key, None)
            else:
                values[key] = value
        path = tmp_path / "campaign.conf"
        lines = ["# pytest campaign"] + [f"{k} = {v}" for k, v in values.items()]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture()
def stash() -> CampaignStash:
    return CampaignStash()


@pytest.fixture()
def fake_client():
    return FakeMailkitClient()
