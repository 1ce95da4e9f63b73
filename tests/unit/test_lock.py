import pytest

from mailcampaign.common.errors import LockHeldError, StartupError
from mailcampaign.workflow.lock import SingleInstanceLock, script_identity


def test_acquire_creates_marker(tmp_path):
    lock = SingleInstanceLock(tmp_path, identity="campaign.py")
    assert not lock.path.exists()

    path = lock.acquire()

    assert path == tmp_path / "campaign.py.lock"
    assert lock.path.exists()
    assert path.read_text(encoding="utf-8") == "CAMPAIGNID = \n"


def test_second_acquire_is_rejected(tmp_path):
    SingleInstanceLock(tmp_path, identity="campaign.py").acquire()
    with pytest.raises(LockHeldError) as exc:
        SingleInstanceLock(tmp_path, identity="campaign.py").acquire()
    assert exc.value.path == tmp_path / "campaign.py.lock"


def test_locks_are_per_identity(tmp_path):
    SingleInstanceLock(tmp_path, identity="a").acquire()
    SingleInstanceLock(tmp_path, identity="b").acquire()


def test_record_and_read_campaign_id(tmp_path):
    lock = SingleInstanceLock(tmp_path, identity="x")
    assert lock.read_campaign_id() is None
    lock.acquire()
    assert lock.read_campaign_id() is None

    lock.record_campaign_id(7781)

    assert lock.path.read_text(encoding="utf-8") == "CAMPAIGNID = 7781\n"
    assert lock.read_campaign_id() == 7781


def test_release(tmp_path):
    lock = SingleInstanceLock(tmp_path, identity="x")
    assert lock.release() is False
    lock.acquire()
    assert lock.release() is True
    assert not lock.path.exists()
    lock.acquire()


def test_missing_directory_is_startup_error(tmp_path):
    with pytest.raises(StartupError):
        SingleInstanceLock(tmp_path / "nope", identity="x").acquire()


def test_script_identity():
    assert script_identity("/opt/bin/send_campaign.py") == "send_campaign.py"
    assert script_identity("") == "mailcampaign"
    assert script_identity("/site-packages/mailcampaign/__main__.py") == "mailcampaign"
