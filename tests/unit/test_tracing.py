import logging

import pytest

from mailcampaign.common.errors import ConfigError, MissingConfigError, describe
from mailcampaign.common.tracing import (
    get_run_id,
    get_step,
    new_run_id,
    set_run_id,
    setup_logging,
    step_scope,
)
from mailcampaign.rpc import schemas
from mailcampaign.workflow.context import CAMPAIGN_CREATE, MAILLIST_CREATE, MAILLIST_IMPORT
from mailcampaign.workflow.engine import Workflow
from tests.fake_mailkit import FakeMailkitClient


def test_records_carry_run_id(caplog):
    setup_logging(logging.DEBUG)
    setup_logging("info")  # idempotent

    run_id = new_run_id()
    set_run_id(run_id)
    try:
        with caplog.at_level(logging.INFO, logger="mailcampaign.test"):
            logging.getLogger("mailcampaign.test").info("hello")
    finally:
        set_run_id(None)

    assert caplog.records[-1].run_id == run_id
    assert caplog.records[-1].step == "-"
    assert get_run_id() is None


def test_step_scope_tags_records_and_resets(caplog):
    setup_logging("INFO")
    with caplog.at_level(logging.INFO, logger="mailcampaign.test"):
        with step_scope("CAMPAIGN_SEND"):
            assert get_step() == "CAMPAIGN_SEND"
            logging.getLogger("mailcampaign.test").info("inside")
        logging.getLogger("mailcampaign.test").info("outside")

    inside, outside = caplog.records[-2:]
    assert inside.step == "CAMPAIGN_SEND"
    assert outside.step == "-"
    assert get_step() is None


def test_step_logs_carry_the_step_name(caplog, config_factory, stash):
    setup_logging("INFO")
    client = FakeMailkitClient({
        schemas.MAILINGLIST_CREATE: {"data": 4242},
        schemas.MAILINGLIST_IMPORT: {"status": "ok"},
        schemas.CAMPAIGNS_CREATE: "7781",
        schemas.SENDMAIL: {"status": "ok"},
    })

    with caplog.at_level(logging.INFO, logger="mailcampaign.steps"):
        Workflow(client, config_factory(), stash).run()

    def step_of(prefix):
        return next(r.step for r in caplog.records if r.getMessage().startswith(prefix))

    assert step_of("Created mailing list") == MAILLIST_CREATE
    assert step_of("Imported") == MAILLIST_IMPORT
    assert step_of("Created campaign") == CAMPAIGN_CREATE


@pytest.mark.parametrize("level", ["bogus", "verbose"])
def test_unknown_level_is_config_error(level):
    with pytest.raises(ConfigError, match="unknown log level"):
        setup_logging(level)


def test_describe_uses_error_code():
    assert describe(MissingConfigError("SEND_TO")) == "missing_config: missing configuration key: SEND_TO"
    assert describe(ValueError("x")) == "ValueError: x"
