#!/usr/bin/env python3
"""
mailcampaign CLI.

Usage:
    mailcampaign -c campaign.conf                       # full run: create list -> send
    mailcampaign -c campaign.conf --start CAMPAIGN_REPORT   # monitoring only
    mailcampaign -c campaign.conf --release-lock        # operator cleanup

Exit codes: 0 completed, 1 workflow failed, 2 startup error, 3 lock held.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from mailcampaign.common.bootstrap_env import bootstrap_env
from mailcampaign.common.errors import CampaignError, LockHeldError, describe
from mailcampaign.common.tracing import new_run_id, set_run_id, setup_logging
from mailcampaign.config import get_settings, load_campaign_config
from mailcampaign.rpc.client import MailkitClient
from mailcampaign.workflow.engine import START_STEP, Workflow, build_registry
from mailcampaign.workflow.lock import LOCK_HELD_MESSAGE, SingleInstanceLock, script_identity
from mailcampaign.workflow.stash import CampaignStash

logger = logging.getLogger("mailcampaign")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_STARTUP_ERROR = 2
EXIT_LOCKED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailcampaign",
        description="Create a Mailkit mailing list, import subscribers, create and send a campaign.",
    )
    parser.add_argument("-c", "--config", required=True, help="Campaign config file (KEY = VALUE lines)")
    parser.add_argument(
        "--start",
        default=START_STEP,
        choices=sorted(build_registry()),
        help=f"Step to start from (default: {START_STEP})",
    )
    parser.add_argument("--release-lock", action="store_true", help="Remove the lock file and exit")
    parser.add_argument("--log-level", default=None, help="Overrides MAILCAMPAIGN_LOG_LEVEL")
    return parser


def _startup_failed(e: CampaignError) -> int:
    logger.error("Startup failed: %s", describe(e))
    print(f"Unable to start - {describe(e)}", file=sys.stderr)
    return EXIT_STARTUP_ERROR


def main(argv: Optional[List[str]] = None) -> int:
    bootstrap_env()
    args = build_parser().parse_args(argv)

    # ── Startup ────────────────────────────────────────────────────
    try:
        settings = get_settings()
        setup_logging(args.log_level or settings.LOG_LEVEL)
        set_run_id(new_run_id())

        config = load_campaign_config(args.config)
        lock = SingleInstanceLock(
            config.get("LOCKFILELOCATION", settings.DEFAULT_LOCK_DIR),
            identity=script_identity(),
        )
        if args.release_lock:
            previous = lock.read_campaign_id()
            removed = lock.release()
            print(f"Lock {lock.path} {'removed' if removed else 'not present'}"
                  + (f" (CAMPAIGNID = {previous})" if previous is not None else ""))
            return EXIT_OK

        client = MailkitClient(
            config.require("URL"),
            config.require("CLIENTID"),
            config.require("CLIENTKEY"),
            timeout=settings.RPC_TIMEOUT,
        )
        stash = CampaignStash.from_config(config)
    except CampaignError as e:
        return _startup_failed(e)

    # ── Single instance ────────────────────────────────────────────
    try:
        lock.acquire()
    except LockHeldError as e:
        logger.warning("%s (CAMPAIGNID = %s)", e, lock.read_campaign_id() or "none")
        print(LOCK_HELD_MESSAGE)
        return EXIT_LOCKED
    except CampaignError as e:
        return _startup_failed(e)

    # ── Workflow ───────────────────────────────────────────────────
    workflow = Workflow(client, config, stash, users_fetch_timeout=settings.USERS_FETCH_TIMEOUT)
    result = workflow.run(args.start)

    if result.stash.campaign_id is not None:
        lock.record_campaign_id(result.stash.campaign_id)

    if result.ok:
        return EXIT_OK

    print(f"Unable to process - {result.failed_step}: {result.detail!r}", file=sys.stderr)
    return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
