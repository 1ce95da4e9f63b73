# mailcampaign/workflow/steps/maillist_import.py
import logging

from mailcampaign.channels.users import load_subscribers
from mailcampaign.workflow.context import CAMPAIGN_CREATE, StepContext
from mailcampaign.workflow.outcome import Continue, Fail, Outcome

logger = logging.getLogger("mailcampaign.steps.maillist_import")


def maillist_import(ctx: StepContext) -> Outcome:
    users = load_subscribers(
        ctx.config.get("USERS_FILE"),
        ctx.config.get("USERS_URL"),
        timeout=ctx.users_fetch_timeout,
    )

    result = ctx.client.call(ctx.method, int(ctx.stash.mailing_list_id), users)

    # The import result does not gate the workflow; only a timeout stops it here.
    if result.kind == "transport_failure" and result.timed_out:
        return Fail(detail=f"{ctx.method} did not complete: {result.error}")
    if result.kind != "success":
        logger.warning(
            "Import into list %s returned %s: %r",
            ctx.stash.mailing_list_id, result.kind, result.raw,
        )
    else:
        logger.info("Imported %d subscriber(s) into list %s", len(users), ctx.stash.mailing_list_id)
    return Continue(next_step=CAMPAIGN_CREATE)
