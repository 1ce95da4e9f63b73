# mailcampaign/workflow/steps/maillist_create.py
import logging

from mailcampaign.workflow.context import MAILLIST_IMPORT, StepContext
from mailcampaign.workflow.outcome import Continue, Fail, Outcome

logger = logging.getLogger("mailcampaign.steps.maillist_create")


def maillist_create(ctx: StepContext) -> Outcome:
    """
    Create the mailing list, or carry on with the existing one.

    Anything other than a fresh list id is read as "already exists" and the
    workflow moves on to the import with the stash untouched.
    """
    name = ctx.config.require("MAILLIST_NAME")
    result = ctx.client.call(ctx.method, name)

    if result.kind == "transport_failure":
        return Fail(detail=f"{ctx.method} did not complete: {result.error}")

    if result.kind == "success":
        ctx.stash.mailing_list_id = result.payload
        logger.info("Created mailing list %r id=%s", name, result.payload)
    else:
        logger.info(
            "Mailing list %r already present; keeping id=%s",
            name, ctx.stash.mailing_list_id,
        )
    return Continue(next_step=MAILLIST_IMPORT)
