# mailcampaign/workflow/steps/campaign_create.py
import logging

from mailcampaign.channels.encoding import encode_fields
from mailcampaign.workflow.context import CAMPAIGN_SEND, StepContext
from mailcampaign.workflow.outcome import Continue, Fail, Outcome

logger = logging.getLogger("mailcampaign.steps.campaign_create")

MESSAGE_TYPE = "email"
SEND_TYPE = "html"


def campaign_create(ctx: StepContext) -> Outcome:
    fields = encode_fields({
        "name": ctx.config.require("CAMPAIGN_NAME"),
        "subject": ctx.config.require("CAMPAIGN_DESCRIPTION"),
        "ID_allow_email": ctx.config.require("ID_ALLOW_EMAIL"),
        "type_message": MESSAGE_TYPE,
        "type_send": SEND_TYPE,
        "ID_mailing_list": int(ctx.stash.mailing_list_id),
    })

    result = ctx.client.call(ctx.method, fields)

    if result.kind == "success":
        ctx.stash.campaign_id = result.payload
        logger.info("Created campaign id=%s on list %s", result.payload, ctx.stash.mailing_list_id)
        return Continue(next_step=CAMPAIGN_SEND)

    if result.kind == "transport_failure":
        return Fail(detail=f"{ctx.method} did not complete: {result.error}")
    return Fail(detail=result.raw)
