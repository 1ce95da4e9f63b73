# mailcampaign/workflow/steps/campaign_send.py
import logging

from mailcampaign.channels.encoding import b64
from mailcampaign.channels.message import render_message
from mailcampaign.config import DEFAULT_SEND_SUBJECT
from mailcampaign.workflow.context import StepContext
from mailcampaign.workflow.outcome import Complete, Fail, Outcome

logger = logging.getLogger("mailcampaign.steps.campaign_send")

SEND_STATUS = "enabled"


def campaign_send(ctx: StepContext) -> Outcome:
    campaign_id = ctx.stash.campaign_id
    if campaign_id is None:
        return Fail(detail="no campaign id in stash; run CAMPAIGN_CREATE first")

    message = {
        "send_to": ctx.config.require("SEND_TO"),
        "subject": ctx.config.get("SEND_SUBJECT", DEFAULT_SEND_SUBJECT),
        "message_data": b64(render_message(ctx.config.get("MESSAGE_FILE"))),
        "status": b64(SEND_STATUS),
    }

    result = ctx.client.call(
        ctx.method,
        int(ctx.stash.mailing_list_id),
        int(campaign_id),
        message,
    )

    if result.kind == "success":
        logger.info("Campaign %s sent to %r", campaign_id, message["send_to"])
        return Complete()
    if result.kind == "transport_failure":
        return Fail(detail=f"{ctx.method} did not complete: {result.error}")
    return Fail(detail=result.raw)
