# mailcampaign/workflow/steps/campaign_report.py
import json
import logging

from mailcampaign.workflow.context import StepContext
from mailcampaign.workflow.outcome import Complete, Fail, Outcome

logger = logging.getLogger("mailcampaign.steps.campaign_report")


def campaign_report(ctx: StepContext) -> Outcome:
    """Monitoring-only terminal step: fetch and print the report."""
    result = ctx.client.call(ctx.method, int(ctx.stash.mailing_list_id))

    if result.kind == "transport_failure":
        return Fail(detail=f"{ctx.method} did not complete: {result.error}")

    if result.kind != "success":
        logger.warning("Report for list %s returned %s", ctx.stash.mailing_list_id, result.kind)

    print(f"Report for mailing list {ctx.stash.mailing_list_id}:")
    print(json.dumps(result.raw, indent=2, default=str))
    return Complete()
