# mailcampaign/workflow/context.py
from dataclasses import dataclass

from mailcampaign.config import CampaignConfig
from mailcampaign.rpc.client import RpcClient
from mailcampaign.workflow.stash import CampaignStash

# Step names (registry keys)
MAILLIST_CREATE = "MAILLIST_CREATE"
MAILLIST_IMPORT = "MAILLIST_IMPORT"
CAMPAIGN_CREATE = "CAMPAIGN_CREATE"
CAMPAIGN_SEND = "CAMPAIGN_SEND"
CAMPAIGN_REPORT = "CAMPAIGN_REPORT"


@dataclass
class StepContext:
    """
    Everything one step invocation sees.
    ``stash`` is shared by reference across steps; nothing else is.
    """

    config: CampaignConfig
    stash: CampaignStash
    client: RpcClient
    method: str                    # remote method bound to this step
    users_fetch_timeout: float = 30.0
