# mailcampaign/workflow/stash.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from mailcampaign.config import DEFAULT_MAILING_LIST_ID, CampaignConfig


class CampaignStash(BaseModel):
    """
    Cross-step state for one run.

    Created once at process start and owned by the engine; steps mutate
    fields in place. Unknown fields and non-integer ids are rejected on
    assignment.
    """
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    mailing_list_id: int = Field(DEFAULT_MAILING_LIST_ID, gt=0)
    campaign_id: Optional[int] = Field(None, gt=0)

    @classmethod
    def from_config(cls, config: CampaignConfig) -> "CampaignStash":
        if config.maillist_id is not None:
            return cls(mailing_list_id=config.maillist_id)
        return cls()
