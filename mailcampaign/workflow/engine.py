# mailcampaign/workflow/engine.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional

from mailcampaign.common.errors import CampaignError, describe
from mailcampaign.common.tracing import step_scope
from mailcampaign.config import CampaignConfig
from mailcampaign.rpc import schemas
from mailcampaign.rpc.client import RpcClient
from mailcampaign.workflow.context import (
    CAMPAIGN_CREATE,
    CAMPAIGN_REPORT,
    CAMPAIGN_SEND,
    MAILLIST_CREATE,
    MAILLIST_IMPORT,
    StepContext,
)
from mailcampaign.workflow.outcome import Complete, Continue, Fail, Outcome
from mailcampaign.workflow.stash import CampaignStash
from mailcampaign.workflow.steps.campaign_create import campaign_create
from mailcampaign.workflow.steps.campaign_report import campaign_report
from mailcampaign.workflow.steps.campaign_send import campaign_send
from mailcampaign.workflow.steps.maillist_create import maillist_create
from mailcampaign.workflow.steps.maillist_import import maillist_import

logger = logging.getLogger("mailcampaign.workflow")

START_STEP = MAILLIST_CREATE

# Upper bound on dispatches per run; a transition cycle is a bug, not a workload
MAX_TRANSITIONS = 32

Handler = Callable[[StepContext], Outcome]


@dataclass(frozen=True)
class OperationDescriptor:
    name: str
    remote_method: str
    handler: Handler


def build_registry() -> Mapping[str, OperationDescriptor]:
    """Fixed step table: name -> (remote method, handler). Read-only once built."""
    ops = [
        OperationDescriptor(MAILLIST_CREATE, schemas.MAILINGLIST_CREATE, maillist_create),
        OperationDescriptor(MAILLIST_IMPORT, schemas.MAILINGLIST_IMPORT, maillist_import),
        OperationDescriptor(CAMPAIGN_CREATE, schemas.CAMPAIGNS_CREATE, campaign_create),
        OperationDescriptor(CAMPAIGN_SEND, schemas.SENDMAIL, campaign_send),
        OperationDescriptor(CAMPAIGN_REPORT, schemas.REPORT_CAMPAIGN, campaign_report),
    ]
    return MappingProxyType({op.name: op for op in ops})


@dataclass
class WorkflowResult:
    status: str                             # "completed" | "failed"
    stash: CampaignStash
    steps: List[str] = field(default_factory=list)
    detail: Any = None
    failed_step: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "completed"


class Workflow:
    """
    Trampoline over the step registry.

    Each step returns an Outcome; ``Continue`` dispatches the named step
    right away, ``Complete``/``Fail`` end the run. The engine keeps no state
    beyond the current step name, so a restart always begins at the start
    step again.
    """

    def __init__(
        self,
        client: RpcClient,
        config: CampaignConfig,
        stash: CampaignStash,
        *,
        registry: Optional[Mapping[str, OperationDescriptor]] = None,
        users_fetch_timeout: float = 30.0,
    ):
        self.client = client
        self.config = config
        self.stash = stash
        self.registry = registry if registry is not None else build_registry()
        self.users_fetch_timeout = users_fetch_timeout

    def dispatch(self, name: str) -> Outcome:
        """Run a single step and return its outcome (never raises CampaignError)."""
        op = self.registry.get(name)
        if op is None:
            return Fail(detail=f"unknown step {name!r}")

        ctx = StepContext(
            config=self.config,
            stash=self.stash,
            client=self.client,
            method=op.remote_method,
            users_fetch_timeout=self.users_fetch_timeout,
        )
        try:
            return op.handler(ctx)
        except CampaignError as e:
            return Fail(detail=describe(e))

    def run(self, start_step: str = START_STEP) -> WorkflowResult:
        visited: List[str] = []
        current = start_step

        while len(visited) < MAX_TRANSITIONS:
            print(f"Running {current}")
            logger.info("Running %s", current)
            visited.append(current)

            with step_scope(current):
                outcome = self.dispatch(current)

            if isinstance(outcome, Continue):
                current = outcome.next_step
                continue

            if isinstance(outcome, Complete):
                print("Completed")
                logger.info("Completed after %d step(s): %s", len(visited), " -> ".join(visited))
                return WorkflowResult(status="completed", stash=self.stash, steps=visited)

            logger.error("Unable to process - %s failed: %r", current, outcome.detail)
            return WorkflowResult(
                status="failed",
                stash=self.stash,
                steps=visited,
                detail=outcome.detail,
                failed_step=current,
            )

        return WorkflowResult(
            status="failed",
            stash=self.stash,
            steps=visited,
            detail=f"exceeded {MAX_TRANSITIONS} transitions",
            failed_step=current,
        )
