# mailcampaign/workflow/outcome.py
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict


class Continue(BaseModel):
    """Dispatch ``next_step`` immediately."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["continue"] = "continue"
    next_step: str


class Complete(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["complete"] = "complete"


class Fail(BaseModel):
    """Terminate the run; ``detail`` is surfaced to the operator as-is."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["fail"] = "fail"
    detail: Any = None


Outcome = Union[Continue, Complete, Fail]
