# mailcampaign/rpc/results.py
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field


class Success(BaseModel):
    """The remote side accepted the call; ``payload`` is the decoded value."""
    kind: Literal["success"] = "success"
    payload: Any = None
    raw: Any = None


class AlreadyExists(BaseModel):
    """The resource the call would create is already there."""
    kind: Literal["already_exists"] = "already_exists"
    raw: Any = None


class RemoteError(BaseModel):
    """The call completed but the remote side said no (or said something unexpected)."""
    kind: Literal["remote_error"] = "remote_error"
    message: str = ""
    raw: Any = None


class TransportFailure(BaseModel):
    """The call never completed: connection, protocol or timeout problem."""
    kind: Literal["transport_failure"] = "transport_failure"
    error: str = ""
    timed_out: bool = False
    raw: Optional[Any] = None


RpcResult = Union[Success, AlreadyExists, RemoteError, TransportFailure]


class RpcCall(BaseModel):
    """Record of one outgoing call (used for logging and by test doubles)."""
    method: str
    args: list = Field(default_factory=list)
