# mailcampaign/rpc/client.py
from __future__ import annotations

import http.client
import logging
import socket
import xmlrpc.client
from typing import Any, Optional, Protocol
from xml.parsers.expat import ExpatError

from mailcampaign.common.errors import StartupError
from mailcampaign.rpc.results import RemoteError, RpcResult, TransportFailure
from mailcampaign.rpc.schemas import decode_response

logger = logging.getLogger("mailcampaign.rpc")

DEFAULT_TIMEOUT_SEC = 30.0


class RpcClient(Protocol):
    def call(self, method: str, *args: Any) -> RpcResult: ...


class _TimeoutTransport(xmlrpc.client.Transport):
    """Plain HTTP transport with a socket timeout on every connection."""

    def __init__(self, timeout: float, **kwargs):
        super().__init__(**kwargs)
        self.timeout = timeout

    def make_connection(self, host):
        conn = super().make_connection(host)
        conn.timeout = self.timeout
        return conn


class _SafeTimeoutTransport(xmlrpc.client.SafeTransport):
    """HTTPS flavour of ``_TimeoutTransport``."""

    def __init__(self, timeout: float, **kwargs):
        super().__init__(**kwargs)
        self.timeout = timeout

    def make_connection(self, host):
        conn = super().make_connection(host)
        conn.timeout = self.timeout
        return conn


class MailkitClient:
    """
    XML-RPC client for the Mailkit API.

    - credentials are bound at construction and prepended to every call
    - responses are decoded once through the per-method schema
    - call failures never raise: they come back as ``TransportFailure`` /
      ``RemoteError`` so the step can tell "remote said no" from "call never
      completed"
    """

    def __init__(
        self,
        url: str,
        client_id: str,
        client_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        proxy: Optional[Any] = None,
    ):
        self.url = url
        self.client_id = client_id
        self.client_key = client_key
        self.timeout = timeout

        if proxy is not None:
            self._proxy = proxy
            return

        transport_cls = _SafeTimeoutTransport if url.lower().startswith("https:") else _TimeoutTransport
        try:
            self._proxy = xmlrpc.client.ServerProxy(
                url,
                transport=transport_cls(timeout),
                allow_none=True,
            )
        except (OSError, ValueError) as e:
            raise StartupError(f"Unable to get RPC client for {url!r}: {e}") from e

    def call(self, method: str, *args: Any) -> RpcResult:
        logger.debug("-> %s (%d args)", method, len(args))
        try:
            raw = getattr(self._proxy, method)(self.client_id, self.client_key, *args)
        except xmlrpc.client.Fault as e:
            logger.warning("%s fault %s: %s", method, e.faultCode, e.faultString)
            return RemoteError(
                message=e.faultString,
                raw={"faultCode": e.faultCode, "faultString": e.faultString},
            )
        except (OverflowError, TypeError) as e:
            # raised by the marshaller before anything is sent, e.g. ints beyond 32 bits
            logger.error("%s request could not be encoded: %s", method, e)
            return TransportFailure(error=f"cannot encode request: {e}")
        except (socket.timeout, TimeoutError) as e:
            logger.error("%s timed out after %ss", method, self.timeout)
            return TransportFailure(error=f"timed out after {self.timeout}s: {e}", timed_out=True)
        except (
            xmlrpc.client.ProtocolError,
            xmlrpc.client.ResponseError,
            http.client.HTTPException,
            ExpatError,
            OSError,
        ) as e:
            logger.error("%s transport error: %s", method, e)
            return TransportFailure(error=f"{e.__class__.__name__}: {e}")

        result = decode_response(method, raw)
        logger.debug("<- %s %s", method, result.kind)
        return result
