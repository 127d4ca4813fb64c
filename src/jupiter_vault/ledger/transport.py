# Ledger - Node Transport
#
# Thin async wrapper around the node's single RPC endpoint (/nxt).
# Every call is a verb + requestType + named parameters.
#
# The NXT API only reads parameters from the query string, even for
# state-changing POSTs, so nothing is ever sent in the request body.
# No retries: ledger writes are not idempotent.

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

import httpx

from ..core.errors import TransportError

logger = logging.getLogger(__name__)

NODE_API_PATH = "/nxt"
USER_AGENT = "jupiter-password-manager"

# Parameters whose values must never reach the logs
_SENSITIVE_PARAMS = frozenset({"secretPhrase", "messageToEncrypt", "data", "nonce"})


class Verb(str, Enum):
    """HTTP verbs the node API accepts."""

    GET = "get"
    POST = "post"


@dataclass(frozen=True)
class RequestDescriptor:
    """One node interaction: verb, requestType and its parameters."""

    verb: Verb
    request_type: str
    params: Mapping[str, Any] = field(default_factory=dict)
    path: str = NODE_API_PATH

    def query_params(self) -> Dict[str, str]:
        """Render parameters as query-string fields (requestType first)."""
        query = {"requestType": self.request_type}
        query.update(encode_params(self.params))
        return query


def encode_params(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Render parameter values the way the node expects them.

    Booleans become ``"true"``/``"false"``; ``None`` values are dropped.
    """
    encoded: Dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        else:
            encoded[key] = str(value)
    return encoded


def redact_params(params: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        key: ("***" if key in _SENSITIVE_PARAMS else value)
        for key, value in params.items()
    }


class NodeTransport:
    """Async HTTP transport bound to one node base URL.

    Usage::

        async with NodeTransport("https://node.example:7876") as transport:
            data = await transport.send(
                RequestDescriptor(Verb.GET, "getBalance", {"account": addr})
            )
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        if client is None:
            client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"User-Agent": USER_AGENT},
                timeout=timeout,
            )
        else:
            client.headers["User-Agent"] = USER_AGENT
        self._client = client

    async def __aenter__(self) -> "NodeTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def send(self, descriptor: RequestDescriptor) -> Dict[str, Any]:
        """Execute a RequestDescriptor and return the decoded JSON object."""
        logger.debug(
            "Node request %s %s params=%s",
            descriptor.verb.value.upper(),
            descriptor.request_type,
            redact_params(descriptor.params),
        )
        return await self.request(
            descriptor.verb,
            descriptor.path,
            descriptor.query_params(),
        )

    async def request(
        self,
        verb: Verb,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Issue a GET or POST with query-string parameters.

        Raises:
            TransportError: on network failure, non-2xx status or a body
                            that is not a JSON object.
        """
        verb = Verb(verb)
        query = encode_params(params)

        try:
            if verb is Verb.POST:
                # POST with an empty body; parameters go in the query string
                resp = await self._client.post(path, params=query)
            else:
                resp = await self._client.get(path, params=query)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Node request %s %s failed: %s", verb.value.upper(), path, exc)
            raise TransportError(verb.value, path, exc) from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise TransportError(verb.value, path, exc) from exc

        if not isinstance(data, dict):
            cause = ValueError(f"expected a JSON object, got {type(data).__name__}")
            raise TransportError(verb.value, path, cause)

        return data
