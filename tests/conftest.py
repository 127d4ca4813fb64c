"""
Shared pytest fixtures for the Jupiter Vault test suite.

Autouse fixtures below isolate tests from the live environment:
  - Audit logger -> temp directory (prevents fake events in ./audit_logs)
  - JUPITER_* environment variables -> cleared

The ``node`` fixture is an in-process fake of the Jupiter /nxt endpoint
built on httpx.MockTransport; no test touches the network.
"""

import os

import httpx
import pytest

from jupiter_vault.core.config import ClientConfig
from jupiter_vault.ledger.transport import NodeTransport
from jupiter_vault.vault.encryption import AESGCMEncryption

ADDRESS = "JUP-TEST-AAAA-BBBB-CCCCC"
OTHER_ADDRESS = "JUP-OTHR-DDDD-EEEE-FFFFF"
PASSPHRASE = "correct horse battery staple"
SERVER = "https://node.test:7876"

# Keep PBKDF2 cheap in tests; production uses EncryptionService defaults
FAST_ITERATIONS = 1_000


@pytest.fixture(autouse=True)
def _isolate_audit_logs(tmp_path):
    """Redirect the global AuditLogger to a temp directory for every test.

    Without this, any client built without an explicit audit logger writes
    into the real ``./audit_logs/`` directory.
    """
    import jupiter_vault.core.audit_log as audit_mod

    old_logger = audit_mod._audit_logger
    audit_mod._audit_logger = audit_mod.AuditLogger(log_dir=tmp_path / "audit_logs")

    yield audit_mod._audit_logger

    audit_mod._audit_logger.close()
    audit_mod._audit_logger = old_logger


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Give each test its own copy of os.environ without JUPITER_* keys.

    python-dotenv writes straight into os.environ, so the copy keeps values
    loaded from test .env files from leaking into later tests.
    """
    environ = {k: v for k, v in os.environ.items() if not k.startswith("JUPITER_")}
    monkeypatch.setattr(os, "environ", environ)


class FakeNode:
    """Minimal stand-in for a Jupiter node's /nxt endpoint.

    Responses are registered per requestType, either as a dict (served as
    JSON with status 200) or as a callable ``(params) -> httpx.Response``.
    Every request is recorded for assertions.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def on(self, request_type, response):
        self.routes[request_type] = response
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        params = dict(request.url.params)
        self.requests.append({
            "method": request.method,
            "path": request.url.path,
            "params": params,
            "body": request.content,
            "headers": dict(request.headers),
        })
        route = self.routes.get(params.get("requestType"))
        if route is None:
            return httpx.Response(200, json={
                "errorCode": 1,
                "errorDescription": "Incorrect request",
            })
        if callable(route):
            return route(params)
        return httpx.Response(200, json=route)

    def calls(self, request_type):
        return [r for r in self.requests if r["params"].get("requestType") == request_type]

    def transport(self) -> NodeTransport:
        client = httpx.AsyncClient(
            base_url=SERVER,
            transport=httpx.MockTransport(self.handler),
        )
        return NodeTransport(SERVER, client=client)


@pytest.fixture
def node():
    return FakeNode()


@pytest.fixture
def config():
    return ClientConfig(
        server=SERVER,
        address=ADDRESS,
        passphrase=PASSPHRASE,
        public_key="ab" * 32,
    )


@pytest.fixture
def encryption():
    return AESGCMEncryption(PASSPHRASE, iterations=FAST_ITERATIONS)
