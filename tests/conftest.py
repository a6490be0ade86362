from __future__ import annotations

from typing import Callable, List, Optional
from urllib.parse import parse_qs

import httpx
import pytest

import mitake_sms
from mitake_sms import MitakeSettings, MitakeSmsClient

OK_BODY = "statuscode=1\nmsgid=1234567890\nAccountPoint=100"


class FakeGateway:
    """Records every request and answers from `responder` (200/OK_BODY by default)."""

    def __init__(self, responder: Optional[Callable[[httpx.Request], httpx.Response]] = None):
        self.requests: List[httpx.Request] = []
        self.responder = responder or (lambda req: httpx.Response(200, text=OK_BODY))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    def form(self, i: int = 0, encoding: str = "utf-8"):
        body = self.requests[i].content.decode("ascii")
        return {k: v[0] for k, v in parse_qs(body, keep_blank_values=True, encoding=encoding).items()}


@pytest.fixture(autouse=True)
def _isolated_defaults(monkeypatch):
    for name in ("MITAKE_USERNAME", "MITAKE_PASSWORD", "MITAKE_API_URL", "MITAKE_TIMEOUT", "MITAKE_OPEN_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    mitake_sms.reset()
    yield
    mitake_sms.reset()


@pytest.fixture
def config():
    return MitakeSettings(
        _env_file=None,
        username="test_username",
        password="test_password",
        api_url="https://test.api.mitake.com.tw/api/mtk/",
    )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(config, gateway):
    c = MitakeSmsClient(config, transport=httpx.MockTransport(gateway))
    yield c
    c.close()
