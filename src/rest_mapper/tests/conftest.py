import pytest

from ..defaults import BearerToken
from .testing import ApiModel, FakeTransport


@pytest.fixture
def token():
    return BearerToken("secret")


@pytest.fixture
def transport(monkeypatch):
    transport = FakeTransport()
    monkeypatch.setattr(ApiModel, "transport", transport)
    return transport
