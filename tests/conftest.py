import pytest

from full_abi.clients.constants import NETWORKS


@pytest.fixture
def mainnet():
    return NETWORKS["mainnet"]


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch):
    """Retry backoff must not slow the suite down."""
    monkeypatch.setattr("time.sleep", lambda seconds: None)
