import pytest

from bink_agent.wallet.builder import build_context

from stubs import StubBalancePlugin


@pytest.fixture
def context():
    """BNB configured, everything else absent, development mnemonic."""
    return build_context({"BNB": "https://bsc.example"}, None)


@pytest.fixture
def plugin():
    return StubBalancePlugin()
