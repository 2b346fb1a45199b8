import pytest

from solders.pubkey import Pubkey


@pytest.fixture
def payer() -> Pubkey:
    return Pubkey.new_unique()


@pytest.fixture
def mint() -> Pubkey:
    return Pubkey.new_unique()


@pytest.fixture
def wallet() -> Pubkey:
    return Pubkey.new_unique()
