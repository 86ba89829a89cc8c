"""
Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests.
"""

from typing import Dict, List
from unittest.mock import MagicMock

import pytest
from eth_utils import to_checksum_address

from tests.fakes import FakeVotingAccessor, make_address


@pytest.fixture
def delegate() -> str:
    """The default Lido delegate used in examples."""
    return to_checksum_address("0x6d8d914205bb14104c0f95bfadb4b1680ef60ccc")


@pytest.fixture
def voters() -> List[str]:
    """Three delegated voters, A B C."""
    return [make_address(i) for i in (0xA, 0xB, 0xC)]


@pytest.fixture
def powers(voters, delegate) -> Dict[str, int]:
    """Voting power for A B C and the delegate; C holds nothing."""
    a, b, c = voters
    return {
        a: 1_500_000_000_000_000_000,
        b: 250_000_000_000_000_000_000,
        c: 0,
        delegate: 42_000_000_000_000_000_000,
    }


@pytest.fixture
def fake_accessor(voters, powers) -> FakeVotingAccessor:
    return FakeVotingAccessor(voters=voters, powers=powers)


@pytest.fixture
def mock_contract():
    """Mock web3 contract exposing the three Lido Voting read functions."""
    contract = MagicMock()
    contract.functions.getDelegatedVoters.return_value.call.return_value = []
    contract.functions.getVotingPowerMultiple.return_value.call.return_value = []
    contract.functions.getVotingPowerMultipleAtVote.return_value.call.return_value = []
    return contract


@pytest.fixture
def mock_web3_service(mock_contract):
    """Mock Web3Service returning ``mock_contract``."""
    service = MagicMock()
    service.w3 = MagicMock()
    service.get_contract.return_value = mock_contract
    return service


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (needs RPC_URL)"
    )
