"""
Unit tests for Web3Service and packaged ABIs (no network access).
"""

import pytest
from eth_utils import to_checksum_address

from delegate_vp.shared.exceptions import ConfigurationException
from delegate_vp.shared.services.resource_manager import (
    ResourceManager,
    resource_manager,
)
from delegate_vp.shared.services.web3_service import Web3Service
from delegate_vp.shared.constants import GlobalConstants, LidoVotingConstants


class TestResourceManager:
    def test_lido_voting_abi(self):
        abi = resource_manager.load_abi(LidoVotingConstants.ABI_NAME)

        names = {entry["name"] for entry in abi}
        assert names == {
            "getDelegatedVoters",
            "getVotingPowerMultiple",
            "getVotingPowerMultipleAtVote",
        }
        assert all(entry["stateMutability"] == "view" for entry in abi)

    def test_missing_abi(self, tmp_path):
        manager = ResourceManager(tmp_path)

        with pytest.raises(ConfigurationException, match="ABI file not found"):
            manager.load_abi("missing")

    def test_rejects_path_traversal(self):
        with pytest.raises(ValueError):
            resource_manager.get_resource_path("abi", "../../secrets.json")


class TestWeb3Service:
    def test_requires_rpc_url(self):
        with pytest.raises(ConfigurationException):
            Web3Service("")

    def test_explicit_timeout(self):
        service = Web3Service("http://localhost:8545", request_timeout=12.5)

        assert service.request_timeout == 12.5

    def test_contract_is_cached(self):
        service = Web3Service("http://localhost:8545", request_timeout=1)

        first = service.get_contract(
            LidoVotingConstants.VOTING_CONTRACT.lower(), LidoVotingConstants.ABI_NAME
        )
        second = service.get_contract(
            LidoVotingConstants.VOTING_CONTRACT, LidoVotingConstants.ABI_NAME
        )

        assert first is second
        assert first.address == to_checksum_address(
            LidoVotingConstants.VOTING_CONTRACT
        )
        assert hasattr(first.functions, "getDelegatedVoters")


class TestRpcConfiguration:
    def test_rpc_url_from_env(self, monkeypatch):
        monkeypatch.setenv("RPC_URL", "https://node.example.org")
        assert GlobalConstants.get_rpc_url() == "https://node.example.org"

    def test_rpc_url_default(self, monkeypatch):
        monkeypatch.delenv("RPC_URL", raising=False)
        assert GlobalConstants.get_rpc_url() == GlobalConstants.DEFAULT_RPC_URL

    def test_timeout_from_env(self, monkeypatch):
        monkeypatch.setenv("DVP_RPC_TIMEOUT", "7")
        assert GlobalConstants.get_rpc_timeout() == 7.0

    @pytest.mark.parametrize("raw", ["soon", "0", "-2"])
    def test_bad_timeout(self, monkeypatch, raw):
        monkeypatch.setenv("DVP_RPC_TIMEOUT", raw)
        with pytest.raises(ConfigurationException, match="DVP_RPC_TIMEOUT"):
            GlobalConstants.get_rpc_timeout()
