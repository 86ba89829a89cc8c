"""
Web3 Service module for reading from Ethereum mainnet.

This module provides a Web3Service class that owns the HTTP connection to an
RPC node, applies the transport timeout, and caches contract instances built
from the packaged ABIs.
"""

from typing import Any, Dict, Optional, Tuple

from web3 import Web3

from delegate_vp.shared.constants import GlobalConstants
from delegate_vp.shared.exceptions import ConfigurationException
from delegate_vp.shared.services.resource_manager import (
    ResourceManager,
    resource_manager,
)


class Web3Service:
    """
    A service class for managing a Web3 connection and contract instances.

    Timeouts are the transport's responsibility and are set here, on the
    HTTP provider, rather than in the pipeline.
    """

    def __init__(
        self,
        rpc_url: str,
        request_timeout: Optional[float] = None,
        resources: Optional[ResourceManager] = None,
    ):
        """
        Initialize the Web3Service.

        Args:
            rpc_url (str): The RPC URL to use.
            request_timeout (float): HTTP timeout in seconds. Defaults to
                DVP_RPC_TIMEOUT or 30s.
            resources (ResourceManager): Where ABIs are loaded from.
        """
        if not rpc_url:
            raise ConfigurationException("RPC URL is not set")
        self.rpc_url = rpc_url
        self.request_timeout = (
            request_timeout
            if request_timeout is not None
            else GlobalConstants.get_rpc_timeout()
        )
        self._resources = resources or resource_manager
        self.w3 = self._initialize_web3(rpc_url)
        self._contract_cache: Dict[Tuple[str, str], Any] = {}

    def _initialize_web3(self, rpc_url: str) -> Web3:
        """Initialize Web3 instance over HTTP"""
        return Web3(
            Web3.HTTPProvider(
                rpc_url, request_kwargs={"timeout": self.request_timeout}
            )
        )

    def get_contract(self, address: str, abi_name: str) -> Any:
        """Get a contract instance for a given address and ABI name"""
        key = (address.lower(), abi_name)
        if key not in self._contract_cache:
            abi = self._resources.load_abi(abi_name)
            self._contract_cache[key] = self.w3.eth.contract(
                address=Web3.to_checksum_address(address.lower()), abi=abi
            )
        return self._contract_cache[key]
