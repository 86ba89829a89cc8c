"""All constants for the project"""

import os

from dotenv import load_dotenv

from delegate_vp.shared.exceptions import ConfigurationException

load_dotenv()


class LidoVotingConstants:
    """Lido Aragon Voting contract on Ethereum mainnet"""

    VOTING_CONTRACT = "0x2e59A20f205bB85a89C53f1936454680651E618e"
    DEFAULT_DELEGATE = "0x6D8D914205bB14104c0f95BfaDb4B1680EF60CCC"
    ABI_NAME = "lido_voting"

    TOKEN_SYMBOL = "LDO"
    TOKEN_DECIMALS = 18


class GlobalConstants:
    """Global class constants"""

    ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

    DEFAULT_RPC_URL = "https://eth.drpc.org"
    DEFAULT_RPC_TIMEOUT = 30.0

    DEFAULT_PAGE_SIZE = 100  # getDelegatedVoters limit
    DEFAULT_CHUNK_SIZE = 100  # addresses per voting power batch
    DEFAULT_CONCURRENCY = 5  # voting power batches in flight

    @staticmethod
    def get_rpc_url() -> str:
        """RPC URL from the environment (or .env), falling back to a public node"""
        return os.getenv("RPC_URL") or GlobalConstants.DEFAULT_RPC_URL

    @staticmethod
    def get_rpc_timeout() -> float:
        """HTTP request timeout for the RPC transport, in seconds"""
        raw = os.getenv("DVP_RPC_TIMEOUT")
        if not raw:
            return GlobalConstants.DEFAULT_RPC_TIMEOUT
        try:
            timeout = float(raw)
        except ValueError:
            raise ConfigurationException(
                f"DVP_RPC_TIMEOUT must be a number of seconds, got {raw!r}"
            )
        if timeout <= 0:
            raise ConfigurationException(
                f"DVP_RPC_TIMEOUT must be positive, got {raw!r}"
            )
        return timeout
