"""
Read access to the Lido Voting contract.

The pipeline only depends on the ``ContractAccessor`` protocol: one paged
enumeration call and one batched voting power call. ``LidoVotingAccessor``
implements it over web3.py; tests use an in-memory fake.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import (
    Any,
    Callable,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    TypeVar,
)

from eth_utils import to_checksum_address

from delegate_vp.shared.constants import GlobalConstants, LidoVotingConstants
from delegate_vp.shared.exceptions import ContractViolationError, DataSourceError
from delegate_vp.shared.logging import get_logger
from delegate_vp.shared.services.web3_service import Web3Service
from delegate_vp.shared.validation import validate_positive_int
from delegate_vp.voters.models import Address, VoteContext, VotingPower

T = TypeVar("T")

_logger = get_logger(__name__)


class ContractAccessor(Protocol):
    """Async read capability the paginator and power fetcher depend on."""

    async def get_voter_page(
        self, delegate: Address, offset: int, limit: int
    ) -> List[Address]:
        ...

    async def get_voting_power_batch(
        self, addresses: Sequence[Address], context: VoteContext
    ) -> List[Tuple[Address, VotingPower]]:
        ...

    def close(self) -> None:
        ...


class LidoVotingAccessor:
    """ContractAccessor over the Lido Aragon Voting contract."""

    def __init__(
        self,
        web3_service: Web3Service,
        contract_address: str = LidoVotingConstants.VOTING_CONTRACT,
        max_workers: int = GlobalConstants.DEFAULT_CONCURRENCY,
    ):
        self.web3_service = web3_service
        self.max_workers = validate_positive_int(max_workers, "max_workers")
        # One worker per in-flight call allowed by the fetch concurrency.
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="lido-voting"
        )
        self.contract_address = to_checksum_address(contract_address)
        self.contract = web3_service.get_contract(
            self.contract_address, LidoVotingConstants.ABI_NAME
        )

    def close(self) -> None:
        """
        Release the worker threads without waiting on them.

        Queued calls are cancelled; a call already on the wire runs until the
        transport timeout.
        """
        self._executor.shutdown(wait=False, cancel_futures=True)

    async def _call(self, function_name: str, fn: Callable[[], T], **context: Any) -> T:
        """Run a blocking contract call on the accessor's worker threads."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, fn)
        except Exception as e:
            raise DataSourceError(
                f"{function_name} RPC call failed: {str(e)}",
                context={"function": function_name, **context},
            ) from e

    async def get_voter_page(
        self, delegate: Address, offset: int, limit: int
    ) -> List[Address]:
        voters = await self._call(
            "getDelegatedVoters",
            self.contract.functions.getDelegatedVoters(
                to_checksum_address(delegate), offset, limit
            ).call,
            delegate=delegate,
            offset=offset,
            limit=limit,
        )
        return [to_checksum_address(v) for v in voters]

    async def get_voting_power_batch(
        self, addresses: Sequence[Address], context: VoteContext
    ) -> List[Tuple[Address, VotingPower]]:
        voters = [to_checksum_address(a) for a in addresses]

        vote_id: Optional[int] = context.vote_id
        if not context.is_historical:
            function_name = "getVotingPowerMultiple"
            call = self.contract.functions.getVotingPowerMultiple(voters).call
        else:
            function_name = "getVotingPowerMultipleAtVote"
            call = self.contract.functions.getVotingPowerMultipleAtVote(
                vote_id, voters
            ).call

        balances = await self._call(
            function_name, call, vote_id=vote_id, addresses=len(voters)
        )

        if len(balances) != len(voters):
            raise ContractViolationError(
                "voting power response length mismatch "
                f"(got {len(balances)}, expected {len(voters)})",
                context={"function": function_name, "vote_id": vote_id},
            )

        _logger.debug(
            "%s returned %d balances", function_name, len(balances)
        )
        return list(zip(voters, (int(b) for b in balances)))
