"""
Delegated voters service - voters and voting power for a delegate.

Composes the two pipeline stages:
1. Enumerate the delegate's voters page by page
2. Fetch voting power for the voters plus the delegate, in concurrent chunks

and hands back an immutable snapshot for reporting. Errors from either stage
propagate unchanged; nothing is retried here.
"""

from typing import Optional

from delegate_vp.contracts.accessor import ContractAccessor
from delegate_vp.shared.constants import GlobalConstants
from delegate_vp.shared.logging import get_logger
from delegate_vp.shared.validation import (
    validate_delegate_address,
    validate_positive_int,
)
from delegate_vp.voters.models import (
    Address,
    DelegateVotingPower,
    VoteContext,
    VoterSet,
)
from delegate_vp.voters.paginator import enumerate_voters
from delegate_vp.voters.power_fetcher import build_address_universe, fetch_powers


class DelegatedVotersService:
    """Service for reading a delegate's voters and their voting power."""

    def __init__(
        self,
        accessor: ContractAccessor,
        page_size: int = GlobalConstants.DEFAULT_PAGE_SIZE,
        chunk_size: int = GlobalConstants.DEFAULT_CHUNK_SIZE,
        concurrency: int = GlobalConstants.DEFAULT_CONCURRENCY,
    ):
        self.accessor = accessor
        self.page_size = validate_positive_int(page_size, "page_size")
        self.chunk_size = validate_positive_int(chunk_size, "chunk_size")
        self.concurrency = validate_positive_int(concurrency, "concurrency")
        self._log = get_logger(__name__)

    def close(self) -> None:
        """Release the accessor's connection resources."""
        self.accessor.close()

    async def get_voters(self, delegate: Address) -> VoterSet:
        """All voters delegating to ``delegate``, in contract order."""
        return await enumerate_voters(self.accessor, delegate, self.page_size)

    async def get_voting_power(
        self, delegate: Address, context: Optional[VoteContext] = None
    ) -> DelegateVotingPower:
        """
        Voting power of every voter of ``delegate`` and of the delegate itself.

        Args:
            delegate: Delegate address
            context: Chain state to read; current state when omitted

        Returns:
            DelegateVotingPower: complete snapshot, never partial
        """
        delegate = validate_delegate_address(delegate)
        context = context or VoteContext.current()

        voters = await self.get_voters(delegate)
        universe = build_address_universe(delegate, voters)
        self._log.info(
            "Unique addresses: %d, calculating %s", len(universe), context.describe()
        )

        powers = await fetch_powers(
            self.accessor,
            universe,
            chunk_size=self.chunk_size,
            concurrency=self.concurrency,
            context=context,
        )
        return DelegateVotingPower(
            delegate=delegate, context=context, voters=voters, powers=powers
        )
