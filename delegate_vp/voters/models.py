"""
Type definitions for delegated voters and their voting power.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, TypedDict

# =============================================================================
# ALIASES
# =============================================================================

Address = str  # EIP-55 checksummed
VotingPower = int  # token base units, never negative
VoterSet = Tuple[Address, ...]
PowerMapping = Mapping[Address, VotingPower]


# =============================================================================
# VOTE CONTEXT
# =============================================================================


@dataclass(frozen=True)
class VoteContext:
    """
    Which chain state voting power is read from.

    ``vote_id=None`` is the current state, otherwise the snapshot taken for
    that vote. A single instance is shared by every lookup of a run.
    """

    vote_id: Optional[int] = None

    def __post_init__(self):
        if self.vote_id is not None and (
            isinstance(self.vote_id, bool)
            or not isinstance(self.vote_id, int)
            or self.vote_id < 0
        ):
            raise ValueError(
                f"vote_id must be a non-negative integer, got {self.vote_id!r}"
            )

    @classmethod
    def current(cls) -> "VoteContext":
        return cls()

    @classmethod
    def at_vote(cls, vote_id: int) -> "VoteContext":
        return cls(vote_id=vote_id)

    @property
    def is_historical(self) -> bool:
        return self.vote_id is not None

    def describe(self) -> str:
        if not self.is_historical:
            return "current voting power"
        return f"voting power at vote #{self.vote_id}"


# =============================================================================
# TYPED DICTS (for JSON serialization)
# =============================================================================


class VoterPowerDict(TypedDict):
    rank: int
    address: str
    voting_power: str  # base units as a decimal string
    voting_power_formatted: str


class DelegateReportDict(TypedDict):
    delegate: str
    vote_id: Optional[int]
    voters_count: int
    active_voters: List[VoterPowerDict]
    inactive_addresses: List[str]
    total_voting_power: str
    total_voting_power_formatted: str


# =============================================================================
# SNAPSHOT
# =============================================================================


def freeze_powers(powers: Dict[Address, VotingPower]) -> PowerMapping:
    """Read-only view over a copy of ``powers``."""
    return MappingProxyType(dict(powers))


@dataclass(frozen=True)
class DelegateVotingPower:
    """
    Complete result of one run, handed to the reporter.

    Only ever built from a fully merged PowerMapping.
    """

    delegate: Address
    context: VoteContext
    voters: VoterSet
    powers: PowerMapping

    def ranked(self) -> List[Tuple[Address, VotingPower]]:
        """All entries by voting power descending, ties by address."""
        return sorted(self.powers.items(), key=lambda item: (-item[1], item[0]))

    def active(self) -> List[Tuple[Address, VotingPower]]:
        return [(a, p) for a, p in self.ranked() if p > 0]

    def inactive(self) -> List[Address]:
        return [a for a, p in self.ranked() if p == 0]

    @property
    def total_power(self) -> VotingPower:
        return sum(self.powers.values())
