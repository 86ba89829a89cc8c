"""Delegated voter enumeration and voting power retrieval."""

from .models import (
    Address,
    DelegateVotingPower,
    PowerMapping,
    VoteContext,
    VoterSet,
    VotingPower,
)

__all__ = [
    "Address",
    "DelegateVotingPower",
    "PowerMapping",
    "VoteContext",
    "VoterSet",
    "VotingPower",
]
