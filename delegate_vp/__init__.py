"""delegate-vp - delegated voters and voting power from the Lido Voting contract."""

__version__ = "0.1.0"

from .voters.models import DelegateVotingPower, VoteContext
from .contracts import ContractAccessor, LidoVotingAccessor
from .voters.service import DelegatedVotersService

__all__ = [
    "ContractAccessor",
    "DelegatedVotersService",
    "DelegateVotingPower",
    "LidoVotingAccessor",
    "VoteContext",
]
