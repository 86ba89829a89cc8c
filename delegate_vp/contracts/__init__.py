from .accessor import ContractAccessor, LidoVotingAccessor

__all__ = ["ContractAccessor", "LidoVotingAccessor"]
