from typing import Any, Optional

from eth_utils import is_address, to_checksum_address

from delegate_vp.shared.constants import GlobalConstants
from delegate_vp.shared.exceptions import InvalidInputError


def validate_eth_address(address: str, param_name: str = "address") -> str:
    """Validate and return checksum ethereum address"""
    if not address or not isinstance(address, str):
        raise InvalidInputError(
            f"Invalid {param_name}: address must be a non-empty string"
        )
    if not is_address(address):
        raise InvalidInputError(
            f"Invalid {param_name}: {address} is not a valid Ethereum address",
            context={param_name: address},
        )
    return to_checksum_address(address)


def validate_delegate_address(address: str) -> str:
    """Validate a delegate address; the zero address is never a delegate"""
    checksummed = validate_eth_address(address, "delegate_address")
    if checksummed == GlobalConstants.ZERO_ADDRESS:
        raise InvalidInputError(
            "Invalid delegate_address: the zero address cannot be a delegate",
            context={"delegate_address": checksummed},
        )
    return checksummed


def validate_positive_int(value: Any, param_name: str) -> int:
    """Validate a size/bound parameter is an integer >= 1"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(
            f"Invalid {param_name}: expected an integer, got {value!r}"
        )
    if value < 1:
        raise InvalidInputError(
            f"Invalid {param_name}: must be >= 1, got {value}",
            context={param_name: value},
        )
    return value


def validate_vote_id(vote_id: Optional[int]) -> Optional[int]:
    """Validate an optional vote id (None means current state)"""
    if vote_id is None:
        return None
    if isinstance(vote_id, bool) or not isinstance(vote_id, int):
        raise InvalidInputError(
            f"Invalid vote_id: expected an integer, got {vote_id!r}"
        )
    if vote_id < 0:
        raise InvalidInputError(
            f"Invalid vote_id: must be >= 0, got {vote_id}",
            context={"vote_id": vote_id},
        )
    return vote_id
