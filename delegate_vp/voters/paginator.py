"""
Delegated voter enumeration.

``getDelegatedVoters`` only exposes offset/limit reads, so the full voter
list is assembled page by page. Pages are strictly sequential: whether to
request page N+1 depends on the size of page N.

Exhaustion rule: a page shorter than ``page_size`` (an empty page included)
is the last one. When the voter count is an exact multiple of the page size
this costs one extra request that comes back empty.
"""

from typing import List, Set

from eth_utils import to_checksum_address

from delegate_vp.contracts.accessor import ContractAccessor
from delegate_vp.shared.exceptions import ContractViolationError, DataSourceError
from delegate_vp.shared.logging import get_logger
from delegate_vp.shared.validation import (
    validate_delegate_address,
    validate_positive_int,
)
from delegate_vp.voters.models import Address, VoterSet

_logger = get_logger(__name__)


async def enumerate_voters(
    accessor: ContractAccessor, delegate: Address, page_size: int
) -> VoterSet:
    """
    Fetch every voter delegating to ``delegate``, in contract order.

    Args:
        accessor: Contract read capability
        delegate: Delegate address (validated, non-zero)
        page_size: Addresses requested per page (>= 1)

    Returns:
        VoterSet: checksummed voters in discovery order, without duplicates

    Raises:
        InvalidInputError: bad delegate or page size, before any call
        DataSourceError: a page request failed; nothing is returned
        ContractViolationError: a page was larger than requested or held
            something other than an address
    """
    delegate = validate_delegate_address(delegate)
    page_size = validate_positive_int(page_size, "page_size")

    voters: List[Address] = []
    seen: Set[Address] = set()
    offset = 0
    pages = 0

    while True:
        try:
            page = await accessor.get_voter_page(delegate, offset, page_size)
        except DataSourceError as e:
            e.context.setdefault("delegate", delegate)
            e.context.setdefault("offset", offset)
            e.context["pages_fetched"] = pages
            raise
        pages += 1

        if len(page) > page_size:
            raise ContractViolationError(
                f"voter page larger than requested (got {len(page)}, "
                f"limit {page_size})",
                context={"delegate": delegate, "offset": offset},
            )

        try:
            page = [to_checksum_address(voter) for voter in page]
        except (TypeError, ValueError) as e:
            raise ContractViolationError(
                f"voter page contains an invalid address: {e}",
                context={"delegate": delegate, "offset": offset},
            ) from e

        for voter in page:
            if voter in seen:
                _logger.warning(
                    "Voter %s returned again at offset %d; keeping first occurrence",
                    voter,
                    offset,
                )
                continue
            seen.add(voter)
            voters.append(voter)

        _logger.debug("Page %d at offset %d: %d voters", pages, offset, len(page))

        if len(page) < page_size:
            break
        offset += len(page)

    _logger.info(
        "Fetched %d delegated voters for %s in %d page(s)",
        len(voters),
        delegate,
        pages,
    )
    return tuple(voters)
