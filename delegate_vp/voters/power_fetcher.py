"""
Batched voting power lookups with bounded concurrency.

The address universe is cut into contiguous chunks. One task per chunk waits
on a shared semaphore, so at most ``concurrency`` lookups are in flight and a
freed slot is taken by the next chunk in index order. Chunk results are
merged into the mapping as they complete, in any order; chunks own disjoint
addresses so the merge never conflicts.

The first failing chunk cancels every other chunk and the fetch raises.
A partially filled mapping is never returned.
"""

import asyncio
from typing import Dict, Iterator, List, Sequence, Set, Tuple

from delegate_vp.contracts.accessor import ContractAccessor
from delegate_vp.shared.exceptions import (
    ContractViolationError,
    DataSourceError,
    InvalidInputError,
)
from delegate_vp.shared.logging import get_logger
from delegate_vp.shared.validation import validate_eth_address, validate_positive_int
from delegate_vp.utils.blockchain import unique_preserve_order
from delegate_vp.voters.models import (
    Address,
    PowerMapping,
    VoteContext,
    VoterSet,
    VotingPower,
    freeze_powers,
)

_logger = get_logger(__name__)

ChunkResult = List[Tuple[Address, VotingPower]]


def chunk_addresses(
    addresses: Sequence[Address], size: int
) -> Iterator[List[Address]]:
    """Yield contiguous chunks of ``size`` addresses (the last may be shorter)."""
    size = validate_positive_int(size, "chunk_size")
    for start in range(0, len(addresses), size):
        yield list(addresses[start : start + size])


def build_address_universe(delegate: Address, voters: VoterSet) -> List[Address]:
    """Voters in discovery order, plus the delegate if it is not one of them."""
    return unique_preserve_order([*voters, delegate])


def _chunk_context(index: int, chunk: Sequence[Address]) -> Dict[str, object]:
    return {
        "chunk_index": index,
        "chunk_size": len(chunk),
        "first_address": chunk[0],
        "last_address": chunk[-1],
    }


def _check_alignment(
    index: int, chunk: Sequence[Address], pairs: ChunkResult
) -> None:
    """A chunk response must mirror the request position by position."""
    context = _chunk_context(index, chunk)
    if len(pairs) != len(chunk):
        raise ContractViolationError(
            f"chunk {index} returned {len(pairs)} entries for "
            f"{len(chunk)} addresses ({chunk[0]}..{chunk[-1]})",
            context=context,
        )
    for position, (expected, (address, power)) in enumerate(zip(chunk, pairs)):
        if str(address).lower() != expected.lower():
            raise ContractViolationError(
                f"chunk {index} out of order at position {position}: "
                f"expected {expected}, got {address}",
                context={**context, "position": position},
            )
        if isinstance(power, bool) or not isinstance(power, int) or power < 0:
            raise ContractViolationError(
                f"chunk {index} returned invalid voting power {power!r} "
                f"for {address}",
                context={**context, "position": position},
            )


async def fetch_powers(
    accessor: ContractAccessor,
    addresses: Sequence[Address],
    chunk_size: int,
    concurrency: int,
    context: VoteContext,
) -> PowerMapping:
    """
    Look up the voting power of every address under a single VoteContext.

    Args:
        accessor: Contract read capability
        addresses: Address universe, no duplicates (any hex case; keys of
            the result are checksummed)
        chunk_size: Addresses per batched lookup (>= 1)
        concurrency: Maximum lookups in flight (>= 1)
        context: Passed unchanged to every lookup

    Returns:
        PowerMapping: read-only, exactly one entry per input address

    Raises:
        InvalidInputError: bad sizes, invalid or duplicate addresses, before
            any call
        DataSourceError: a chunk lookup failed (context names the chunk)
        ContractViolationError: a chunk response was misaligned
    """
    concurrency = validate_positive_int(concurrency, "concurrency")
    addresses = [validate_eth_address(a) for a in addresses]
    chunks = list(chunk_addresses(addresses, chunk_size))

    seen: Set[Address] = set()
    for address in addresses:
        if address in seen:
            raise InvalidInputError(
                f"duplicate address in voting power request: {address}",
                context={"address": address},
            )
        seen.add(address)

    if not chunks:
        return freeze_powers({})

    semaphore = asyncio.Semaphore(concurrency)
    # Set by the first failing chunk, before its slot is released, so no
    # queued chunk is dispatched while the fetch is being torn down.
    aborted = asyncio.Event()

    async def fetch_chunk(index: int, chunk: List[Address]) -> ChunkResult:
        async with semaphore:
            if aborted.is_set():
                raise asyncio.CancelledError()
            _logger.debug(
                "Chunk %d/%d: %d addresses", index + 1, len(chunks), len(chunk)
            )
            try:
                pairs = await accessor.get_voting_power_batch(chunk, context)
                _check_alignment(index, chunk, pairs)
                pairs = [
                    (address, power) for address, (_, power) in zip(chunk, pairs)
                ]
            except (DataSourceError, ContractViolationError) as e:
                aborted.set()
                if "chunk_index" in e.context:
                    raise
                raise type(e)(
                    f"chunk {index} ({chunk[0]}..{chunk[-1]}): {e.message}",
                    context={**e.context, **_chunk_context(index, chunk)},
                ) from e
            except Exception:
                aborted.set()
                raise
            return pairs

    tasks = [
        asyncio.create_task(fetch_chunk(index, chunk))
        for index, chunk in enumerate(chunks)
    ]
    order = {task: index for index, task in enumerate(tasks)}
    powers: Dict[Address, VotingPower] = {}
    pending = set(tasks)

    try:
        while pending:
            done, pending = await asyncio.wait(
                pending, return_when=asyncio.FIRST_EXCEPTION
            )
            # Lowest failing index first, so the reported chunk is stable.
            for task in sorted(done, key=order.__getitem__):
                if task.cancelled():
                    continue
                error = task.exception()
                if error is not None:
                    _logger.error(
                        "Voting power fetch aborted, %d chunk(s) cancelled: %s",
                        len(pending),
                        error,
                    )
                    raise error
                powers.update(task.result())
    finally:
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    _logger.info(
        "Fetched %s for %d addresses in %d chunk(s)",
        context.describe(),
        len(powers),
        len(chunks),
    )
    return freeze_powers(powers)
