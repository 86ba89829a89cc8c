"""
Unit tests for delegated voter enumeration.
"""

import pytest

from delegate_vp.shared.exceptions import (
    ContractViolationError,
    DataSourceError,
    InvalidInputError,
)
from delegate_vp.voters.paginator import enumerate_voters
from tests.fakes import FakeVotingAccessor, make_address


class TestPaginationTermination:
    """A short page (or an empty one) ends the enumeration."""

    @pytest.mark.asyncio
    async def test_three_voters_page_size_two(self, fake_accessor, delegate, voters):
        """[A,B] then [C]: the short second page is the last."""
        result = await enumerate_voters(fake_accessor, delegate, page_size=2)

        assert result == tuple(voters)
        assert [(o, l) for _, o, l in fake_accessor.page_calls] == [(0, 2), (2, 2)]

    @pytest.mark.asyncio
    async def test_no_voters_is_empty_not_error(self, delegate):
        accessor = FakeVotingAccessor(voters=[])

        result = await enumerate_voters(accessor, delegate, page_size=100)

        assert result == ()
        assert len(accessor.page_calls) == 1

    @pytest.mark.asyncio
    async def test_exact_multiple_costs_one_empty_page(self, delegate):
        voters = [make_address(i) for i in range(1, 5)]
        accessor = FakeVotingAccessor(voters=voters)

        result = await enumerate_voters(accessor, delegate, page_size=2)

        assert result == tuple(voters)
        assert [o for _, o, _ in accessor.page_calls] == [0, 2, 4]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("total", [0, 1, 5, 10, 11])
    @pytest.mark.parametrize("page_size", [1, 3, 5, 100])
    async def test_request_count(self, delegate, total, page_size):
        """floor(S/P) + 1 requests, never more than ceil(S/P) + 1."""
        voters = [make_address(i) for i in range(1, total + 1)]
        accessor = FakeVotingAccessor(voters=voters)

        result = await enumerate_voters(accessor, delegate, page_size)

        assert result == tuple(voters)
        assert len(accessor.page_calls) == total // page_size + 1
        offsets = [o for _, o, _ in accessor.page_calls]
        assert len(set(offsets)) == len(offsets)

    @pytest.mark.asyncio
    async def test_offset_advances_by_returned_count(self, delegate):
        """The delegate is passed through and offsets follow page lengths."""
        a, b, c = (make_address(i) for i in (1, 2, 3))
        accessor = FakeVotingAccessor(pages=[[a, b], [c]])

        await enumerate_voters(accessor, delegate, page_size=2)

        assert accessor.page_calls == [(delegate, 0, 2), (delegate, 2, 2)]


class TestDeduplication:
    @pytest.mark.asyncio
    async def test_duplicates_across_pages_are_dropped(self, delegate):
        a, b, c, d = (make_address(i) for i in (1, 2, 3, 4))
        accessor = FakeVotingAccessor(pages=[[a, b], [b, c], [a, d], []])

        result = await enumerate_voters(accessor, delegate, page_size=2)

        assert result == (a, b, c, d)
        assert len(result) == len(set(result))

    @pytest.mark.asyncio
    async def test_duplicate_within_a_page(self, delegate):
        a, b = make_address(1), make_address(2)
        accessor = FakeVotingAccessor(pages=[[a, a, b]])

        result = await enumerate_voters(accessor, delegate, page_size=5)

        assert result == (a, b)


class TestPaginationFailures:
    @pytest.mark.asyncio
    async def test_page_failure_aborts_without_partial_list(self, delegate):
        voters = [make_address(i) for i in range(1, 8)]
        accessor = FakeVotingAccessor(voters=voters, failing_offsets={3})

        with pytest.raises(DataSourceError) as exc_info:
            await enumerate_voters(accessor, delegate, page_size=3)

        assert exc_info.value.context["offset"] == 3
        assert exc_info.value.context["pages_fetched"] == 1
        # Not retried
        assert [o for _, o, _ in accessor.page_calls] == [0, 3]

    @pytest.mark.asyncio
    async def test_oversized_page_is_contract_violation(self, delegate):
        accessor = FakeVotingAccessor(pages=[[make_address(i) for i in (1, 2, 3)]])

        with pytest.raises(ContractViolationError, match="larger than requested"):
            await enumerate_voters(accessor, delegate, page_size=2)


class TestPaginationInputValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("page_size", [0, -1])
    async def test_rejects_non_positive_page_size(self, fake_accessor, delegate, page_size):
        with pytest.raises(InvalidInputError, match="page_size"):
            await enumerate_voters(fake_accessor, delegate, page_size)
        assert fake_accessor.page_calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "bad_delegate",
        ["", "not-an-address", "0x0000000000000000000000000000000000000000"],
    )
    async def test_rejects_invalid_delegate(self, fake_accessor, bad_delegate):
        with pytest.raises(InvalidInputError, match="delegate_address"):
            await enumerate_voters(fake_accessor, bad_delegate, 10)
        assert fake_accessor.page_calls == []

    @pytest.mark.asyncio
    async def test_lowercase_delegate_is_checksummed(self, fake_accessor, delegate):
        await enumerate_voters(fake_accessor, delegate.lower(), 10)

        assert fake_accessor.page_calls[0][0] == delegate


class TestAddressNormalisation:
    @pytest.mark.asyncio
    async def test_page_addresses_are_checksummed_before_dedup(self, delegate):
        a, b = make_address(0xAB), make_address(0xCD)
        accessor = FakeVotingAccessor(pages=[[a.lower(), b], [a]])

        result = await enumerate_voters(accessor, delegate, page_size=2)

        assert result == (a, b)

    @pytest.mark.asyncio
    async def test_non_address_in_page_is_contract_violation(self, delegate):
        accessor = FakeVotingAccessor(pages=[["0xnot-an-address"]])

        with pytest.raises(ContractViolationError, match="invalid address"):
            await enumerate_voters(accessor, delegate, page_size=2)
